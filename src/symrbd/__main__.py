import os
import argparse
from symrbd import (
    MechanismState, PendulumParameters, DEFAULT_VALUES,
    double_pendulum, set_symbolic_state, derive,
    format_derivation, generate_python_code, generate_latex_document)
from symrbd.parser import (
    load_description, mechanism_from_dict, parameters_from_dict,
    generate_template_yaml)
from symrbd import __version__

def main(argv: list = None) -> None:
    parser = argparse.ArgumentParser(
        prog="python -m symrbd",
        description="Symbolic mass matrix, kinetic and potential energy of a double pendulum or any other kinematic tree.",
    )
    parser.add_argument("filename", type=str, nargs="?", default=None, help=".yaml or .json file with definition of the mechanism to analyse or location where to save generated template with '--template' option. Defaults to the built in double pendulum.")
    parser.add_argument('--version', action='version',
                    version='symrbd {version}'.format(version=__version__))
    parser.add_argument("-n", "--no-simplify", action="store_true", help="skip simplification of expressions")
    parser.add_argument("--substitute", action="store_true", help="substitute numeric parameter values ('parameters' entry of the file or default values)")
    parser.add_argument("--latex-print", action="store_true", help="print LaTeX strings instead of pretty printed expressions")
    parser.add_argument("-p", "--python", action="store_true", help="generate python code")
    parser.add_argument("-l", "--latex", action="store_true", help="generate LaTeX document")
    parser.add_argument("--pdf", action="store_true", help="compile LaTeX document to pdf (needs a LaTeX installation)")
    parser.add_argument("-f", "--folder", type=str, default="./generated_code", help="folder where to save generated code. Defaults to './generated_code'")
    parser.add_argument("--name", type=str, default="", help="name of class and file. Defaults to filename")
    parser.add_argument("--graph", type=str, default="", help="save graph of the kinematic tree as pdf to given path")

    # options for template generation
    generate_template = parser.add_argument_group("Options for template generation")
    generate_template.add_argument("-T", "--template", action="store_true", help="store template yaml file of the double pendulum to edit instead of analyzing a mechanism")

    args = parser.parse_args(argv)

    path = args.filename

    # generate yaml template
    if args.template:
        if path is None:
            path = "double_pendulum.yaml"
        name, ext = os.path.splitext(path)
        if ext not in {".yaml", ".YAML", ".yml", ".YML"}:
            path = name + ".yaml"
        if (os.path.exists(path)
            and not input(f"{path} already exists.\nOverwrite existing file? [Y/n] ") in {"", "y", "Y"}):
            print("Abort execution.")
            return
        generate_template_yaml(path, parameters=DEFAULT_VALUES)
        print(f"Template saved to {path}")
        return

    values = dict(DEFAULT_VALUES)
    if path is None:
        mechanism, state = double_pendulum()
        if args.name == "": args.name = "double_pendulum"
    else:
        if not os.path.exists(path) or not os.path.isfile(path):
            raise ValueError(f"{path} is no existing file.")
        name, ext = os.path.splitext(path)
        if ext not in {".yaml", ".YAML", ".yml", ".YML", ".json", ".JSON"}:
            raise ValueError("File extension not recognized.")
        description = load_description(path)
        mechanism = mechanism_from_dict(description)
        values.update(parameters_from_dict(description))
        state = MechanismState(mechanism)
        if args.name == "": args.name = os.path.basename(name)

    set_symbolic_state(state)
    derivation = derive(state, simplify=not args.no_simplify)
    if args.substitute:
        derivation = derivation.subs(
            PendulumParameters.symbolic().substitutions(values))

    print(format_derivation(derivation, latex=args.latex_print))

    if args.python:
        generate_python_code(derivation, name=args.name,
                             folder=os.path.join(args.folder, "python"))
    if args.latex:
        generate_latex_document(derivation, name=args.name,
                                folder=os.path.join(args.folder, "latex"),
                                compile_pdf=args.pdf)
    if args.graph:
        mechanism.generate_graph(args.graph)


if __name__ == "__main__":
    main()
