from __future__ import annotations

import os

import regex
import sympy
from pylatex import Command, Document, NoEscape, Section
from sympy.printing.latex import LatexPrinter
from sympy.printing.numpy import NumPyPrinter

from symrbd.dynamics import Derivation

# expression name -> (section title, symbol in LaTeX)
LATEX_NAMES = {
    "mass_matrix": ("Mass matrix", "M"),
    "kinetic_energy": ("Kinetic energy", "T"),
    "potential_energy": ("Potential energy", "V"),
}


def class_name(name: str) -> str:
    """'double_pendulum' -> 'DoublePendulum'"""
    return regex.sub(r"(?:^|_)(\w)", lambda x: x.group(1).upper(), name)


def _sorted_variables(derivation: Derivation, expression: sympy.Expr) -> list:
    """State symbols used by expression, positions first."""
    syms = expression.free_symbols
    return [s for s in [*derivation.q, *derivation.v] if s in syms]


def generate_python_code(derivation: Derivation, name: str="double_pendulum",
                         folder: str="./generated_code",
                         verbose: bool=True) -> str:
    """Generate python code from derived expressions.

    The generated module contains one class taking all parameters as
    constructor arguments with one method per expression.

    Args:
        derivation (Derivation): Expressions.
        name (str, optional): Name of file; the class name is the
            CamelCase version. Defaults to "double_pendulum".
        folder (str, optional): Folder where to save code.
            Defaults to "./generated_code".
        verbose (bool, optional): Print progress. Defaults to True.

    Returns:
        str: path of the generated file.
    """
    if verbose:
        print("Generate Python code")
    if not os.path.exists(folder):
        os.makedirs(folder)

    p = NumPyPrinter()
    parameters = derivation.parameters()

    s = ["import numpy", "", ""]
    s.append(f"class {class_name(name)}():")
    s.append("    def __init__(self%s) -> None:" % "".join(
        f", {i}: float" for i in parameters))
    if parameters:
        s.append("        "
                 + ", ".join(f"self.{i}" for i in parameters)
                 + " = "
                 + ", ".join(str(i) for i in parameters))
    else:
        s.append("        pass")

    for fname, expression in derivation.expressions().items():
        var_syms = _sorted_variables(derivation, expression)
        const_syms = [i for i in parameters if i in expression.free_symbols]
        s.append("")
        s.append(f"    def {fname}(self%s) -> %s:" % (
            "".join(f", {i}: float" for i in var_syms),
            "numpy.ndarray" if isinstance(expression, sympy.MatrixBase) else "float"))
        if const_syms:
            s.append("        "
                     + ", ".join(str(i) for i in const_syms)
                     + " = "
                     + ", ".join(f"self.{i}" for i in const_syms))
        s.append(f"        {fname} = {p.doprint(expression)}")
        s.append(f"        return {fname}")
    s.append("")

    path = os.path.join(folder, name + ".py")
    with open(path, "w+") as f:
        f.write("\n".join(s))
    if verbose:
        print("Done")
    return path


def format_derivation(derivation: Derivation, latex: bool=False) -> str:
    """Human readable listing of all expressions.

    Args:
        derivation (Derivation): Expressions.
        latex (bool, optional): LaTeX strings instead of sympy's pretty
            printing. Defaults to False.

    Returns:
        str: one block per expression.
    """
    blocks = []
    expressions = (latex_expressions(derivation) if latex
                   else {k: sympy.pretty(e) for k, e in derivation.expressions().items()})
    for key, text in expressions.items():
        title, letter = LATEX_NAMES[key]
        blocks.append(f"{title} {letter}:\n{text}")
    return "\n\n".join(blocks)


def latex_expressions(derivation: Derivation) -> dict[str, str]:
    """LaTeX strings of all expressions."""
    return {name: LatexPrinter().doprint(e)
            for name, e in derivation.expressions().items()}


def generate_latex_document(derivation: Derivation, name: str="double_pendulum",
                            folder: str="./latex", compile_pdf: bool=False,
                            landscape: bool=False, verbose: bool=True) -> str:
    """Generate LaTeX document from derived expressions.

    Args:
        derivation (Derivation): Expressions.
        name (str, optional): Name of file. Defaults to "double_pendulum".
        folder (str, optional): Folder where to save document.
            Defaults to "./latex".
        compile_pdf (bool, optional): Compile pdf with the LaTeX
            installation of the system. Defaults to False.
        landscape (bool, optional): Landscape mode to fit longer
            equations. Defaults to False.
        verbose (bool, optional): Print progress. Defaults to True.

    Returns:
        str: path of the generated file without extension.
    """
    if verbose:
        print("Generate LaTeX document")
    if not os.path.exists(folder):
        os.makedirs(folder)

    doc = Document(documentclass="article", inputenc="utf8")
    geometry = "a4paper,top=2cm,bottom=2cm,left=2.5cm,right=2.5cm"
    if landscape:
        geometry = "landscape," + geometry
    doc.packages.append(NoEscape(r"\usepackage[%s]{geometry}" % geometry))
    doc.packages.append(NoEscape(r"\usepackage{amsmath}"))
    doc.packages.append(NoEscape(r"\usepackage{graphicx}"))
    doc.packages.append(NoEscape(r"\usepackage{breqn}"))

    doc.preamble.append(Command("title", "Double pendulum"))
    doc.preamble.append(Command("author", "symrbd"))
    doc.preamble.append(Command("date", NoEscape(r"\today")))
    doc.append(NoEscape(r"\maketitle"))

    for key, expression in derivation.expressions().items():
        title, letter = LATEX_NAMES[key]
        if not isinstance(expression, sympy.MatrixBase):
            expression = sympy.Matrix([expression])
        with doc.create(Section(title)):
            maxlen = max(
                len(regex.sub(r"(\\left|\\right|\{|\}|\\|_|\^| )", "",
                              str(expression[row, col])))
                for row in range(expression.shape[0])
                for col in range(expression.shape[1]))
            if maxlen < 120 + int(landscape)*100:
                eq = LatexPrinter().doprint(
                    expression if expression.shape != (1, 1) else expression[0, 0])
                doc.append(NoEscape(r"\[ " + letter + " = " + eq + r" \]"))
            else:
                doc.append(NoEscape(r"\begin{dgroup*}"))
                for row in range(expression.shape[0]):
                    for col in range(expression.shape[1]):
                        index = ("_{%d%d}" % (row+1, col+1)
                                 if expression.shape != (1, 1) else "")
                        eq = LatexPrinter().doprint(expression[row, col])
                        doc.append(NoEscape(r"\begin{dmath*}"))
                        doc.append(NoEscape(f"{letter}{index} = {eq}"))
                        doc.append(NoEscape(r"\end{dmath*}"))
                doc.append(NoEscape(r"\end{dgroup*}"))

    path = os.path.join(folder, name)
    if compile_pdf:
        doc.generate_pdf(path, clean_tex=False)
    else:
        doc.generate_tex(path)
    if verbose:
        print("Done")
    return path
