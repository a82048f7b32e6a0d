from __future__ import annotations

import json
from typing import Iterable, Optional

import regex
import yaml
from sympy import Matrix, Identity, parse_expr, Expr

from symrbd.matrices import inertia_matrix, transformation_matrix
from symrbd.mechanism import Joint, Mechanism, RigidBody
from symrbd.parameters import normalize_name, parameter_symbols


def mechanism_from_yaml(path: str) -> Mechanism:
    """Parse yaml mechanism description and return Mechanism object.

    Args:
        path (str): Path to yaml file.

    Returns:
        symrbd.Mechanism object.
    """
    with open(path, "r") as stream:
        y = yaml.safe_load(stream)
    return mechanism_from_dict(y)


def mechanism_from_json(path: str) -> Mechanism:
    """Parse json mechanism description and return Mechanism object.

    Args:
        path (str): Path to json file.

    Returns:
        symrbd.Mechanism object.
    """
    with open(path, "r") as stream:
        y = json.load(stream)
    return mechanism_from_dict(y)


def load_description(path: str) -> dict:
    """Load yaml or json file as dict, chosen by file extension."""
    with open(path, "r") as stream:
        if bool(regex.search(r"(\.json|\.JSON)\Z", path)):
            return json.load(stream)
        return yaml.safe_load(stream)


def parse_hierarchical_expr(x: list | dict | str,
                            include_keys: Iterable={},
                            exclude_keys: Iterable={}) -> list | dict | Expr:
    """Convert strings in data structure (list or dict) to sympy
    expressions. Names of the pendulum parameters are parsed to symbols
    with the pendulum assumptions.

    Args:
        x (list | dict | str):
            Hierarchical structure which might contain symbolic
            expression as string.
        include_keys (Iterable):
            Only convert strings with listed dict_keys.
            Defaults to {}.
        exclude_keys (Iterable):
            Don't convert strings with listed dict_keys.
            Defaults to {}.

    Returns:
        list | dict | sympy.Expr:
            Same data structure with strings converted to sympy.Expr.
    """
    local_dict = parameter_symbols()
    if type(x) in {dict, list}:
        for i in x if type(x) is dict else range(len(x)):
            if type(x[i]) in {list, dict}:
                x[i] = parse_hierarchical_expr(x[i], include_keys, exclude_keys)
            elif type(x[i]) is str:
                if (type(x) is list
                    or (include_keys and i in include_keys)
                    or (not include_keys and i not in exclude_keys)):
                    x[i] = parse_expr(x[i], local_dict=local_dict)
    elif type(x) is str:
        x = parse_expr(x, local_dict=local_dict)
    return x


def _pose(d: dict) -> Matrix:
    t = d["translation"] if "translation" in d else [0, 0, 0]
    r = Matrix(d["rotation"]) if "rotation" in d else Matrix(Identity(3))
    return transformation_matrix(r, t)


def _inertia(inertia) -> Matrix:
    if type(inertia) is list:
        if len(inertia) == 6:
            return inertia_matrix(*inertia)
        return Matrix(inertia)
    if type(inertia) is dict:
        return inertia_matrix(**inertia)
    return inertia*Matrix(Identity(3))


def mechanism_from_dict(d: dict) -> Mechanism:
    """Parse dict to Mechanism object.

    Bodies are attached in the order of the list, so parents have to be
    listed before their children.

    Args:
        d (dict): Dictionary containing the mechanism description.

    Raises:
        KeyError: Entry not found.
        ValueError: Unexpected entry.

    Returns:
        symrbd.Mechanism object.
    """
    d = parse_hierarchical_expr(d, exclude_keys={"name", "parent", "type",
                                                 "root"})
    if "bodies" not in d:
        raise KeyError("mechanism description needs a 'bodies' entry.")
    try:
        gravity = d["gravity"] if "gravity" in d else d["gravity_vector"]
    except KeyError:
        gravity = [0, 0, 0]

    mechanism = Mechanism(d["root"] if "root" in d else "world", gravity=gravity)
    for b in d["bodies"]:
        if type(b) is not dict:
            raise ValueError(f"body description {b} cannot be processed.")
        j = b["joint"]
        joint = Joint(j["name"], j["type"] if "type" in j else "revolute",
                      j["axis"] if "axis" in j else [0, 0, 1])
        body = RigidBody(b["name"],
                         mass=b["mass"] if "mass" in b else 0,
                         com=b["com"] if "com" in b else [0, 0, 0],
                         inertia=_inertia(b["inertia"]) if "inertia" in b else None)
        mechanism.attach(b["parent"] if "parent" in b else mechanism.root.name,
                         body, joint, joint_pose=_pose(j))

    if "ee" in d:
        mechanism.set_end_effector(d["ee"]["parent"], _pose(d["ee"]))
    return mechanism


def parameters_from_dict(d: dict) -> dict[str, float]:
    """Numeric parameter values of the 'parameters' entry.

    Raises:
        KeyError: Unknown parameter name.
        ValueError: Value is not a number.
    """
    values = {}
    for name, value in (d.get("parameters") or {}).items():
        try:
            values[normalize_name(name)] = float(value)
        except (TypeError, ValueError):
            raise ValueError(f"parameter {name} has to be a number, got {value}.") from None
    return values


def parameters_from_yaml(path: str) -> dict[str, float]:
    """Numeric parameter values stored in a yaml or json description."""
    return parameters_from_dict(load_description(path))


def mechanism_to_dict(mechanism: Mechanism) -> dict:
    """Describe mechanism as dict of strings and lists of strings."""
    def strlist(m):
        return [str(i) for i in m]

    d = {"root": mechanism.root.name,
         "gravity": strlist(mechanism.gravity_vector),
         "bodies": []}
    for i, (joint, pose) in enumerate(zip(mechanism.joints, mechanism.joint_poses)):
        body = mechanism.bodies[i+1]
        j = {"name": joint.name,
             "type": joint.joint_type,
             "axis": strlist(joint.axis),
             "translation": strlist(pose[:3, 3])}
        if pose[:3, :3] != Matrix(Identity(3)):
            j["rotation"] = [strlist(pose[k, :3]) for k in range(3)]
        I = body.inertia
        d["bodies"].append({
            "name": body.name,
            "parent": mechanism.bodies[mechanism.parent[i]].name,
            "joint": j,
            "mass": str(body.mass),
            "com": strlist(body.com),
            "inertia": strlist([I[0, 0], I[0, 1], I[0, 2], I[1, 1], I[1, 2], I[2, 2]]),
        })
    if mechanism.ee is not None:
        d["ee"] = {"parent": mechanism.bodies[mechanism.ee_parent].name,
                   "translation": strlist(mechanism.ee[:3, 3])}
    return d


def mechanism_to_yaml(mechanism: Mechanism, path: str="mechanism.yaml") -> None:
    with open(path, "w+") as f:
        yaml.safe_dump(mechanism_to_dict(mechanism), f, sort_keys=False)


def mechanism_to_json(mechanism: Mechanism, path: str="mechanism.json") -> None:
    with open(path, "w+") as f:
        json.dump(mechanism_to_dict(mechanism), f, indent=2)


def generate_template_yaml(path: str="double_pendulum.yaml",
                           parameters: Optional[dict]=None,
                           **kwargs) -> None | dict:
    """Generate template yaml file of the double pendulum to modify.

    Args:
        path (str, optional): Path where to save generated yaml file.
            Defaults to 'double_pendulum.yaml'
        parameters (dict, optional): numeric parameter values written
            to the 'parameters' entry. Defaults to None.
    """
    y = ["---"]
    y.append("root: world")
    y.append("gravity: [0, 0, -g]")
    y.append("")
    y.append("bodies:")
    for i, (body, joint, parent) in enumerate(
            [("upper_link", "shoulder", "world"), ("lower_link", "elbow", "upper_link")]):
        y.append(f"  - name: {body}")
        y.append(f"    parent: {parent}")
        y.append( "    joint:")
        y.append(f"      name: {joint}")
        y.append( "      type: revolute")
        y.append( "      axis: [0, 1, 0]")
        y.append(f"      translation: [0, 0, {'l_1' if i else 0}]")
        y.append(f"    mass: m_{i+1}")
        y.append(f"    com: [0, 0, c_{i+1}]")
        y.append( "    inertia:")
        y.append(f"      Iyy: I_{i+1}")
        y.append("")
    y.append("ee:")
    y.append("  parent: lower_link")
    y.append("  translation: [0, 0, l_2]")
    y.append("")
    if parameters:
        y.append("parameters:")
        for name, value in parameters.items():
            y.append(f"  {name}: {value}")
        y.append("")

    if "return_dict" in kwargs and kwargs["return_dict"]:
        return yaml.safe_load("\n".join(y))

    # check if path ends with .yaml
    if not bool(regex.search(r"(\.yaml|\.YAML|\.yml|\.YML)\Z", path)):
        path += ".yaml"

    with open(path, "w+") as f:
        f.write("\n".join(y))
