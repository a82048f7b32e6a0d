from __future__ import annotations

from typing import Optional

import pydot
from sympy import Matrix, MutableDenseMatrix, Expr, eye, zeros

from symrbd.matrices import joint_screw, mass_matrix_mixed_data


class RigidBody():
    """Rigid body with spatial inertia w.r.t. its body fixed frame.

    Args:
        name (str): Unique name of the body.
        mass (float | sympy.Expr, optional): Mass. Defaults to 0.
        com (list | sympy.Matrix, optional): Center of mass (3,1) in
            the body frame. Defaults to (0,0,0).
        inertia (sympy.Matrix, optional): (3,3) rotational inertia
            about the body frame origin. Defaults to zeros(3,3).
    """
    def __init__(self, name: str, mass: float | Expr=0,
                 com: tuple | MutableDenseMatrix=(0, 0, 0),
                 inertia: Optional[MutableDenseMatrix]=None) -> None:
        self.name = name
        self.mass = mass
        self.com = Matrix(com)
        self.inertia = Matrix(inertia) if inertia is not None else zeros(3, 3)

    @property
    def Mb(self) -> MutableDenseMatrix:
        """(6,6) mass-inertia matrix in the body frame."""
        return mass_matrix_mixed_data(self.mass, self.inertia, self.com)

    def __repr__(self) -> str:
        return (f"RigidBody(name='{self.name}', mass={self.mass}, "
                f"com={list(self.com)}, inertia={self.inertia.tolist()})")


class Joint():
    """Single degree of freedom joint.

    Args:
        name (str): Unique name of the joint.
        joint_type (str, optional): "revolute" or "prismatic".
            Defaults to "revolute".
        axis (list, optional): Joint axis in the joint frame.
            Defaults to (0,0,1).

    Raises:
        ValueError: joint type not supported.
    """
    REVOLUTE = "revolute"
    PRISMATIC = "prismatic"

    def __init__(self, name: str, joint_type: str="revolute",
                 axis: tuple | MutableDenseMatrix=(0, 0, 1)) -> None:
        if joint_type not in {self.REVOLUTE, self.PRISMATIC}:
            raise ValueError(f"joint type {joint_type} not supported.")
        self.name = name
        self.joint_type = joint_type
        self.axis = Matrix(axis)

    def screw(self) -> MutableDenseMatrix:
        """(6,1) joint screw coordinates in the joint frame."""
        return joint_screw(self.axis, revolute=self.joint_type == self.REVOLUTE)

    def __repr__(self) -> str:
        return (f"Joint(name='{self.name}', joint_type='{self.joint_type}', "
                f"axis={list(self.axis)})")


class Mechanism():
    """Kinematic tree of rigid bodies connected by single degree of
    freedom joints.

    Body 0 is the fixed root. Every other body k is attached to its
    parent through joint k-1, so joint indices double as indices into
    the generalized position and velocity vectors. The body frame
    coincides with the frame after its joint.

    Args:
        root_name (str, optional): Name of the root body.
            Defaults to "world".
        gravity (list | sympy.Matrix, optional): (3,1) gravity vector
            in the root frame. Defaults to (0,0,0).
    """
    def __init__(self, root_name: str="world",
                 gravity: tuple | MutableDenseMatrix=(0, 0, 0)) -> None:
        self.gravity_vector = Matrix(gravity)
        self._bodies = [RigidBody(root_name)]
        self._joints = []
        self._joint_poses = []
        # parent body index for any joint; 0 is the root
        self._parent = []
        # optional end-effector frame
        self.ee = None
        self.ee_parent = None

    @property
    def root(self) -> RigidBody:
        return self._bodies[0]

    @property
    def bodies(self) -> list[RigidBody]:
        return list(self._bodies)

    @property
    def joints(self) -> list[Joint]:
        return list(self._joints)

    @property
    def joint_poses(self) -> list[MutableDenseMatrix]:
        return list(self._joint_poses)

    @property
    def parent(self) -> list[int]:
        return list(self._parent)

    @property
    def num_positions(self) -> int:
        return len(self._joints)

    @property
    def num_velocities(self) -> int:
        return len(self._joints)

    def attach(self, parent: RigidBody | str, body: RigidBody, joint: Joint,
               joint_pose: Optional[MutableDenseMatrix]=None) -> RigidBody:
        """Attach body to parent through joint.

        Args:
            parent (RigidBody | str): Body already in the tree.
            body (RigidBody): New body.
            joint (Joint): Joint between parent and body.
            joint_pose (sympy.Matrix, optional): (4,4) transform of the
                frame before the joint w.r.t. the parent body frame.
                Defaults to identity.

        Raises:
            ValueError: Unknown parent or body/joint name already used.

        Returns:
            RigidBody: attached body.
        """
        parent_index = self.body_index(parent)
        if any(b.name == body.name for b in self._bodies):
            raise ValueError(f"body name '{body.name}' is already in use.")
        if any(j.name == joint.name for j in self._joints):
            raise ValueError(f"joint name '{joint.name}' is already in use.")
        if joint_pose is None:
            joint_pose = eye(4)
        joint_pose = Matrix(joint_pose)
        if joint_pose.shape != (4, 4):
            raise ValueError("joint_pose has to be a (4,4) transformation matrix.")
        self._bodies.append(body)
        self._joints.append(joint)
        self._joint_poses.append(joint_pose)
        self._parent.append(parent_index)
        return body

    def set_end_effector(self, body: RigidBody | str,
                         transform: MutableDenseMatrix) -> None:
        """Define an end-effector frame rigidly attached to body."""
        index = self.body_index(body)
        if index == 0:
            raise ValueError("end-effector has to be attached to a moving body.")
        self.ee = Matrix(transform)
        self.ee_parent = index

    def body(self, name: str) -> RigidBody:
        return self._bodies[self.body_index(name)]

    def joint(self, name: str) -> Joint:
        for j in self._joints:
            if j.name == name:
                return j
        raise KeyError(f"no joint named '{name}'.")

    def joint_index(self, joint: Joint | str) -> int:
        name = joint.name if isinstance(joint, Joint) else joint
        for i, j in enumerate(self._joints):
            if j.name == name:
                return i
        raise KeyError(f"no joint named '{name}'.")

    def parent_of(self, body: RigidBody | str) -> RigidBody:
        index = self.body_index(body)
        if index == 0:
            raise ValueError("root body has no parent.")
        return self._bodies[self._parent[index-1]]

    def support(self, body: RigidBody | str) -> list[int]:
        """Joint indices from the root to body, including body's joint."""
        index = self.body_index(body)
        path = []
        while index != 0:
            path.append(index-1)
            index = self._parent[index-1]
        return path[::-1]

    def children(self, body: RigidBody | str) -> list[RigidBody]:
        index = self.body_index(body)
        return [self._bodies[k+1] for k, p in enumerate(self._parent) if p == index]

    def is_chain(self) -> bool:
        """True if the tree is an open chain without branches."""
        return all(len(self.children(b)) <= 1 for b in self._bodies)

    def generate_graph(self, path: Optional[str]=None,
                       include_mb: bool=False) -> pydot.Dot:
        """Graph of the kinematic tree. Written as pdf if path is given.

        Args:
            path (str, optional): Path where to save graph.
                Defaults to None.
            include_mb (bool, optional): Include mass inertia data.
                Defaults to False.

        Returns:
            pydot.Dot: graph.
        """
        graph = pydot.Dot("Kinematic tree", graph_type="digraph")
        graph.add_node(pydot.Node("b0", label=f"{self.root.name} (root)", shape="box"))
        for i, (joint, pose) in enumerate(zip(self._joints, self._joint_poses)):
            body = self._bodies[i+1]
            graph.add_node(pydot.Node(
                f"j{i}", color="blue",
                label=f"{joint.name}\n{joint.joint_type} {list(joint.axis)}"))
            translation = list(pose[:3, 3])
            graph.add_edge(pydot.Edge(f"b{self._parent[i]}", f"j{i}",
                                      label=f"{translation}"))
            label = body.name
            if include_mb:
                label += f"\nm={body.mass}\ncom={list(body.com)}"
            graph.add_node(pydot.Node(f"b{i+1}", shape="box", label=label))
            graph.add_edge(pydot.Edge(f"j{i}", f"b{i+1}"))
        if self.ee is not None:
            graph.add_node(pydot.Node("ee", shape="plaintext", label="ee"))
            graph.add_edge(pydot.Edge(f"b{self.ee_parent}", "ee",
                                      label=f"{list(self.ee[:3, 3])}"))
        if path is not None:
            graph.write_pdf(path)
        return graph

    def body_index(self, body: RigidBody | str) -> int:
        name = body.name if isinstance(body, RigidBody) else body
        for i, b in enumerate(self._bodies):
            if b.name == name:
                return i
        raise ValueError(f"body '{name}' is not part of the mechanism.")

    def __repr__(self) -> str:
        return (f"Mechanism(root='{self.root.name}', "
                f"bodies={[b.name for b in self._bodies[1:]]}, "
                f"joints={[j.name for j in self._joints]}, "
                f"parent={self._parent}, "
                f"gravity_vector={list(self.gravity_vector)})")


class MechanismState():
    """Generalized positions and velocities of a mechanism.

    Both vectors are sympy column matrices initialized with zeros and
    may hold numbers or expressions.
    """
    def __init__(self, mechanism: Mechanism) -> None:
        self.mechanism = mechanism
        self.q = zeros(mechanism.num_positions, 1)
        self.v = zeros(mechanism.num_velocities, 1)

    def set_configuration(self, values: list | MutableDenseMatrix) -> None:
        self.q = self._as_vector(values, self.mechanism.num_positions, "configuration")

    def set_velocity(self, values: list | MutableDenseMatrix) -> None:
        self.v = self._as_vector(values, self.mechanism.num_velocities, "velocity")

    def zero_velocity(self) -> None:
        self.v = zeros(self.mechanism.num_velocities, 1)

    def configuration(self, joint: Joint | str) -> Expr:
        return self.q[self.mechanism.joint_index(joint)]

    def velocity(self, joint: Joint | str) -> Expr:
        return self.v[self.mechanism.joint_index(joint)]

    def is_symbolic(self) -> bool:
        return all(x.is_Symbol for x in [*self.q, *self.v])

    @staticmethod
    def _as_vector(values, n: int, what: str) -> MutableDenseMatrix:
        values = Matrix(values)
        if len(values) != n or min(values.shape) > 1:
            raise ValueError(f"{what} has to have {n} entries, got shape {values.shape}.")
        return values.reshape(n, 1)

    def __repr__(self) -> str:
        return f"MechanismState(q={list(self.q)}, v={list(self.v)})"
