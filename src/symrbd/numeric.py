"""Direct numeric evaluation of a mechanism with numpy.

Parameter symbols are replaced by floats once, afterwards all
kinematics run on numpy arrays. Body twists are propagated recursively
from the root, which makes this module an independent cross check of
the closed form expressions in ``symrbd.dynamics``.
"""
from __future__ import annotations

import numpy as np
from numpy.typing import ArrayLike

from symrbd.mechanism import Mechanism


def skew(x: ArrayLike) -> np.ndarray:
    return np.array([[0.0, -x[2], x[1]],
                     [x[2], 0.0, -x[0]],
                     [-x[1], x[0], 0.0]])


def se3_exp(screw: np.ndarray, t: float) -> np.ndarray:
    """(4,4) pose exp(screw * t) for a unit rotational or pure
    translational (6,) screw [omega, v]."""
    omega, v = screw[:3], screw[3:]
    C = np.eye(4)
    if np.allclose(omega, 0.0):
        C[:3, 3] = v*t
        return C
    W = skew(omega)
    R = np.eye(3) + np.sin(t)*W + (1.0 - np.cos(t))*W @ W
    C[:3, :3] = R
    C[:3, 3] = (np.eye(3) - R) @ (W @ v) + omega*(omega @ v)*t
    return C


def se3_inv(C: np.ndarray) -> np.ndarray:
    R = C[:3, :3]
    Cinv = np.eye(4)
    Cinv[:3, :3] = R.T
    Cinv[:3, 3] = -R.T @ C[:3, 3]
    return Cinv


def se3_adjoint(C: np.ndarray) -> np.ndarray:
    """(6,6) adjoint of a pose for twists ordered [omega, v]."""
    R = C[:3, :3]
    Ad = np.zeros((6, 6))
    Ad[:3, :3] = R
    Ad[3:, 3:] = R
    Ad[3:, :3] = skew(C[:3, 3]) @ R
    return Ad


def _to_array(expr, values: dict) -> np.ndarray:
    # raises TypeError if a symbol is left without value
    return np.array(expr.subs(values).evalf().tolist(), dtype=float)


class NumericModel():
    """Numeric version of a mechanism for fixed parameter values.

    Args:
        mechanism (Mechanism): (symbolic) mechanism.
        values (dict, optional): {sympy.Symbol: float} substitutions for
            all parameter symbols used by the mechanism. Defaults to {}.
    """
    def __init__(self, mechanism: Mechanism, values: dict | None=None) -> None:
        values = values or {}
        self.n = mechanism.num_positions
        self.parent = mechanism.parent
        self.screws = [_to_array(j.screw(), values).ravel() for j in mechanism.joints]
        self.joint_poses = [_to_array(p, values) for p in mechanism.joint_poses]
        bodies = mechanism.bodies[1:]
        self.Mb = [_to_array(b.Mb, values) for b in bodies]
        self.masses = [float(Mb[3, 3]) for Mb in self.Mb]
        self.coms = [_to_array(b.com, values).ravel() for b in bodies]
        self.gravity = _to_array(mechanism.gravity_vector, values).ravel()
        self.support = [mechanism.support(b) for b in bodies]

    def forward_kinematics(self, q: ArrayLike) -> list[np.ndarray]:
        """(4,4) poses of bodies 1..n w.r.t. the root."""
        q = np.asarray(q, dtype=float)
        FK = []
        for i in range(self.n):
            parent = self.parent[i]
            C_parent = FK[parent-1] if parent else np.eye(4)
            FK.append(C_parent @ self.joint_poses[i] @ se3_exp(self.screws[i], q[i]))
        return FK

    def body_twists(self, q: ArrayLike, v: ArrayLike) -> list[np.ndarray]:
        """Body twists by recursion V_k = Ad(C_rel^-1) V_parent + X_k v_k."""
        q = np.asarray(q, dtype=float)
        v = np.asarray(v, dtype=float)
        twists = []
        for i in range(self.n):
            parent = self.parent[i]
            V_parent = twists[parent-1] if parent else np.zeros(6)
            Crel = self.joint_poses[i] @ se3_exp(self.screws[i], q[i])
            twists.append(se3_adjoint(se3_inv(Crel)) @ V_parent + self.screws[i]*v[i])
        return twists

    def mass_matrix(self, q: ArrayLike) -> np.ndarray:
        FK = self.forward_kinematics(q)
        M = np.zeros((self.n, self.n))
        for i in range(self.n):
            J = np.zeros((6, self.n))
            for j in self.support[i]:
                J[:, j] = se3_adjoint(se3_inv(FK[i]) @ FK[j]) @ self.screws[j]
            M += J.T @ self.Mb[i] @ J
        return M

    def kinetic_energy(self, q: ArrayLike, v: ArrayLike) -> float:
        return float(sum(0.5*V @ Mb @ V
                         for V, Mb in zip(self.body_twists(q, v), self.Mb)))

    def potential_energy(self, q: ArrayLike) -> float:
        U = 0.0
        for C, m, com in zip(self.forward_kinematics(q), self.masses, self.coms):
            U -= m*self.gravity @ (C[:3, :3] @ com + C[:3, 3])
        return float(U)
