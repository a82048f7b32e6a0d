from __future__ import annotations

import random
from collections import defaultdict
from dataclasses import dataclass
from itertools import combinations

import numpy
import sympy
from sympy import (Matrix, MutableDenseMatrix, cancel, factor, lambdify,
                   nsimplify, powsimp, zeros, Rational)
from sympy.simplify.fu import fu

from symrbd.matrices import SE3AdjInvMatrix, SE3AdjMatrix, SE3Exp
from symrbd.mechanism import MechanismState, RigidBody


def transforms_to_root(state: MechanismState) -> list[MutableDenseMatrix]:
    """Forward kinematics of every non-root body.

    C_k = C_parent * joint_pose_k * exp(X_k q_k)

    Returns:
        list[sympy.Matrix]: (4,4) poses of bodies 1..n w.r.t. the root.
    """
    mechanism = state.mechanism
    FK_C = []
    for i, (joint, pose, parent) in enumerate(zip(mechanism.joints,
                                                  mechanism.joint_poses,
                                                  mechanism.parent)):
        C_parent = FK_C[parent-1] if parent else sympy.eye(4)
        FK_C.append(C_parent*pose*SE3Exp(joint.screw(), state.q[i]))
    return FK_C


def transform_to_root(state: MechanismState, body: RigidBody | str) -> MutableDenseMatrix:
    """(4,4) pose of body w.r.t. the root frame."""
    index = state.mechanism.body_index(body)
    if index == 0:
        return sympy.eye(4)
    return transforms_to_root(state)[index-1]


def system_jacobian(state: MechanismState,
                    FK_C: list[MutableDenseMatrix] | None=None) -> MutableDenseMatrix:
    """System level body Jacobian J (6n x n).

    J = A*X with the block diagonal matrix X of joint screws in the
    body frames and the block lower triangular matrix A holding the
    adjoints of the relative configurations between supporting bodies.
    """
    mechanism = state.mechanism
    n = mechanism.num_velocities
    if FK_C is None:
        FK_C = transforms_to_root(state)

    X = zeros(6*n, n)
    for i, joint in enumerate(mechanism.joints):
        X[6*i:6*i+6, i] = joint.screw()

    A = Matrix(sympy.Identity(6*n))
    for i in range(n):
        for j in mechanism.support(mechanism.bodies[i+1]):
            if j == i:
                continue
            # Ad(C_i^-1 C_j)
            A[6*i:6*i+6, 6*j:6*j+6] = SE3AdjInvMatrix(FK_C[i])*SE3AdjMatrix(FK_C[j])
    return A*X


def body_twists(state: MechanismState) -> list[MutableDenseMatrix]:
    """Body fixed twists [omega; v] (6,1) of bodies 1..n."""
    n = state.mechanism.num_velocities
    V = system_jacobian(state)*state.v
    return [V[6*i:6*i+6, :] for i in range(n)]


def _block_mass_matrix(state: MechanismState) -> MutableDenseMatrix:
    bodies = state.mechanism.bodies[1:]
    Mb = zeros(6*len(bodies), 6*len(bodies))
    for i, body in enumerate(bodies):
        Mb[6*i:6*i+6, 6*i:6*i+6] = body.Mb
    return Mb


def mass_matrix(state: MechanismState) -> MutableDenseMatrix:
    """Joint space mass inertia matrix M = J^T Mb J (n x n)."""
    J = system_jacobian(state)
    return J.T*_block_mass_matrix(state)*J


def kinetic_energy(state: MechanismState) -> sympy.Expr:
    """Kinetic energy 1/2 sum_k V_k^T Mb_k V_k over all body twists."""
    T = sympy.S.Zero
    for body, V in zip(state.mechanism.bodies[1:], body_twists(state)):
        T += Rational(1, 2)*(V.T*body.Mb*V)[0, 0]
    return T


def gravitational_potential_energy(state: MechanismState) -> sympy.Expr:
    """Potential energy -sum_k m_k g^T p_com_k in the gravity field of the
    mechanism. Zero level is the root frame origin."""
    g = state.mechanism.gravity_vector
    U = sympy.S.Zero
    for body, C in zip(state.mechanism.bodies[1:], transforms_to_root(state)):
        p = C[:3, :3]*body.com + C[:3, 3]
        U -= body.mass*(g.T*p)[0, 0]
    return U


def center_of_mass(state: MechanismState) -> MutableDenseMatrix:
    """(3,1) center of mass of all bodies w.r.t. the root frame."""
    total = sympy.S.Zero
    weighted = zeros(3, 1)
    for body, C in zip(state.mechanism.bodies[1:], transforms_to_root(state)):
        weighted += body.mass*(C[:3, :3]*body.com + C[:3, 3])
        total += body.mass
    if total == 0:
        raise ValueError("mechanism has no mass.")
    return weighted/total


def tip_position(state: MechanismState) -> MutableDenseMatrix:
    """(3,1) position of the end-effector frame w.r.t. the root frame.

    Raises:
        ValueError: mechanism has no end-effector frame.
    """
    mechanism = state.mechanism
    if mechanism.ee is None:
        raise ValueError("mechanism has no end-effector frame.")
    C = transforms_to_root(state)[mechanism.ee_parent-1]*mechanism.ee
    return C[:3, 3]


def partial_factor(exp: sympy.Expr) -> sympy.Expr:
    """Pull common factors out of pairs of additive terms.

    Args:
        exp (sympy.Expr): sympy expression or matrix.

    Returns:
        sympy.Expr: modified sympy expression.
    """
    if isinstance(exp, sympy.MatrixBase):
        return exp.applyfunc(partial_factor)

    factor_map = defaultdict(set)
    const, additive_terms = exp.as_coeff_add()
    for term1, term2 in combinations(additive_terms, 2):
        common_terms = (set(term1.as_coeff_mul()[-1])
                        & set(term2.as_coeff_mul()[-1]))
        if common_terms:
            factor_map[sympy.Mul(*common_terms)] |= {term1, term2}

    # largest savings first
    factor_list = sorted(
        factor_map.items(),
        key=lambda i: ((i[0].count_ops() + 1) * len(i[1]), str(i[0])),
        reverse=True)

    used = set()
    new_expr = nsimplify(0)
    for common, appearances in factor_list:
        terms = 0
        for instance in sorted(appearances, key=str):
            coefficient = instance.as_coefficient(common)
            if instance not in used and coefficient is not None:
                terms += coefficient
                used.add(instance)
        new_expr += common*terms
    for term in set(additive_terms) - used:
        new_expr += term
    return new_expr + const


def simplify(exp: sympy.Expr | MutableDenseMatrix) -> sympy.Expr | MutableDenseMatrix:
    """Faster simplify implementation for sympy expressions.
    Results can differ in form from sympy.simplify but are
    algebraically equivalent and deterministic.

    Symmetric matrices are simplified once per upper triangle entry and
    mirrored, so the result is exactly symmetric.

    Args:
        exp (sympy expression | sympy.Matrix): Expression to simplify.

    Returns:
        sympy expression: Simplified expression.
    """
    if isinstance(exp, sympy.MatrixBase):
        if exp.is_square and _is_symmetric(exp):
            m_exp = zeros(*exp.shape)
            for i in range(exp.shape[0]):
                for j in range(i, exp.shape[1]):
                    m_exp[i, j] = simplify(exp[i, j])
                    m_exp[j, i] = m_exp[i, j]
            return m_exp
        return Matrix(exp).applyfunc(simplify)
    exp = sympy.sympify(exp)
    exp = fu(exp)  # fast function to simplify sin and cos expressions
    exp = cancel(exp)
    exp = factor(exp)
    exp = powsimp(exp)
    exp = partial_factor(exp)
    return exp.doit()


_simplify = simplify  # derive has an argument named simplify


def _is_symmetric(exp: MutableDenseMatrix) -> bool:
    # numeric test is faster than is_symmetric for long expressions
    syms = sorted(exp.free_symbols, key=str)
    num = numpy.array(
        lambdify(syms, exp, "numpy")(*(random.random() for _ in syms)),
        dtype=complex)
    return bool(numpy.allclose(num, num.T))


@dataclass
class Derivation:
    """Closed form dynamical quantities of a mechanism state."""
    mass_matrix: MutableDenseMatrix
    kinetic_energy: sympy.Expr
    potential_energy: sympy.Expr
    q: MutableDenseMatrix
    v: MutableDenseMatrix

    def expressions(self) -> dict[str, sympy.Expr]:
        return {"mass_matrix": self.mass_matrix,
                "kinetic_energy": self.kinetic_energy,
                "potential_energy": self.potential_energy}

    def parameters(self) -> list[sympy.Symbol]:
        """Constant symbols, sorted by name."""
        syms = set()
        for e in self.expressions().values():
            syms.update(e.free_symbols)
        syms -= set(self.q) | set(self.v)
        return sorted(syms, key=str)

    def subs(self, values: dict) -> Derivation:
        """Substitute symbols (e.g. parameters) in all expressions."""
        return Derivation(self.mass_matrix.subs(values),
                          self.kinetic_energy.subs(values),
                          self.potential_energy.subs(values),
                          self.q, self.v)

    def evaluate(self, values: dict, q: list, v: list) -> tuple:
        """Numeric (M, T, V) for parameter values and a float state."""
        state_values = dict(zip(self.q, q))
        state_values.update(zip(self.v, v))
        d = self.subs(values).subs(state_values)
        return (numpy.array(d.mass_matrix.evalf().tolist(), dtype=float),
                float(d.kinetic_energy.evalf()),
                float(d.potential_energy.evalf()))


def derive(state: MechanismState, simplify: bool=True,
           verbose: bool=True) -> Derivation:
    """Query mass matrix, kinetic energy and gravitational potential
    energy of state and bring them into closed form.

    Args:
        state (MechanismState): State, usually populated with
            set_symbolic_state.
        simplify (bool, optional): Use simplify on the expressions.
            Defaults to True.
        verbose (bool, optional): Print progress. Defaults to True.

    Returns:
        Derivation: expressions.
    """
    if verbose:
        print("Dynamics calculation")
    M = mass_matrix(state)
    T = kinetic_energy(state)
    U = gravitational_potential_energy(state)
    if simplify:
        if verbose:
            print("Simplify expressions")
        M, T, U = _simplify(M), _simplify(T), _simplify(U)
    if verbose:
        print("Done")
    return Derivation(Matrix(M), T, U, Matrix(state.q), Matrix(state.v))
