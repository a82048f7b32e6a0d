from __future__ import annotations

from typing import Optional

from sympy import Matrix, MutableDenseMatrix

from symrbd.matrices import generalized_vectors, transformation_matrix
from symrbd.mechanism import Joint, Mechanism, MechanismState, RigidBody
from symrbd.parameters import PendulumParameters


def double_pendulum(params: Optional[PendulumParameters]=None,
                    axis: tuple=(0, 1, 0)) -> tuple[Mechanism, MechanismState]:
    """Build the two link pendulum world -> shoulder -> upper_link ->
    elbow -> lower_link.

    Both joints are revolute about the same axis. Gravity points along
    -z. The link centers of mass lie on the z axis of their body frames
    at c_1 and c_2, the elbow sits at l_1 on the upper link and the
    end-effector (tip) at l_2 on the lower link. I_1 and I_2 are the
    moments of inertia about the joint axis.

    Args:
        params (PendulumParameters, optional): Parameters. Defaults to
            PendulumParameters.symbolic().
        axis (tuple, optional): Common rotation axis. Defaults to (0,1,0).

    Returns:
        tuple[Mechanism, MechanismState]: mechanism and a zero state.
    """
    if params is None:
        params = PendulumParameters.symbolic()
    axis = Matrix(axis)

    mechanism = Mechanism("world", gravity=[0, 0, -params.g])

    upper_link = RigidBody("upper_link", mass=params.m_1,
                           com=[0, 0, params.c_1],
                           inertia=params.I_1*axis*axis.T)
    shoulder = Joint("shoulder", Joint.REVOLUTE, axis)
    mechanism.attach(mechanism.root, upper_link, shoulder)

    lower_link = RigidBody("lower_link", mass=params.m_2,
                           com=[0, 0, params.c_2],
                           inertia=params.I_2*axis*axis.T)
    elbow = Joint("elbow", Joint.REVOLUTE, axis)
    mechanism.attach(upper_link, lower_link, elbow,
                     joint_pose=transformation_matrix(t=[0, 0, params.l_1]))

    mechanism.set_end_effector(lower_link, transformation_matrix(t=[0, 0, params.l_2]))
    return mechanism, MechanismState(mechanism)


def set_symbolic_state(state: MechanismState
                       ) -> tuple[MutableDenseMatrix, MutableDenseMatrix]:
    """Replace every position slot with q_i and every velocity slot with
    v_i (real symbols, i starting at 1).

    Returns:
        tuple[sympy.Matrix, sympy.Matrix]: (q, v)
    """
    q, v = generalized_vectors(state.mechanism.num_positions)
    state.set_configuration(q)
    state.set_velocity(v)
    return q, v
