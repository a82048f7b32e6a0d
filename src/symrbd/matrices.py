from __future__ import annotations

from sympy import Matrix, Identity, symbols, sin, cos, zeros, eye, MutableDenseMatrix, Expr


def generalized_vectors(
    DOF: int, startindex: int=1
    ) -> tuple[MutableDenseMatrix, MutableDenseMatrix]:
    """Generate symbolic generalized position and velocity vectors.

    The symbols are named as follows:

        q_1, q_2, ....., q_i for joint positions.
        v_1, v_2, ....., v_i for joint velocities.

    All symbols are real. Calling the function twice with the same
    arguments returns equal symbols.

    Args:
        DOF (int): Degrees of freedom.
        startindex (int, optional): Index of first joint. Defaults to 1.

    Returns:
        tuple(sympy.Matrix): Generalized vectors (q, v), each (DOF,1).
    """
    indices = range(startindex, startindex+DOF)
    q = Matrix([symbols(f"q_{i}", real=True) for i in indices])
    v = Matrix([symbols(f"v_{i}", real=True) for i in indices])
    return q, v


def skew(x: MutableDenseMatrix | list) -> MutableDenseMatrix:
    """Skew symmetric (3,3) matrix of a 3 vector, i.e. skew(a)*b = a x b."""
    x = Matrix(x)
    return Matrix([[0, -x[2], x[1]],
                   [x[2], 0, -x[0]],
                   [-x[1], x[0], 0]])


def joint_screw(axis: list, vec: list=[0,0,0], revolute: bool=True) -> MutableDenseMatrix:
    """Get joint screw coordinates from joint axis and vector to joint.

    Args:
        axis (list):
            Joint axis w.r.t. the frame the screw is expressed in.
        vec (list, optional):
            Vector to joint axis for revolute joint.
            Defaults to [0,0,0].
        revolute (bool, optional):
            Revolute (True) or prismatic (False) joint.
            Defaults to True.

    Returns:
        sympy.Matrix: (6,1) joint screw coordinates [omega; v].
    """
    e = Matrix(axis)
    if revolute:
        return Matrix.vstack(e, Matrix(vec).cross(e))
    return Matrix.vstack(zeros(3, 1), e)


def SE3Exp(XX: MutableDenseMatrix, t: float | Expr) -> MutableDenseMatrix:
    """Compute exponential mapping for SE(3).

    The rotational part of the screw has to be either zero or a unit
    vector.

    Args:
        XX (sympy.Matrix): (6,1) screw coordinates [omega; v].
        t (sympy.Expr): joint coordinate (angle or displacement).

    Returns:
        sympy.Matrix: (4,4) SE(3) Pose.
    """
    xi = Matrix(XX[0:3])
    eta = Matrix(XX[3:6])
    if xi == zeros(3, 1):
        return transformation_matrix(t=eta*t)
    xihat = skew(xi)
    R = eye(3) + sin(t)*xihat + (1-cos(t))*(xihat*xihat)
    p = (eye(3)-R)*(xihat*eta) + xi*(xi.T*eta)*t
    return transformation_matrix(R, p)


def SE3Inv(C: MutableDenseMatrix) -> MutableDenseMatrix:
    """Compute analytical inverse of a (4,4) SE(3) pose."""
    R = C[:3, :3]
    return transformation_matrix(R.T, -R.T*C[:3, 3])


def SE3AdjMatrix(C: MutableDenseMatrix) -> MutableDenseMatrix:
    """Compute (6x6) Adjoint matrix for SE(3).

    Twists are ordered [omega; v].

    Args:
        C (sympy.Matrix): SE(3) Pose.

    Returns:
        sympy.Matrix: (6x6) Adjoint matrix
    """
    R = C[:3, :3]
    return Matrix.vstack(Matrix.hstack(R, zeros(3)),
                         Matrix.hstack(skew(C[:3, 3])*R, R))


def SE3AdjInvMatrix(C: MutableDenseMatrix) -> MutableDenseMatrix:
    """Compute inverse of (6x6) Adjoint matrix for SE(3) without
    inverting the (6x6) matrix.

    Args:
        C (sympy.Matrix): SE(3) Pose.

    Returns:
        sympy.Matrix: Inverse of (6x6) Adjoint matrix
    """
    R = C[:3, :3]
    return Matrix.vstack(Matrix.hstack(R.T, zeros(3)),
                         Matrix.hstack(-R.T*skew(C[:3, 3]), R.T))


def inertia_matrix(Ixx: float | Expr=0, Ixy: float | Expr=0,
                   Ixz: float | Expr=0, Iyy: float | Expr=0,
                   Iyz: float | Expr=0, Izz: float | Expr=0) -> MutableDenseMatrix:
    """Create 3 x 3 inertia matrix from independent inertia values.

    Args:
        Ixx (float or sympy.Expr): Inertia value I11. Defaults to 0.
        Ixy (float or sympy.Expr): Inertia value I12. Defaults to 0.
        Ixz (float or sympy.Expr): Inertia value I13. Defaults to 0.
        Iyy (float or sympy.Expr): Inertia value I22. Defaults to 0.
        Iyz (float or sympy.Expr): Inertia value I23. Defaults to 0.
        Izz (float or sympy.Expr): Inertia value I33. Defaults to 0.

    Returns:
        sympy.Matrix: Inertia matrix (3,3)
    """
    return Matrix([[Ixx, Ixy, Ixz],
                   [Ixy, Iyy, Iyz],
                   [Ixz, Iyz, Izz]])


def transformation_matrix(r: MutableDenseMatrix=Matrix(Identity(3)),
                          t: MutableDenseMatrix | list=zeros(3, 1)) -> MutableDenseMatrix:
    """Build transformation matrix from rotation and translation.

    Args:
        r (sympy.Matrix):
            SO(3) Rotation matrix (3,3).
            Defaults to sympy.Matrix(Identity(3))
        t (sympy.Matrix | list):
            Translation vector (3,1). Defaults to sympy.zeros(3,1)

    Returns:
        sympy.Matrix: Transformation matrix (4,4)
    """
    T = eye(4)
    T[:3, :3] = Matrix(r)
    T[:3, 3] = Matrix(t)
    return T


def mass_matrix_mixed_data(m: float | Expr, Theta: MutableDenseMatrix,
                           COM: MutableDenseMatrix | list) -> MutableDenseMatrix:
    """Build mass-inertia matrix in SE(3) from mass, inertia and
    center of mass information w.r.t. the body fixed frame.

    Theta is the rotational inertia about the body frame origin, not
    about the center of mass.

    Args:
        m (float | sympy.Expr): Mass.
        Theta (array_like): (3,3) Inertia tensor with respect to body-fixed frame.
        COM (array_like): Center of mass (3,1).

    Returns:
        sympy.Matrix: Mass-inertia matrix (6,6).
    """
    mc = m*skew(COM)
    return Matrix.vstack(Matrix.hstack(Matrix(Theta), mc),
                         Matrix.hstack(mc.T, m*eye(3)))
