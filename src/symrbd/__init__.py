__version__ = "0.0.1"

from symrbd.mechanism import Joint, Mechanism, MechanismState, RigidBody
from symrbd.parameters import DEFAULT_VALUES, PendulumParameters
from symrbd.double_pendulum import double_pendulum, set_symbolic_state
from symrbd.dynamics import (
    Derivation, body_twists, center_of_mass, derive,
    gravitational_potential_energy, kinetic_energy, mass_matrix,
    simplify, system_jacobian, tip_position, transform_to_root)
from symrbd.matrices import (
    SE3AdjInvMatrix, SE3AdjMatrix, SE3Exp, SE3Inv, generalized_vectors,
    inertia_matrix, joint_screw, mass_matrix_mixed_data, transformation_matrix)
from symrbd.numeric import NumericModel
from symrbd.parser import (
    mechanism_from_yaml, mechanism_from_json, mechanism_from_dict,
    parameters_from_yaml, generate_template_yaml)
from symrbd.codegen import (
    format_derivation, generate_python_code, generate_latex_document)
