from symrbd import (double_pendulum, set_symbolic_state, derive,
                    mass_matrix, kinetic_energy, gravitational_potential_energy,
                    simplify, tip_position, PendulumParameters, DEFAULT_VALUES,
                    generate_python_code)
from sympy import init_printing, pprint

init_printing()

# two link pendulum with symbolic parameters m_1, m_2, I_1, I_2, l_1, l_2, c_1, c_2, g
mechanism, state = double_pendulum()
print(mechanism)

# replace the zero state by the symbols q_1, q_2, v_1, v_2
q, v = set_symbolic_state(state)

# single queries
M = simplify(mass_matrix(state))
T = simplify(kinetic_energy(state))
V = simplify(gravitational_potential_energy(state))
pprint(M)
pprint(T)
pprint(V)

# position of the lower link tip
pprint(simplify(tip_position(state)))

# all at once, with numbers
d = derive(state)
numeric = d.subs(PendulumParameters.symbolic().substitutions(DEFAULT_VALUES))
pprint(numeric.mass_matrix)

generate_python_code(d, name="double_pendulum", folder="./generated_code/python")

# numbers right away, only the state stays symbolic
numeric_mechanism, numeric_state = double_pendulum(PendulumParameters.numeric({"m2": 1.5}))
set_symbolic_state(numeric_state)
pprint(simplify(mass_matrix(numeric_state)))
