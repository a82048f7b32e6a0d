import unittest
import sys
import random
from os.path import dirname, join
sys.path.append(join(dirname(dirname(__file__)), "src"))
from symrbd import (SE3AdjInvMatrix, SE3AdjMatrix, SE3Exp, SE3Inv,
                    generalized_vectors, inertia_matrix, joint_screw,
                    mass_matrix_mixed_data, transformation_matrix)
from symrbd.numeric import se3_adjoint, se3_exp, se3_inv
from sympy import Matrix, cos, sin, symbols, simplify, zeros, eye
import numpy as np


class TestMatrices(unittest.TestCase):

    def testInertiaMatrix(self):
        self.assertEqual(
            inertia_matrix(1,2,3,4,5,6),
            Matrix([[1,2,3],[2,4,5],[3,5,6]])
        )
        self.assertEqual(inertia_matrix(Iyy=7), Matrix([[0,0,0],[0,7,0],[0,0,0]]))

    def testTransformationMatrix(self):
        self.assertEqual(
            transformation_matrix(Matrix([[1,2,3],[4,5,6],[7,8,9]]),
                                  Matrix([10,11,12])),
            Matrix([[1,2,3,10],[4,5,6,11],[7,8,9,12],[0,0,0,1]])
        )
        self.assertEqual(transformation_matrix(), eye(4))

    def testJointScrew(self):
        self.assertEqual(joint_screw([0,1,0]), Matrix([0,1,0,0,0,0]))
        self.assertEqual(joint_screw([0,0,1],[1,0,0]), Matrix([0,0,1,0,-1,0]))
        self.assertEqual(joint_screw([1,0,0], revolute=False), Matrix([0,0,0,1,0,0]))

    def testSE3Exp(self):
        t = random.randint(0,100)
        self.assertEqual(
            SE3Exp(Matrix([0,0,0,0,0,1]), t=t),
            Matrix([[1,0,0,0],[0,1,0,0],[0,0,1,t],[0,0,0,1]])
        )
        self.assertEqual(
            SE3Exp(Matrix([0,0,1,0,0,0]), t=t),
            Matrix([[cos(t),-sin(t),0,0],[sin(t),cos(t),0,0],[0,0,1,0],[0,0,0,1]])
        )
        self.assertEqual(
            SE3Exp(Matrix([0,1,0,0,0,0]), t=t),
            Matrix([[cos(t),0,sin(t),0],[0,1,0,0],[-sin(t),0,cos(t),0],[0,0,0,1]])
        )

    def testSE3Inv(self):
        a,x,y,z = symbols("a,x,y,z")
        m = Matrix([[cos(a),-sin(a),0,x],
                    [sin(a), cos(a),0,y],
                    [0,0,1,z],
                    [0,0,0,1]])
        self.assertEqual(simplify(SE3Inv(m) - m.inv()), zeros(4,4))

    def testSE3AdjInvMatrix(self):
        a,x,y,z = symbols("a,x,y,z")
        m = transformation_matrix(SE3Exp(Matrix([0,1,0,0,0,0]), a)[:3,:3], [x,y,z])
        self.assertEqual(
            simplify(SE3AdjInvMatrix(m) - SE3AdjMatrix(SE3Inv(m))),
            zeros(6,6)
        )
        self.assertEqual(simplify(SE3AdjInvMatrix(m)*SE3AdjMatrix(m)), eye(6))

    def testMassMatrixMixedData(self):
        m = random.randint(0,100)
        Ixx = random.randint(0,100)
        Ixy = random.randint(0,100)
        Ixz = random.randint(0,100)
        Iyy = random.randint(0,100)
        Iyz = random.randint(0,100)
        Izz = random.randint(0,100)
        I = Matrix([[Ixx,Ixy,Ixz],[Ixy,Iyy,Iyz],[Ixz,Iyz,Izz]])
        c1=random.randint(0,100)
        c2=random.randint(0,100)
        c3=random.randint(0,100)
        com = [c1,c2,c3]
        self.assertEqual(
            mass_matrix_mixed_data(m,I,com),
            Matrix([[Ixx,Ixy,Ixz, 0,-m*c3,m*c2],
                    [Ixy,Iyy,Iyz, m*c3,0,-m*c1],
                    [Ixz,Iyz,Izz,-m*c2,m*c1,0],
                    [0,m*c3,-m*c2,m,0,0],
                    [-m*c3,0,m*c1,0,m,0],
                    [m*c2,-m*c1,0,0,0,m]])
        )

    def testGeneralizedVectors(self):
        q, v = generalized_vectors(2)
        self.assertEqual(q, Matrix(symbols("q_1 q_2", real=True)))
        self.assertEqual(v, Matrix(symbols("v_1 v_2", real=True)))
        self.assertTrue(all(s.is_real for s in [*q, *v]))
        q, v = generalized_vectors(1, startindex=3)
        self.assertEqual(str(q[0]), "q_3")
        self.assertEqual(str(v[0]), "v_3")

    def testNumericHelpers(self):
        t = random.random()
        a,x,y,z = symbols("a,x,y,z")
        screws = [Matrix([0,1,0,0,0,0]), Matrix([0,0,1,1,0,0]), Matrix([0,0,0,0,1,0])]
        for screw in screws:
            C = SE3Exp(screw, a)
            C[:3,3] += Matrix([x,y,z])
            values = {a: t, x: 0.3, y: -0.2, z: 1.5}
            C_num = np.array(C.subs(values).evalf().tolist(), dtype=float)
            with self.subTest("exp"):
                np.testing.assert_allclose(
                    se3_exp(np.array(screw, dtype=float).ravel(), t),
                    np.array(SE3Exp(screw, t).evalf().tolist(), dtype=float),
                    atol=1e-12)
            with self.subTest("inv"):
                np.testing.assert_allclose(se3_inv(C_num), np.linalg.inv(C_num), atol=1e-12)
            with self.subTest("adjoint"):
                np.testing.assert_allclose(
                    se3_adjoint(C_num),
                    np.array(SE3AdjMatrix(C).subs(values).evalf().tolist(), dtype=float),
                    atol=1e-12)


if __name__ == "__main__":
    unittest.main()
