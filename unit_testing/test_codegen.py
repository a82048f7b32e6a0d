import unittest
import sys
import os
import shutil
import random
import importlib.util
from os.path import dirname, join
sys.path.append(join(dirname(dirname(__file__)), "src"))
from symrbd import (double_pendulum, set_symbolic_state, derive,
                    PendulumParameters, DEFAULT_VALUES, NumericModel,
                    format_derivation, generate_python_code,
                    generate_latex_document)
from symrbd.codegen import class_name, latex_expressions
import numpy as np

delete_generated_code = True # False deactivates cleanup functions


def import_file(name, path):
    spec = importlib.util.spec_from_file_location(name, path)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


class TestGeneratedPythonCode(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        mechanism, state = double_pendulum()
        set_symbolic_state(state)
        cls.d = derive(state, verbose=False)
        cls.folder = join(dirname(__file__), "generated_code")
        cls.path = generate_python_code(cls.d, name="testplant",
                                        folder=join(cls.folder, "python"),
                                        verbose=False)
        values = PendulumParameters.symbolic().substitutions(DEFAULT_VALUES)
        cls.model = NumericModel(mechanism, values)
        module = import_file("testplant", cls.path)
        cls.plant = module.Testplant(
            **{str(s): DEFAULT_VALUES[str(s)] for s in cls.d.parameters()})

    @classmethod
    def tearDownClass(cls):
        if delete_generated_code:
            shutil.rmtree(cls.folder, ignore_errors=True)

    def testClassName(self):
        self.assertEqual(class_name("double_pendulum"), "DoublePendulum")
        self.assertEqual(class_name("testplant"), "Testplant")

    def testMassMatrix(self):
        for _ in range(3):
            q = [random.uniform(-np.pi, np.pi) for _ in range(2)]
            np.testing.assert_allclose(self.plant.mass_matrix(q[1]),
                                       self.model.mass_matrix(q))

    def testKineticEnergy(self):
        q = [random.uniform(-np.pi, np.pi) for _ in range(2)]
        v = [random.uniform(-5, 5) for _ in range(2)]
        np.testing.assert_allclose(self.plant.kinetic_energy(q[1], *v),
                                   self.model.kinetic_energy(q, v))

    def testPotentialEnergy(self):
        q = [random.uniform(-np.pi, np.pi) for _ in range(2)]
        np.testing.assert_allclose(self.plant.potential_energy(*q),
                                   self.model.potential_energy(q))


class TestLatex(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        mechanism, state = double_pendulum()
        set_symbolic_state(state)
        cls.d = derive(state, verbose=False)
        cls.folder = join(dirname(__file__), "generated_latex")

    @classmethod
    def tearDownClass(cls):
        if delete_generated_code:
            shutil.rmtree(cls.folder, ignore_errors=True)

    def testLatexExpressions(self):
        tex = latex_expressions(self.d)
        self.assertEqual(set(tex), {"mass_matrix", "kinetic_energy", "potential_energy"})
        self.assertIn(r"\cos", tex["mass_matrix"])
        self.assertIn("m_{2}", tex["mass_matrix"])

    def testDocument(self):
        for landscape in (False, True):
            path = generate_latex_document(self.d, name="testplant",
                                           folder=self.folder,
                                           landscape=landscape, verbose=False)
            self.assertTrue(os.path.exists(path + ".tex"))
            with open(path + ".tex", "r") as f:
                content = f.read()
            self.assertIn("Mass matrix", content)
            self.assertIn("Potential energy", content)

    def testFormatDerivation(self):
        text = format_derivation(self.d)
        self.assertIn("Mass matrix M:", text)
        self.assertIn("Kinetic energy T:", text)
        self.assertIn("Potential energy V:", text)
        self.assertIn(r"\cos", format_derivation(self.d, latex=True))


if __name__ == "__main__":
    unittest.main()
