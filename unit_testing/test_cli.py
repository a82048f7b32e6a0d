import unittest
import unittest.mock
import sys
import os
import io
import tempfile
from os.path import dirname, join
sys.path.append(join(dirname(dirname(__file__)), "src"))
from symrbd.__main__ import main
from symrbd.parser import parameters_from_yaml
from symrbd import DEFAULT_VALUES


def run(argv):
    with unittest.mock.patch("sys.stdout", new_callable=io.StringIO) as out:
        main(argv)
    return out.getvalue()


class TestCommandLine(unittest.TestCase):

    def testDefaultPendulum(self):
        out = run([])
        self.assertIn("Dynamics calculation", out)
        self.assertIn("Mass matrix M:", out)
        self.assertIn("Potential energy V:", out)

    def testTemplateAndAnalysis(self):
        with tempfile.TemporaryDirectory() as folder:
            path = join(folder, "pendulum.yaml")
            run(["-T", path])
            self.assertEqual(parameters_from_yaml(path), DEFAULT_VALUES)

            with unittest.mock.patch("builtins.input", return_value="n"):
                out = run(["--template", path])
            self.assertIn("Abort execution.", out)

            out = run([path, "--substitute", "--latex-print", "-n",
                       "-p", "-l", "-f", join(folder, "generated_code")])
            self.assertIn("Kinetic energy T:", out)
            self.assertNotIn("m_{2}", out)
            self.assertTrue(os.path.exists(
                join(folder, "generated_code", "python", "pendulum.py")))
            self.assertTrue(os.path.exists(
                join(folder, "generated_code", "latex", "pendulum.tex")))

    def testMissingFile(self):
        with self.assertRaises(ValueError):
            run(["does_not_exist.yaml"])

    def testExtension(self):
        with tempfile.NamedTemporaryFile(suffix=".txt") as f:
            with self.assertRaises(ValueError):
                run([f.name])


if __name__ == "__main__":
    unittest.main()
