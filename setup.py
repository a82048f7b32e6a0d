from setuptools import setup, find_packages

with open("README.md", "r") as f:
        long_description = f.read()
        
setup(
    name="symrbd",
    version="0.0.1",
    description="Symbolic mass matrix and energies of a double pendulum built on a screw theory kinematic tree.",
    long_description=long_description,
    long_description_content_type='text/markdown',
    packages=find_packages("src",exclude="test"),
    package_dir={"": "src"},
    setup_requires=["numpy"],
    python_requires=">=3.8",
    install_requires=[
        "numpy",
        "sympy>=1.8",
        "regex",
        "PyYAML",
        "pylatex",
        "pydot",
    ],
    extras_require={"testing": ["pytest"]},
    classifiers=[
        'Development Status :: 4 - Beta',
        'Environment :: Console',
        'Programming Language :: Python',
        "Operating System :: OS Independent",
    ],
)
