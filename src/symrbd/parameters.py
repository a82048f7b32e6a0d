from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Iterator

from sympy import Symbol, symbols

# name -> sympy assumptions of the pendulum parameters
ASSUMPTIONS = {
    "m_1": {"positive": True},
    "m_2": {"positive": True},
    "I_1": {"positive": True},
    "I_2": {"positive": True},
    "l_1": {"real": True},
    "l_2": {"real": True},
    "c_1": {"real": True},
    "c_2": {"real": True},
    "g": {"real": True},
}

# links hang down along -z at q = 0
DEFAULT_VALUES = {
    "m_1": 1.0,
    "m_2": 2.0,
    "I_1": 0.333,  # about the shoulder axis
    "I_2": 0.5,  # about the elbow axis
    "l_1": -1.0,
    "l_2": -2.0,
    "c_1": -0.5,
    "c_2": -1.0,
    "g": 9.81,
}


@dataclass(frozen=True)
class PendulumParameters:
    """The nine scalar parameters of a double pendulum.

    Masses and moments of inertia are declared positive, lengths,
    center of mass offsets and gravitational acceleration are real.
    Moments of inertia are taken about the joint axis. Fields may also
    hold plain numbers for a purely numeric model.
    """
    m_1: Symbol
    m_2: Symbol
    I_1: Symbol
    I_2: Symbol
    l_1: Symbol
    l_2: Symbol
    c_1: Symbol
    c_2: Symbol
    g: Symbol

    @classmethod
    def symbolic(cls) -> PendulumParameters:
        """Declare all nine parameters as sympy symbols."""
        return cls(**{name: symbols(name, **assumptions)
                      for name, assumptions in ASSUMPTIONS.items()})

    @classmethod
    def numeric(cls, values: dict | None=None) -> PendulumParameters:
        """Parameters holding numbers instead of symbols.

        Missing entries are filled from DEFAULT_VALUES.
        """
        merged = dict(DEFAULT_VALUES)
        if values:
            merged.update({normalize_name(k): v for k, v in values.items()})
        return cls(**{name: merged[name] for name in ASSUMPTIONS})

    def __iter__(self) -> Iterator:
        return (getattr(self, f.name) for f in fields(self))

    def as_dict(self) -> dict[str, Symbol]:
        return {f.name: getattr(self, f.name) for f in fields(self)}

    def substitutions(self, values: dict) -> dict:
        """Map a {name: value} dict to a {symbol: value} dict usable with
        ``subs``.

        Names may be given with or without underscore, i.e. "m_1" or
        "m1".

        Raises:
            KeyError: Unknown parameter name.
        """
        own = self.as_dict()
        return {own[normalize_name(name)]: value
                for name, value in values.items()}


def normalize_name(name: str) -> str:
    """Convert "m1" style names to "m_1"; raise KeyError if unknown."""
    name = str(name)
    if name in ASSUMPTIONS:
        return name
    if len(name) > 1 and name[-1].isdigit() and name[-2] != "_":
        candidate = name[:-1] + "_" + name[-1]
        if candidate in ASSUMPTIONS:
            return candidate
    raise KeyError(f"unknown pendulum parameter '{name}'")


def parameter_symbols() -> dict[str, Symbol]:
    """Local dict for ``sympy.parse_expr`` which gives parameter names
    their pendulum assumptions."""
    return PendulumParameters.symbolic().as_dict()
