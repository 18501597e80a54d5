"""
Built-in Mechanism Data
=======================

Species thermodynamic data (NASA 7-coefficient polynomials, GRI-Mech 3.0
values) and a one-step global hydrogen oxidation reaction, used by the
command-line demo and the validation routines.

GLOBAL REACTION
===============

2 H₂ + O₂ ⇒ 2 H₂O
r = A exp(-Eₐ/RT) [H₂][O₂]

A = 4.0e12 m³/(kmol·s), Eₐ = 150 MJ/kmol. This is a demonstration rate
that gives ignition delays between about ten and a hundred milliseconds
for stoichiometric mixtures at 1000-1200 K and 1 atm;
it is not a validated combustion model.

Author: Guilherme F. G. Santos
Date: January 2026
License: MIT
"""

from typing import Dict, Tuple

from .kinetics import ArrheniusRate, GasKinetics, Reaction
from .thermodynamics import IdealGasPhase, NasaPolynomial, Species


NASA_COEFFICIENTS: Dict[str, Tuple[str, list, list]] = {
    "H2": (
        "H2",
        [2.34433112e00, 7.98052075e-03, -1.94781510e-05, 2.01572094e-08,
         -7.37611761e-12, -9.17935173e02, 6.83010238e-01],
        [3.33727920e00, -4.94024731e-05, 4.99456778e-07, -1.79566394e-10,
         2.00255376e-14, -9.50158922e02, -3.20502331e00],
    ),
    "O2": (
        "O2",
        [3.78245636e00, -2.99673416e-03, 9.84730201e-06, -9.68129509e-09,
         3.24372837e-12, -1.06394356e03, 3.65767573e00],
        [3.28253784e00, 1.48308754e-03, -7.57966669e-07, 2.09470555e-10,
         -2.16717794e-14, -1.08845772e03, 5.45323129e00],
    ),
    "H2O": (
        "H2O",
        [4.19864056e00, -2.03643410e-03, 6.52040211e-06, -5.48797062e-09,
         1.77197817e-12, -3.02937267e04, -8.49032208e-01],
        [3.03399249e00, 2.17691804e-03, -1.64072518e-07, -9.70419870e-11,
         1.68200992e-14, -3.00042971e04, 4.96677010e00],
    ),
    "N2": (
        "N2",
        [3.298677e00, 1.4082404e-03, -3.963222e-06, 5.641515e-09,
         -2.444854e-12, -1.0208999e03, 3.950372e00],
        [2.92664e00, 1.4879768e-03, -5.68476e-07, 1.0097038e-10,
         -6.753351e-15, -9.227977e02, 5.980528e00],
    ),
    "AR": (
        "Ar",
        [2.5, 0.0, 0.0, 0.0, 0.0, -7.453750e02, 4.366],
        [2.5, 0.0, 0.0, 0.0, 0.0, -7.453750e02, 4.366],
    ),
}


def nasa_species(name: str) -> Species:
    """Species from the built-in NASA coefficient table."""
    formula, low, high = NASA_COEFFICIENTS[name]
    return Species(name, formula, NasaPolynomial(t_mid=1000.0, low=low, high=high))


def hydrogen_air(name: str = "gas") -> Tuple[IdealGasPhase, GasKinetics]:
    """
    Hydrogen/air phase with the one-step global oxidation reaction.

    Returns:
        (phase, kinetics) sharing the same species ordering
    """
    gas = IdealGasPhase([nasa_species(sp) for sp in NASA_COEFFICIENTS], name=name)
    gas.set_state_TPX(300.0, 101325.0, {"O2": 0.21, "N2": 0.78, "AR": 0.01})
    global_step = Reaction.from_equation(
        "2 H2 + O2 => 2 H2O",
        ArrheniusRate(A=4.0e12, b=0.0, Ea=1.5e8),
        orders={"H2": 1.0, "O2": 1.0},
    )
    return gas, GasKinetics(gas, [global_step])
