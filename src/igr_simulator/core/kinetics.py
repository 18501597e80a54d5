"""
Gas-Phase Kinetics Module
=========================

Homogeneous reaction rates for an ideal-gas phase.

THEORETICAL FOUNDATION
=====================

1. Modified Arrhenius Rate Constant:
   k(T) = A * T^b * exp(-Eₐ/(R*T))

2. Mass-Action Rate of Progress:
   q_j = k_f,j Π Cᵢ^{ν'ᵢⱼ} - k_r,j Π Cᵢ^{ν''ᵢⱼ}

3. Reverse Rate from Equilibrium:
   K_c = exp(-Δg°/RT) * (P°/RT)^{Δν}
   k_r = k_f / K_c

4. Net Production Rates:
   ω̇ᵢ = Σⱼ (ν''ᵢⱼ - ν'ᵢⱼ) q_j        [kmol/(m³·s)]

5. Temperature Derivatives (constant molar concentrations):
   d ln k_f/dT = b/T + Eₐ/(R T²)
   d ln K_c/dT = Σν h°/(R T²) - Δν/T

Author: Guilherme F. G. Santos
Date: January 2026
License: MIT
"""

import numpy as np
import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from .errors import ConfigurationError
from .thermodynamics import GAS_CONSTANT, STANDARD_PRESSURE, IdealGasPhase


@dataclass
class ArrheniusRate:
    """
    Modified Arrhenius rate expression.

    Attributes:
        A: Pre-exponential factor [kmol, m³, s units per reaction order]
        b: Temperature exponent [-]
        Ea: Activation energy [J/kmol]
    """

    A: float
    b: float = 0.0
    Ea: float = 0.0

    def validate(self) -> None:
        if self.A < 0:
            raise ConfigurationError(f"Pre-exponential factor must be non-negative: A={self.A}")

    def __call__(self, T: float) -> float:
        return self.A * T**self.b * np.exp(-self.Ea / (GAS_CONSTANT * T))

    def dlnk_dT(self, T: float) -> float:
        return self.b / T + self.Ea / (GAS_CONSTANT * T * T)


def _parse_side(text: str) -> Dict[str, float]:
    side: Dict[str, float] = {}
    for term in text.split("+"):
        term = term.strip()
        if not term:
            continue
        match = re.fullmatch(r"(\d+(?:\.\d*)?)?\s*(\S+)", term)
        if match is None:
            raise ConfigurationError(f"Cannot parse reaction term '{term}'")
        coeff, name = match.groups()
        side[name] = side.get(name, 0.0) + float(coeff or 1.0)
    return side


@dataclass
class Reaction:
    """
    Gas-phase reaction.

    Attributes:
        reactants: Species -> stoichiometric coefficient
        products: Species -> stoichiometric coefficient
        rate: Forward rate constant
        reversible: Include the equilibrium-based reverse rate
        orders: Optional non-elementary forward orders (species -> order)
    """

    reactants: Dict[str, float]
    products: Dict[str, float]
    rate: ArrheniusRate
    reversible: bool = False
    orders: Optional[Dict[str, float]] = None

    @classmethod
    def from_equation(
        cls,
        equation: str,
        rate: ArrheniusRate,
        orders: Optional[Dict[str, float]] = None,
    ) -> "Reaction":
        """
        Build a reaction from an equation string.

        "<=>" marks a reversible reaction, "=>" an irreversible one.

        Example:
            >>> rxn = Reaction.from_equation("2 H2 + O2 => 2 H2O", ArrheniusRate(1e10))
            >>> rxn.reactants
            {'H2': 2.0, 'O2': 1.0}
        """
        if "<=>" in equation:
            lhs, rhs = equation.split("<=>")
            reversible = True
        elif "=>" in equation:
            lhs, rhs = equation.split("=>")
            reversible = False
        else:
            raise ConfigurationError(f"Reaction equation needs '=>' or '<=>': {equation}")
        return cls(_parse_side(lhs), _parse_side(rhs), rate, reversible, orders)

    @property
    def equation(self) -> str:
        def side(terms):
            return " + ".join(
                (f"{n:g} {sp}" if n != 1 else sp) for sp, n in terms.items()
            )

        arrow = "<=>" if self.reversible else "=>"
        return f"{side(self.reactants)} {arrow} {side(self.products)}"


class GasKinetics:
    """
    Mass-action kinetics for an ideal-gas phase.

    All rates are evaluated at the phase's current state, so the owner of
    the phase is responsible for having restored the right state first.
    """

    def __init__(self, thermo: IdealGasPhase, reactions: Sequence[Reaction] = ()):
        self.thermo = thermo
        self.reactions: List[Reaction] = []
        n = thermo.n_species
        self._nu_f = np.zeros((0, n))
        self._nu_r = np.zeros((0, n))
        self._orders = np.zeros((0, n))
        self._multipliers: List[float] = []
        for rxn in reactions:
            self.add_reaction(rxn)

    @property
    def n_species(self) -> int:
        return self.thermo.n_species

    @property
    def n_reactions(self) -> int:
        return len(self.reactions)

    @property
    def species_names(self) -> List[str]:
        return self.thermo.species_names

    def _stoich_row(self, terms: Dict[str, float], equation: str) -> np.ndarray:
        row = np.zeros(self.n_species)
        for sp, nu in terms.items():
            k = self.thermo.species_index(sp)
            if k is None:
                raise ConfigurationError(
                    f"Reaction '{equation}' references unknown species '{sp}'"
                )
            row[k] = nu
        return row

    def add_reaction(self, reaction: Reaction) -> None:
        reaction.rate.validate()
        eq = reaction.equation
        nu_f = self._stoich_row(reaction.reactants, eq)
        nu_r = self._stoich_row(reaction.products, eq)
        orders = nu_f.copy()
        for sp, order in (reaction.orders or {}).items():
            k = self.thermo.species_index(sp)
            if k is None:
                raise ConfigurationError(
                    f"Reaction '{eq}' has an order for unknown species '{sp}'"
                )
            orders[k] = order
        self._nu_f = np.vstack([self._nu_f, nu_f])
        self._nu_r = np.vstack([self._nu_r, nu_r])
        self._orders = np.vstack([self._orders, orders])
        self._multipliers.append(1.0)
        self.reactions.append(reaction)

    @property
    def stoichiometry(self) -> np.ndarray:
        """Net stoichiometric matrix, shape (n_reactions, n_species)."""
        return self._nu_r - self._nu_f

    # Rate multipliers (used by sensitivity analysis)
    def multiplier(self, i: int) -> float:
        return self._multipliers[i]

    def set_multiplier(self, i: int, value: float) -> None:
        self._multipliers[i] = float(value)

    # ------------------------------------------------------------------
    # Rates
    # ------------------------------------------------------------------

    def _rate_constants(self, T: float):
        kf = np.array([rxn.rate(T) for rxn in self.reactions]) * np.array(
            self._multipliers
        )
        dlnkf = np.array([rxn.rate.dlnk_dT(T) for rxn in self.reactions])
        return kf, dlnkf

    def _equilibrium(self, T: float):
        """ln Kc and d ln Kc/dT for every reaction."""
        nu = self.stoichiometry
        dnu = nu.sum(axis=1)
        ln_Kc = -nu @ self.thermo.gibbs_RT() + dnu * np.log(
            STANDARD_PRESSURE / (GAS_CONSTANT * T)
        )
        dln_Kc = (nu @ self.thermo.enthalpy_RT()) / T - dnu / T
        return ln_Kc, dln_Kc

    def rates_of_progress(self):
        """
        Forward and reverse rates of progress [kmol/(m³·s)].

        Returns:
            (q_fwd, q_rev, dq_fwd/dT, dq_rev/dT) at constant concentrations
        """
        if self.n_reactions == 0:
            empty = np.zeros(0)
            return empty, empty, empty, empty

        T = self.thermo.temperature
        C = np.clip(self.thermo.concentrations, 0.0, np.inf)
        kf, dlnkf = self._rate_constants(T)

        q_fwd = kf * np.prod(C[None, :] ** self._orders, axis=1)
        dq_fwd = q_fwd * dlnkf

        reversible = np.array([rxn.reversible for rxn in self.reactions])
        q_rev = np.zeros(self.n_reactions)
        dq_rev = np.zeros(self.n_reactions)
        if reversible.any():
            ln_Kc, dln_Kc = self._equilibrium(T)
            kr = kf * np.exp(-ln_Kc)
            prod_rev = np.prod(C[None, :] ** self._nu_r, axis=1)
            q_rev = np.where(reversible, kr * prod_rev, 0.0)
            dq_rev = q_rev * (dlnkf - dln_Kc)

        return q_fwd, q_rev, dq_fwd, dq_rev

    def net_rates_of_progress(self) -> np.ndarray:
        q_fwd, q_rev, _, _ = self.rates_of_progress()
        return q_fwd - q_rev

    def net_production_rates(self) -> np.ndarray:
        """Net molar production rates ω̇ [kmol/(m³·s)]."""
        if self.n_reactions == 0:
            return np.zeros(self.n_species)
        return self.stoichiometry.T @ self.net_rates_of_progress()

    def net_production_rates_ddT(self) -> np.ndarray:
        """dω̇/dT at constant molar concentrations [kmol/(m³·s·K)]."""
        if self.n_reactions == 0:
            return np.zeros(self.n_species)
        _, _, dq_fwd, dq_rev = self.rates_of_progress()
        return self.stoichiometry.T @ (dq_fwd - dq_rev)


def validate_kinetics() -> None:
    """
    Validation of gas-phase kinetics.

    Tests:
    1. Elements are conserved by the net production rates
    2. Analytic temperature derivative matches a finite difference
    3. Rate multiplier scales the production rates linearly
    """
    from .mechanisms import hydrogen_air

    gas, kinetics = hydrogen_air()
    gas.set_state_TPX(1200.0, 101325.0, {"H2": 2.0, "O2": 1.0, "H2O": 0.5, "N2": 3.76})

    # Test 1: Element conservation (mass production sums to zero)
    wdot = kinetics.net_production_rates()
    mass_rate = np.dot(wdot, gas.molecular_weights)
    assert abs(mass_rate) < 1e-9 * np.abs(wdot * gas.molecular_weights).max(), "Mass balance"

    # Test 2: Temperature derivative at constant concentrations
    T0, rho0 = gas.temperature, gas.density
    dT = 1e-4 * T0
    gas.set_state_TR(T0 + dT, rho0)
    w_plus = kinetics.net_production_rates()
    gas.set_state_TR(T0 - dT, rho0)
    w_minus = kinetics.net_production_rates()
    gas.set_state_TR(T0, rho0)
    fd = (w_plus - w_minus) / (2 * dT)
    assert np.allclose(fd, kinetics.net_production_rates_ddT(), rtol=1e-5, atol=1e-12), "dwdot/dT"

    # Test 3: Multipliers
    for i in range(kinetics.n_reactions):
        kinetics.set_multiplier(i, 2.0)
    assert np.allclose(kinetics.net_production_rates(), 2.0 * wdot), "Multiplier"
    for i in range(kinetics.n_reactions):
        kinetics.set_multiplier(i, 1.0)

    print("✓ All kinetics validations passed")


if __name__ == "__main__":
    validate_kinetics()
