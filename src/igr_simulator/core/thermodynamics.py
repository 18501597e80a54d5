"""
Thermodynamics Module for Ideal-Gas Reactors
============================================

This module implements the ideal-gas equation of state and species
thermodynamic properties needed by the reactor equations.

THEORETICAL FOUNDATION
=====================

1. NASA 7-Coefficient Polynomials (two temperature ranges):
   cp/R = a₀ + a₁T + a₂T² + a₃T³ + a₄T⁴
   h/RT = a₀ + a₁T/2 + a₂T²/3 + a₃T³/4 + a₄T⁴/5 + a₅/T
   s/R  = a₀ ln T + a₁T + a₂T²/2 + a₃T³/3 + a₄T⁴/4 + a₆

2. Ideal Gas Mixture:
   P = ρ R T / W̄          with 1/W̄ = Σ Yₖ/Wₖ
   Cₖ = ρ Yₖ / Wₖ          [kmol/m³]
   uₖ = hₖ - R T           (partial molar internal energy)
   c_v = c_p - R / W̄

3. State Checkpoints:
   The phase can save its (T, ρ, Y) into an immutable ThermoSnapshot and be
   restored from one. Reactors persist a snapshot after every state update
   and restore it before every evaluation.

UNITS
=====

SI with kmol: J/kmol, kg/kmol, kmol/m³, Pa, K.

References:
- Gordon & McBride, NASA RP-1311 (1994)
- Kee, Coltrin & Glarborg "Chemically Reacting Flow" (2003)

Author: Guilherme F. G. Santos
Date: January 2026
License: MIT
"""

import numpy as np
import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence
import logging

from .errors import ConfigurationError

logger = logging.getLogger(__name__)


# Universal Constants
GAS_CONSTANT = 8314.462618  # [J/(kmol·K)] Universal gas constant
ONE_ATM = 101325.0  # [Pa]
STANDARD_PRESSURE = ONE_ATM  # [Pa] Reference pressure for standard-state properties

# Atomic weights [kg/kmol]
ATOMIC_WEIGHTS = {
    "H": 1.008,
    "C": 12.011,
    "N": 14.007,
    "O": 15.999,
    "Ar": 39.95,
    "He": 4.002602,
}


def parse_composition(formula: str) -> Dict[str, float]:
    """
    Parse a compact composition string such as "H2O" or "Ar".

    Returns:
        Mapping element -> atom count
    """
    composition: Dict[str, float] = {}
    for element, count in re.findall(r"([A-Z][a-z]?)(\d*)", formula):
        composition[element] = composition.get(element, 0.0) + float(count or 1)
    if not composition:
        raise ConfigurationError(f"Cannot parse composition '{formula}'")
    return composition


@dataclass
class NasaPolynomial:
    """
    Two-range NASA 7-coefficient polynomial.

    Attributes:
        t_mid: Switch temperature between the ranges [K]
        low: Coefficients a₀..a₆ for T < t_mid
        high: Coefficients a₀..a₆ for T >= t_mid
        t_min: Lower validity bound [K]
        t_max: Upper validity bound [K]
    """

    t_mid: float
    low: Sequence[float]
    high: Sequence[float]
    t_min: float = 200.0
    t_max: float = 3500.0

    def __post_init__(self):
        self.low = np.asarray(self.low, dtype=float)
        self.high = np.asarray(self.high, dtype=float)

    def validate(self) -> None:
        """Validate coefficient shapes and temperature ranges."""
        if self.low.shape != (7,) or self.high.shape != (7,):
            raise ConfigurationError("NASA polynomials need exactly 7 coefficients")
        if not self.t_min < self.t_mid < self.t_max:
            raise ConfigurationError(
                f"Invalid temperature ranges: {self.t_min} < {self.t_mid} < {self.t_max}"
            )

    def _coeffs(self, T: float) -> np.ndarray:
        return self.high if T >= self.t_mid else self.low

    def cp_R(self, T: float) -> float:
        a = self._coeffs(T)
        return a[0] + T * (a[1] + T * (a[2] + T * (a[3] + T * a[4])))

    def enthalpy_RT(self, T: float) -> float:
        a = self._coeffs(T)
        return (
            a[0]
            + T * (a[1] / 2 + T * (a[2] / 3 + T * (a[3] / 4 + T * a[4] / 5)))
            + a[5] / T
        )

    def entropy_R(self, T: float) -> float:
        a = self._coeffs(T)
        return (
            a[0] * np.log(T)
            + T * (a[1] + T * (a[2] / 2 + T * (a[3] / 3 + T * a[4] / 4)))
            + a[6]
        )

    def dcp_R_dT(self, T: float) -> float:
        a = self._coeffs(T)
        return a[1] + T * (2 * a[2] + T * (3 * a[3] + T * 4 * a[4]))

    @classmethod
    def constant_cp(cls, cp_R: float, h0_RT0: float = 0.0, T0: float = 298.15):
        """
        Species with constant heat capacity, convenient for idealized models.

        Args:
            cp_R: Dimensionless heat capacity
            h0_RT0: Dimensionless enthalpy at T0
            T0: Reference temperature [K]
        """
        a5 = (h0_RT0 - cp_R) * T0
        coeffs = [cp_R, 0.0, 0.0, 0.0, 0.0, a5, 0.0]
        return cls(t_mid=1000.0, low=coeffs, high=coeffs, t_min=1.0, t_max=1.0e5)


@dataclass
class Species:
    """
    Gas-phase species definition.

    Attributes:
        name: Species name (unique within a phase)
        composition: Elemental composition, e.g. {"H": 2, "O": 1}
        thermo: NASA polynomial for standard-state properties
        molecular_weight: Computed from composition unless given [kg/kmol]
    """

    name: str
    composition: Dict[str, float]
    thermo: NasaPolynomial
    molecular_weight: Optional[float] = None

    def __post_init__(self):
        if isinstance(self.composition, str):
            self.composition = parse_composition(self.composition)
        if self.molecular_weight is None:
            try:
                self.molecular_weight = sum(
                    ATOMIC_WEIGHTS[el] * n for el, n in self.composition.items()
                )
            except KeyError as e:
                raise ConfigurationError(
                    f"Unknown element {e} in species '{self.name}'"
                ) from e

    def validate(self) -> None:
        if not self.name:
            raise ConfigurationError("Species name must be non-empty")
        if self.molecular_weight <= 0:
            raise ConfigurationError(
                f"Molecular weight must be positive: {self.name}={self.molecular_weight}"
            )
        self.thermo.validate()


@dataclass(frozen=True)
class ThermoSnapshot:
    """
    Immutable checkpoint of a phase state.

    Restoring a snapshot reproduces temperature, density and the mass
    fractions exactly as saved (no renormalization).
    """

    temperature: float  # [K]
    density: float  # [kg/m³]
    mass_fractions: np.ndarray = field(repr=False)


class IdealGasPhase:
    """
    Ideal-gas mixture with NASA polynomial species thermodynamics.

    Species ordering is fixed at construction and shared with every
    kinetics object built on the phase.
    """

    phase_type = "IdealGas"

    def __init__(
        self,
        species: Sequence[Species],
        name: str = "gas",
        temperature: float = 300.0,
        pressure: float = ONE_ATM,
    ):
        """
        Initialize ideal-gas phase.

        Args:
            species: Species definitions
            name: Phase identifier
            temperature: Initial temperature [K]
            pressure: Initial pressure [Pa]; composition starts as pure
                first species
        """
        if len(species) == 0:
            raise ConfigurationError("An ideal-gas phase needs at least one species")
        names = [sp.name for sp in species]
        if len(set(names)) != len(names):
            raise ConfigurationError(f"Duplicate species names in phase '{name}'")
        for sp in species:
            sp.validate()

        self.name = name
        self.species: List[Species] = list(species)
        self._index = {sp.name: k for k, sp in enumerate(self.species)}
        self._mw = np.array([sp.molecular_weight for sp in self.species])

        self._T = temperature
        self._rho = 1.0
        self._Y = np.zeros(self.n_species)
        self._Y[0] = 1.0
        self._mmw = self._mw[0]
        self.set_state_TP(temperature, pressure)

    # ------------------------------------------------------------------
    # Species bookkeeping
    # ------------------------------------------------------------------

    @property
    def n_species(self) -> int:
        return len(self.species)

    @property
    def species_names(self) -> List[str]:
        return [sp.name for sp in self.species]

    def species_index(self, name: str) -> Optional[int]:
        """Index of species `name`, or None if the phase does not contain it."""
        return self._index.get(name)

    def species_name(self, k: int) -> str:
        return self.species[k].name

    @property
    def molecular_weights(self) -> np.ndarray:
        """Species molecular weights [kg/kmol]."""
        return self._mw

    # ------------------------------------------------------------------
    # State setters
    # ------------------------------------------------------------------

    def _composition_array(self, values) -> np.ndarray:
        if isinstance(values, dict):
            arr = np.zeros(self.n_species)
            for sp, v in values.items():
                k = self.species_index(sp)
                if k is None:
                    raise ConfigurationError(f"Unknown species '{sp}' in phase '{self.name}'")
                arr[k] = v
            return arr
        arr = np.asarray(values, dtype=float)
        if arr.shape != (self.n_species,):
            raise ValueError(
                f"Composition has {arr.size} entries, phase has {self.n_species} species"
            )
        return arr

    def set_mass_fractions_no_norm(self, Y) -> None:
        """Set mass fractions exactly as given (sum not forced to one)."""
        self._Y = np.array(Y[: self.n_species], dtype=float)
        self._mmw = 1.0 / np.sum(self._Y / self._mw)

    def set_mass_fractions(self, Y) -> None:
        """Set mass fractions, clipping negatives and normalizing to one."""
        Y = np.maximum(self._composition_array(Y), 0.0)
        total = Y.sum()
        if total <= 0:
            raise ValueError("Mass fractions must have a positive sum")
        self.set_mass_fractions_no_norm(Y / total)

    def set_mole_fractions(self, X) -> None:
        X = np.maximum(self._composition_array(X), 0.0)
        total = X.sum()
        if total <= 0:
            raise ValueError("Mole fractions must have a positive sum")
        Y = X * self._mw
        self.set_mass_fractions_no_norm(Y / Y.sum())

    def set_state_TR(self, T: float, rho: float) -> None:
        """Set temperature [K] and density [kg/m³]."""
        if T <= 0:
            raise ValueError(f"Temperature must be positive: T={T}")
        if rho <= 0:
            raise ValueError(f"Density must be positive: rho={rho}")
        self._T = float(T)
        self._rho = float(rho)

    def set_state_TP(self, T: float, P: float) -> None:
        """Set temperature [K] and pressure [Pa] at the current composition."""
        if P <= 0:
            raise ValueError(f"Pressure must be positive: P={P}")
        self.set_state_TR(T, P * self._mmw / (GAS_CONSTANT * T))

    def set_state_TPY(self, T: float, P: float, Y) -> None:
        self.set_mass_fractions(Y)
        self.set_state_TP(T, P)

    def set_state_TPX(self, T: float, P: float, X) -> None:
        self.set_mole_fractions(X)
        self.set_state_TP(T, P)

    # ------------------------------------------------------------------
    # Checkpoints
    # ------------------------------------------------------------------

    def save_state(self) -> ThermoSnapshot:
        return ThermoSnapshot(self._T, self._rho, self._Y.copy())

    def restore_state(self, snapshot: ThermoSnapshot) -> None:
        self._T = snapshot.temperature
        self._rho = snapshot.density
        self.set_mass_fractions_no_norm(snapshot.mass_fractions)

    # ------------------------------------------------------------------
    # Mixture properties
    # ------------------------------------------------------------------

    @property
    def temperature(self) -> float:
        return self._T

    @property
    def density(self) -> float:
        return self._rho

    @property
    def mean_molecular_weight(self) -> float:
        return self._mmw

    @property
    def pressure(self) -> float:
        return self._rho * GAS_CONSTANT * self._T / self._mmw

    @property
    def mass_fractions(self) -> np.ndarray:
        return self._Y.copy()

    @property
    def mole_fractions(self) -> np.ndarray:
        return self._Y / self._mw * self._mmw

    @property
    def concentrations(self) -> np.ndarray:
        """Molar concentrations [kmol/m³]."""
        return self._rho * self._Y / self._mw

    @property
    def enthalpy_mass(self) -> float:
        """Specific enthalpy [J/kg]."""
        h_k = self.enthalpy_RT() * GAS_CONSTANT * self._T
        return float(np.sum(self._Y * h_k / self._mw))

    @property
    def int_energy_mass(self) -> float:
        """Specific internal energy [J/kg]."""
        return self.enthalpy_mass - self.pressure / self._rho

    @property
    def cp_mass(self) -> float:
        return float(np.sum(self._Y * self.cp_R() / self._mw)) * GAS_CONSTANT

    @property
    def cv_mass(self) -> float:
        return self.cp_mass - GAS_CONSTANT / self._mmw

    # ------------------------------------------------------------------
    # Species-resolved properties at the current temperature
    # ------------------------------------------------------------------

    def cp_R(self) -> np.ndarray:
        return np.array([sp.thermo.cp_R(self._T) for sp in self.species])

    def enthalpy_RT(self) -> np.ndarray:
        return np.array([sp.thermo.enthalpy_RT(self._T) for sp in self.species])

    def entropy_R(self) -> np.ndarray:
        return np.array([sp.thermo.entropy_R(self._T) for sp in self.species])

    def gibbs_RT(self) -> np.ndarray:
        """Standard-state Gibbs energies g°/RT."""
        return self.enthalpy_RT() - self.entropy_R()

    def dcp_R_dT(self) -> np.ndarray:
        """Temperature derivatives of cp/R [1/K]; equal to d(cv/R)/dT."""
        return np.array([sp.thermo.dcp_R_dT(self._T) for sp in self.species])

    def partial_molar_int_energies(self) -> np.ndarray:
        """Partial molar internal energies [J/kmol]."""
        RT = GAS_CONSTANT * self._T
        return (self.enthalpy_RT() - 1.0) * RT

    def __repr__(self) -> str:
        return (
            f"IdealGasPhase(name={self.name!r}, T={self._T:.2f} K, "
            f"P={self.pressure:.1f} Pa, species={self.n_species})"
        )


def validate_thermodynamics() -> None:
    """
    Validation of ideal-gas thermodynamics.

    Tests:
    1. Ideal-gas law round trip through density
    2. cv = cp - R/W̄ for a monatomic gas (cp/R = 5/2)
    3. Snapshot restore is exact
    4. Analytic d(cp/R)/dT matches a finite difference
    """
    argon = Species("AR", "Ar", NasaPolynomial.constant_cp(2.5))
    nitrogen = Species(
        "N2",
        "N2",
        NasaPolynomial(
            t_mid=1000.0,
            low=[3.298677, 1.4082404e-03, -3.963222e-06, 5.641515e-09,
                 -2.444854e-12, -1020.8999, 3.950372],
            high=[2.92664, 1.4879768e-03, -5.68476e-07, 1.0097038e-10,
                  -6.753351e-15, -922.7977, 5.980528],
        ),
    )
    gas = IdealGasPhase([argon, nitrogen])

    # Test 1: Ideal-gas law
    gas.set_state_TPX(500.0, 2 * ONE_ATM, {"AR": 0.5, "N2": 0.5})
    assert abs(gas.pressure - 2 * ONE_ATM) < 1e-6, "Ideal-gas law mismatch"

    # Test 2: Monatomic heat capacity
    gas.set_state_TPY(500.0, ONE_ATM, {"AR": 1.0})
    expected_cv = 1.5 * GAS_CONSTANT / ATOMIC_WEIGHTS["Ar"]
    assert abs(gas.cv_mass - expected_cv) < 1e-9 * expected_cv, "cv of argon"

    # Test 3: Snapshot restore
    gas.set_state_TPX(700.0, ONE_ATM, {"AR": 0.2, "N2": 0.8})
    snap = gas.save_state()
    gas.set_state_TP(1500.0, 3 * ONE_ATM)
    gas.restore_state(snap)
    assert gas.temperature == 700.0 and gas.density == snap.density, "Snapshot restore"

    # Test 4: d(cp/R)/dT
    dT = 1e-3
    T0 = gas.temperature
    gas.set_state_TR(T0 + dT, gas.density)
    cp_plus = gas.cp_R()
    gas.set_state_TR(T0 - dT, gas.density)
    cp_minus = gas.cp_R()
    gas.set_state_TR(T0, gas.density)
    fd = (cp_plus - cp_minus) / (2 * dT)
    assert np.allclose(fd, gas.dcp_R_dT(), rtol=1e-6, atol=1e-12), "dcp/dT"

    print("✓ All thermodynamics validations passed")


if __name__ == "__main__":
    validate_thermodynamics()
