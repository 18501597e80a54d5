"""
Reactor Base Classes
====================

Common machinery shared by every zero-dimensional reactor:

- ReactorBase: owns a thermodynamic phase, its persisted snapshot, the
  cached properties peer reactors read (enthalpy, pressure, internal
  energy) and the ordered lists of attached inlets, outlets and walls.
- Reservoir: a ReactorBase whose state never changes. Used as a flow
  source or sink and as the far side of a wall.
- Reactor: an integrable reactor. Adds kinetics, wall and surface
  evaluation, sensitivity parameters and the generic component naming
  scheme. Concrete reactors define the state vector and its equations.

SNAPSHOT DISCIPLINE
===================

All reads of a reactor's thermodynamic properties go through the snapshot
persisted by the last state update:

   update_state(y)  -> set phase from y, persist snapshot + cached props
   eval_eqs(...)    -> restore snapshot, then evaluate

Several reactors may share one phase object; restoring the snapshot first
makes every evaluation start from that reactor's committed state.

Author: Guilherme F. G. Santos
Date: January 2026
License: MIT
"""

import numpy as np
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import IntEnum
from typing import Iterator, List, Optional, Tuple
import logging

from .errors import ConfigurationError, StateError
from .sensitivity import SensitivityParameter, SensitivityParameters
from .thermodynamics import ThermoSnapshot

logger = logging.getLogger(__name__)


class WallSide(IntEnum):
    """Side of a wall a reactor is installed on."""

    LEFT = 0
    RIGHT = 1


@dataclass
class ReactorConfiguration:
    """
    Configuration for an integrable reactor.

    Attributes:
        name: Reactor identifier used in component names and errors
        volume: Initial volume [m³]
        energy_enabled: Integrate the energy equation (False = isothermal)
        chemistry_enabled: Evaluate homogeneous reactions
    """

    name: str = "reactor"
    volume: float = 1.0  # [m³]
    energy_enabled: bool = True
    chemistry_enabled: bool = True

    def validate(self) -> None:
        """Validate configuration consistency."""
        if not isinstance(self.name, str) or len(self.name) == 0:
            raise ConfigurationError("Reactor name must be non-empty string")
        if not self.volume > 0:
            raise ConfigurationError(f"Reactor volume must be positive: {self.volume}")


class ReactorBase:
    """
    Thermodynamic container with flow and wall connections.
    """

    def __init__(self, thermo=None, name: str = "reservoir", volume: float = 1.0):
        self.name = name
        self.thermo = None
        self._volume = volume
        self._mass = 0.0
        self._state: Optional[ThermoSnapshot] = None

        # Cached properties for connected reactors
        self._enthalpy = 0.0
        self._pressure = 0.0
        self._int_energy = 0.0

        self.inlets: List = []
        self.outlets: List = []
        self.walls: List = []
        self._wall_sides: List[WallSide] = []

        if thermo is not None:
            self.insert(thermo)

    def insert(self, thermo) -> None:
        """Fill the reactor with the contents of `thermo`."""
        self.set_thermo(thermo)

    def set_thermo(self, thermo) -> None:
        self.thermo = thermo
        self.sync_state()

    def _require_thermo(self, operation: str) -> None:
        if self.thermo is None:
            raise StateError(self.name, operation, "reactor is empty (no thermodynamic model)")

    def sync_state(self) -> None:
        """Adopt the phase's current state as this reactor's committed state."""
        self._require_thermo("sync_state")
        self._persist_state()
        self._mass = self.thermo.density * self._volume

    def _persist_state(self) -> None:
        self._state = self.thermo.save_state()
        self._enthalpy = self.thermo.enthalpy_mass
        self._pressure = self.thermo.pressure
        self._int_energy = self.thermo.int_energy_mass

    def restore_state(self) -> None:
        """Load the committed snapshot back into the phase."""
        self._require_thermo("restore_state")
        self.thermo.restore_state(self._state)

    # ------------------------------------------------------------------
    # Connections
    # ------------------------------------------------------------------

    def add_inlet(self, device) -> None:
        self.inlets.append(device)

    def add_outlet(self, device) -> None:
        self.outlets.append(device)

    def add_wall(self, wall, side: WallSide) -> None:
        self.walls.append(wall)
        self._wall_sides.append(WallSide(side))

    # ------------------------------------------------------------------
    # Committed state, as seen by connected devices
    # ------------------------------------------------------------------

    @property
    def temperature(self) -> float:
        self._require_thermo("temperature")
        return self._state.temperature

    @property
    def density(self) -> float:
        self._require_thermo("density")
        return self._state.density

    @property
    def mass_fractions(self) -> np.ndarray:
        self._require_thermo("mass_fractions")
        return self._state.mass_fractions.copy()

    @property
    def pressure(self) -> float:
        return self._pressure

    @property
    def enthalpy_mass(self) -> float:
        return self._enthalpy

    @property
    def int_energy_mass(self) -> float:
        return self._int_energy

    @property
    def mass(self) -> float:
        return self._mass

    @property
    def volume(self) -> float:
        return self._volume

    @property
    def species_names(self) -> List[str]:
        self._require_thermo("species_names")
        return self.thermo.species_names

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"


class Reservoir(ReactorBase):
    """
    Reactor with a fixed state.

    Its snapshot is taken when the contents are inserted and never changes,
    so flow devices and walls see constant properties.
    """

    def __init__(self, thermo=None, name: str = "reservoir"):
        super().__init__(thermo, name=name)


class Reactor(ReactorBase, ABC):
    """
    Integrable zero-dimensional reactor.

    Subclasses define the state vector layout (get_state / update_state)
    and its time derivatives (eval_eqs).
    """

    def __init__(self, thermo=None, kinetics=None, config: Optional[ReactorConfiguration] = None):
        """
        Initialize reactor.

        Args:
            thermo: Thermodynamic phase held by the reactor
            kinetics: Homogeneous kinetics for the same species set
            config: Reactor configuration (defaults to ReactorConfiguration())
        """
        config = config or ReactorConfiguration()
        config.validate()
        self.config = config
        self.kinetics = None
        super().__init__(thermo, name=config.name, volume=config.volume)

        self.energy_enabled = config.energy_enabled
        self.chemistry_enabled = config.chemistry_enabled
        self.sensitivity = SensitivityParameters()

        self._initialized = False
        self._n_eq = 0
        self._wdot = np.zeros(0)
        self._sdot = np.zeros(0)
        self._vdot = 0.0  # [m³/s] rate of volume change from walls
        self._Q = 0.0  # [W] heat leaving through walls

        if kinetics is not None:
            self.set_kinetics(kinetics)

    def set_thermo(self, thermo) -> None:
        super().set_thermo(thermo)
        if self.kinetics is not None:
            self._check_kinetics(self.kinetics)
        self._initialized = False

    def set_kinetics(self, kinetics) -> None:
        if self.thermo is not None:
            self._check_kinetics(kinetics)
        self.kinetics = kinetics
        self._initialized = False

    def _check_kinetics(self, kinetics) -> None:
        if list(kinetics.species_names) != list(self.thermo.species_names):
            raise ConfigurationError(
                f"Kinetics species {kinetics.species_names} do not match the phase "
                f"species {self.thermo.species_names} of reactor '{self.name}'"
            )

    def add_wall(self, wall, side: WallSide) -> None:
        surface = wall.surface(side)
        if surface is not None and surface.gas is not self.thermo:
            raise ConfigurationError(
                f"Surface '{surface.name}' on wall '{wall.name}' is not attached to the "
                f"gas phase of reactor '{self.name}'"
            )
        super().add_wall(wall, side)
        self._initialized = False

    def add_sensitivity_reaction(self, reaction_index: int) -> SensitivityParameter:
        """Register a rate multiplier of a gas-phase reaction as a parameter."""
        if self.kinetics is None:
            raise ConfigurationError(f"Reactor '{self.name}' has no kinetics")
        if not 0 <= reaction_index < self.kinetics.n_reactions:
            raise IndexError(f"Reaction index {reaction_index} out of range")
        equation = self.kinetics.reactions[reaction_index].equation
        return self.sensitivity.add(reaction_index, f"{self.name}: {equation}")

    # ------------------------------------------------------------------
    # Sizing
    # ------------------------------------------------------------------

    def initialize(self, t0: float = 0.0) -> None:
        """Size the work buffers. Must precede the first evaluation."""
        self._require_thermo("initialize")
        self.restore_state()
        n_species = self.thermo.n_species
        self._wdot = np.zeros(n_species)
        self._sdot = np.zeros(n_species)
        self._n_eq = 3 + n_species + self.n_surface_coverages
        self._initialized = True
        logger.debug(
            f"Reactor '{self.name}' initialized at t={t0}: {self._n_eq} equations, "
            f"{len(self.inlets)} inlets, {len(self.outlets)} outlets, {len(self.walls)} walls"
        )

    def _require_initialized(self, operation: str) -> None:
        self._require_thermo(operation)
        if not self._initialized:
            raise StateError(self.name, operation, "reactor has not been initialized")

    @property
    def n_species(self) -> int:
        self._require_thermo("n_species")
        return self.thermo.n_species

    @property
    def n_surface_coverages(self) -> int:
        return sum(surface.n_species for _, _, surface in self._wall_surfaces())

    @property
    def n_equations(self) -> int:
        self._require_initialized("n_equations")
        return self._n_eq

    # ------------------------------------------------------------------
    # Walls and surfaces
    # ------------------------------------------------------------------

    def _wall_surfaces(self) -> Iterator[Tuple[object, WallSide, object]]:
        for wall, side in zip(self.walls, self._wall_sides):
            surface = wall.surface(side)
            if surface is not None:
                yield wall, side, surface

    def get_surface_initial_conditions(self, y: np.ndarray) -> None:
        loc = 0
        for _, _, surface in self._wall_surfaces():
            y[loc : loc + surface.n_species] = surface.coverages
            loc += surface.n_species

    def update_surface_state(self, y: np.ndarray) -> None:
        loc = 0
        for _, _, surface in self._wall_surfaces():
            surface.set_coverages_no_norm(y[loc : loc + surface.n_species])
            loc += surface.n_species

    def _evaluate_walls(self, time: float) -> None:
        """Sum volume change and heat loss over all walls."""
        self._vdot = 0.0
        self._Q = 0.0
        for wall, side in zip(self.walls, self._wall_sides):
            sign = 1.0 if side == WallSide.LEFT else -1.0
            self._vdot += sign * wall.vdot(time)
            self._Q += sign * wall.heat_rate(time)

    def _evaluate_surfaces(self, time: float, ydot_surf: np.ndarray) -> float:
        """
        Surface production rates and coverage equations.

        Fills `ydot_surf` with dθ/dt for every wall surface and accumulates
        the gas-phase production rates into self._sdot [kmol/s].

        Returns:
            Net mass flux from the surfaces into the gas [kg/s]
        """
        self._sdot[:] = 0.0
        loc = 0
        for wall, _, surface in self._wall_surfaces():
            n = surface.n_species
            gas_rates, surf_rates = surface.net_production_rates()
            dtheta = surf_rates * surface.sizes / surface.site_density
            # coverages keep their sum: the first species takes up the balance
            dtheta[0] = -np.sum(dtheta[1:])
            ydot_surf[loc : loc + n] = dtheta
            loc += n
            self._sdot += gas_rates * wall.area
        return float(np.dot(self._sdot, self.thermo.molecular_weights))

    # ------------------------------------------------------------------
    # Component names
    # ------------------------------------------------------------------

    def component_name(self, k: int) -> str:
        """Name of state-vector component `k` (generic reactor scheme)."""
        self._require_thermo("component_name")
        if k == 0:
            return "mass"
        elif k == 1:
            return "volume"
        elif k == 2:
            return "int_energy"
        elif k >= 3:
            k -= 3
            if k < self.thermo.n_species:
                return self.thermo.species_name(k)
            k -= self.thermo.n_species
            for _, _, surface in self._wall_surfaces():
                if k < surface.n_species:
                    return surface.species_names[k]
                k -= surface.n_species
        raise IndexError(f"Component index out of bounds for reactor '{self.name}'")

    def component_index(self, name: str) -> Optional[int]:
        """Offset of the component called `name`, or None."""
        self._require_thermo("component_index")
        k = self.thermo.species_index(name)
        if k is not None:
            return k + 3
        return {"mass": 0, "volume": 1, "int_energy": 2}.get(name)

    # ------------------------------------------------------------------
    # State vector contract
    # ------------------------------------------------------------------

    @abstractmethod
    def get_state(self, y: np.ndarray) -> None:
        """Write the committed state into `y`."""

    @abstractmethod
    def update_state(self, y: np.ndarray) -> None:
        """Set the reactor state from `y` and persist it."""

    @abstractmethod
    def eval_eqs(self, time: float, y: np.ndarray, ydot: np.ndarray, params=None) -> None:
        """Write the time derivatives of the state into `ydot`."""

    def eval_jac_eqs(self, time: float, y: np.ndarray, jac: np.ndarray, start: int) -> None:
        """Write analytic Jacobian entries; the generic reactor has none."""
