"""
Walls
=====

Walls separate two reactors and exchange work and heat between them.

THEORETICAL FOUNDATION
=====================

1. Volume Change (left reactor grows when V̇ > 0):
   V̇ = K A (P_left - P_right) + A v(t)

2. Heat Transfer (from left to right):
   Q̇ = U A (T_left - T_right) + ε σ A (T_left⁴ - T_right⁴) + A q(t)

The left reactor sees +V̇ and loses +Q̇; the right reactor sees -V̇ and
loses -Q̇. Each side may carry a reacting surface with area A.

Author: Guilherme F. G. Santos
Date: January 2026
License: MIT
"""

from abc import ABC, abstractmethod
from typing import Callable, Optional
import logging

from ..core.errors import ConfigurationError
from ..core.reactor_base import WallSide

logger = logging.getLogger(__name__)


STEFAN_BOLTZMANN = 5.670374419e-8  # [W/(m²·K⁴)]


class WallBase(ABC):
    """Interface shared by all wall models."""

    def __init__(self, left, right, area: float = 1.0, name: str = "wall"):
        if area <= 0:
            raise ConfigurationError(f"Wall area must be positive: {area}")
        if left is right:
            raise ConfigurationError(f"Wall '{name}' has the same reactor on both sides")
        self.name = name
        self.left = left
        self.right = right
        self.area = area
        self._surfaces = {WallSide.LEFT: None, WallSide.RIGHT: None}

    def install(self) -> None:
        self.left.add_wall(self, WallSide.LEFT)
        self.right.add_wall(self, WallSide.RIGHT)

    def surface(self, side: WallSide):
        """Reacting surface on `side`, or None."""
        return self._surfaces[WallSide(side)]

    @abstractmethod
    def vdot(self, time: float) -> float:
        """Rate of volume change of the left reactor [m³/s]."""

    @abstractmethod
    def heat_rate(self, time: float) -> float:
        """Heat flow from left to right [W]."""


class Wall(WallBase):
    """
    Wall with expansion, conduction, radiation and prescribed fluxes.

    Args:
        left, right: Reactors (or reservoirs) on either side
        area: Wall area [m²]
        expansion_rate_coeff: K [m/(s·Pa)]
        heat_transfer_coeff: U [W/(m²·K)]
        emissivity: ε for radiative exchange [-]
        velocity: Prescribed wall velocity v(t) [m/s]
        heat_flux: Prescribed heat flux q(t) [W/m²]
        left_surface, right_surface: Optional ReactingSurface per side
    """

    def __init__(
        self,
        left,
        right,
        area: float = 1.0,
        expansion_rate_coeff: float = 0.0,
        heat_transfer_coeff: float = 0.0,
        emissivity: float = 0.0,
        velocity: Optional[Callable[[float], float]] = None,
        heat_flux: Optional[Callable[[float], float]] = None,
        left_surface=None,
        right_surface=None,
        name: str = "wall",
    ):
        super().__init__(left, right, area, name)
        if not 0.0 <= emissivity <= 1.0:
            raise ConfigurationError(f"Emissivity must be in [0, 1]: {emissivity}")
        if expansion_rate_coeff < 0 or heat_transfer_coeff < 0:
            raise ConfigurationError(f"Wall '{name}' coefficients must be non-negative")

        self.expansion_rate_coeff = expansion_rate_coeff
        self.heat_transfer_coeff = heat_transfer_coeff
        self.emissivity = emissivity
        self.velocity = velocity
        self.heat_flux = heat_flux
        self._surfaces[WallSide.LEFT] = left_surface
        self._surfaces[WallSide.RIGHT] = right_surface
        self.install()

    def vdot(self, time: float) -> float:
        rate = self.expansion_rate_coeff * self.area * (self.left.pressure - self.right.pressure)
        if self.velocity is not None:
            rate += self.area * self.velocity(time)
        return rate

    def heat_rate(self, time: float) -> float:
        T_left = self.left.temperature
        T_right = self.right.temperature
        q = self.heat_transfer_coeff * self.area * (T_left - T_right)
        if self.emissivity > 0.0:
            q += self.emissivity * STEFAN_BOLTZMANN * self.area * (T_left**4 - T_right**4)
        if self.heat_flux is not None:
            q += self.area * self.heat_flux(time)
        return q
