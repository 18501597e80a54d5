"""
Flow Devices
============

Devices that move mass between two reactors (or a reservoir and a reactor).

A device is installed between an upstream and a downstream reactor. It is
registered as an outlet of the upstream reactor and as an inlet of the
downstream one. Every quantity is computed from the persisted snapshots of
its endpoints, so querying a device never changes any state.

MODELS
======

1. Mass Flow Controller:
   ṁ = ṁ₀ f(t)                  (f defaults to 1)

2. Valve:
   ṁ = K (P_up - P_down)         or  ṁ = K g(P_up - P_down)

3. Pressure Controller:
   ṁ = ṁ_master + K (P_up - P_down)

All flow rates are clipped at zero: devices never reverse.

Inflow composition is the upstream composition, mapped by species name
onto the downstream species list. Species the downstream phase does not
know are dropped.

Author: Guilherme F. G. Santos
Date: January 2026
License: MIT
"""

import numpy as np
from abc import ABC, abstractmethod
from typing import Callable, List, Optional
import logging

from ..core.errors import ConfigurationError

logger = logging.getLogger(__name__)


class FlowDevice(ABC):
    """
    Abstract flow device.

    Subclasses implement mass_flow_rate(time).
    """

    def __init__(self, upstream, downstream, name: str = "flow_device"):
        if upstream is downstream:
            raise ConfigurationError(f"Flow device '{name}' connects a reactor to itself")
        self.name = name
        self.upstream = upstream
        self.downstream = downstream
        self._species_map: Optional[List[Optional[int]]] = None

        upstream.add_outlet(self)
        downstream.add_inlet(self)
        logger.debug(f"Installed {type(self).__name__} '{name}': {upstream.name} -> {downstream.name}")

    @abstractmethod
    def mass_flow_rate(self, time: float) -> float:
        """Instantaneous mass flow rate [kg/s] at `time`."""

    def pressure_drop(self) -> float:
        """P_up - P_down [Pa] from the endpoint snapshots."""
        return self.upstream.pressure - self.downstream.pressure

    def enthalpy_mass(self) -> float:
        """Specific enthalpy of the inflow [J/kg]."""
        return self.upstream.enthalpy_mass

    def _build_species_map(self) -> List[Optional[int]]:
        up = self.upstream.thermo
        return [up.species_index(name) for name in self.downstream.species_names]

    def outlet_species_mass_flow_rates(self, time: float) -> np.ndarray:
        """
        Species mass flow rates delivered downstream [kg/s].

        Indexed by the downstream species ordering.
        """
        if self._species_map is None:
            self._species_map = self._build_species_map()
        mdot = self.mass_flow_rate(time)
        Y_up = self.upstream.mass_fractions
        rates = np.zeros(len(self._species_map))
        for k, k_up in enumerate(self._species_map):
            if k_up is not None:
                rates[k] = mdot * Y_up[k_up]
        return rates

    def outlet_species_mass_flow_rate(self, k: int, time: float) -> float:
        return float(self.outlet_species_mass_flow_rates(time)[k])

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"


class MassFlowController(FlowDevice):
    """
    Prescribed mass flow rate, independent of the endpoint pressures.

    Args:
        mdot: Nominal mass flow rate [kg/s]
        function: Optional time modulation f(t), multiplied with mdot
    """

    def __init__(
        self,
        upstream,
        downstream,
        mdot: float = 0.0,
        function: Optional[Callable[[float], float]] = None,
        name: str = "mass_flow_controller",
    ):
        if mdot < 0:
            raise ConfigurationError(f"Mass flow rate must be non-negative: {mdot}")
        self.mdot = mdot
        self.function = function
        super().__init__(upstream, downstream, name)

    def mass_flow_rate(self, time: float) -> float:
        rate = self.mdot
        if self.function is not None:
            rate *= self.function(time)
        return max(rate, 0.0)


class Valve(FlowDevice):
    """
    Pressure-driven flow.

    Args:
        K: Valve coefficient [kg/(s·Pa)]
        function: Optional characteristic g(Δp); replaces the linear law
    """

    def __init__(
        self,
        upstream,
        downstream,
        K: float = 1.0,
        function: Optional[Callable[[float], float]] = None,
        name: str = "valve",
    ):
        if K < 0:
            raise ConfigurationError(f"Valve coefficient must be non-negative: {K}")
        self.K = K
        self.function = function
        super().__init__(upstream, downstream, name)

    def mass_flow_rate(self, time: float) -> float:
        dp = self.pressure_drop()
        if self.function is not None:
            rate = self.K * self.function(dp)
        else:
            rate = self.K * dp
        return max(rate, 0.0)


class PressureController(FlowDevice):
    """
    Follows a master device, corrected by the pressure difference.

    Typically used as the outlet of a reactor fed by a MassFlowController
    to hold its pressure near the downstream pressure.
    """

    def __init__(self, upstream, downstream, master: FlowDevice, K: float = 1.0, name: str = "pressure_controller"):
        if K < 0:
            raise ConfigurationError(f"Pressure coefficient must be non-negative: {K}")
        if master is None:
            raise ConfigurationError(f"Pressure controller '{name}' needs a master flow device")
        self.master = master
        self.K = K
        super().__init__(upstream, downstream, name)

    def mass_flow_rate(self, time: float) -> float:
        return max(self.master.mass_flow_rate(time) + self.K * self.pressure_drop(), 0.0)
