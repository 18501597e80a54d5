"""
Ideal-Gas Reactor Simulator
===========================

Well-mixed ideal-gas reactors, flow devices and walls, integrated as
stiff ODE systems.

Author: Guilherme F. G. Santos
Date: January 2026
License: MIT
"""

__version__ = "1.0.0"
__author__ = "Guilherme F. G. Santos"

from .core import (
    ConfigurationError,
    IdealGasPhase,
    IdealGasReactor,
    IntegratorConfiguration,
    ReactorConfiguration,
    ReactorNet,
    Reservoir,
    StateError,
    hydrogen_air,
)
from .devices import MassFlowController, PressureController, Valve, Wall

__all__ = [
    "ConfigurationError",
    "StateError",
    "IdealGasPhase",
    "IdealGasReactor",
    "ReactorConfiguration",
    "Reservoir",
    "ReactorNet",
    "IntegratorConfiguration",
    "hydrogen_air",
    "MassFlowController",
    "PressureController",
    "Valve",
    "Wall",
]
