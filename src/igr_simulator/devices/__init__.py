"""
Flow devices and walls connecting reactors.
"""

from .flow_device import FlowDevice, MassFlowController, PressureController, Valve
from .wall import STEFAN_BOLTZMANN, Wall, WallBase

__all__ = [
    "FlowDevice",
    "MassFlowController",
    "Valve",
    "PressureController",
    "WallBase",
    "Wall",
    "STEFAN_BOLTZMANN",
]
