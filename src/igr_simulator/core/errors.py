"""
Error Types for the Reactor Physics Engine
==========================================

Two failure kinds, both structural and unrecoverable where they occur:

- ConfigurationError: the reactor was assembled from incompatible parts
  (wrong phase kind, kinetics for another species set, invalid settings).
  Raised at attachment/construction time, before any time step.
- StateError: a state or evaluation call reached a reactor that has no
  thermodynamic model, or that was never initialized.

Author: Guilherme F. G. Santos
Date: January 2026
License: MIT
"""


class ConfigurationError(ValueError):
    """Reactor components or settings are incompatible."""


class StateError(RuntimeError):
    """
    Operation attempted on a reactor whose state is not usable.

    Attributes:
        reactor: Name of the reactor involved
        operation: Name of the operation that failed
    """

    def __init__(self, reactor: str, operation: str, reason: str):
        self.reactor = reactor
        self.operation = operation
        super().__init__(f"{operation} on reactor '{reactor}': {reason}")
