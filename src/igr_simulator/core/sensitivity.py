"""
Sensitivity Parameters
======================

Reaction-rate multipliers that an outer sensitivity analysis perturbs
around a single right-hand-side evaluation.

Each registered parameter p scales one reaction's rate multiplier by
params[p] while the evaluation runs. The previous multipliers are pushed
on a stack and restored on exit, so brackets nest (a network evaluating
several reactors that share one kinetics object stays consistent).

Author: Guilherme F. G. Santos
Date: January 2026
License: MIT
"""

from contextlib import contextmanager
from dataclasses import dataclass
from typing import List, Optional, Sequence


@dataclass
class SensitivityParameter:
    """One perturbable reaction-rate multiplier."""

    reaction_index: int
    name: str


class SensitivityParameters:
    """Registered sensitivity parameters of one reactor."""

    def __init__(self):
        self.parameters: List[SensitivityParameter] = []
        self._saved: List[List[float]] = []

    def __len__(self) -> int:
        return len(self.parameters)

    def add(self, reaction_index: int, name: str) -> SensitivityParameter:
        param = SensitivityParameter(reaction_index, name)
        self.parameters.append(param)
        return param

    @property
    def names(self) -> List[str]:
        return [p.name for p in self.parameters]

    def apply(self, kinetics, params: Optional[Sequence[float]]) -> None:
        if params is None or kinetics is None or not self.parameters:
            self._saved.append([])
            return
        if len(params) != len(self.parameters):
            raise ValueError(
                f"Expected {len(self.parameters)} sensitivity parameters, got {len(params)}"
            )
        saved = []
        for p, value in zip(self.parameters, params):
            current = kinetics.multiplier(p.reaction_index)
            saved.append(current)
            kinetics.set_multiplier(p.reaction_index, current * value)
        self._saved.append(saved)

    def reset(self, kinetics) -> None:
        saved = self._saved.pop()
        # Restore in reverse so a reaction registered twice ends at its first value
        for p, value in reversed(list(zip(self.parameters, saved))):
            kinetics.set_multiplier(p.reaction_index, value)

    @contextmanager
    def applied(self, kinetics, params: Optional[Sequence[float]]):
        """Apply `params` for the duration of the block."""
        self.apply(kinetics, params)
        try:
            yield
        finally:
            self.reset(kinetics)
