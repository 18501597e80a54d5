"""
Ideal-Gas Reactor Core Package
==============================

Zero-dimensional, well-mixed ideal-gas reactors as ODE systems.

This package provides:
- Thermodynamics: NASA-polynomial ideal-gas mixtures with state snapshots
- Kinetics: Mass-action gas-phase reactions with analytic dω̇/dT
- Surface: Reacting wall surfaces with site coverages
- Reactor: IdealGasReactor state vector, right-hand side and partial Jacobian
- Network: Multi-reactor assembly integrated with scipy.integrate.solve_ivp

USAGE EXAMPLE
============

```python
import numpy as np
from igr_simulator.core import IdealGasReactor, ReactorNet, hydrogen_air

gas, kinetics = hydrogen_air()
gas.set_state_TPX(1100.0, 101325.0, {"H2": 2.0, "O2": 1.0, "N2": 3.76})

reactor = IdealGasReactor(gas, kinetics)
net = ReactorNet([reactor])
result = net.simulate(np.linspace(0.0, 0.1, 101))

T = result.component("reactor: temperature")
```

STATE VECTOR
============

Per reactor: [m, V, T, Y₀ … Y_{K-1}, θ …]

- m: total mass [kg]
- V: volume [m³]
- T: temperature [K]
- Y: mass fractions, loaded without renormalization
- θ: surface coverages of every wall surface, in wall-attachment order

CALL SEQUENCE
=============

The integrator drives each reactor as:

1. update_state(y)        push the trial state, persist the snapshot
2. eval_eqs(t, y, ydot)   derivatives from the persisted snapshot
3. eval_jac_eqs(...)      occasionally, temperature-column Jacobian entries

Reading properties of a reactor always goes through its last persisted
snapshot. Flow devices and walls compute everything from the snapshots
of the reactors they connect, so evaluation order does not matter.

JACOBIAN COVERAGE
=================

IdealGasReactor.eval_jac_eqs fills ∂Ṫ/∂T and ∂Ẏₖ/∂T only. The ∂/∂Y blocks
are not computed analytically; ReactorNet.jacobian differences the full
matrix numerically and, when IntegratorConfiguration.analytic_jacobian is
set, overwrites the temperature column with the analytic entries.

ERRORS
======

- ConfigurationError: wrong phase type, mismatched kinetics, bad settings.
  Raised at construction or attachment, before any time stepping.
- StateError: state access or evaluation on a reactor without a
  thermodynamic model, or before initialize(). The message names the
  reactor and the operation.

VALIDATION STATUS
================

✓ Thermodynamics: ideal-gas law, monatomic cv, snapshot restore, dcp/dT
✓ Kinetics: mass balance, dω̇/dT, rate multipliers
✓ Reactor: state round trip, isolated reactor, Jacobian block coverage
✓ Network: hydrogen ignition, mass conservation, isothermal mode

Run validation: `python -m igr_simulator.core` or call `run_all_validations()`

Author: Guilherme F. G. Santos
Date: January 2026
License: MIT
"""

# Errors
from .errors import ConfigurationError, StateError

# Thermodynamics
from .thermodynamics import (
    GAS_CONSTANT,
    ONE_ATM,
    IdealGasPhase,
    NasaPolynomial,
    Species,
    ThermoSnapshot,
    validate_thermodynamics,
)

# Gas-phase kinetics
from .kinetics import ArrheniusRate, GasKinetics, Reaction, validate_kinetics

# Surface chemistry
from .surface import ReactingSurface, SurfaceReaction, SurfaceSpecies

# Sensitivity parameters
from .sensitivity import SensitivityParameter, SensitivityParameters

# Reactors
from .reactor_base import Reactor, ReactorBase, ReactorConfiguration, Reservoir, WallSide
from .reactor import IdealGasReactor, validate_ideal_gas_reactor

# Network integration
from .network import (
    IntegratorConfiguration,
    ReactorNet,
    TrajectoryResult,
    validate_reactor_network,
)

# Built-in data
from .mechanisms import hydrogen_air, nasa_species

# Convenience imports
__all__ = [
    # Errors
    "ConfigurationError",
    "StateError",
    # Thermodynamics
    "GAS_CONSTANT",
    "ONE_ATM",
    "IdealGasPhase",
    "NasaPolynomial",
    "Species",
    "ThermoSnapshot",
    # Kinetics
    "ArrheniusRate",
    "GasKinetics",
    "Reaction",
    # Surface
    "ReactingSurface",
    "SurfaceReaction",
    "SurfaceSpecies",
    # Sensitivity
    "SensitivityParameter",
    "SensitivityParameters",
    # Reactors
    "ReactorBase",
    "Reservoir",
    "Reactor",
    "ReactorConfiguration",
    "WallSide",
    "IdealGasReactor",
    # Network
    "IntegratorConfiguration",
    "ReactorNet",
    "TrajectoryResult",
    # Mechanisms
    "hydrogen_air",
    "nasa_species",
    # Validation functions
    "validate_thermodynamics",
    "validate_kinetics",
    "validate_ideal_gas_reactor",
    "validate_reactor_network",
]


def run_all_validations():
    """
    Run all physics validation tests.

    This should be run after any code changes to ensure
    physics correctness is maintained.
    """
    print("Running Ideal-Gas Reactor Validation Suite")
    print("=" * 70)

    print("\n1. Thermodynamics...")
    validate_thermodynamics()

    print("\n2. Kinetics...")
    validate_kinetics()

    print("\n3. Ideal-Gas Reactor...")
    validate_ideal_gas_reactor()

    print("\n4. Reactor Network...")
    validate_reactor_network()

    print("\n" + "=" * 70)
    print("ALL VALIDATIONS PASSED ✓")
    print("=" * 70)


if __name__ == "__main__":
    """Run all validations when package is executed."""
    run_all_validations()
