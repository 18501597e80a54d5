"""
Reactor Simulation Entry Point
==============================

Runs one of the built-in hydrogen/air scenarios and writes the trajectory
as CSV.

Scenarios:
    ignition  Closed constant-volume reactor (ignition delay)
    flow      Stirred reactor fed from a reservoir, held near the exhaust
              pressure by a pressure controller

Usage:
    python -m igr_simulator --scenario ignition --temperature 1100 --output run.csv

Author: Guilherme F. G. Santos
Date: January 2026
"""

import argparse
import logging
import sys
from typing import List, Optional

import numpy as np

from .core import (
    ConfigurationError,
    IdealGasReactor,
    IntegratorConfiguration,
    ReactorConfiguration,
    ReactorNet,
    Reservoir,
    StateError,
    TrajectoryResult,
    hydrogen_air,
)
from .devices import MassFlowController, PressureController

logger = logging.getLogger(__name__)

STOICHIOMETRIC_AIR = {"H2": 2.0, "O2": 1.0, "N2": 3.76}


def build_ignition(args) -> ReactorNet:
    """Closed adiabatic (or isothermal) reactor."""
    gas, kinetics = hydrogen_air()
    gas.set_state_TPX(args.temperature, args.pressure, STOICHIOMETRIC_AIR)
    reactor = IdealGasReactor(
        gas,
        kinetics,
        ReactorConfiguration(name="reactor", volume=1.0, energy_enabled=not args.no_energy),
    )
    return ReactorNet([reactor], _integrator_config(args))


def build_flow(args, residence_time: float = 0.1) -> ReactorNet:
    """Stirred reactor between a fresh-mixture reservoir and an exhaust."""
    feed_gas, _ = hydrogen_air("feed")
    feed_gas.set_state_TPX(args.temperature, args.pressure, STOICHIOMETRIC_AIR)
    feed = Reservoir(feed_gas, name="feed")

    exhaust_gas, _ = hydrogen_air("exhaust")
    exhaust_gas.set_state_TPX(args.temperature, args.pressure, {"N2": 1.0})
    exhaust = Reservoir(exhaust_gas, name="exhaust")

    gas, kinetics = hydrogen_air()
    gas.set_state_TPX(args.temperature, args.pressure, STOICHIOMETRIC_AIR)
    reactor = IdealGasReactor(
        gas,
        kinetics,
        ReactorConfiguration(name="reactor", volume=1.0, energy_enabled=not args.no_energy),
    )

    inlet = MassFlowController(feed, reactor, mdot=reactor.mass / residence_time, name="inlet")
    PressureController(reactor, exhaust, master=inlet, K=1e-5, name="outlet")
    return ReactorNet([reactor], _integrator_config(args))


def _integrator_config(args) -> IntegratorConfiguration:
    return IntegratorConfiguration(analytic_jacobian=args.analytic_jacobian)


SCENARIOS = {
    "ignition": build_ignition,
    "flow": build_flow,
}


def ignition_delay(result: TrajectoryResult, reactor_name: str = "reactor") -> Optional[float]:
    """Time of the steepest temperature rise, or None without a rise."""
    T = result.component(f"{reactor_name}: temperature")
    if len(T) < 3:
        return None
    dTdt = np.gradient(T, result.time)
    i = int(np.argmax(dTdt))
    # Rises below round-off of the gradient are not an ignition
    span = result.time[-1] - result.time[0]
    if span <= 0.0 or dTdt[i] <= 1e-9 * max(np.abs(T).max(), 1.0) / span:
        return None
    return float(result.time[i])


def write_csv(path: str, result: TrajectoryResult) -> None:
    data = np.column_stack([result.time, result.states])
    header = ",".join(["time"] + result.component_names)
    np.savetxt(path, data, delimiter=",", header=header, comments="")


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Ideal-Gas Reactor Simulation")
    parser.add_argument(
        "--scenario", choices=sorted(SCENARIOS), default="ignition", help="Scenario to run"
    )
    parser.add_argument(
        "--temperature", type=float, default=1100.0, help="Initial temperature [K]"
    )
    parser.add_argument(
        "--pressure", type=float, default=101325.0, help="Initial pressure [Pa]"
    )
    parser.add_argument(
        "--duration", type=float, default=0.2, help="Simulated time [seconds]"
    )
    parser.add_argument(
        "--points", type=int, default=201, help="Number of output times"
    )
    parser.add_argument(
        "--no-energy", action="store_true", help="Hold the reactor temperature fixed"
    )
    parser.add_argument(
        "--analytic-jacobian",
        action="store_true",
        help="Use the analytic temperature-column Jacobian entries",
    )
    parser.add_argument("--output", type=str, default=None, help="CSV output file")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    if args.duration <= 0 or args.points < 2:
        logger.error("Duration must be positive and at least 2 output points are needed")
        return 2

    logger.info("=" * 70)
    logger.info(f"IDEAL-GAS REACTOR SIMULATION ({args.scenario})")
    logger.info("=" * 70)

    try:
        net = SCENARIOS[args.scenario](args)
        result = net.simulate(np.linspace(0.0, args.duration, args.points))
    except (ConfigurationError, StateError) as e:
        logger.error(f"Simulation setup failed: {e}")
        return 1

    if not result.success:
        logger.error(f"Integration stopped early: {result.message}")

    T = result.component("reactor: temperature")
    logger.info(f"✓ Integrated {len(result.time)} points to t={result.time[-1]:.4g} s")
    logger.info(f"  T: {T[0]:.1f} K -> {T[-1]:.1f} K")
    delay = ignition_delay(result)
    if delay is not None and T[-1] - T[0] > 400.0:
        logger.info(f"  Ignition at t={delay * 1e3:.2f} ms")

    if args.output:
        write_csv(args.output, result)
        logger.info(f"✓ Trajectory written to {args.output}")

    return 0 if result.success else 1


if __name__ == "__main__":
    sys.exit(main())
