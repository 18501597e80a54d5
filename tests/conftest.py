import numpy as np
import pytest

from igr_simulator.core import (
    ONE_ATM,
    ArrheniusRate,
    IdealGasPhase,
    IdealGasReactor,
    NasaPolynomial,
    ReactingSurface,
    ReactorConfiguration,
    Reservoir,
    Species,
    SurfaceReaction,
    SurfaceSpecies,
    hydrogen_air,
)
from igr_simulator.devices import Wall

STOICHIOMETRIC_AIR = {"H2": 2.0, "O2": 1.0, "N2": 3.76}


def binary_phase(name="binary"):
    """Constant-cp N2/Ar mixture (species order: N2, AR)."""
    species = [
        Species("N2", "N2", NasaPolynomial.constant_cp(3.5)),
        Species("AR", "Ar", NasaPolynomial.constant_cp(2.5)),
    ]
    gas = IdealGasPhase(species, name=name)
    gas.set_state_TPY(500.0, ONE_ATM, {"N2": 1.0})
    return gas


class StubFlow:
    """Flow device with fixed rates, for exercising the reactor equations."""

    def __init__(self, mdot, enthalpy=0.0, species_rates=None):
        self.mdot = mdot
        self.enthalpy = enthalpy
        self.species_rates = species_rates

    def mass_flow_rate(self, time):
        return self.mdot

    def enthalpy_mass(self):
        return self.enthalpy

    def outlet_species_mass_flow_rates(self, time):
        return np.asarray(self.species_rates, dtype=float)


@pytest.fixture
def binary_gas():
    return binary_phase()


@pytest.fixture
def binary_reactor(binary_gas):
    """Reactor holding 1 kg of pure N2 in 1 m³ at 500 K."""
    reactor = IdealGasReactor(binary_gas, config=ReactorConfiguration(name="r1", volume=1.0))
    reactor.update_state(np.array([1.0, 1.0, 500.0, 1.0, 0.0]))
    return reactor


@pytest.fixture
def h2_air():
    gas, kinetics = hydrogen_air()
    gas.set_state_TPX(1100.0, ONE_ATM, STOICHIOMETRIC_AIR)
    return gas, kinetics


@pytest.fixture
def h2_reactor(h2_air):
    gas, kinetics = h2_air
    reactor = IdealGasReactor(gas, kinetics, ReactorConfiguration(name="r1", volume=0.5))
    reactor.initialize()
    return reactor


def reactor_at(T, name, pressure=ONE_ATM):
    gas = binary_phase(name)
    gas.set_state_TPY(T, pressure, {"N2": 1.0})
    return IdealGasReactor(gas, config=ReactorConfiguration(name=name, volume=1.0))


def adsorbing_reactor():
    """N2/Ar reactor whose wall (area 3 m²) adsorbs argon onto free sites."""
    reactor = reactor_at(500.0, "r")
    reactor.thermo.set_state_TPY(500.0, ONE_ATM, {"N2": 0.5, "AR": 0.5})
    reactor.sync_state()
    surface = ReactingSurface(
        reactor.thermo,
        [SurfaceSpecies("PT(S)"), SurfaceSpecies("AR(S)", size=2.0)],
        [SurfaceReaction({"AR": 1.0, "PT(S)": 1.0}, {"AR(S)": 1.0}, ArrheniusRate(A=1.0e5))],
        site_density=2.7e-8,
        coverages={"PT(S)": 0.9, "AR(S)": 0.1},
    )
    env = Reservoir(binary_phase("env"), name="env")
    Wall(reactor, env, area=3.0, left_surface=surface)
    reactor.initialize()
    return reactor, surface
