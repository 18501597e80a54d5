import numpy as np
import pytest
from numpy.testing import assert_allclose

from igr_simulator.core import (
    ONE_ATM,
    ConfigurationError,
    IdealGasReactor,
    IntegratorConfiguration,
    ReactorConfiguration,
    ReactorNet,
    Reservoir,
    StateError,
    hydrogen_air,
)
from igr_simulator.devices import MassFlowController, PressureController, Wall

from conftest import STOICHIOMETRIC_AIR, binary_phase


def ignition_net(T0=1200.0, analytic=False):
    gas, kinetics = hydrogen_air()
    gas.set_state_TPX(T0, ONE_ATM, STOICHIOMETRIC_AIR)
    reactor = IdealGasReactor(gas, kinetics)
    return reactor, ReactorNet([reactor], IntegratorConfiguration(analytic_jacobian=analytic))


def test_offsets_and_component_names():
    a = IdealGasReactor(binary_phase("a"), config=ReactorConfiguration(name="a"))
    b = IdealGasReactor(binary_phase("b"), config=ReactorConfiguration(name="b"))
    net = ReactorNet([a, b])
    net.initialize()
    assert net.offsets == [0, 5]
    assert net.n_equations == 10
    assert net.component_name(2) == "a: temperature"
    assert net.component_name(8) == "b: N2"
    with pytest.raises(IndexError):
        net.component_name(10)


def test_membership_rules(binary_gas):
    reactor = IdealGasReactor(binary_gas)
    net = ReactorNet([reactor])
    with pytest.raises(ConfigurationError):
        net.add_reactor(reactor)
    with pytest.raises(ConfigurationError):
        net.add_reactor(Reservoir(binary_phase("res")))
    with pytest.raises(ConfigurationError):
        ReactorNet().initialize()


def test_rhs_before_initialize():
    _, net = ignition_net()
    with pytest.raises(StateError):
        net.rhs(0.0, np.zeros(8))


def test_invalid_integrator_configuration():
    with pytest.raises(ConfigurationError):
        IntegratorConfiguration(method="Euler").validate()
    with pytest.raises(ConfigurationError):
        IntegratorConfiguration(rtol=0.0).validate()


def test_rhs_matches_reactor_equations():
    reactor, net = ignition_net()
    net.initialize()
    y = net.get_state()
    ydot = net.rhs(0.0, y)
    expected = np.zeros_like(y)
    reactor.eval_eqs(0.0, y, expected)
    assert_allclose(ydot, expected)


def test_finite_difference_jacobian_temperature_column():
    reactor, net = ignition_net()
    net.initialize()
    y = net.get_state()
    jac = net.jacobian(0.0, y)
    assert jac.shape == (8, 8)
    assert np.all(np.isfinite(jac))
    # Closed rigid reactor: mass and volume rows vanish
    assert_allclose(jac[0], 0.0, atol=1e-12)
    assert_allclose(jac[1], 0.0, atol=1e-12)


def test_analytic_overlay_replaces_temperature_column():
    reactor, net = ignition_net(analytic=True)
    net.initialize()
    y = net.get_state()
    jac = net.jacobian(0.0, y)

    expected = np.zeros((8, 8))
    reactor.eval_jac_eqs(0.0, y, expected, 0)
    assert_allclose(jac[2:, 2], expected[2:, 2])


def test_adiabatic_ignition():
    reactor, net = ignition_net()
    net.initialize()
    m0 = reactor.mass
    result = net.simulate(np.linspace(0.0, 0.05, 11))

    assert result.success
    assert len(result.time) == 11
    T = result.component("reactor: temperature")
    assert T[0] == pytest.approx(1200.0)
    assert T[-1] > 2000.0
    assert reactor.mass == pytest.approx(m0, rel=1e-12)
    assert abs(reactor.mass_fractions.sum() - 1.0) < 1e-6
    H2 = result.component("reactor: H2")
    assert H2[-1] < 0.1 * H2[0]


def test_analytic_jacobian_option_still_ignites():
    reactor, net = ignition_net(analytic=True)
    net.advance(0.05)
    assert net.time == pytest.approx(0.05)
    assert reactor.temperature > 2000.0


def test_advance_is_monotonic():
    reactor, net = ignition_net(T0=900.0)
    net.advance(1e-3)
    t = net.time
    assert net.advance(t / 2) == t


def test_isothermal_mode():
    gas, kinetics = hydrogen_air()
    gas.set_state_TPX(1200.0, ONE_ATM, STOICHIOMETRIC_AIR)
    reactor = IdealGasReactor(gas, kinetics, ReactorConfiguration(energy_enabled=False))
    net = ReactorNet([reactor])
    net.advance(0.02)
    assert reactor.temperature == pytest.approx(1200.0, abs=1e-9)
    assert reactor.mass_fractions[gas.species_index("H2O")] > 0.0


def test_heat_exchange_conserves_energy():
    hot = IdealGasReactor(binary_phase("hot"), config=ReactorConfiguration(name="hot"))
    cold_gas = binary_phase("cold")
    cold_gas.set_state_TPY(300.0, ONE_ATM, {"N2": 1.0})
    cold = IdealGasReactor(cold_gas, config=ReactorConfiguration(name="cold"))
    Wall(hot, cold, area=1.0, heat_transfer_coeff=20.0)

    def energy():
        return sum(r.mass * r.thermo.cv_mass * r.temperature for r in (hot, cold))

    net = ReactorNet([hot, cold])
    net.initialize()
    e0 = energy()
    net.advance(50.0)
    assert energy() == pytest.approx(e0, rel=1e-6)
    assert hot.temperature < 500.0
    assert cold.temperature > 300.0


def test_stirred_reactor_with_pressure_controller():
    feed_gas = binary_phase("feed")
    feed_gas.set_state_TPY(500.0, ONE_ATM, {"AR": 1.0})
    feed = Reservoir(feed_gas, name="feed")
    exhaust = Reservoir(binary_phase("exhaust"), name="exhaust")

    reactor = IdealGasReactor(binary_phase("r"), config=ReactorConfiguration(name="r"))
    inlet = MassFlowController(feed, reactor, mdot=reactor.mass / 0.5)
    PressureController(reactor, exhaust, master=inlet, K=1e-5)

    net = ReactorNet([reactor])
    result = net.simulate(np.linspace(0.0, 15.0, 31))
    assert result.success
    Y_ar = result.component("r: AR")
    assert Y_ar[-1] > 0.99
    assert reactor.pressure == pytest.approx(ONE_ATM, rel=1e-3)


def test_sensitivity_parameters_collected():
    reactor, net = ignition_net()
    reactor.add_sensitivity_reaction(0)
    net.initialize()
    assert net.sensitivity_parameter_names == ["reactor: 2 H2 + O2 => 2 H2O"]
    assert_allclose(net.sensitivity_parameters, [1.0])
    y = net.get_state()
    base = net.rhs(0.0, y, net.sensitivity_parameters)
    doubled = net.rhs(0.0, y, np.array([2.0]))
    assert_allclose(doubled[3:], 2.0 * base[3:])


def test_trajectory_component_lookup():
    _, net = ignition_net()
    result = net.simulate([0.0, 1e-4])
    with pytest.raises(KeyError):
        result.component("reactor: pressure")
