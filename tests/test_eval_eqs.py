import numpy as np
import pytest
from numpy.testing import assert_allclose

from igr_simulator.core import GAS_CONSTANT, IdealGasReactor, ReactorConfiguration

from conftest import StubFlow


def evaluate(reactor, time=0.0, params=None):
    y = np.zeros(reactor.n_equations)
    reactor.get_state(y)
    reactor.update_state(y)
    ydot = np.full(reactor.n_equations, np.nan)
    reactor.eval_eqs(time, y, ydot, params)
    return ydot


def test_isolated_reactor_without_chemistry_is_stationary(h2_reactor):
    h2_reactor.chemistry_enabled = False
    ydot = evaluate(h2_reactor)
    assert np.all(ydot == 0.0)


def test_isolated_reactor_without_kinetics_is_stationary(binary_reactor):
    binary_reactor.initialize()
    ydot = evaluate(binary_reactor)
    assert np.all(ydot == 0.0)


def test_outlet_mass_balance(binary_reactor):
    binary_reactor.add_outlet(StubFlow(0.25))
    binary_reactor.initialize()
    ydot = evaluate(binary_reactor)
    assert ydot[0] == -0.25
    assert ydot[1] == 0.0
    # Outflow leaves with the reactor composition
    assert_allclose(ydot[3:], 0.0)


def test_outlet_flow_work(binary_reactor):
    mdot = 0.25
    binary_reactor.add_outlet(StubFlow(mdot))
    binary_reactor.initialize()
    ydot = evaluate(binary_reactor)
    m, V = binary_reactor.mass, binary_reactor.volume
    expected = -mdot * binary_reactor.pressure * V / m / (m * binary_reactor.thermo.cv_mass)
    assert ydot[2] == pytest.approx(expected, rel=1e-12)


def test_pure_inflow_of_same_species_keeps_composition(binary_reactor):
    mdot = 0.3
    binary_reactor.add_inlet(StubFlow(mdot, binary_reactor.enthalpy_mass, [mdot, 0.0]))
    binary_reactor.initialize()
    ydot = evaluate(binary_reactor)
    assert ydot[0] == mdot
    assert ydot[3] == 0.0
    assert ydot[4] == 0.0


def test_inflow_at_reactor_state_adds_flow_work(binary_reactor):
    mdot = 0.3
    binary_reactor.add_inlet(StubFlow(mdot, binary_reactor.enthalpy_mass, [mdot, 0.0]))
    binary_reactor.initialize()
    ydot = evaluate(binary_reactor)
    gas = binary_reactor.thermo
    W = gas.molecular_weights[0]
    m = binary_reactor.mass
    expected = mdot * GAS_CONSTANT * gas.temperature / W / (m * gas.cv_mass)
    assert ydot[2] == pytest.approx(expected, rel=1e-10)


def test_concrete_inlet_outlet_scenario(binary_reactor):
    # m = 1, V = 1, T = 500, Y = [1, 0]; pure species 2 fed at 0.1 kg/s
    binary_reactor.add_inlet(StubFlow(0.1, 300.0, [0.0, 0.1]))
    binary_reactor.add_outlet(StubFlow(0.1))
    binary_reactor.initialize()
    assert binary_reactor.pressure == pytest.approx(
        GAS_CONSTANT * 500.0 / binary_reactor.thermo.molecular_weights[0]
    )

    ydot = evaluate(binary_reactor)
    assert ydot[0] == 0.0
    assert ydot[4] > 0.0
    assert ydot[3] < 0.0
    assert ydot[3] + ydot[4] == pytest.approx(0.0, abs=1e-15)
    assert_allclose(ydot[3:], [-0.1, 0.1])


def test_energy_disabled_freezes_temperature(binary_reactor):
    binary_reactor.energy_enabled = False
    binary_reactor.add_inlet(StubFlow(0.1, 5.0e6, [0.0, 0.1]))
    binary_reactor.add_outlet(StubFlow(0.2))
    binary_reactor.initialize()
    ydot = evaluate(binary_reactor)
    assert ydot[2] == 0.0
    assert ydot[0] == pytest.approx(-0.1)
    assert ydot[4] > 0.0


def test_energy_disabled_from_configuration(h2_air):
    gas, kinetics = h2_air
    reactor = IdealGasReactor(gas, kinetics, ReactorConfiguration(energy_enabled=False))
    reactor.initialize()
    ydot = evaluate(reactor)
    assert ydot[2] == 0.0
    assert ydot[3 + gas.species_index("H2")] < 0.0


def test_chemistry_disabled_still_allows_flow(h2_reactor):
    h2_reactor.chemistry_enabled = False
    n_species = h2_reactor.thermo.n_species
    rates = np.zeros(n_species)
    rates[h2_reactor.thermo.species_index("AR")] = 0.01
    h2_reactor.add_inlet(StubFlow(0.01, h2_reactor.enthalpy_mass, rates))
    h2_reactor.initialize()
    ydot = evaluate(h2_reactor)
    assert ydot[0] == 0.01
    assert ydot[3 + h2_reactor.thermo.species_index("AR")] > 0.0
    assert ydot[3 + h2_reactor.thermo.species_index("H2")] < 0.0


def test_reacting_closed_reactor(h2_reactor):
    gas = h2_reactor.thermo
    ydot = evaluate(h2_reactor)
    wdot = h2_reactor.kinetics.net_production_rates()
    m, V = h2_reactor.mass, h2_reactor.volume

    assert ydot[0] == 0.0
    assert_allclose(ydot[3:], wdot * V * gas.molecular_weights / m, rtol=1e-12)
    assert abs(ydot[3:].sum()) < 1e-10 * np.abs(ydot[3:]).max()

    u_k = gas.partial_molar_int_energies()
    expected_T = -np.dot(wdot * V, u_k) / (m * gas.cv_mass)
    assert ydot[2] == pytest.approx(expected_T, rel=1e-12)
    assert ydot[2] > 0.0


def test_multiple_devices_are_additive(binary_reactor):
    binary_reactor.add_outlet(StubFlow(0.1))
    binary_reactor.add_outlet(StubFlow(0.05))
    binary_reactor.add_inlet(StubFlow(0.02, 0.0, [0.02, 0.0]))
    binary_reactor.add_inlet(StubFlow(0.03, 0.0, [0.03, 0.0]))
    binary_reactor.initialize()
    ydot = evaluate(binary_reactor)
    assert ydot[0] == pytest.approx(0.05 - 0.15)


def test_evaluation_restores_snapshot_first(h2_reactor):
    y = np.zeros(h2_reactor.n_equations)
    h2_reactor.get_state(y)
    h2_reactor.update_state(y)
    first = np.zeros_like(y)
    h2_reactor.eval_eqs(0.0, y, first)

    h2_reactor.thermo.set_state_TR(300.0, 0.1)
    second = np.zeros_like(y)
    h2_reactor.eval_eqs(0.0, y, second)
    assert_allclose(second, first)


def test_sensitivity_parameters_scale_chemistry(h2_reactor):
    h2_reactor.add_sensitivity_reaction(0)
    base = evaluate(h2_reactor)
    doubled = evaluate(h2_reactor, params=[2.0])
    assert_allclose(doubled[3:], 2.0 * base[3:], rtol=1e-12)
    # Multipliers are restored after the evaluation
    assert h2_reactor.kinetics.multiplier(0) == 1.0
    assert_allclose(evaluate(h2_reactor), base)
