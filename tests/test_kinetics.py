import numpy as np
import pytest
from numpy.testing import assert_allclose

from igr_simulator.core import ArrheniusRate, ConfigurationError, GasKinetics, Reaction
from igr_simulator.core.kinetics import validate_kinetics
from igr_simulator.core.thermodynamics import GAS_CONSTANT


def test_arrhenius_rate():
    rate = ArrheniusRate(A=2.0e10, b=0.5, Ea=1.0e8)
    T = 1500.0
    assert rate(T) == pytest.approx(2.0e10 * T**0.5 * np.exp(-1.0e8 / (GAS_CONSTANT * T)))
    assert rate.dlnk_dT(T) == pytest.approx(0.5 / T + 1.0e8 / (GAS_CONSTANT * T**2))


def test_reaction_from_equation():
    rxn = Reaction.from_equation("2 H2 + O2 <=> 2 H2O", ArrheniusRate(1.0))
    assert rxn.reactants == {"H2": 2.0, "O2": 1.0}
    assert rxn.products == {"H2O": 2.0}
    assert rxn.reversible
    assert rxn.equation == "2 H2 + O2 <=> 2 H2O"


def test_reaction_without_arrow():
    with pytest.raises(ConfigurationError):
        Reaction.from_equation("H2 + O2", ArrheniusRate(1.0))


def test_unknown_species_rejected(h2_air):
    gas, _ = h2_air
    with pytest.raises(ConfigurationError):
        GasKinetics(gas, [Reaction.from_equation("CH4 => C + 2 H2", ArrheniusRate(1.0))])


def test_no_reactions_gives_zero_rates(binary_gas):
    kinetics = GasKinetics(binary_gas)
    assert kinetics.n_reactions == 0
    assert_allclose(kinetics.net_production_rates(), np.zeros(2))
    assert_allclose(kinetics.net_production_rates_ddT(), np.zeros(2))


def test_global_step_conserves_mass(h2_air):
    gas, kinetics = h2_air
    wdot = kinetics.net_production_rates()
    assert wdot[gas.species_index("H2")] < 0
    assert wdot[gas.species_index("H2O")] > 0
    mass_rate = np.dot(wdot, gas.molecular_weights)
    assert abs(mass_rate) < 1e-10 * np.abs(wdot * gas.molecular_weights).max()


def test_reaction_orders(h2_air):
    gas, kinetics = h2_air
    C = gas.concentrations
    k = kinetics.reactions[0].rate(gas.temperature)
    q = kinetics.net_rates_of_progress()[0]
    assert q == pytest.approx(k * C[gas.species_index("H2")] * C[gas.species_index("O2")])


def test_temperature_derivative_matches_finite_difference(h2_air):
    gas, kinetics = h2_air
    T0, rho = gas.temperature, gas.density
    dT = 1e-4 * T0
    gas.set_state_TR(T0 + dT, rho)
    plus = kinetics.net_production_rates()
    gas.set_state_TR(T0 - dT, rho)
    minus = kinetics.net_production_rates()
    gas.set_state_TR(T0, rho)
    assert_allclose(kinetics.net_production_rates_ddT(), (plus - minus) / (2 * dT), rtol=1e-5)


def test_reverse_rate_from_equilibrium(h2_air):
    gas, _ = h2_air
    gas.set_state_TPX(1500.0, 101325.0, {"H2": 1.0, "O2": 1.0, "H2O": 1.0})
    kinetics = GasKinetics(gas, [Reaction.from_equation("2 H2 + O2 <=> 2 H2O", ArrheniusRate(1.0e8))])
    q_fwd, q_rev, _, _ = kinetics.rates_of_progress()
    assert q_rev[0] > 0.0
    assert q_fwd[0] > q_rev[0]


def test_reversible_derivative_matches_finite_difference(h2_air):
    gas, _ = h2_air
    gas.set_state_TPX(2500.0, 101325.0, {"H2": 1.0, "O2": 1.0, "H2O": 1.0})
    kinetics = GasKinetics(
        gas, [Reaction.from_equation("2 H2 + O2 <=> 2 H2O", ArrheniusRate(1.0e8, 0.0, 5.0e7))]
    )
    T0, rho = gas.temperature, gas.density
    dT = 1e-4 * T0
    gas.set_state_TR(T0 + dT, rho)
    plus = kinetics.net_production_rates()
    gas.set_state_TR(T0 - dT, rho)
    minus = kinetics.net_production_rates()
    gas.set_state_TR(T0, rho)
    assert_allclose(kinetics.net_production_rates_ddT(), (plus - minus) / (2 * dT), rtol=1e-4)


def test_multiplier_scales_rates(h2_air):
    _, kinetics = h2_air
    base = kinetics.net_production_rates()
    kinetics.set_multiplier(0, 3.0)
    assert_allclose(kinetics.net_production_rates(), 3.0 * base)
    assert kinetics.multiplier(0) == 3.0


def test_validate_kinetics(capsys):
    validate_kinetics()
    assert "kinetics validations passed" in capsys.readouterr().out
