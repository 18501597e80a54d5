import pytest

from igr_simulator.core import IdealGasPhase, IdealGasReactor, NasaPolynomial, Species


def test_fixed_components(h2_reactor):
    assert h2_reactor.component_index("mass") == 0
    assert h2_reactor.component_index("volume") == 1
    assert h2_reactor.component_index("temperature") == 2
    assert h2_reactor.component_name(0) == "mass"
    assert h2_reactor.component_name(1) == "volume"
    assert h2_reactor.component_name(2) == "temperature"


def test_species_round_trip(h2_reactor):
    for k, name in enumerate(h2_reactor.thermo.species_names):
        i = h2_reactor.component_index(name)
        assert i == k + 3
        assert h2_reactor.component_name(i) == name


def test_unknown_name_returns_none(h2_reactor):
    assert h2_reactor.component_index("pressure") is None
    assert h2_reactor.component_index("int_energy") is None


def test_index_past_end_raises(h2_reactor):
    with pytest.raises(IndexError):
        h2_reactor.component_name(h2_reactor.n_equations)


def test_species_names_take_precedence():
    gas = IdealGasPhase(
        [
            Species("N2", "N2", NasaPolynomial.constant_cp(3.5)),
            Species("mass", "Ar", NasaPolynomial.constant_cp(2.5)),
        ]
    )
    reactor = IdealGasReactor(gas)
    assert reactor.component_index("mass") == 4
