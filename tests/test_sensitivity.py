import pytest

from igr_simulator.core import ConfigurationError, SensitivityParameters


def test_applied_scales_and_restores(h2_air):
    _, kinetics = h2_air
    params = SensitivityParameters()
    params.add(0, "global step")
    with params.applied(kinetics, [3.0]):
        assert kinetics.multiplier(0) == 3.0
    assert kinetics.multiplier(0) == 1.0


def test_nested_brackets_are_reentrant(h2_air):
    _, kinetics = h2_air
    outer, inner = SensitivityParameters(), SensitivityParameters()
    outer.add(0, "outer")
    inner.add(0, "inner")
    with outer.applied(kinetics, [2.0]):
        with inner.applied(kinetics, [5.0]):
            assert kinetics.multiplier(0) == 10.0
        assert kinetics.multiplier(0) == 2.0
    assert kinetics.multiplier(0) == 1.0


def test_restored_after_exception(h2_air):
    _, kinetics = h2_air
    params = SensitivityParameters()
    params.add(0, "global step")
    with pytest.raises(RuntimeError):
        with params.applied(kinetics, [4.0]):
            raise RuntimeError("evaluation failed")
    assert kinetics.multiplier(0) == 1.0


def test_none_and_empty_are_no_ops(h2_air):
    _, kinetics = h2_air
    params = SensitivityParameters()
    with params.applied(kinetics, [2.0]):
        assert kinetics.multiplier(0) == 1.0
    params.add(0, "global step")
    with params.applied(kinetics, None):
        assert kinetics.multiplier(0) == 1.0


def test_length_mismatch(h2_air):
    _, kinetics = h2_air
    params = SensitivityParameters()
    params.add(0, "global step")
    with pytest.raises(ValueError):
        params.apply(kinetics, [1.0, 2.0])


def test_reactor_registration(h2_reactor):
    param = h2_reactor.add_sensitivity_reaction(0)
    assert param.name == "r1: 2 H2 + O2 => 2 H2O"
    assert h2_reactor.sensitivity.names == [param.name]
    with pytest.raises(IndexError):
        h2_reactor.add_sensitivity_reaction(5)


def test_registration_needs_kinetics(binary_reactor):
    with pytest.raises(ConfigurationError):
        binary_reactor.add_sensitivity_reaction(0)
