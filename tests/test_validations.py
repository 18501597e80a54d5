from igr_simulator.core import run_all_validations


def test_run_all_validations(capsys):
    run_all_validations()
    out = capsys.readouterr().out
    assert "ideal-gas reactor validations passed" in out
    assert "reactor network validations passed" in out
    assert "ALL VALIDATIONS PASSED" in out
