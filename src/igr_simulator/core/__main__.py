"""Run the core validation suite: python -m igr_simulator.core"""

from . import run_all_validations

run_all_validations()
