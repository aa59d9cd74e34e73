"""
contract_sim.tests
==================

Test package for the simulator. Sample contracts used across the suite live
in `contract_sim.tests.sample_contracts`; shared fixtures in `conftest.py`.
"""
