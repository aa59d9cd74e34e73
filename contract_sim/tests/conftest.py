"""
Shared fixtures: a fresh simulator per test, built from an empty environment
so local CONTRACT_SIM_* variables never leak into results.
"""
from __future__ import annotations

import pytest

from contract_sim.config import SimConfig, load_config
from contract_sim.runtime.service import ServiceManager
from contract_sim.state.accounts import Account


@pytest.fixture
def config() -> SimConfig:
    return load_config(env={})


@pytest.fixture
def sm(config: SimConfig) -> ServiceManager:
    return ServiceManager(config)


@pytest.fixture
def owner(sm: ServiceManager) -> Account:
    return sm.create_account(100)


@pytest.fixture
def alice(sm: ServiceManager) -> Account:
    return sm.create_account(10)
