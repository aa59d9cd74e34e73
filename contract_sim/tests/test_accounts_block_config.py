from __future__ import annotations

import pytest

from contract_sim import ServiceManager, __version__, errors, version
from contract_sim.config import load_config, summary
from contract_sim.errors import (ConfigurationError, ContractNotFound,
                                 InsufficientBalance, NegativeAmount,
                                 NoAccount, PolicyViolation, Revert, SimError)
from contract_sim.state.accounts import AccountRegistry
from contract_sim.state.block import BlockClock, BlockInfo
from contract_sim.types.address import ADDRESS_BODY_SIZE, Address


# ---- accounts ---- #

def test_create_external_scales_initial_coins() -> None:
    reg = AccountRegistry("ICX", 18)
    acct = reg.create_external(3)
    assert acct.balance == 3 * 10**18
    assert not acct.is_contract
    assert reg.require(acct.address) is acct
    assert acct.address in reg


def test_addresses_are_sequential_and_distinct() -> None:
    reg = AccountRegistry()
    a, c, b = reg.create_external(), reg.create_contract(), reg.create_external()
    assert [x.address for x in (a, c, b)] == [
        Address.from_seed(1),
        Address.from_seed(2, contract=True),
        Address.from_seed(3),
    ]
    assert reg.is_contract(c.address) and not reg.is_contract(a.address)
    assert len(reg) == 3


def test_multi_symbol_balances() -> None:
    reg = AccountRegistry()
    acct = reg.create_external(1)
    assert acct.add_balance("SIM", 5) == 5
    assert acct.subtract_balance("SIM", 2) == 3
    assert acct.get_balance("SIM") == 3
    assert acct.get_balance() == reg.coin
    assert acct.to_dict()["balances"] == {"ICX": reg.coin, "SIM": 3}
    assert reg.total_supply("SIM") == 3


def test_subtract_beyond_balance_leaves_ledger_unchanged() -> None:
    acct = AccountRegistry().create_external()
    acct.add_balance("ICX", 4)
    with pytest.raises(InsufficientBalance):
        acct.subtract_balance("ICX", 5)
    assert acct.balance == 4


def test_amount_validation() -> None:
    acct = AccountRegistry().create_external()
    with pytest.raises(NegativeAmount):
        acct.add_balance("ICX", -1)
    with pytest.raises(TypeError):
        acct.add_balance("ICX", 1.5)
    with pytest.raises(TypeError):
        acct.add_balance("ICX", True)


def test_require_unknown_account() -> None:
    reg = AccountRegistry()
    assert reg.get(Address.from_seed(42)) is None
    with pytest.raises(NoAccount):
        reg.require(Address.from_seed(42))


# ---- addresses ---- #

def test_address_text_form_round_trips() -> None:
    eoa = Address.from_seed(1)
    cx = Address.from_seed(1, contract=True)
    assert str(eoa) == "hx" + "00" * (ADDRESS_BODY_SIZE - 1) + "01"
    assert str(cx).startswith("cx")
    assert eoa != cx
    assert Address.from_string(str(cx)) == cx
    assert repr(eoa) == f"Address({eoa})"


@pytest.mark.parametrize("text", ["zz00", "hx" + "00" * 19, "cx" + "gg" * 20])
def test_address_parse_rejects_bad_text(text: str) -> None:
    with pytest.raises(ValueError):
        Address.from_string(text)


# ---- block clock ---- #

def test_block_clock_advances_deterministically() -> None:
    clock = BlockClock(10, 1_000, interval_us=500)
    assert clock.increase() == BlockInfo(11, 1_500)
    assert clock.increase(2) == BlockInfo(13, 2_500)
    assert clock.snapshot() == BlockInfo(13, 2_500)


def test_block_clock_rejects_bad_input() -> None:
    with pytest.raises(ValueError):
        BlockClock(interval_us=0)
    with pytest.raises(ValueError):
        BlockClock(-1)
    with pytest.raises(ValueError):
        BlockClock().increase(-1)


def test_service_manager_explicit_clock(config) -> None:
    sm = ServiceManager(config, height=100, timestamp=7)
    assert (sm.get_block().height, sm.get_block().timestamp) == (100, 7)


# ---- config ---- #

def test_config_defaults() -> None:
    cfg = load_config(env={})
    assert cfg.chain.initial_height == 0
    assert cfg.chain.block_interval_us == 2_000_000
    assert cfg.chain.native_symbol == "ICX"
    assert cfg.chain.coin == 10**18
    assert cfg.features.enforce_readonly is True
    assert cfg.limits.max_call_depth == 1024


def test_config_env_and_overrides() -> None:
    env = {
        "CONTRACT_SIM_INITIAL_HEIGHT": "0x10",
        "CONTRACT_SIM_BLOCK_INTERVAL_US": "1_000",
        "CONTRACT_SIM_NATIVE_SYMBOL": " SIM ",
        "CONTRACT_SIM_NATIVE_DECIMALS": "2",
        "CONTRACT_SIM_ENFORCE_READONLY": "off",
    }
    cfg = load_config(env=env, overrides={"max_call_depth": 8, "initial_height": 3})
    assert cfg.chain.initial_height == 3
    assert cfg.chain.block_interval_us == 1000
    assert cfg.chain.native_symbol == "SIM"
    assert cfg.features.enforce_readonly is False
    assert cfg.limits.max_call_depth == 8

    sm = ServiceManager(cfg)
    assert sm.coin == 100
    assert sm.create_account(2).get_balance("SIM") == 200


@pytest.mark.parametrize(
    "env",
    [
        {"CONTRACT_SIM_BLOCK_INTERVAL_US": "0"},
        {"CONTRACT_SIM_MAX_CALL_DEPTH": "0"},
        {"CONTRACT_SIM_INITIAL_HEIGHT": "ten"},
        {"CONTRACT_SIM_NATIVE_SYMBOL": "  "},
    ],
)
def test_config_rejects_invalid_values(env) -> None:
    with pytest.raises(ValueError):
        load_config(env=env)


def test_config_summary_line() -> None:
    line = summary(load_config(env={}))
    assert line.startswith("sim{") and line.endswith("}")
    assert "coin=ICX/18" in line and "depth=1024" in line


# ---- errors & version ---- #

def test_error_hierarchy_and_payload() -> None:
    assert errors.__all__ == [
        "SimError",
        "ConfigurationError",
        "EmptyFrameStack",
        "ContractNotFound",
        "MethodNotFound",
        "PolicyViolation",
        "InsufficientBalance",
        "NoAccount",
        "NegativeAmount",
        "InvalidAccess",
        "CallDepthExceeded",
        "Revert",
    ]
    assert isinstance(NoAccount(address="hx01"), PolicyViolation)
    assert isinstance(ContractNotFound(target="cx01"), SimError)
    assert ConfigurationError("bad").to_dict() == {"code": "CONFIGURATION", "message": "bad"}
    assert Revert("no", reason="no").to_dict()["data"] == {"reason": "no"}
    err = InsufficientBalance(address="hx01", balance=1, amount=2)
    assert err.to_dict() == {
        "code": "OUT_OF_BALANCE",
        "message": "OutOfBalance",
        "data": {"address": "hx01", "balance": 1, "amount": 2},
    }
    assert str(err).startswith("OUT_OF_BALANCE: OutOfBalance")


def test_version_module_exposes_only_version() -> None:
    assert version.__all__ == ["__version__"]
    assert version.__version__ == __version__
    assert __version__.count(".") == 2
