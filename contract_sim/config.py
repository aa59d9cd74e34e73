"""
contract_sim.config — runtime configuration for the contract simulator.

This module centralizes knobs for:
  • Chain defaults (initial block height/timestamp, block interval, native coin)
  • Feature flags (readonly-frame enforcement)
  • Limits (maximum nested call depth)

Configuration may be provided via environment variables. Safe defaults are
chosen so a test run works out of the box and is fully reproducible.

Environment variables (all optional):
  CONTRACT_SIM_INITIAL_HEIGHT      -> int >= 0 (default: 0)
  CONTRACT_SIM_INITIAL_TIMESTAMP   -> int >= 0, microseconds (default: 0)
  CONTRACT_SIM_BLOCK_INTERVAL_US   -> int > 0, microseconds per block (default: 2_000_000)
  CONTRACT_SIM_NATIVE_SYMBOL       -> balance symbol used by transfer (default: ICX)
  CONTRACT_SIM_NATIVE_DECIMALS     -> int >= 0 (default: 18)
  CONTRACT_SIM_MAX_CALL_DEPTH      -> int > 0 (default: 1024)
  CONTRACT_SIM_ENFORCE_READONLY    -> 0/1/true/false (default: 1)

Programmatic usage:
    from contract_sim.config import get_config
    cfg = get_config()
    if cfg.features.enforce_readonly:
        ...

Note: This module does not perform any I/O beyond reading env vars.
"""

from __future__ import annotations

import os
from dataclasses import asdict, dataclass
from functools import lru_cache
from typing import Dict, Mapping, Optional, Union

# ----------------------------- helpers -------------------------------------


_BOOL_TRUE = {"1", "true", "t", "yes", "y", "on"}
_BOOL_FALSE = {"0", "false", "f", "no", "n", "off"}


def _bool_env(value: Optional[str], default: bool) -> bool:
    if value is None:
        return default
    v = value.strip().lower()
    if v in _BOOL_TRUE:
        return True
    if v in _BOOL_FALSE:
        return False
    # Be forgiving: non-empty → True, empty → default
    return bool(v) if v != "" else default


def _int_value(name: str, raw: Union[str, int, None], default: int) -> int:
    if raw is None:
        return default
    if isinstance(raw, bool):
        raise ValueError(f"{name} must be an integer, got bool")
    if isinstance(raw, int):
        return raw
    s = str(raw).strip().replace("_", "")
    if s == "":
        return default
    try:
        return int(s, 0)
    except ValueError as e:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from e


# ------------------------------ dataclasses ---------------------------------


@dataclass(frozen=True)
class ChainDefaults:
    initial_height: int = 0
    initial_timestamp: int = 0  # microseconds
    block_interval_us: int = 2_000_000  # 2 secs block generation
    native_symbol: str = "ICX"
    native_decimals: int = 18

    @property
    def coin(self) -> int:
        """One whole native coin in the smallest unit (10**decimals)."""
        return 10 ** self.native_decimals


@dataclass(frozen=True)
class FeatureFlags:
    enforce_readonly: bool = True


@dataclass(frozen=True)
class Limits:
    max_call_depth: int = 1024


@dataclass(frozen=True)
class SimConfig:
    chain: ChainDefaults
    features: FeatureFlags
    limits: Limits

    def to_dict(self) -> Dict[str, object]:
        return asdict(self)


# ------------------------------ loader --------------------------------------


def _validate_chain(c: ChainDefaults) -> ChainDefaults:
    if c.initial_height < 0:
        raise ValueError("initial_height must be ≥ 0")
    if c.initial_timestamp < 0:
        raise ValueError("initial_timestamp must be ≥ 0")
    if c.block_interval_us <= 0:
        raise ValueError("block_interval_us must be > 0")
    if not c.native_symbol:
        raise ValueError("native_symbol must be non-empty")
    if c.native_decimals < 0:
        raise ValueError("native_decimals must be ≥ 0")
    return c


def _validate_limits(l: Limits) -> Limits:
    if l.max_call_depth <= 0:
        raise ValueError("max_call_depth must be > 0")
    return l


def load_config(
    env: Optional[Mapping[str, str]] = None,
    *,
    overrides: Optional[Mapping[str, Union[str, int, bool]]] = None,
) -> SimConfig:
    """
    Build a SimConfig from environment and optional overrides.

    Args:
        env: mapping to read variables from (default: os.environ)
        overrides: explicit field overrides (take precedence over env); keys support:
          'initial_height', 'initial_timestamp', 'block_interval_us',
          'native_symbol', 'native_decimals', 'max_call_depth', 'enforce_readonly'
    """
    env = os.environ if env is None else env
    overrides = dict(overrides or {})

    chain = ChainDefaults(
        initial_height=_int_value(
            "initial_height",
            overrides.get("initial_height", env.get("CONTRACT_SIM_INITIAL_HEIGHT")),
            0,
        ),
        initial_timestamp=_int_value(
            "initial_timestamp",
            overrides.get("initial_timestamp", env.get("CONTRACT_SIM_INITIAL_TIMESTAMP")),
            0,
        ),
        block_interval_us=_int_value(
            "block_interval_us",
            overrides.get("block_interval_us", env.get("CONTRACT_SIM_BLOCK_INTERVAL_US")),
            2_000_000,
        ),
        native_symbol=str(
            overrides.get("native_symbol", env.get("CONTRACT_SIM_NATIVE_SYMBOL", "ICX"))
        ).strip(),
        native_decimals=_int_value(
            "native_decimals",
            overrides.get("native_decimals", env.get("CONTRACT_SIM_NATIVE_DECIMALS")),
            18,
        ),
    )

    if "enforce_readonly" in overrides:
        enforce = bool(overrides["enforce_readonly"])
    else:
        enforce = _bool_env(env.get("CONTRACT_SIM_ENFORCE_READONLY"), True)
    features = FeatureFlags(enforce_readonly=enforce)

    limits = Limits(
        max_call_depth=_int_value(
            "max_call_depth",
            overrides.get("max_call_depth", env.get("CONTRACT_SIM_MAX_CALL_DEPTH")),
            1024,
        ),
    )

    return SimConfig(
        chain=_validate_chain(chain),
        features=features,
        limits=_validate_limits(limits),
    )


@lru_cache(maxsize=1)
def get_config() -> SimConfig:
    """
    Cached global config. Suitable for test-session bootstraps; a ServiceManager
    can always be given its own SimConfig instead.
    """
    return load_config()


# ----------------------------- pretty-print ---------------------------------


def summary(cfg: Optional[SimConfig] = None) -> str:
    """
    Return a human-friendly one-line summary of the most important knobs.
    """
    cfg = cfg or get_config()
    c = cfg.chain
    return (
        "sim{"
        f"height={c.initial_height}, ts={c.initial_timestamp}, interval={c.block_interval_us}us, "
        f"coin={c.native_symbol}/{c.native_decimals}, "
        f"readonly={int(cfg.features.enforce_readonly)}, depth={cfg.limits.max_call_depth}"
        "}"
    )


__all__ = [
    "ChainDefaults",
    "FeatureFlags",
    "Limits",
    "SimConfig",
    "load_config",
    "get_config",
    "summary",
]
