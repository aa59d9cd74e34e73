"""
contract_sim.state — simulator state (accounts, block clock, storage).

Submodules:
- accounts:  Account records and the AccountRegistry
- block:     Deterministic BlockClock
- storage:   StorageEngine with per-frame first-write logs and revert
"""

from __future__ import annotations

from importlib import import_module as _imp
from typing import Any, Dict, Tuple

_exports: Dict[str, Tuple[str, str]] = {
    "Account": ("accounts", "Account"),
    "AccountRegistry": ("accounts", "AccountRegistry"),
    "BlockClock": ("block", "BlockClock"),
    "BlockInfo": ("block", "BlockInfo"),
    "StorageEngine": ("storage", "StorageEngine"),
}

__all__ = tuple(_exports.keys())


def __getattr__(name: str) -> Any:
    """
    Lazy attribute loader to avoid import-time dependency tangles.
    """
    if name in _exports:
        submod, symbol = _exports[name]
        mod = _imp(f"{__name__}.{submod}")
        return getattr(mod, symbol)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
