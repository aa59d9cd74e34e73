"""
contract_sim — deterministic in-process simulator of a contract-execution
environment (nested call frames, frame-scoped storage revert, value transfer
with fallback dispatch) for unit-testing contract-like Python classes.

Common symbols are lazily re-exported from their submodules on first access
so that importing the package stays cheap and free of cycles:

    from contract_sim import ServiceManager
    sm = ServiceManager()
    owner = sm.create_account(100)
"""

from __future__ import annotations

from importlib import import_module as _imp
from typing import Any, Dict, Tuple

from .version import __version__

# Map of public attributes → (submodule, symbol)
_exports: Dict[str, Tuple[str, str]] = {
    "ServiceManager": ("runtime.service", "ServiceManager"),
    "Context": ("runtime.context", "Context"),
    "ContractHandle": ("runtime.contracts", "ContractHandle"),
    "Frame": ("runtime.frames", "Frame"),
    "Account": ("state.accounts", "Account"),
    "Address": ("types.address", "Address"),
    "BlockClock": ("state.block", "BlockClock"),
    "SimConfig": ("config", "SimConfig"),
    "load_config": ("config", "load_config"),
}

__all__ = tuple(["__version__", *_exports.keys()])


def __getattr__(name: str) -> Any:
    """
    Lazy attribute loader to avoid import-time dependency tangles.
    """
    if name in _exports:
        submod, symbol = _exports[name]
        mod = _imp(f"{__name__}.{submod}")
        return getattr(mod, symbol)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


def __dir__() -> list[str]:
    return sorted(list(globals().keys()) + list(_exports.keys()))
