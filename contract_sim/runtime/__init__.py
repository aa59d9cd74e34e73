"""
contract_sim.runtime — frames, contract registry, dispatcher and service facade.

Submodules:
- frames:      Frame records and the LIFO FrameStack
- contracts:   ContractHandle, ContractRegistry (factories, aliases)
- dispatcher:  deploy / call / query / transfer routing
- context:     Context facade handed to contract code
- service:     ServiceManager, owner of one simulator's state

Symbols are lazily re-exported so that `contract_sim.state.storage` can import
`runtime.frames` without pulling in the service module.
"""

from __future__ import annotations

from importlib import import_module as _imp
from typing import Any, Dict, Tuple

_exports: Dict[str, Tuple[str, str]] = {
    "Frame": ("frames", "Frame"),
    "FrameStack": ("frames", "FrameStack"),
    "ContractHandle": ("contracts", "ContractHandle"),
    "ContractRegistry": ("contracts", "ContractRegistry"),
    "Dispatcher": ("dispatcher", "Dispatcher"),
    "Context": ("context", "Context"),
    "ServiceManager": ("service", "ServiceManager"),
}

__all__ = tuple(_exports.keys())


def __getattr__(name: str) -> Any:
    if name in _exports:
        submod, symbol = _exports[name]
        mod = _imp(f"{__name__}.{submod}")
        return getattr(mod, symbol)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
