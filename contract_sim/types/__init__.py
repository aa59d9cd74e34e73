"""
contract_sim.types — small value types shared across the simulator.

Public surface (re-exported):
    Address            : Dataclass — value-equal hx…/cx… address
    ADDRESS_BODY_SIZE  : Raw address body length in bytes
"""

from __future__ import annotations

from .address import ADDRESS_BODY_SIZE, Address

__all__ = ["Address", "ADDRESS_BODY_SIZE"]
