"""
contract_sim.types.address — account/contract address model.

Addresses are opaque value objects compared by value. Two kinds exist and are
distinguished by a one-byte prefix, matching the human-readable form used by
the simulated platform:

    hx<40 hex chars>   externally-owned account
    cx<40 hex chars>   contract account

The 20-byte body of a simulator-allocated address is the big-endian encoding
of the allocation counter, so addresses are stable across runs.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

ADDRESS_BODY_SIZE: int = 20

_EOA_PREFIX = "hx"
_CONTRACT_PREFIX = "cx"


def _ensure_body(body: Union[bytes, bytearray], *, name: str = "address body") -> bytes:
    if not isinstance(body, (bytes, bytearray)):
        raise TypeError(f"{name} must be bytes, got {type(body).__name__}")
    b = bytes(body)
    if len(b) != ADDRESS_BODY_SIZE:
        raise ValueError(f"{name} must be {ADDRESS_BODY_SIZE} bytes, got {len(b)}")
    return b


@dataclass(frozen=True, order=True)
class Address:
    """
    Value-equal address.

    Fields
    ------
    is_contract: True for contract accounts (cx…), False for EOAs (hx…).
    body:        Exactly ADDRESS_BODY_SIZE raw bytes.
    """
    is_contract: bool
    body: bytes

    def __post_init__(self) -> None:
        object.__setattr__(self, "is_contract", bool(self.is_contract))
        object.__setattr__(self, "body", _ensure_body(self.body))

    # ---- constructors ---- #

    @classmethod
    def from_seed(cls, seed: int, *, contract: bool = False) -> "Address":
        """Deterministic address for allocation counter `seed` (>= 0)."""
        if not isinstance(seed, int) or seed < 0:
            raise ValueError(f"seed must be a non-negative int, got {seed!r}")
        return cls(is_contract=contract, body=seed.to_bytes(ADDRESS_BODY_SIZE, "big"))

    @classmethod
    def from_string(cls, value: str) -> "Address":
        """Parse the `hx…` / `cx…` textual form."""
        if not isinstance(value, str):
            raise TypeError(f"address must be str, got {type(value).__name__}")
        s = value.strip().lower()
        prefix, hexpart = s[:2], s[2:]
        if prefix not in (_EOA_PREFIX, _CONTRACT_PREFIX):
            raise ValueError(f"invalid address prefix: {value!r}")
        try:
            body = bytes.fromhex(hexpart)
        except ValueError as e:
            raise ValueError(f"invalid address hex: {value!r}") from e
        return cls(is_contract=(prefix == _CONTRACT_PREFIX), body=body)

    # ---- views ---- #

    def __str__(self) -> str:
        prefix = _CONTRACT_PREFIX if self.is_contract else _EOA_PREFIX
        return prefix + self.body.hex()

    def __repr__(self) -> str:
        return f"Address({self})"


__all__ = ["ADDRESS_BODY_SIZE", "Address"]
