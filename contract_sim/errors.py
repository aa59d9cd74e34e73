"""
contract_sim.errors — simulator exceptions.

The simulator reports every failure through *typed exceptions*. They are
pure-Python, dependency-free and deliberately small so low-level modules
(frame stack, storage engine, account registry) can raise them without import
cycles.

Hierarchy
---------
SimError (base)
 ├─ ConfigurationError  : Fatal usage error (bad factory, frame stack misuse)
 │   └─ EmptyFrameStack : Identity/storage accessor used outside any frame
 ├─ ContractNotFound    : No contract at an address / for a caller identity
 │   └─ MethodNotFound  : Contract exists but does not expose the method
 ├─ PolicyViolation     : Domain rule broken by the request
 │   ├─ InsufficientBalance
 │   ├─ NoAccount
 │   ├─ NegativeAmount
 │   ├─ InvalidAccess   : Write attempted inside a readonly frame
 │   └─ CallDepthExceeded
 └─ Revert              : Contract-triggered failure (Context.revert)

Notes
-----
* Nothing here is retried. Configuration errors are programmer mistakes; the
  rest are surfaced to the caller immediately.
* Exceptions raised by contract code itself are never wrapped; they reach the
  caller unchanged after the frame has been popped.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass
class SimError(Exception):
    """
    Base simulator error.

    Attributes:
        message: Human-readable explanation.
        code:    Stable machine code string (e.g., 'NOT_FOUND', 'REVERT').
        data:    Optional structured details (kept JSON-serializable).
    """
    message: str = "simulator error"
    code: str = "SIM_ERROR"
    data: Optional[Dict[str, Any]] = field(default=None)

    def __str__(self) -> str:  # pragma: no cover - trivial
        if self.data:
            return f"{self.code}: {self.message} ({self.data})"
        return f"{self.code}: {self.message}"

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to a JSON-safe dict for test reports."""
        out: Dict[str, Any] = {"code": self.code, "message": self.message}
        if self.data is not None:
            out["data"] = self.data
        return out


def _merge(data: Optional[Dict[str, Any]], **fields: Any) -> Optional[Dict[str, Any]]:
    d: Dict[str, Any] = {}
    if data:
        d.update(data)
    for k, v in fields.items():
        if v is not None:
            d.setdefault(k, v)
    return d or None


# -------- configuration ------------------------------------------------------


class ConfigurationError(SimError):
    """
    Fatal usage error.

    Examples:
      - two factories registered for the same contract type
      - deploying something that cannot be constructed
    """
    def __init__(self, message: str = "configuration error", *, data: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, code="CONFIGURATION", data=data)


class EmptyFrameStack(ConfigurationError):
    """No active call frame (accessor used outside of any execution context)."""

    def __init__(self, message: str = "no active frame", *, op: Optional[str] = None):
        super().__init__(message, data=_merge(None, op=op))
        self.code = "NO_FRAME"


# -------- lookup -------------------------------------------------------------


class ContractNotFound(SimError):
    """No contract is registered for the requested address or caller identity."""

    def __init__(self, message: str = "ScoreNotFound", *, target: Optional[str] = None,
                 data: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, code="NOT_FOUND", data=_merge(data, target=target))


class MethodNotFound(ContractNotFound):
    """The resolved contract has no callable attribute with the requested name."""

    def __init__(self, method: str, *, target: Optional[str] = None):
        super().__init__(f"method not found: {method}", target=target, data={"method": method})
        self.code = "METHOD_NOT_FOUND"


# -------- policy -------------------------------------------------------------


class PolicyViolation(SimError):
    """A request broke a simulated ledger rule."""

    def __init__(self, message: str = "policy violation", *, code: str = "POLICY",
                 data: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, code=code, data=data)


class InsufficientBalance(PolicyViolation):
    """Raised when a debit would make an account balance negative."""

    def __init__(self, message: str = "OutOfBalance", *, address: Optional[str] = None,
                 balance: Optional[int] = None, amount: Optional[int] = None):
        super().__init__(
            message,
            code="OUT_OF_BALANCE",
            data=_merge(None, address=address, balance=balance, amount=amount),
        )


class NoAccount(PolicyViolation):
    """Transfer target (or any referenced address) has no registered account."""

    def __init__(self, message: str = "NoAccount", *, address: Optional[str] = None):
        super().__init__(message, code="NO_ACCOUNT", data=_merge(None, address=address))


class NegativeAmount(PolicyViolation):
    """Raised when a negative amount is passed to a credit/debit/transfer."""

    def __init__(self, amount: int):
        super().__init__(f"amount must be >= 0, got {amount}", code="NEGATIVE_AMOUNT",
                         data={"amount": amount})


class InvalidAccess(PolicyViolation):
    """Illegal operation for the current frame (e.g. storage write while readonly)."""

    def __init__(self, message: str = "invalid access", *, op: Optional[str] = None,
                 address: Optional[str] = None, key: Optional[str] = None):
        super().__init__(
            message,
            code="INVALID_ACCESS",
            data=_merge(None, op=op, address=address, key=key),
        )


class CallDepthExceeded(PolicyViolation):
    """Pushing another frame would exceed the configured maximum call depth."""

    def __init__(self, limit: int):
        super().__init__(f"call depth limit {limit} exceeded", code="CALL_DEPTH",
                         data={"limit": limit})


# -------- contract-triggered -------------------------------------------------


class Revert(SimError):
    """
    Contract-triggered revert.

    Usage (inside contract code):
        ctx.revert("insufficient allowance")
    which reverts the current frame's storage and raises this error.
    """
    def __init__(self, message: str = "reverted", *, reason: Optional[str] = None,
                 data: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, code="REVERT", data=_merge(data, reason=reason))


__all__ = [
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
