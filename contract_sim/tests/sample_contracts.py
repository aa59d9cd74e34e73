"""
Small contracts exercised by the test-suite.

Each class follows the default factory convention: the simulator calls
`Cls(context, *deploy_args)` inside the `<init>` frame.
"""
from __future__ import annotations

from typing import Any, Dict, List

from contract_sim.runtime.context import Context
from contract_sim.types.address import Address


class Counter:
    def __init__(self, ctx: Context, start: int = 0) -> None:
        self.ctx = ctx
        ctx.put("count", start)

    def count(self) -> int:
        return self.ctx.get("count", 0)

    def increment(self, by: int = 1) -> int:
        self.ctx.put("count", self.ctx.get("count", 0) + by)
        return self.ctx.get("count")

    def set_then_revert(self, value: int) -> None:
        self.ctx.put("count", value)
        self.ctx.revert_frame()

    def set_then_abort(self, value: int) -> None:
        self.ctx.put("count", value)
        self.ctx.revert("count rejected")

    def set_then_fail(self, value: int) -> None:
        self.ctx.put("count", value)
        raise RuntimeError("boom")

    def _hidden(self) -> str:
        return "not callable through the dispatcher"

    def fallback(self) -> None:
        self.ctx.put("paid", self.ctx.get("paid", 0) + self.ctx.value)


class Recorder:
    """Records the identity it observes in every frame it runs in."""

    def __init__(self, ctx: Context) -> None:
        self.ctx = ctx
        self.seen: List[Dict[str, Any]] = []
        self.init_owner = ctx.owner
        self.init_caller = ctx.caller
        self.init_address = ctx.address

    def _record(self, label: str) -> Dict[str, Any]:
        entry = {
            "label": label,
            "caller": self.ctx.caller,
            "address": self.ctx.address,
            "origin": self.ctx.origin,
            "owner": self.ctx.owner,
            "value": self.ctx.value,
            "depth": self.ctx.depth,
            "readonly": self.ctx.readonly,
        }
        self.seen.append(entry)
        return entry

    def whoami(self) -> Dict[str, Any]:
        return self._record("whoami")

    def fallback(self) -> None:
        self._record("fallback")


class Relay:
    """Forwards payments and calls to other contracts."""

    def __init__(self, ctx: Context) -> None:
        self.ctx = ctx

    def forward(self, target: Address, amount: int) -> None:
        self.ctx.transfer(target, amount)

    def poke(self, target: Address, method: str, *params: Any) -> Any:
        return self.ctx.call(target, method, *params)

    def write_poke_revert(self, target: Address) -> None:
        self.ctx.put("marker", "relay")
        self.ctx.call(target, "increment")
        self.ctx.revert_frame()

    def whoami(self, target: Address) -> Dict[str, Any]:
        return self.ctx.call(target, "whoami")

    def store(self, key: str, value: Any) -> None:
        self.ctx.put(key, value)

    def load(self, key: str) -> Any:
        return self.ctx.get(key)

    def fallback(self) -> None:
        pass


class Payless:
    """A contract without a fallback method."""

    def __init__(self, ctx: Context) -> None:
        self.ctx = ctx

    def ping(self) -> str:
        return "pong"


class TokenBase:
    """Interface-like base class used through the alias table."""


class Token(TokenBase):
    def __init__(self, ctx: Context, symbol: str, supply: int) -> None:
        self.ctx = ctx
        self.symbol = symbol
        ctx.put("supply", supply)

    def supply(self) -> int:
        return self.ctx.get("supply")
