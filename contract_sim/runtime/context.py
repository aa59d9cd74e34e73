"""
contract_sim.runtime.context — the facade contract code uses to reach the simulator.

Each deployed contract receives its own Context as the first argument of its
factory. Contract authors never touch the ServiceManager directly; everything
they may do goes through this surface:

    identity   address, caller, origin, owner, value, readonly, depth
    chain      block_height, block_timestamp, balance_of(address)
    storage    get(key), put(key, value), get_type(key), revert_frame()
    calls      call(target, method, *params, value=0), transfer(target, value)
    failure    revert(reason), undo this frame's storage and raise Revert

Identity values are derived from the live frame stack at the moment of the
call, so they are only meaningful while the contract is executing.

Example contract
----------------
    class Counter:
        def __init__(self, ctx, start=0):
            self.ctx = ctx
            ctx.put("count", start)

        def increment(self):
            self.ctx.put("count", self.ctx.get("count") + 1)

        def fallback(self):
            self.ctx.put("paid", self.ctx.get("paid", 0) + self.ctx.value)
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, NoReturn, Optional

from ..errors import Revert
from ..types.address import Address

if TYPE_CHECKING:
    from .contracts import ContractHandle
    from .service import ServiceManager


class Context:
    """Contract-facing view of one ServiceManager, bound to one deployed contract."""

    def __init__(self, service: "ServiceManager", handle: "ContractHandle") -> None:
        self._service = service
        self._handle = handle

    # ---- identity ---- #

    @property
    def address(self) -> Address:
        """Address of the contract currently executing (top frame callee)."""
        return self._service.get_address()

    @property
    def caller(self) -> Address:
        return self._service.get_caller()

    @property
    def origin(self) -> Address:
        return self._service.get_origin()

    @property
    def owner(self) -> Address:
        return self._service.get_owner()

    @property
    def value(self) -> int:
        """Native amount attached to the current frame."""
        return self._service.get_value()

    @property
    def readonly(self) -> bool:
        return self._service.is_readonly()

    @property
    def depth(self) -> int:
        """Depth of the frame currently executing (0 for a top-level call)."""
        return self._service.get_current_frame().depth

    @property
    def self_address(self) -> Address:
        """Address of the contract this context is bound to (frame-independent)."""
        return self._handle.address

    # ---- chain ---- #

    @property
    def block_height(self) -> int:
        return self._service.get_block().height

    @property
    def block_timestamp(self) -> int:
        return self._service.get_block().timestamp

    def balance_of(self, address: Address, symbol: Optional[str] = None) -> int:
        acct = self._service.get_account(address)
        return 0 if acct is None else acct.get_balance(symbol)

    # ---- storage ---- #

    def get(self, key: str, default: Any = None) -> Any:
        return self._service.get_storage(key, default)

    def put(self, key: str, value: Any, declared_type: Optional[type] = None) -> None:
        self._service.put_storage(key, value, declared_type)

    def get_type(self, key: str) -> Optional[type]:
        return self._service.get_storage_type(key)

    def revert_frame(self) -> int:
        """Restore this frame's storage writes without raising."""
        return self._service.revert_current_frame()

    # ---- calls ---- #

    def call(self, target: Address, method: str, *params: Any, value: int = 0) -> Any:
        """
        Call another contract as this contract. An empty or "fallback" method
        sends `value` as a plain payment instead.
        """
        return self._service.call_from(self._handle, value, target, method, *params)

    def transfer(self, target: Address, value: int) -> None:
        self._service.call_from(self._handle, value, target, "")

    # ---- failure ---- #

    def revert(self, reason: str = "reverted") -> NoReturn:
        """Undo this frame's storage writes and abort the call with Revert."""
        self._service.revert_current_frame()
        raise Revert(reason, reason=reason)


__all__ = ["Context"]
