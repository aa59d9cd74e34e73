"""
contract_sim.runtime.dispatcher — route deploys, calls and transfers.

Every routed operation is scoped by a frame:

  - call     → resolve target by address, push (from, target, readonly=False,
               method, value), invoke, pop
  - query    → as call, with readonly=True and value 0
  - transfer → advance the clock, move native coins, and if the receiver is a
               contract, run its `fallback` as a nested call
  - deploy   → advance the clock, allocate a contract account, push "<init>",
               build the instance through its factory, pop; a factory that
               raises leaves no handle behind and the previous deploy of the
               type keeps its slot

Pops happen in `finally` blocks, so the stack never leaks a frame when the
contract body raises. Storage is *not* reverted automatically on failure;
reverting is an explicit step (`StorageEngine.revert_current_frame`) taken by
contract code or the test while the frame is still active.

Balance changes are never rolled back by the dispatcher.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Callable

from ..errors import InsufficientBalance, MethodNotFound, NoAccount, SimError
from ..state.accounts import Account, AccountRegistry
from ..state.block import BlockClock
from ..types.address import Address
from .contracts import ContractHandle, ContractRegistry
from .frames import FrameStack

if TYPE_CHECKING:
    from .context import Context
    from .service import ServiceManager

log = logging.getLogger(__name__)

INIT_METHOD = "<init>"
FALLBACK_METHOD = "fallback"


class Dispatcher:
    """
    Call/transfer router over one simulator's collaborators.

    Parameters
    ----------
    accounts, block, frames, contracts :
        The owning ServiceManager's state.
    context_factory :
        Builds the Context handed to a contract's factory at deploy time.
    service :
        Back-reference stored on each ContractHandle for its test conveniences.
    """

    def __init__(
        self,
        accounts: AccountRegistry,
        block: BlockClock,
        frames: FrameStack,
        contracts: ContractRegistry,
        *,
        context_factory: Callable[[ContractHandle], "Context"],
        service: "ServiceManager",
    ) -> None:
        self.accounts = accounts
        self.block = block
        self.frames = frames
        self.contracts = contracts
        self._context_factory = context_factory
        self._service = service

    # ------------------------------------------------------------------ #
    # Resolution
    # ------------------------------------------------------------------ #

    def resolve_by_address(self, address: Address) -> ContractHandle:
        return self.contracts.by_address(address)

    def resolve_by_caller(self, caller: Any) -> ContractHandle:
        return self.contracts.by_caller(caller)

    # ------------------------------------------------------------------ #
    # Invocation
    # ------------------------------------------------------------------ #

    def _invoke(
        self,
        handle: ContractHandle,
        from_account: Account,
        readonly: bool,
        value: int,
        method: str,
        params: tuple,
    ) -> Any:
        self.frames.push(from_account, handle.account, readonly, method, value)
        try:
            fn = getattr(handle.instance, method, None)
            if method.startswith("_") or not callable(fn):
                raise MethodNotFound(method, target=str(handle.address))
            return fn(*params)
        except SimError:
            raise
        except Exception:
            log.warning(
                "call %s.%s from %s raised",
                handle.address, method, from_account.address, exc_info=True,
            )
            raise
        finally:
            self.frames.pop()

    def call(self, from_account: Account, value: int, target: Address, method: str, *params: Any) -> Any:
        handle = self.resolve_by_address(target)
        return self._invoke(handle, from_account, False, value, method, params)

    def query(self, from_account: Account, target: Address, method: str, *params: Any) -> Any:
        handle = self.resolve_by_address(target)
        return self._invoke(handle, from_account, True, 0, method, params)

    def call_from(self, caller: Any, value: int, target: Address, method: str, *params: Any) -> Any:
        """
        Call made by contract code, identified by its handle/instance/type.
        An empty or "fallback" method is a plain payment and degenerates into
        `transfer`.
        """
        source = self.resolve_by_caller(caller)
        if method in ("", FALLBACK_METHOD):
            self.transfer(source.account, target, value)
            return None
        return self.call(source.account, value, target, method, *params)

    # ------------------------------------------------------------------ #
    # Transfers
    # ------------------------------------------------------------------ #

    def transfer(self, from_account: Account, target: Address, value: int) -> None:
        self.block.increase()
        symbol = self.accounts.native_symbol
        balance = from_account.get_balance(symbol)
        if balance < value:
            raise InsufficientBalance(
                address=str(from_account.address), balance=balance, amount=value
            )
        to_account = self.accounts.get(target)
        if to_account is None:
            raise NoAccount(address=str(target))

        from_account.subtract_balance(symbol, value)
        to_account.add_balance(symbol, value)
        log.debug("transfer %s -> %s value=%d", from_account.address, target, value)

        if target.is_contract:
            self.call(from_account, value, target, FALLBACK_METHOD)

    # ------------------------------------------------------------------ #
    # Deploy
    # ------------------------------------------------------------------ #

    def deploy(self, owner: Account, contract_type: type, *args: Any) -> ContractHandle:
        factory = self.contracts.factory_for(contract_type)
        self.block.increase()
        account = self.accounts.create_contract()
        handle = ContractHandle(account, owner, contract_type, self._service)
        handle.context = self._context_factory(handle)
        previous = self.contracts.type_slot(contract_type)
        self.contracts.register(handle)

        self.frames.push(owner, account, False, INIT_METHOD, 0)
        try:
            instance = factory(handle.context, *args)
        except Exception:
            self.contracts.unregister(handle, previous)
            raise
        finally:
            self.frames.pop()
        self.contracts.bind_instance(handle, instance)
        log.debug("deploy %s at %s owner=%s", contract_type.__name__, account.address, owner.address)
        return handle


__all__ = [
    "INIT_METHOD",
    "FALLBACK_METHOD",
    "Dispatcher",
]
