"""
contract_sim.runtime.service — ServiceManager, the simulator's single owner of state.

A ServiceManager bundles one of each collaborator:

    AccountRegistry   accounts and balances
    BlockClock        synthetic height/timestamp
    FrameStack        active call frames
    StorageEngine     contract storage + per-frame revert logs
    ContractRegistry  deployed contracts, factories, aliases
    Dispatcher        deploy / call / query / transfer routing

Nothing is global: independent ServiceManager instances never share state, so
a test module can build a fresh one per test.

Locking
-------
The frame stack and storage engine are mutated in multi-step sequences
(snapshot-then-write, push-invoke-pop). Every public entry point takes one
reentrant lock, so a whole top-level call chain (including nested calls made
from contract code on the same thread) runs without interleaving with another
thread's chain. Manual `push_frame`/`pop_frame` sequences spanning several
statements are not protected across statements.

Typical usage
-------------
    sm = ServiceManager()
    owner = sm.create_account(100)
    token = sm.deploy(owner, Token, "SIM", 1000)
    token.invoke(owner, "transfer", alice.address, 10)
    sm.transfer(owner, token.address, 5 * sm.coin)   # runs Token.fallback
"""

from __future__ import annotations

import logging
import threading
from typing import Any, List, Optional

from ..config import SimConfig, get_config, summary
from ..state.accounts import Account, AccountRegistry
from ..state.block import BlockClock
from ..state.storage import StorageEngine
from ..types.address import Address
from .context import Context
from .contracts import ContractHandle, ContractRegistry, Factory
from .dispatcher import Dispatcher
from .frames import Frame, FrameStack

log = logging.getLogger(__name__)


class ServiceManager:
    """
    Deterministic in-process contract-execution environment.

    Parameters
    ----------
    config : Optional[SimConfig]
        Simulator settings; defaults to the cached environment config.
    height, timestamp : Optional[int]
        Initial block position; default to `config.chain.initial_*`.
    """

    def __init__(
        self,
        config: Optional[SimConfig] = None,
        *,
        height: Optional[int] = None,
        timestamp: Optional[int] = None,
    ) -> None:
        self.config = config or get_config()
        chain = self.config.chain
        self._lock = threading.RLock()

        self.accounts = AccountRegistry(chain.native_symbol, chain.native_decimals)
        self.block = BlockClock(
            chain.initial_height if height is None else height,
            chain.initial_timestamp if timestamp is None else timestamp,
            interval_us=chain.block_interval_us,
        )
        self.frames = FrameStack(max_depth=self.config.limits.max_call_depth)
        self.storage = StorageEngine(
            self.frames, enforce_readonly=self.config.features.enforce_readonly
        )
        self.contracts = ContractRegistry()
        self.dispatcher = Dispatcher(
            self.accounts,
            self.block,
            self.frames,
            self.contracts,
            context_factory=lambda handle: Context(self, handle),
            service=self,
        )
        log.debug("service manager ready %s", summary(self.config))

    @property
    def coin(self) -> int:
        """One whole native coin in the smallest unit."""
        return self.accounts.coin

    # ------------------------------------------------------------------ #
    # Accounts & block
    # ------------------------------------------------------------------ #

    def create_account(self, initial_coins: int = 0) -> Account:
        with self._lock:
            return self.accounts.create_external(initial_coins)

    def get_account(self, address: Address) -> Optional[Account]:
        return self.accounts.get(address)

    def get_block(self) -> BlockClock:
        return self.block

    # ------------------------------------------------------------------ #
    # Contracts
    # ------------------------------------------------------------------ #

    def register_factory(self, contract_type: type, factory: Factory) -> None:
        with self._lock:
            self.contracts.register_factory(contract_type, factory)

    def register_alias(self, alias: type, contract_type: type) -> None:
        with self._lock:
            self.contracts.register_alias(alias, contract_type)

    def deploy(self, owner: Account, contract_type: type, *args: Any) -> ContractHandle:
        with self._lock:
            return self.dispatcher.deploy(owner, contract_type, *args)

    def get_contract(self, address: Address) -> ContractHandle:
        return self.dispatcher.resolve_by_address(address)

    def call(self, from_account: Account, value: int, target: Address, method: str, *params: Any) -> Any:
        with self._lock:
            return self.dispatcher.call(from_account, value, target, method, *params)

    def call_from(self, caller: Any, value: int, target: Address, method: str, *params: Any) -> Any:
        with self._lock:
            return self.dispatcher.call_from(caller, value, target, method, *params)

    def query(self, from_account: Account, target: Address, method: str, *params: Any) -> Any:
        with self._lock:
            return self.dispatcher.query(from_account, target, method, *params)

    def transfer(self, from_account: Account, target: Address, value: int) -> None:
        with self._lock:
            self.dispatcher.transfer(from_account, target, value)

    # ------------------------------------------------------------------ #
    # Frames
    # ------------------------------------------------------------------ #

    def push_frame(
        self,
        from_account: Account,
        to_account: Account,
        readonly: bool,
        method: str,
        value: int = 0,
    ) -> Frame:
        with self._lock:
            return self.frames.push(from_account, to_account, readonly, method, value)

    def pop_frame(self) -> Frame:
        with self._lock:
            return self.frames.pop()

    def get_current_frame(self) -> Frame:
        return self.frames.current()

    def get_first_frame(self) -> Frame:
        return self.frames.origin()

    @property
    def frame_depth(self) -> int:
        return self.frames.depth

    def call_stack(self) -> List[Frame]:
        return self.frames.frames()

    # ------------------------------------------------------------------ #
    # Identity
    # ------------------------------------------------------------------ #

    def get_address(self) -> Address:
        return self.frames.current().to_account.address

    def get_caller(self) -> Address:
        return self.frames.current().from_account.address

    def get_origin(self) -> Address:
        return self.frames.origin().from_account.address

    def get_owner(self) -> Address:
        handle = self.dispatcher.resolve_by_address(self.get_address())
        return handle.owner.address

    def get_value(self) -> int:
        return self.frames.current().value

    def is_readonly(self) -> bool:
        return self.frames.current().readonly

    # ------------------------------------------------------------------ #
    # Storage
    # ------------------------------------------------------------------ #

    def put_storage(self, key: str, value: Any, declared_type: Optional[type] = None) -> None:
        with self._lock:
            self.storage.put(key, value, declared_type)

    def get_storage(self, key: str, default: Any = None) -> Any:
        with self._lock:
            return self.storage.get(key, default)

    def get_storage_type(self, key: str) -> Optional[type]:
        with self._lock:
            return self.storage.get_type(key)

    def revert_current_frame(self) -> int:
        with self._lock:
            return self.storage.revert_current_frame()


__all__ = ["ServiceManager"]
