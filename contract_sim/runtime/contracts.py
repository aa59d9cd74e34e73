"""
contract_sim.runtime.contracts — deployed contract handles and their registry.

A deployed contract is represented by a ContractHandle binding together:

  - the contract Account (cx… address, balance)
  - the owner Account passed to deploy
  - the Python instance built by the contract's factory
  - the Context facade the instance uses to reach the simulator

The registry resolves handles three ways:

  by address        exact, used for every inbound call/transfer
  by instance       identity of the running object (calls made from contract code)
  by type           exact type registered at deploy time, then the explicit
                    alias table; there is no implicit superclass search

Factories
---------
Construction goes through exactly one factory per contract type:

    factory(context, *args) -> instance

A type with no registered factory is its own factory (the class is called
with the context followed by the deploy arguments). Registering a second
factory for a type is rejected.
"""

from __future__ import annotations

from typing import (TYPE_CHECKING, Any, Callable, Dict, Iterator, Optional,
                    Tuple)

from ..errors import ConfigurationError, ContractNotFound
from ..state.accounts import Account
from ..types.address import Address

if TYPE_CHECKING:  # type-only imports to avoid cycles
    from .context import Context
    from .service import ServiceManager

Factory = Callable[..., Any]


class ContractHandle:
    """
    A deployed contract (the simulator-side view of a contract account).

    `instance` is None only while the `<init>` frame is running.
    """

    def __init__(
        self,
        account: Account,
        owner: Account,
        contract_type: type,
        service: "ServiceManager",
    ) -> None:
        self.account = account
        self.owner = owner
        self.contract_type = contract_type
        self.instance: Any = None
        self._service = service
        self.context: Optional["Context"] = None

    @property
    def address(self) -> Address:
        return self.account.address

    # ---- test conveniences ---- #

    def invoke(self, sender: Account, method: str, *params: Any, value: int = 0) -> Any:
        """Call `method` as `sender`. `value` is recorded on the frame; no coins move."""
        return self._service.call(sender, value, self.address, method, *params)

    def query(self, method: str, *params: Any, sender: Optional[Account] = None) -> Any:
        """Readonly call of `method`; the sender defaults to the owner."""
        return self._service.query(sender or self.owner, self.address, method, *params)

    def __repr__(self) -> str:
        return f"ContractHandle({self.contract_type.__name__} @ {self.address}, owner={self.owner.address})"


class ContractRegistry:
    """Per-simulator table of deployed contracts, factories and aliases."""

    def __init__(self) -> None:
        self._by_address: Dict[Address, ContractHandle] = {}
        self._by_type: Dict[type, ContractHandle] = {}
        self._by_instance: Dict[int, ContractHandle] = {}
        self._aliases: Dict[type, type] = {}
        self._factories: Dict[type, Factory] = {}

    # ---- factories ---- #

    def register_factory(self, contract_type: type, factory: Factory) -> None:
        """
        Register the single factory used to build `contract_type`.
        A second registration for the same type is a ConfigurationError.
        """
        if not isinstance(contract_type, type):
            raise ConfigurationError(f"contract type must be a class, got {contract_type!r}")
        if not callable(factory):
            raise ConfigurationError(f"factory for {contract_type.__name__} is not callable")
        if contract_type in self._factories:
            raise ConfigurationError(
                f"multiple factories registered for {contract_type.__name__}",
                data={"type": contract_type.__qualname__},
            )
        self._factories[contract_type] = factory

    def factory_for(self, contract_type: type) -> Factory:
        factory = self._factories.get(contract_type)
        if factory is not None:
            return factory
        if not isinstance(contract_type, type):
            raise ConfigurationError(f"cannot deploy {contract_type!r}: not a class")
        return contract_type

    # ---- aliases ---- #

    def register_alias(self, alias: type, contract_type: type) -> None:
        """
        Let `alias` (e.g. a base class or interface used in contract code)
        resolve to whatever handle is registered for `contract_type`.
        """
        if not isinstance(alias, type) or not isinstance(contract_type, type):
            raise ConfigurationError("aliases map classes to classes")
        if alias is contract_type:
            raise ConfigurationError(f"{alias.__name__} cannot alias itself")
        existing = self._aliases.get(alias)
        if existing is not None and existing is not contract_type:
            raise ConfigurationError(
                f"{alias.__name__} already aliases {existing.__name__}",
                data={"alias": alias.__qualname__},
            )
        self._aliases[alias] = contract_type

    # ---- registration ---- #

    def register(self, handle: ContractHandle) -> None:
        """Register a fresh handle under its address and concrete type (latest deploy wins the type)."""
        self._by_address[handle.address] = handle
        self._by_type[handle.contract_type] = handle

    def unregister(self, handle: ContractHandle, previous: Optional[ContractHandle] = None) -> None:
        """Drop a handle whose construction failed; `previous` gets the type slot back."""
        self._by_address.pop(handle.address, None)
        if self._by_type.get(handle.contract_type) is handle:
            if previous is None:
                del self._by_type[handle.contract_type]
            else:
                self._by_type[handle.contract_type] = previous

    def bind_instance(self, handle: ContractHandle, instance: Any) -> None:
        handle.instance = instance
        self._by_instance[id(instance)] = handle

    # ---- resolution ---- #

    def type_slot(self, contract_type: type) -> Optional[ContractHandle]:
        """Handle currently registered for exactly `contract_type`, if any."""
        return self._by_type.get(contract_type)

    def by_address(self, address: Address) -> ContractHandle:
        handle = self._by_address.get(address)
        if handle is None:
            raise ContractNotFound(target=str(address))
        return handle

    def by_type(self, caller_type: type) -> ContractHandle:
        handle = self._by_type.get(caller_type)
        if handle is not None:
            return handle
        target = self._aliases.get(caller_type)
        if target is not None and target in self._by_type:
            return self._by_type[target]
        raise ContractNotFound(f"{caller_type.__name__} not found", target=caller_type.__qualname__)

    def by_caller(self, caller: Any) -> ContractHandle:
        """
        Resolve the calling contract from a handle, a deployed instance or a type.
        """
        if isinstance(caller, ContractHandle):
            return caller
        if isinstance(caller, type):
            return self.by_type(caller)
        handle = self._by_instance.get(id(caller))
        if handle is not None and handle.instance is caller:
            return handle
        raise ContractNotFound(
            f"{type(caller).__name__} instance is not a deployed contract",
            target=type(caller).__qualname__,
        )

    # ---- introspection ---- #

    def __contains__(self, address: object) -> bool:
        return address in self._by_address

    def __len__(self) -> int:
        return len(self._by_address)

    def __iter__(self) -> Iterator[ContractHandle]:
        return iter(self._by_address.values())

    def aliases(self) -> Tuple[Tuple[type, type], ...]:
        return tuple(self._aliases.items())


__all__ = [
    "Factory",
    "ContractHandle",
    "ContractRegistry",
]
