"""
contract_sim.state.accounts — Account records and the per-simulator registry.

An Account holds:

- address:  value-equal `Address` (hx… for EOAs, cx… for contracts)
- balances: symbol → non-negative integer amount in the smallest unit

The registry is owned by one ServiceManager instance; there is no global
account table. Addresses come from a single allocation counter (starting at 1)
shared by externally-owned and contract accounts, so every address in a run is
distinct and reproducible.

All arithmetic is exact (Python ints) and deterministic.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator, Optional

from ..errors import InsufficientBalance, NegativeAmount, NoAccount
from ..types.address import Address

DEFAULT_SYMBOL = "ICX"


def _ensure_non_negative(amount: int) -> int:
    if not isinstance(amount, int) or isinstance(amount, bool):
        raise TypeError(f"amount must be int, got {type(amount).__name__}")
    if amount < 0:
        raise NegativeAmount(amount)
    return amount


# --------------------------------------------------------------------------- #
# Account
# --------------------------------------------------------------------------- #

@dataclass
class Account:
    """
    A minimal account record with a multi-symbol balance ledger.

    Invariants:
    - every balance is a non-negative int
    - `native_symbol` names the ledger entry used by value transfers
    """
    address: Address
    native_symbol: str = DEFAULT_SYMBOL
    balances: Dict[str, int] = field(default_factory=dict)

    @property
    def is_contract(self) -> bool:
        return self.address.is_contract

    @property
    def balance(self) -> int:
        """Balance in the native symbol."""
        return self.balances.get(self.native_symbol, 0)

    def get_balance(self, symbol: Optional[str] = None) -> int:
        return self.balances.get(symbol or self.native_symbol, 0)

    def add_balance(self, symbol: str, amount: int) -> int:
        """
        Increase the `symbol` balance by `amount` and return the new balance.
        """
        amt = _ensure_non_negative(amount)
        new = self.balances.get(symbol, 0) + amt
        self.balances[symbol] = new
        return new

    def subtract_balance(self, symbol: str, amount: int) -> int:
        """
        Decrease the `symbol` balance by `amount`; raises InsufficientBalance
        (and leaves the balance untouched) if it cannot be covered.
        """
        amt = _ensure_non_negative(amount)
        cur = self.balances.get(symbol, 0)
        if cur < amt:
            raise InsufficientBalance(address=str(self.address), balance=cur, amount=amt)
        self.balances[symbol] = cur - amt
        return cur - amt

    def to_dict(self) -> dict:
        return {
            "address": str(self.address),
            "balances": dict(sorted(self.balances.items())),
        }


# --------------------------------------------------------------------------- #
# Registry
# --------------------------------------------------------------------------- #

class AccountRegistry:
    """
    Address → Account table for one simulator instance.

    Parameters
    ----------
    native_symbol : str
        Ledger symbol credited by `create_external(initial_coins)` and moved by
        transfers.
    decimals : int
        `initial_coins` is scaled by 10**decimals.
    """

    def __init__(self, native_symbol: str = DEFAULT_SYMBOL, decimals: int = 18) -> None:
        self.native_symbol = native_symbol
        self.coin = 10 ** int(decimals)
        self._accounts: Dict[Address, Account] = {}
        self._next_seed = 1

    def _allocate(self, *, contract: bool) -> Account:
        addr = Address.from_seed(self._next_seed, contract=contract)
        self._next_seed += 1
        acct = Account(address=addr, native_symbol=self.native_symbol)
        self._accounts[addr] = acct
        return acct

    # ---- lifecycle ---- #

    def create_external(self, initial_coins: int = 0) -> Account:
        """Create an EOA funded with `initial_coins` whole native coins."""
        acct = self._allocate(contract=False)
        acct.add_balance(self.native_symbol, _ensure_non_negative(initial_coins) * self.coin)
        return acct

    def create_contract(self) -> Account:
        """Create an empty contract account (binding happens in the contract registry)."""
        return self._allocate(contract=True)

    # ---- lookup ---- #

    def get(self, address: Address) -> Optional[Account]:
        return self._accounts.get(address)

    def require(self, address: Address) -> Account:
        acct = self._accounts.get(address)
        if acct is None:
            raise NoAccount(address=str(address))
        return acct

    def is_contract(self, address: Address) -> bool:
        acct = self._accounts.get(address)
        return acct is not None and acct.is_contract

    def __contains__(self, address: object) -> bool:
        return address in self._accounts

    def __len__(self) -> int:
        return len(self._accounts)

    def __iter__(self) -> Iterator[Account]:
        return iter(self._accounts.values())

    def total_supply(self, symbol: Optional[str] = None) -> int:
        """Sum of all balances in `symbol` (native by default)."""
        sym = symbol or self.native_symbol
        return sum(a.get_balance(sym) for a in self._accounts.values())


__all__ = [
    "DEFAULT_SYMBOL",
    "Account",
    "AccountRegistry",
]
