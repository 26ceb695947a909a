"""Fungible asset ledgers the pool moves funds through.

The pool only depends on the AssetLedger protocol. InMemoryAssetLedger is a
process-local implementation used to bootstrap the API and in tests; it plays
the role of a mintable token with balances and allowances.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

import structlog

from dex.errors import TransferFailed
from dex.models.types import normalize_address
from dex.safe_int import S

logger = structlog.get_logger()


@runtime_checkable
class AssetLedger(Protocol):
    """Balance and allowance store for one asset.

    Every call names the acting account explicitly. Transfers either move the
    full amount or raise TransferFailed without side effects.
    """

    symbol: str

    def balance_of(self, account: str) -> int:
        """Return the balance held by account."""
        ...

    def transfer(self, sender: str, to: str, amount: int) -> None:
        """Move amount from sender to to.

        Raises:
            TransferFailed: If sender's balance is insufficient
        """
        ...

    def transfer_from(self, spender: str, owner: str, to: str, amount: int) -> None:
        """Move amount from owner to to, spending spender's allowance.

        Raises:
            TransferFailed: If owner's balance or spender's allowance is insufficient
        """
        ...


class InMemoryAssetLedger:
    """Mintable asset ledger kept in process memory.

    Zero balances and allowances are dropped to keep the tables sparse.
    """

    def __init__(self, symbol: str, name: str | None = None) -> None:
        self.symbol = symbol
        self.name = name or symbol
        self._balances: dict[str, int] = {}
        self._allowances: dict[tuple[str, str], int] = {}
        self._total_supply = 0

    def __repr__(self) -> str:
        return f"InMemoryAssetLedger({self.symbol!r}, holders={len(self._balances)})"

    @property
    def total_supply(self) -> int:
        return self._total_supply

    def balance_of(self, account: str) -> int:
        return self._balances.get(normalize_address(account), 0)

    def allowance(self, owner: str, spender: str) -> int:
        return self._allowances.get((normalize_address(owner), normalize_address(spender)), 0)

    def mint(self, to: str, amount: int) -> None:
        """Create amount new units for to."""
        if amount < 0:
            raise ValueError(f"Mint amount cannot be negative: {amount}")
        to_norm = normalize_address(to)
        self._set_balance(to_norm, (S(self.balance_of(to_norm)) + S(amount)).to_uint256())
        self._total_supply = (S(self._total_supply) + S(amount)).to_uint256()
        logger.debug("asset_minted", symbol=self.symbol, to=to_norm, amount=amount)

    def approve(self, owner: str, spender: str, amount: int) -> None:
        """Let spender move up to amount of owner's balance (replaces any previous allowance)."""
        if amount < 0:
            raise ValueError(f"Allowance cannot be negative: {amount}")
        key = (normalize_address(owner), normalize_address(spender))
        if amount == 0:
            self._allowances.pop(key, None)
        else:
            self._allowances[key] = S(amount).to_uint256()

    def transfer(self, sender: str, to: str, amount: int) -> None:
        self._move(normalize_address(sender), normalize_address(to), amount)

    def transfer_from(self, spender: str, owner: str, to: str, amount: int) -> None:
        owner_norm = normalize_address(owner)
        spender_norm = normalize_address(spender)
        allowed = self.allowance(owner_norm, spender_norm)
        if allowed < amount:
            raise TransferFailed(
                f"{self.symbol}: allowance {allowed} of {spender_norm} "
                f"for {owner_norm} is below {amount}"
            )
        self._move(owner_norm, normalize_address(to), amount)
        self.approve(owner_norm, spender_norm, allowed - amount)

    def _move(self, sender: str, to: str, amount: int) -> None:
        if amount < 0:
            raise TransferFailed(f"{self.symbol}: negative transfer amount {amount}")
        balance = self.balance_of(sender)
        if balance < amount:
            raise TransferFailed(
                f"{self.symbol}: balance {balance} of {sender} is below {amount}"
            )
        self._set_balance(sender, balance - amount)
        self._set_balance(to, (S(self.balance_of(to)) + S(amount)).to_uint256())

    def _set_balance(self, account: str, amount: int) -> None:
        if amount == 0:
            self._balances.pop(account, None)
        else:
            self._balances[account] = amount
