"""Liquidity share balances per provider."""

from __future__ import annotations

from dex.errors import InsufficientShares, InvariantViolation, ZeroAmount
from dex.models.types import normalize_address
from dex.safe_int import S
from dex.state import ReserveState


class LiquidityLedger:
    """Mapping of provider -> share balance.

    Minting and burning keep the share supply on the bound ReserveState in
    step with the positions, so that the positions always sum to
    ``state.total_liquidity``. Zero positions are dropped.
    """

    def __init__(self, state: ReserveState) -> None:
        self._state = state
        self._positions: dict[str, int] = {}

    def __len__(self) -> int:
        return len(self._positions)

    def __repr__(self) -> str:
        return f"LiquidityLedger({len(self._positions)} positions)"

    def balance_of(self, provider: str) -> int:
        """Return the share balance of provider (0 if none)."""
        return self._positions.get(normalize_address(provider), 0)

    def positions(self) -> dict[str, int]:
        return dict(self._positions)

    def total(self) -> int:
        """Sum of all positions."""
        return sum(self._positions.values())

    def mint(self, provider: str, amount: int) -> None:
        """Credit amount new shares to provider.

        Raises:
            ZeroAmount: If amount is not positive
        """
        if amount <= 0:
            raise ZeroAmount(f"Cannot mint {amount} shares")
        key = normalize_address(provider)
        self._positions[key] = (S(self._positions.get(key, 0)) + S(amount)).to_uint256()
        self._state.total_liquidity = (S(self._state.total_liquidity) + S(amount)).to_uint256()

    def burn(self, provider: str, amount: int) -> None:
        """Destroy amount of provider's shares.

        Raises:
            ZeroAmount: If amount is not positive
            InsufficientShares: If provider holds fewer than amount shares
        """
        if amount <= 0:
            raise ZeroAmount(f"Cannot burn {amount} shares")
        key = normalize_address(provider)
        balance = self._positions.get(key, 0)
        if amount > balance:
            raise InsufficientShares(f"{key} holds {balance} shares, cannot burn {amount}")

        remaining = balance - amount
        if remaining:
            self._positions[key] = remaining
        else:
            del self._positions[key]
        self._state.total_liquidity = (S(self._state.total_liquidity) - S(amount)).value

    def snapshot(self) -> dict[str, int]:
        return dict(self._positions)

    def restore(self, snapshot: dict[str, int]) -> None:
        """Replace all positions with a snapshot (share supply is restored by the owner)."""
        self._positions = dict(snapshot)

    def verify_conservation(self) -> None:
        """Check that positions sum to the outstanding share supply.

        Raises:
            InvariantViolation: If they differ
        """
        total = self.total()
        if total != self._state.total_liquidity:
            raise InvariantViolation(
                f"Positions sum to {total} but share supply is {self._state.total_liquidity}"
            )
