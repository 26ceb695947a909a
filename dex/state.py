"""Reserve bookkeeping for a two-asset pool."""

from __future__ import annotations

from dataclasses import dataclass, replace

from dex.errors import InvariantViolation


@dataclass
class ReserveState:
    """Authoritative reserve quantities and share supply of a pool.

    Created empty and mutated only by the pool that owns it. The pool is
    either fully empty (both reserves and the share supply are zero) or fully
    funded (both reserves and the share supply are positive).
    """

    reserve_a: int = 0
    reserve_b: int = 0
    total_liquidity: int = 0

    @property
    def k(self) -> int:
        """Constant-product invariant reserve_a * reserve_b."""
        return self.reserve_a * self.reserve_b

    @property
    def is_empty(self) -> bool:
        return self.total_liquidity == 0

    def snapshot(self) -> ReserveState:
        """Return an independent copy of the current values."""
        return replace(self)

    def restore(self, snapshot: ReserveState) -> None:
        """Overwrite the current values with a snapshot."""
        self.reserve_a = snapshot.reserve_a
        self.reserve_b = snapshot.reserve_b
        self.total_liquidity = snapshot.total_liquidity

    def check_invariants(self) -> None:
        """Verify non-negativity and the empty-iff-no-shares invariant.

        Raises:
            InvariantViolation: If any value is negative, or reserves and
                share supply disagree about whether the pool is empty
        """
        if self.reserve_a < 0 or self.reserve_b < 0 or self.total_liquidity < 0:
            raise InvariantViolation(f"Negative pool state: {self}")

        if self.total_liquidity == 0:
            if self.reserve_a != 0 or self.reserve_b != 0:
                raise InvariantViolation(f"Reserves without outstanding shares: {self}")
        elif self.reserve_a == 0 or self.reserve_b == 0:
            raise InvariantViolation(f"Outstanding shares with an empty reserve: {self}")
