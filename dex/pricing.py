"""Constant-product pricing.

The pool keeps reserve_a * reserve_b = k, charging a proportional fee on
swap inputs. Every function here is pure: reserves are passed in explicitly
and nothing is mutated, so quotes can be simulated off-pool.

All divisions floor. Flooring always rounds in the pool's favour (less
output, fewer minted shares, smaller withdrawals), which is what keeps k
non-decreasing across swaps. Do not switch to round-to-nearest.
"""

from __future__ import annotations

from dex.config import DEFAULT_POOL_CONFIG, PoolConfig
from dex.errors import InsufficientLiquidity, InvalidAmount, ZeroAmount
from dex.safe_int import S


class ConstantProductPricing:
    """Swap, price and liquidity math for a two-asset constant-product pool.

    Formula: amount_out = (amount_in * num * reserve_out) / (reserve_in * den + amount_in * num)

    With the default 997/1000 ratio this is the 0.3% fee constant-product swap.
    """

    def __init__(self, config: PoolConfig = DEFAULT_POOL_CONFIG) -> None:
        self.config = config

    @property
    def fee_numerator(self) -> int:
        return self.config.fee_numerator

    @property
    def fee_denominator(self) -> int:
        return self.config.fee_denominator

    def get_amount_out(self, amount_in: int, reserve_in: int, reserve_out: int) -> int:
        """Calculate swap output for an exact input.

        Args:
            amount_in: Input asset amount
            reserve_in: Reserve of the input asset
            reserve_out: Reserve of the output asset

        Returns:
            Output amount, always strictly below reserve_out

        Raises:
            InvalidAmount: If amount_in is not positive
            InsufficientLiquidity: If either reserve is empty
        """
        if amount_in <= 0:
            raise InvalidAmount(f"Swap input must be positive: {amount_in}")
        if reserve_in <= 0 or reserve_out <= 0:
            raise InsufficientLiquidity(
                f"Empty reserves: reserve_in={reserve_in}, reserve_out={reserve_out}"
            )

        amount_in_with_fee = S(amount_in) * S(self.fee_numerator)
        numerator = amount_in_with_fee * S(reserve_out)
        denominator = S(reserve_in) * S(self.fee_denominator) + amount_in_with_fee

        return (numerator // denominator).value

    def get_amount_in(self, amount_out: int, reserve_in: int, reserve_out: int) -> int:
        """Calculate the input required for an exact output.

        Formula: amount_in = (reserve_in * out * den) / ((reserve_out - out) * num) + 1

        The trailing +1 rounds up, so swapping the returned amount yields at
        least amount_out.

        Raises:
            InvalidAmount: If amount_out is not positive
            InsufficientLiquidity: If either reserve is empty or amount_out
                would drain the output reserve
        """
        if amount_out <= 0:
            raise InvalidAmount(f"Requested output must be positive: {amount_out}")
        if reserve_in <= 0 or reserve_out <= 0:
            raise InsufficientLiquidity(
                f"Empty reserves: reserve_in={reserve_in}, reserve_out={reserve_out}"
            )
        if amount_out >= reserve_out:
            raise InsufficientLiquidity(
                f"Requested output {amount_out} reaches reserve {reserve_out}"
            )

        numerator = S(reserve_in) * S(amount_out) * S(self.fee_denominator)
        denominator = (S(reserve_out) - S(amount_out)) * S(self.fee_numerator)

        return ((numerator // denominator) + S(1)).value

    def get_price(self, reserve_a: int, reserve_b: int) -> int:
        """Price of one unit of A in B, scaled by config.price_scale.

        Returns 0 when reserve_a is empty: an empty pool has no price, which
        is a normal state and not an error.
        """
        if reserve_a == 0:
            return 0
        return (S(reserve_b) * S(self.config.price_scale) // S(reserve_a)).value

    def quote(self, amount_a: int, reserve_a: int, reserve_b: int) -> int:
        """Amount of B matching amount_a at the current reserve ratio.

        Raises:
            ZeroAmount: If amount_a is not positive
            InsufficientLiquidity: If either reserve is empty
        """
        if amount_a <= 0:
            raise ZeroAmount(f"Quote amount must be positive: {amount_a}")
        if reserve_a <= 0 or reserve_b <= 0:
            raise InsufficientLiquidity(
                f"Empty reserves: reserve_a={reserve_a}, reserve_b={reserve_b}"
            )
        return (S(amount_a) * S(reserve_b) // S(reserve_a)).value

    def quote_liquidity(
        self,
        amount_a: int,
        amount_b: int,
        reserve_a: int,
        reserve_b: int,
    ) -> tuple[int, int]:
        """Pick the amounts of a deposit actually taken into the pool.

        An empty pool takes both amounts as given, which sets its initial
        ratio. Otherwise the deposit is fitted to the current ratio: if the B
        matching all of amount_a fits inside amount_b, use it; if not, use the
        A matching all of amount_b. Neither result exceeds what the caller
        offered.

        Returns:
            Tuple of (used_a, used_b)
        """
        if reserve_a == 0 and reserve_b == 0:
            return amount_a, amount_b

        amount_b_optimal = self.quote(amount_a, reserve_a, reserve_b)
        if amount_b_optimal <= amount_b:
            return amount_a, amount_b_optimal

        amount_a_optimal = self.quote(amount_b, reserve_b, reserve_a)
        # amount_b_optimal > amount_b implies amount_a_optimal <= amount_a
        return amount_a_optimal, amount_b

    def liquidity_to_mint(
        self,
        used_a: int,
        used_b: int,
        reserve_a: int,
        reserve_b: int,
        total_liquidity: int,
    ) -> int:
        """Shares minted for a deposit of (used_a, used_b).

        The first deposit mints the geometric mean sqrt(used_a * used_b).
        Later deposits mint the smaller of the two proportional claims, so a
        deposit off the pool ratio never mints more than its binding side.
        """
        if total_liquidity == 0:
            return (S(used_a) * S(used_b)).isqrt().value

        share_a = S(used_a) * S(total_liquidity) // S(reserve_a)
        share_b = S(used_b) * S(total_liquidity) // S(reserve_b)
        return share_a.min(share_b).value

    def amounts_for_shares(
        self,
        shares: int,
        reserve_a: int,
        reserve_b: int,
        total_liquidity: int,
    ) -> tuple[int, int]:
        """Reserves claimed by burning shares, floored in the pool's favour."""
        supply = S(total_liquidity)
        amount_a = S(reserve_a) * S(shares) // supply
        amount_b = S(reserve_b) * S(shares) // supply
        return amount_a.value, amount_b.value


# Singleton instance
constant_product = ConstantProductPricing()


__all__ = [
    "ConstantProductPricing",
    "constant_product",
]
