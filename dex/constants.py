"""Pool parameters.

The fee is expressed as a ratio: an input of `x` is credited as
`x * FEE_NUMERATOR / FEE_DENOMINATOR` when pricing a swap. 997/1000 is the
classic 0.3% constant-product fee.
"""

FEE_NUMERATOR = 997
FEE_DENOMINATOR = 1000

# Fixed-point scale for prices (price of A in B, 1e18 = 1.0)
PRICE_SCALE = 10**18

# Basis point base used when reporting the fee
BPS_BASE = 10_000

# Events a pool keeps in memory; older ones are only in the log
EVENT_HISTORY_LIMIT = 10_000
