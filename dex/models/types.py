"""Shared type definitions for pool events and API payloads."""

import re
from typing import Annotated, Any

from pydantic import BeforeValidator, Field

from dex.safe_int import UINT256_MAX


def validate_uint256(value: Any) -> int:
    """Validate that a value is a uint256 amount.

    Accepts ints and decimal strings, since ledger amounts routinely exceed
    what JSON clients can represent as numbers.

    Args:
        value: Value to validate (int or decimal string)

    Returns:
        The amount as int

    Raises:
        ValueError: If value is not a non-negative integer within uint256 range
    """
    if isinstance(value, bool):
        raise ValueError("Uint256 must be an integer, got bool")

    if isinstance(value, str):
        try:
            value = int(value)
        except ValueError as err:
            raise ValueError(f"Uint256 must be a decimal integer string: '{value}'") from err

    if not isinstance(value, int):
        raise ValueError(f"Uint256 must be string or int, got {type(value).__name__}")

    if value < 0:
        raise ValueError(f"Uint256 cannot be negative: {value}")
    if value > UINT256_MAX:
        raise ValueError(f"Uint256 overflow: {value} > 2^256-1")

    return value


# Account address: 0x followed by 40 hex digits, any case
ADDRESS_PATTERN = r"^0x[a-fA-F0-9]{40}$"
_ADDRESS_RE = re.compile(ADDRESS_PATTERN)

Address = Annotated[str, Field(pattern=ADDRESS_PATTERN)]

# 256-bit unsigned integer, accepted as int or decimal string
Uint256 = Annotated[
    int,
    BeforeValidator(validate_uint256),
    Field(description="256-bit unsigned integer"),
]


def normalize_address(address: str, *, validate: bool = False) -> str:
    """Canonical form of an account: lowercase, 0x-prefixed.

    Balances and share positions are keyed by this form, so "0xAB.." and
    "ab.." name the same account. With validate=True a malformed address
    raises ValueError instead of being keyed as-is.
    """
    canonical = address.lower()
    if not canonical.startswith("0x"):
        canonical = f"0x{canonical}"
    if validate and not is_valid_address(canonical):
        raise ValueError(f"Invalid address: {address}")
    return canonical


def is_valid_address(address: str) -> bool:
    return isinstance(address, str) and _ADDRESS_RE.fullmatch(address) is not None
