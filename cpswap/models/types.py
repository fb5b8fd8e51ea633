"""Shared type definitions for the API models."""

from typing import Annotated, Any

from pydantic import BeforeValidator, Field

from cpswap.safe_int import U64_MAX


def validate_u64(value: Any) -> int:
    """Validate that a value is a u64 token amount.

    Args:
        value: Value to validate (int or decimal string)

    Returns:
        The amount as int

    Raises:
        ValueError: If value is not a non-negative integer within u64 range
    """
    if isinstance(value, bool):
        raise ValueError("U64 must be an integer, got bool")

    if isinstance(value, str):
        try:
            value = int(value)
        except ValueError as err:
            raise ValueError(f"U64 must be a decimal integer string: '{value}'") from err

    if not isinstance(value, int):
        raise ValueError(f"U64 must be string or int, got {type(value).__name__}")

    if value < 0:
        raise ValueError(f"U64 cannot be negative: {value}")
    if value > U64_MAX:
        raise ValueError(f"U64 overflow: {value} > 2^64-1")

    return value


# 64-bit unsigned token amount; accepts ints or decimal strings
U64 = Annotated[
    int,
    BeforeValidator(validate_u64),
    Field(description="64-bit unsigned integer"),
]

# Fee schedule index
U16 = Annotated[int, Field(ge=0, le=2**16 - 1)]
