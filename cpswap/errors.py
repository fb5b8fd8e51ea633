"""Engine error classes.

Every failed operation raises one of these. Nothing is committed when
an error is raised and the engine never retries on its own.
"""


class AmmError(Exception):
    """Base error for pool engine operations."""

    pass


class NotFound(AmmError):
    """Fee schedule, pool, mint or account does not exist."""

    pass


class AlreadyExists(AmmError):
    """A fee schedule already occupies this index."""

    pass


class InvalidFeeSplit(AmmError):
    """Fee rates are out of range or carve-outs exceed the trade fee."""

    pass


class PoolExists(AmmError):
    """A pool for this schedule and mint pair is already initialized."""

    pass


class PoolCreationDisabled(AmmError):
    """The fee schedule does not allow new pools."""

    pass


class InsufficientInitialLiquidity(AmmError):
    """Initial deposit is too small to bootstrap the pool."""

    pass


class SlippageExceeded(AmmError):
    """Computed amount is beyond the caller's limit."""

    pass


class InvalidAmount(AmmError):
    """Amount or argument is not acceptable for this operation."""

    pass


class InsufficientSupply(AmmError):
    """LP amount exceeds the caller's balance or the pool supply."""

    pass


class InsufficientFunds(AmmError):
    """Token account balance is too low for a transfer."""

    pass


class InsufficientLiquidity(AmmError):
    """Requested output would empty the reserve."""

    pass


class ZeroAmount(AmmError):
    """Amount nets to zero after fees or rounding."""

    pass


class PoolPaused(AmmError):
    """Operation class is disabled by the pool status."""

    pass


class PoolNotOpen(AmmError):
    """Swaps are not allowed before the pool open time."""

    pass


class InvariantViolation(AmmError):
    """Constant product decreased across a swap."""

    pass


class Unauthorized(AmmError):
    """Caller is not the engine admin."""

    pass


class ArithmeticOverflow(AmmError, ArithmeticError):
    """Intermediate result left the u64/u128 range, underflowed or divided by zero."""

    pass
