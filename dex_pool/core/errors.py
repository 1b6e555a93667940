"""Pool error taxonomy.

Every error here describes a caller-correctable input or state precondition.
A raised error always leaves the pool exactly as it was before the call.
"""


class PoolError(Exception):
    """Base class for all pool failures."""


class InvalidAmount(PoolError, ValueError):
    """A supplied amount is zero, negative, or not an integer."""


class NoLiquidity(PoolError):
    """The operation requires an active pool but the reserves are empty."""


class InsufficientLiquidity(PoolError):
    """A pricing input reserve is empty or a withdrawal share truncated to zero."""


class InsufficientMintedClaims(PoolError):
    """A deposit is too small to mint a nonzero number of claims."""


class InsufficientOutput(PoolError):
    """A swap input is too small to produce any output."""


class InsufficientBalance(PoolError):
    """A holder tried to burn more claims than they own."""


class TransferFailed(PoolError):
    """The custody collaborator declined a pull or push."""


class ArithmeticOverflow(PoolError, OverflowError):
    """An amount or resulting counter exceeds the configured integer bound."""


class ReentrantCall(PoolError, RuntimeError):
    """A state-changing call was made while another operation on the pool is in progress."""
