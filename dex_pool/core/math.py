"""Integer constant-product pool math.

Every division floors non-negative operands, so rounding always favors the
pool (and therefore existing claim holders) over the caller of a single
operation. Preconditions are checked by the callers in ``core.pool``, except
where a function is part of the public query surface.
"""

from typing import Tuple

from dex_pool.config import DEFAULT_SETTINGS
from dex_pool.core.errors import InsufficientLiquidity, InvalidAmount, NoLiquidity


def _require_int(name: str, value: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidAmount(f"{name} must be an integer, got {value!r}")


def isqrt(n: int) -> int:
    """Integer square root, floor(sqrt(n)).

    Babylonian refinement starting from (n + 1) // 2; iteration stops as soon
    as the candidate stops decreasing.

    Example:
        >>> isqrt(1000 * 1000)
        1000
        >>> isqrt(15)
        3
    """
    if n < 0:
        raise ValueError(f"isqrt requires a non-negative integer, got {n}")
    if n == 0:
        return 0
    z = n
    x = (n + 1) // 2
    while x < z:
        z = x
        x = (n // x + x) // 2
    return z


def quote_amount_out(
    amount_in: int,
    reserve_in: int,
    reserve_out: int,
    fee_numerator: int = DEFAULT_SETTINGS.fee_numerator,
    fee_denominator: int = DEFAULT_SETTINGS.fee_denominator,
) -> int:
    """Output of a constant-product swap with the fee taken from the input.

    amount_in_after_fee = amount_in * 997 // 1000
    amount_out = amount_in_after_fee * reserve_out // (reserve_in + amount_in_after_fee)

    Args:
        amount_in: Gross input amount
        reserve_in: Reserve of the input asset
        reserve_out: Reserve of the output asset

    Returns:
        Output amount; may be 0 for dust inputs

    Raises:
        InvalidAmount: If any argument is not an integer, or amount_in is
            not positive
        InsufficientLiquidity: If either reserve is empty
    """
    _require_int("amount_in", amount_in)
    _require_int("reserve_in", reserve_in)
    _require_int("reserve_out", reserve_out)
    if amount_in <= 0:
        raise InvalidAmount(f"amount_in must be > 0, got {amount_in}")
    if reserve_in <= 0 or reserve_out <= 0:
        raise InsufficientLiquidity(
            f"reserves must be > 0, got ({reserve_in}, {reserve_out})"
        )
    amount_in_after_fee = amount_in * fee_numerator // fee_denominator
    return amount_in_after_fee * reserve_out // (reserve_in + amount_in_after_fee)


def quote_price(
    reserve_x: int,
    reserve_y: int,
    scale: int = DEFAULT_SETTINGS.price_scale,
) -> int:
    """Units of X per unit of Y as a fixed-point integer (18 decimals by default)."""
    _require_int("reserve_x", reserve_x)
    _require_int("reserve_y", reserve_y)
    if reserve_y == 0:
        raise NoLiquidity("cannot price an empty pool")
    return reserve_x * scale // reserve_y


def initial_claims(amount_x: int, amount_y: int) -> int:
    """Claims minted by the first deposit: the geometric mean of the amounts."""
    return isqrt(amount_x * amount_y)


def proportional_claims(
    amount_x: int,
    amount_y: int,
    reserve_x: int,
    reserve_y: int,
    total_claims: int,
) -> int:
    """Claims minted by a deposit into an active pool.

    Takes the smaller of the two per-asset ratios, so a deposit that does not
    match the pool ratio donates its excess instead of diluting holders.
    """
    return min(
        amount_x * total_claims // reserve_x,
        amount_y * total_claims // reserve_y,
    )


def withdrawal_amounts(
    claims: int,
    reserve_x: int,
    reserve_y: int,
    total_claims: int,
) -> Tuple[int, int]:
    """Reserve share paid out for burning ``claims``."""
    return (
        claims * reserve_x // total_claims,
        claims * reserve_y // total_claims,
    )
