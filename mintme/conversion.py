"""
Unit conversion between SOL and lamports, and between whole tokens and their
base units. All arithmetic goes through Decimal so amounts are never truncated
by binary floating point.
"""
from decimal import Context, Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Union

from mintme.constants import LAMPORTS_PER_SOL

Amount = Union[int, float, str, Decimal]

# u64 amounts scaled by 10**9 need 29 significant digits, more than the
# default context keeps.
_CTX = Context(prec=60)


def _to_decimal(amount: Amount) -> Decimal:
    if isinstance(amount, bool):
        raise ValueError("Amount must be a number, not a boolean")
    if isinstance(amount, float):
        # str() gives the shortest repr, so 0.1 becomes Decimal("0.1")
        amount = str(amount)
    try:
        value = Decimal(amount)
    except InvalidOperation:
        raise ValueError(f"Invalid amount: {amount!r}")
    if not value.is_finite():
        raise ValueError(f"Amount must be finite: {amount!r}")
    return value


def _round(value: Decimal) -> int:
    return int(value.to_integral_value(rounding=ROUND_HALF_UP, context=_CTX))


def sol_to_lamports(sol_amount: Amount) -> int:
    """Converts SOL to lamports, rounding to the nearest lamport."""
    return _round(_CTX.multiply(_to_decimal(sol_amount), Decimal(LAMPORTS_PER_SOL)))


def lamports_to_sol(lamports: int) -> Decimal:
    """Converts lamports to SOL."""
    return _CTX.divide(Decimal(int(lamports)), Decimal(LAMPORTS_PER_SOL))


def format_sol_amount(lamports: int, decimals: int = 4) -> str:
    """Formats lamports for display, e.g. 1500000000 -> "1.5000 SOL"."""
    sol = lamports_to_sol(lamports).quantize(Decimal(1).scaleb(-decimals), rounding=ROUND_HALF_UP, context=_CTX)
    return f"{sol:.{decimals}f} SOL"


def to_token_base_units(amount: Amount, decimals: int) -> int:
    """Converts a whole-token amount to base units using the token's decimals."""
    return _round(_CTX.multiply(_to_decimal(amount), _CTX.power(Decimal(10), int(decimals))))


def from_token_base_units(amount: int, decimals: int) -> Decimal:
    """Converts base units back to a whole-token amount."""
    return _CTX.divide(Decimal(int(amount)), _CTX.power(Decimal(10), int(decimals)))
