from decimal import ROUND_DOWN, Decimal, InvalidOperation
from typing import Union

from .errors import ValidationError

Number = Union[Decimal, int, str]

# Pool balances are kept in whole cents.
MONEY_QUANT = Decimal("0.01")
ZERO = Decimal("0")
# Money columns are max_digits=20, decimal_places=2: at most 18 integer digits.
MAX_MONEY = Decimal(10) ** 18


def to_decimal(x: Number, field: str = "amount") -> Decimal:
    """
    Parse a finite decimal from a Decimal, int or numeric string.

    Floats and bools are rejected: binary floats cannot represent most cent
    values and a bool is never a meaningful amount. Magnitudes that do not
    fit a money column are rejected too.
    """
    if isinstance(x, bool) or not isinstance(x, (Decimal, int, str)):
        raise ValidationError(f"{field} must be a numeric string, got={x!r}")
    try:
        value = x if isinstance(x, Decimal) else Decimal(str(x).strip())
    except (InvalidOperation, ValueError) as e:
        raise ValidationError(f"{field} must be a numeric string, got={x!r}") from e
    if not value.is_finite():
        raise ValidationError(f"{field} must be finite, got={x!r}")
    if abs(value) >= MAX_MONEY:
        raise ValidationError(f"{field} is out of range, got={x!r}")
    return value


def quantize_money(x: Decimal) -> Decimal:
    # Round down so computed payouts never exceed what the pool holds.
    try:
        value = x.quantize(MONEY_QUANT, rounding=ROUND_DOWN)
    except InvalidOperation as e:
        raise ValidationError(f"amount is out of range, got={x!r}") from e
    if abs(value) >= MAX_MONEY:
        raise ValidationError(f"amount is out of range, got={x!r}")
    return value
