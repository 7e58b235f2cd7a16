"""Money helpers - amounts are integer minor units (cents) throughout"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Union

from bijoux_ledger.domain.exceptions import InvalidAmountError, InvalidCostError

CENTS_PER_UNIT = 100

AmountInput = Union[int, str, Decimal]


def to_cents(value: AmountInput) -> int:
    """
    Convert a major-unit amount ("6000", "12.5", Decimal("3.335")) to cents.

    Rounds half up to the nearest cent. Integers are taken as major units.

    Raises:
        InvalidAmountError: If the value cannot be parsed as a number
    """
    try:
        amount = Decimal(str(value).replace(",", "").strip())
    except (InvalidOperation, ValueError) as e:
        raise InvalidAmountError(f"Not a money amount: {value!r}") from e
    if not amount.is_finite():
        raise InvalidAmountError(f"Not a money amount: {value!r}")
    return int((amount * CENTS_PER_UNIT).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def format_currency(amount_cents: int, label: str = "FRW") -> str:
    """
    Format cents for display with thousands separators.

    Whole amounts drop the fractional part: 600000 -> "6,000 FRW".
    """
    sign = "-" if amount_cents < 0 else ""
    units, cents = divmod(abs(amount_cents), CENTS_PER_UNIT)
    text = f"{units:,}" if cents == 0 else f"{units:,}.{cents:02d}"
    return f"{sign}{text} {label}"


def require_positive(amount_cents: int, what: str = "amount") -> int:
    """Reject zero and negative amounts"""
    if not isinstance(amount_cents, int) or isinstance(amount_cents, bool):
        raise InvalidAmountError(f"{what} must be an integer number of cents")
    if amount_cents <= 0:
        raise InvalidAmountError(f"{what} must be positive, got {amount_cents}")
    return amount_cents


def require_cost(cost_cents: int) -> int:
    """Cost basis may be zero but never negative"""
    if not isinstance(cost_cents, int) or isinstance(cost_cents, bool):
        raise InvalidCostError("cost must be an integer number of cents")
    if cost_cents < 0:
        raise InvalidCostError(f"cost must not be negative, got {cost_cents}")
    return cost_cents
