# stockledger/core/quantities.py
from decimal import Context, Decimal, DivisionByZero, Inexact, InvalidOperation, Overflow
from typing import Any

from stockledger.core.errors import InvalidInputError

ZERO = Decimal("0")

# Largest number of significant digits accepted from a request.
MAX_DIGITS = 28

# Arithmetic on quantities never rounds: anything that would lose digits
# raises Inexact instead.
QUANTITY_CONTEXT = Context(
    prec=2 * MAX_DIGITS + 8,
    traps=[InvalidOperation, Inexact, Overflow, DivisionByZero],
)


def normalize_quantity(value: Decimal) -> Decimal:
    """Drop trailing zeros without switching to exponent notation."""
    return Decimal(format(value.normalize(QUANTITY_CONTEXT), "f"))


def add_quantities(a: Decimal, b: Decimal, field: str) -> Decimal:
    try:
        return normalize_quantity(QUANTITY_CONTEXT.add(a, b))
    except (Inexact, Overflow):
        raise InvalidInputError(f"{field} is out of range", field=field) from None


def subtract_quantities(a: Decimal, b: Decimal, field: str) -> Decimal:
    try:
        return normalize_quantity(QUANTITY_CONTEXT.subtract(a, b))
    except (Inexact, Overflow):
        raise InvalidInputError(f"{field} is out of range", field=field) from None


def to_decimal(value: Any) -> Decimal:
    """Convert a raw request value to Decimal.

    Floats go through their shortest repr so 0.1 becomes Decimal("0.1")
    rather than the binary approximation. Raises InvalidOperation/TypeError
    for anything that is not a number.
    """
    if isinstance(value, bool):
        raise TypeError("booleans are not quantities")
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(repr(value))
    if isinstance(value, int):
        return Decimal(value)
    if isinstance(value, str):
        return Decimal(value.strip())
    raise TypeError(f"unsupported quantity type {type(value).__name__}")


def is_missing(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def parse_quantity(value: Any, field: str, invalid_message: str) -> Decimal:
    """Parse a required finite quantity or raise InvalidInputError.

    A missing value and a malformed one are reported with different
    messages; range checks are left to the caller. Values with more than
    MAX_DIGITS significant digits are rejected rather than rounded.
    """
    if is_missing(value):
        raise InvalidInputError(f"Missing required field: {field}", field=field)
    try:
        qty = to_decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        raise InvalidInputError(invalid_message, field=field) from None
    if not qty.is_finite():
        raise InvalidInputError(invalid_message, field=field)
    too_long = InvalidInputError(
        f"{field} must have at most {MAX_DIGITS} significant digits",
        field=field,
    )
    try:
        qty = normalize_quantity(qty)
    except (Inexact, Overflow):
        raise too_long from None
    if len(qty.as_tuple().digits) > MAX_DIGITS:
        raise too_long
    return qty


def to_decimal_or_zero(value: Any) -> Decimal:
    """Lenient conversion for stored pass-through text such as stock_up."""
    if is_missing(value):
        return ZERO
    try:
        qty = to_decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        return ZERO
    return qty if qty.is_finite() else ZERO
