import math
import numbers
import re
from decimal import Context, Decimal, ROUND_HALF_UP

from Expressions.errors import InvalidNumber, InvalidVariableName

DECIMAL_PLACES = 5
_QUANTUM = Decimal(1).scaleb(-DECIMAL_PLACES)
# Wide enough for the largest finite double plus the decimal places.
_CONTEXT = Context(prec=400)

VARIABLE_PATTERN = re.compile(r'[A-Za-z]+')


def format_number(num: float) -> str:
    """Render ``num`` with exactly DECIMAL_PLACES decimals.

    Rounding starts from the float's shortest decimal form (``repr``), so
    0.3 renders as ``0.30000`` and not ``0.29999``. Re-reading the rendered
    text and rendering it again gives the same string.
    """
    quantized = Decimal(repr(num)).quantize(_QUANTUM, rounding=ROUND_HALF_UP, context=_CONTEXT)
    return f"{quantized:f}"


def number_key(num: float) -> str:
    # Two numbers are the same constant iff their keys match.
    return format_number(num)


ZERO_KEY = number_key(0.0)
ONE_KEY = number_key(1.0)


def is_zero(num: float) -> bool:
    return number_key(num) == ZERO_KEY


def is_one(num: float) -> bool:
    return number_key(num) == ONE_KEY


def check_number(num) -> float:
    """Return ``num`` as a float, rejecting negative and non-finite values."""
    if isinstance(num, bool) or not isinstance(num, numbers.Real):
        raise InvalidNumber(f"Not a number: {num!r}")
    try:
        value = float(num)
    except (OverflowError, ValueError) as e:
        raise InvalidNumber(f"{type(num).__name__} value does not fit in a float") from e
    if math.isnan(value) or math.isinf(value):
        raise InvalidNumber(f"Number must be finite, got {num!r}")
    if value < 0:
        raise InvalidNumber(f"Number must be non-negative, got {num!r}")
    # -0.0 + 0.0 == 0.0
    return value + 0.0


def check_variable_name(name) -> str:
    if not isinstance(name, str) or not VARIABLE_PATTERN.fullmatch(name):
        raise InvalidVariableName(f"Invalid variable name {name!r}. Variables must be non-empty strings of letters.")
    return name
