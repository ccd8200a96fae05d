# toolroom/core/numbers.py
import math
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext
from typing import Annotated

from pydantic import BeforeValidator


def to_float(value: object) -> float:
    """Coerce form input to float. Anything that is not a finite number is 0."""
    if isinstance(value, bool):
        return float(value)
    try:
        number = float(str(value).strip().replace(",", ".")) if value is not None else 0.0
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(number) or math.isinf(number):
        return 0.0
    return number


def to_decimal(value: object) -> Decimal:
    try:
        number = Decimal(str(value).strip().replace(",", ".")) if value is not None else Decimal("0")
    except (InvalidOperation, ValueError):
        return Decimal("0")
    if not number.is_finite():
        return Decimal("0")
    return number


def to_int(value: object) -> int:
    return int(to_float(value))


def _quantize(value: Decimal, quantum: Decimal) -> Decimal:
    if not value.is_finite():
        return Decimal("0")
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, value.adjusted() - quantum.adjusted() + 2)
        return value.quantize(quantum, rounding=ROUND_HALF_UP)


def round_half_up(value: float, digits: int = 0) -> float:
    """Half-up rounding, the way calculator screens round (2.5 -> 3)."""
    return float(_quantize(Decimal(repr(float(value))), Decimal(1).scaleb(-digits)))


def round_int(value: float) -> int:
    return int(round_half_up(value, 0))


def money(value: Decimal) -> Decimal:
    return _quantize(Decimal(value), Decimal("0.01"))


def round_decimal(value: Decimal, places: int) -> Decimal:
    return _quantize(Decimal(value), Decimal(1).scaleb(-places))


def safe_div(numerator: float, denominator: float) -> float:
    if not denominator:
        return 0.0
    return numerator / denominator


def safe_pow(base: float, exponent: float) -> float:
    """math.pow that overflows to inf instead of raising."""
    try:
        return math.pow(base, exponent)
    except OverflowError:
        return math.inf


def floor_int(value: float) -> int:
    return math.floor(value) if math.isfinite(value) else 0


def ceil_int(value: float) -> int:
    return math.ceil(value) if math.isfinite(value) else 0


# Pydantic field types: invalid numeric form input becomes 0 instead of a 422
LenientFloat = Annotated[float, BeforeValidator(to_float)]
LenientInt = Annotated[int, BeforeValidator(to_int)]
LenientDecimal = Annotated[Decimal, BeforeValidator(to_decimal)]
