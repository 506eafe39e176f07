"""Decimal to fixed-width unsigned integer conversion.

The wire protocol carries no decimal type, so every price, size and amount
travels as an unsigned integer scaled by ``10**decimals``. Conversion always
rounds DOWN and refuses to silently produce zero from a nonzero input or to
wrap past the integer width.

Each width gets its own decimal context: 20 significant digits and an
exponent range of +/-28 for 64-bit targets, 40 digits and +/-56 for 128-bit
targets. Both hold the full integer range of their width exactly
(2**64 - 1 has 20 digits, 2**128 - 1 has 39), so no double rounding can
occur between scaling and truncation.
"""

from dataclasses import dataclass
from decimal import ROUND_DOWN, Context, Decimal, InvalidOperation, Overflow

from nord.exceptions import ValidationError, ValidationErrorKind
from nord.types import U128

DecimalLike = Decimal | int | str | float

U64_MAX = (1 << 64) - 1
U128_MAX = (1 << 128) - 1


@dataclass(frozen=True)
class ScalingProfile:
    """Decimal working precision for one integer width."""

    bits: int
    precision: int
    exponent: int

    @property
    def max_value(self) -> int:
        return (1 << self.bits) - 1

    def context(self) -> Context:
        return Context(
            prec=self.precision,
            rounding=ROUND_DOWN,
            Emin=-self.exponent,
            Emax=self.exponent,
            traps=[InvalidOperation, Overflow],
        )


PROFILES: dict[int, ScalingProfile] = {
    64: ScalingProfile(bits=64, precision=20, exponent=28),
    128: ScalingProfile(bits=128, precision=40, exponent=56),
}


def _to_decimal(value: DecimalLike) -> Decimal:
    """Convert input to Decimal, going through str() for floats."""
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value)) if isinstance(value, float) else Decimal(value)
    except InvalidOperation as exc:
        raise ValidationError(
            ValidationErrorKind.INVALID_NUMBER, f"{value!r} is not a number"
        ) from exc


def to_scaled(value: DecimalLike, decimals: int, width: int) -> int:
    """Scale a decimal quantity to an unsigned integer of the given width.

    Computes ``floor(value * 10**decimals)``.

    Args:
        value: Non-negative decimal quantity.
        decimals: Number of decimal digits to shift by (>= 0).
        width: Target integer width in bits, 64 or 128.

    Returns:
        The scaled integer, in ``[0, 2**width - 1]``. Zero only when
        ``value`` is exactly zero.

    Raises:
        ValidationError: NEGATIVE, PRECISION_LOSS (nonzero input truncates
            to zero), OUT_OF_RANGE (result exceeds the width), INVALID_DECIMALS
            or INVALID_NUMBER.
    """
    profile = PROFILES.get(width)
    if profile is None:
        raise ValueError(f"Unsupported integer width: {width}")
    if decimals < 0:
        raise ValidationError(
            ValidationErrorKind.INVALID_DECIMALS,
            f"decimals must be non-negative, got {decimals}",
        )

    dec = _to_decimal(value)
    if not dec.is_finite():
        raise ValidationError(
            ValidationErrorKind.INVALID_NUMBER, f"{dec} is not a finite number"
        )
    if dec.is_zero():
        return 0
    if dec.is_signed():
        raise ValidationError(ValidationErrorKind.NEGATIVE, f"number {dec} is negative")

    ctx = profile.context()
    try:
        scaled = ctx.scaleb(ctx.create_decimal(dec), decimals)
        truncated = scaled.to_integral_value(rounding=ROUND_DOWN, context=ctx)
    except (InvalidOperation, Overflow) as exc:
        raise ValidationError(
            ValidationErrorKind.OUT_OF_RANGE,
            f"{dec} * 10^{decimals} exceeds limit {profile.max_value}",
        ) from exc

    if truncated.is_zero():
        raise ValidationError(
            ValidationErrorKind.PRECISION_LOSS,
            f"precision loss when converting {dec} with {decimals} decimals "
            "to scaled integer",
        )

    result = int(truncated)
    if result > profile.max_value:
        raise ValidationError(
            ValidationErrorKind.OUT_OF_RANGE,
            f"integer {result} exceeds limit {profile.max_value}",
        )
    return result


def to_scaled_u64(value: DecimalLike, decimals: int) -> int:
    """Scale to a 64-bit unsigned integer. See ``to_scaled``."""
    return to_scaled(value, decimals, 64)


def to_scaled_u128(value: DecimalLike, decimals: int) -> int:
    """Scale to a 128-bit unsigned integer. See ``to_scaled``."""
    return to_scaled(value, decimals, 128)


def split_u128(value: int) -> U128:
    """Split a 128-bit unsigned integer into (lo, hi) 64-bit words."""
    if value < 0:
        raise ValidationError(
            ValidationErrorKind.NEGATIVE, f"negative number ({value})"
        )
    if value > U128_MAX:
        raise ValidationError(
            ValidationErrorKind.OUT_OF_RANGE, f"U128 overflow ({value})"
        )
    return U128(lo=value & U64_MAX, hi=(value >> 64) & U64_MAX)
