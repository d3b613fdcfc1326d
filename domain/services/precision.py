"""Rounding and number formatting shared by geometry derivation and display.

Every derived pixel quantity is computed on exact rationals and rounded once,
here. ``mode="round"`` always resolves ties away from zero, so ``822.5``
becomes ``823`` and ``-0.5`` becomes ``-1``.
"""

from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal
from fractions import Fraction
from numbers import Rational, Real

from domain.models import Dimensions, RoundingConfig

DEFAULT_ROUNDING = RoundingConfig(even="whole", mode="round")
ASC_TEMPLATE_ROUNDING = RoundingConfig(even="even", mode="up")

_HALF = Fraction(1, 2)


def to_fraction(value: Real) -> Fraction:
    """Exact rational for ``value``; floats go through their shortest repr so 1.3 stays 13/10."""
    if isinstance(value, Rational):
        return Fraction(value)
    if not math.isfinite(value):
        msg = f"Cannot convert non-finite value {value!r}"
        raise ValueError(msg)
    return Fraction(repr(float(value)))


def round_half_away_from_zero(value: Real) -> int:
    exact = to_fraction(value)
    if exact >= 0:
        return math.floor(exact + _HALF)
    return -math.floor(-exact + _HALF)


def apply_rounding(value: Real, config: RoundingConfig = DEFAULT_ROUNDING) -> int:
    exact = to_fraction(value)
    if config.mode == "up":
        rounded = math.ceil(exact)
    elif config.mode == "down":
        rounded = math.floor(exact)
    else:
        rounded = round_half_away_from_zero(exact)

    if config.even == "even" and rounded % 2 != 0:
        if config.mode == "up":
            rounded += 1
        elif config.mode == "down":
            rounded -= 1
        else:
            upper = rounded + 1
            lower = rounded - 1
            distance_up = abs(exact - upper)
            distance_down = abs(exact - lower)
            if distance_up == distance_down:
                rounded = upper if exact >= 0 else lower
            else:
                rounded = upper if distance_up < distance_down else lower
    return rounded


def minimum_dimension(config: RoundingConfig) -> int:
    return 2 if config.even == "even" else 1


def round_dimension(value: Real, config: RoundingConfig = DEFAULT_ROUNDING) -> int:
    return max(minimum_dimension(config), apply_rounding(value, config))


def round_dimensions(
    width: Real,
    height: Real,
    config: RoundingConfig = DEFAULT_ROUNDING,
) -> Dimensions:
    return Dimensions(
        width=round_dimension(width, config),
        height=round_dimension(height, config),
    )


def round_offset(value: Real, config: RoundingConfig = DEFAULT_ROUNDING) -> int:
    # Offsets honour the rounding direction but are never forced even.
    return apply_rounding(value, RoundingConfig(even="whole", mode=config.mode))


def precise_aspect_ratio(width: Real, height: Real) -> float:
    if height == 0:
        return 0.0
    return float(to_fraction(width) / to_fraction(height))


def format_number(value: Real, decimals: int = 2) -> str:
    if decimals < 0:
        msg = f"decimals must be non-negative, got {decimals}"
        raise ValueError(msg)
    if not math.isfinite(float(value)):
        msg = f"Cannot format non-finite value {value!r}"
        raise ValueError(msg)
    exact = to_fraction(value)
    quantum = Decimal(1).scaleb(-decimals)
    decimal_value = Decimal(exact.numerator) / Decimal(exact.denominator)
    result = decimal_value.quantize(quantum, rounding=ROUND_HALF_UP)
    if result == 0:
        result = abs(result)
    return f"{result:.{decimals}f}"


def format_aspect_ratio(width: Real, height: Real, decimals: int = 2) -> str:
    return f"{format_number(precise_aspect_ratio(width, height), decimals)}:1"
