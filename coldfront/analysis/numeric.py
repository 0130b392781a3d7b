"""Numeric helpers shared by the aggregator and the record trackers."""

import math
from numbers import Real

from coldfront.models.errors import ConfigurationMissing, InvalidNumericInput


def _require_number(value: object) -> float:
    # bool is a Real subclass but never a temperature
    if isinstance(value, bool) or not isinstance(value, Real):
        raise InvalidNumericInput(
            f"value {value!r} (type={type(value).__name__}) is not a number"
        )
    number = float(value)
    if not math.isfinite(number):
        raise InvalidNumericInput(f"value {value!r} is not a finite number")
    return number


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves toward positive infinity.

    Python's round() uses banker's rounding (round(40.5) == 40); forecast
    temperatures are rounded the conventional way instead.
    """
    return math.floor(_require_number(value) + 0.5)


def round_up_to_nearest_ten(value: float) -> int:
    """Round up to the next multiple of ten, e.g. 21 -> 30, 20 -> 20, -23 -> -20."""
    number = _require_number(value)
    return math.ceil(number / 10) * 10


def coerce_number(raw: str | None, key: str) -> float:
    """Coerce a persisted numeric-valued string.

    Raises ConfigurationMissing if absent and InvalidNumericInput if the text
    is not a finite number.
    """
    if raw is None:
        raise ConfigurationMissing(key)
    try:
        number = float(raw.strip())
    except (AttributeError, ValueError) as e:
        raise InvalidNumericInput(
            f"value {raw!r} for {key!r} is not a number"
        ) from e
    if not math.isfinite(number):
        raise InvalidNumericInput(f"value {raw!r} for {key!r} is not a finite number")
    return number
