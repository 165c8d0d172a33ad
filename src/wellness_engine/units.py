"""Weight and height unit conversions."""

import math
import re
from dataclasses import dataclass

KG_PER_LB = 0.45359237
LBS_PER_KG = 1 / KG_PER_LB
CM_PER_INCH = 2.54
INCHES_PER_FOOT = 12
MIN_HEIGHT_INCHES = 48
MAX_HEIGHT_INCHES = 96

WEIGHT_UNITS = frozenset({"lbs", "kg"})
HEIGHT_UNITS = frozenset({"in", "cm", "ft"})

_FEET_INCHES_RE = re.compile(
    r"^(\d+)\s*(?:'|ft|feet)?\s*(\d+(?:\.\d+)?)?\s*(?:\"|in|inches)?$",
    re.IGNORECASE,
)
_NUMBER_RE = re.compile(r"-?\d+(?:\.\d+)?")


@dataclass(frozen=True)
class HeightValue:
    """Height reading in a given unit.

    For ``ft`` readings ``value`` holds the total inches and ``feet``/``inches``
    hold the split form.
    """

    value: float
    unit: str
    feet: int | None = None
    inches: float | None = None


def convert_weight(weight: float, from_unit: str, to_unit: str) -> float:
    """Convert a weight between ``lbs`` and ``kg``."""
    _check_weight_unit(from_unit)
    _check_weight_unit(to_unit)
    if from_unit == to_unit:
        return weight
    if from_unit == "lbs":
        return weight * KG_PER_LB
    return weight * LBS_PER_KG


def format_weight(weight: float, unit: str, decimals: int = 1) -> str:
    """Format a weight for display."""
    return f"{weight:.{decimals}f} {unit}"


def convert_to_inches(height: HeightValue) -> float:
    """Return the height expressed in inches."""
    if height.unit == "in":
        return height.value
    if height.unit == "cm":
        return height.value / CM_PER_INCH
    if height.unit == "ft":
        return (height.feet or 0) * INCHES_PER_FOOT + (height.inches or 0.0)
    raise ValueError(f"Unknown height unit: {height.unit}")


def convert_from_inches(inches: float, target_unit: str) -> HeightValue:
    """Express a height in inches as ``target_unit``."""
    if target_unit == "in":
        return HeightValue(value=inches, unit="in")
    if target_unit == "cm":
        return HeightValue(value=inches * CM_PER_INCH, unit="cm")
    if target_unit == "ft":
        feet = math.floor(inches / INCHES_PER_FOOT)
        return HeightValue(
            value=inches,
            unit="ft",
            feet=feet,
            inches=inches - feet * INCHES_PER_FOOT,
        )
    raise ValueError(f"Unknown height unit: {target_unit}")


def convert_height(height: HeightValue, target_unit: str) -> HeightValue:
    """Convert a height reading to another unit."""
    return convert_from_inches(convert_to_inches(height), target_unit)


def format_height(height: HeightValue) -> str:
    """Format a height for display."""
    if height.unit == "ft":
        return f"{height.feet or 0}' {(height.inches or 0.0):.1f}\""
    return f"{height.value:.1f} {height.unit}"


def parse_height_input(raw: str, unit: str) -> HeightValue | None:
    """Parse free-form height input such as ``5'10"``, ``5 10`` or ``178``."""
    cleaned = raw.strip()
    if unit == "ft":
        match = _FEET_INCHES_RE.match(cleaned)
        if match and match.group(2) is not None:
            feet = int(match.group(1))
            inches = float(match.group(2))
            return HeightValue(
                value=feet * INCHES_PER_FOOT + inches,
                unit="ft",
                feet=feet,
                inches=inches,
            )

    number = _NUMBER_RE.search(cleaned)
    if number is None:
        return None
    value = float(number.group(0))
    if value <= 0:
        return None

    if unit == "ft":
        # Bare number of feet, possibly fractional.
        feet = math.floor(value)
        inches = (value - feet) * INCHES_PER_FOOT
        return HeightValue(
            value=feet * INCHES_PER_FOOT + inches,
            unit="ft",
            feet=feet,
            inches=inches,
        )
    if unit not in HEIGHT_UNITS:
        raise ValueError(f"Unknown height unit: {unit}")
    return HeightValue(value=value, unit=unit)


def is_valid_height(height: HeightValue) -> bool:
    """Return True when the height is within a plausible adult range."""
    inches = convert_to_inches(height)
    return MIN_HEIGHT_INCHES <= inches <= MAX_HEIGHT_INCHES


def calculate_bmi(height_inches: float, weight_lbs: float) -> float:
    """Return the body mass index from imperial measurements."""
    if height_inches <= 0:
        raise ValueError("Height must be positive")
    return weight_lbs * 703 / (height_inches * height_inches)


def _check_weight_unit(unit: str) -> None:
    if unit not in WEIGHT_UNITS:
        raise ValueError(f"Unknown weight unit: {unit}")
