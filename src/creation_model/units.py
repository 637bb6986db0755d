"""Length unit conversion.

The model store works in decimal feet. Every real-world dimension handed to
the generators goes through :func:`convert_to_internal` first.
"""

from __future__ import annotations

from enum import Enum


class UnitType(str, Enum):
    """Length units accepted by the converter."""

    MILLIMETERS = "millimeters"
    CENTIMETERS = "centimeters"
    METERS = "meters"
    INCHES = "inches"
    FEET = "feet"


# Millimeters per unit
_MM_PER_UNIT: dict[UnitType, float] = {
    UnitType.MILLIMETERS: 1.0,
    UnitType.CENTIMETERS: 10.0,
    UnitType.METERS: 1000.0,
    UnitType.INCHES: 25.4,
    UnitType.FEET: 304.8,
}

INTERNAL_UNIT = UnitType.FEET


def convert_to_internal(value: float, unit: UnitType) -> float:
    """Convert a length in ``unit`` to internal units (feet)."""
    return value * _MM_PER_UNIT[UnitType(unit)] / _MM_PER_UNIT[INTERNAL_UNIT]


def convert_from_internal(value: float, unit: UnitType) -> float:
    """Convert an internal length (feet) to ``unit``."""
    return value * _MM_PER_UNIT[INTERNAL_UNIT] / _MM_PER_UNIT[UnitType(unit)]


def mm(value: float) -> float:
    """Shorthand: millimeters to internal units."""
    return convert_to_internal(value, UnitType.MILLIMETERS)
