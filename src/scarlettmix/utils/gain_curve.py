"""Gain curve codec between dial positions and hardware decibels.

Dial space is a normalized position in [0, 1]; hardware space is an
integer dB value in [-128, +6]. The curve is

    db = sqrt(v) / (sqrt(0.5) + sqrt(v)) * 228.75 - 128

which puts 0 dB at roughly 80% of the dial travel. Its inverse has an
asymptote at db = +100.75, far above anything the hardware accepts; the
inverse is clamped to the top of the dial instead of dividing by zero.
"""

import math
from dataclasses import dataclass
from enum import Enum

DB_FLOOR = -128  # dial at 0, treated as "off"
DB_CEIL = 6  # dial at 1
CURVE_SPAN = 228.75
KNOB_MIN = 0.0
KNOB_MAX = 1.0

_SQRT_HALF = math.sqrt(0.5)
# Closest the inverse may get to its pole at k == 1
_ASYMPTOTE_GUARD = 1e-9


def knob_to_db(v: float) -> int:
    """
    Convert a dial position to integer hardware dB.

    Args:
        v: Dial position, clamped to [0, 1]

    Returns:
        Gain in whole dB, at most +6
    """
    v = min(max(v, KNOB_MIN), KNOB_MAX)
    s = math.sqrt(v)
    db = s / (_SQRT_HALF + s) * CURVE_SPAN + DB_FLOOR
    if db > DB_CEIL:
        return DB_CEIL
    return int(round(db))


def db_to_knob(db: float) -> float:
    """
    Convert hardware dB to a dial position.

    Args:
        db: Gain in dB (need not be an integer)

    Returns:
        Dial position in [0, 1]
    """
    k = (db - DB_FLOOR) / CURVE_SPAN
    if k <= 0:
        return KNOB_MIN
    if k >= 1 - _ASYMPTOTE_GUARD:
        return KNOB_MAX
    s = k * _SQRT_HALF / (1 - k)
    return min(s * s, KNOB_MAX)


class GainMarker(str, Enum):
    """Annotation shown on a gain dial."""

    OFF = "off"  # at the floor
    UNITY = "unity"  # exactly 0 dB
    NONE = "none"


def gain_marker(db: float) -> GainMarker:
    """Classify a dB value for dial annotation."""
    if db <= DB_FLOOR:
        return GainMarker.OFF
    if db == 0:
        return GainMarker.UNITY
    return GainMarker.NONE


@dataclass(frozen=True)
class GainValue:
    """A gain expressed both as dial position and hardware dB."""

    knob: float
    db: int

    @classmethod
    def from_knob(cls, v: float) -> "GainValue":
        v = min(max(v, KNOB_MIN), KNOB_MAX)
        return cls(knob=v, db=knob_to_db(v))

    @classmethod
    def from_db(cls, db: float) -> "GainValue":
        knob = db_to_knob(db)
        return cls(knob=knob, db=knob_to_db(knob))

    @property
    def marker(self) -> GainMarker:
        return gain_marker(self.db)

    def __str__(self) -> str:
        return f"{self.db:+d}dB"
