"""Utility modules for scarlettmix."""

from .gain_curve import DB_CEIL, DB_FLOOR, GainMarker, GainValue, db_to_knob, gain_marker, knob_to_db
from .observers import ObserverManager

__all__ = [
    "DB_CEIL",
    "DB_FLOOR",
    "GainMarker",
    "GainValue",
    "ObserverManager",
    "db_to_knob",
    "gain_marker",
    "knob_to_db",
]
