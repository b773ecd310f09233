"""Core synchronization engine."""

from .engine import EngineState, MixerEngine
from .io import ControlIO
from .reset import force_update

__all__ = ["ControlIO", "EngineState", "MixerEngine", "force_update"]
