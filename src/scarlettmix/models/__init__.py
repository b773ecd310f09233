"""Data models for scarlettmix."""

from .banks import ControlBank, ControlId
from .config import MixerConfig
from .controls import ControlCapability, ControlInfo
from .profile import SLOT_CAPACITY, DeviceProfile, SlotMap

__all__ = [
    "ControlBank",
    "ControlCapability",
    "ControlId",
    "ControlInfo",
    "DeviceProfile",
    "MixerConfig",
    "SLOT_CAPACITY",
    "SlotMap",
]
