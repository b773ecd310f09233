"""Enumerated hardware control descriptions."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class ControlCapability(str, Enum):
    """What a hardware mixer control can do."""

    ENUMERATED = "enumerated"  # Item selector (routing, impedance, ...)
    PLAYBACK_SWITCH = "playback_switch"  # On/off, used inverted as mute
    CAPTURE_SWITCH = "capture_switch"  # On/off on the capture side
    PLAYBACK_DB = "playback_db"  # Volume with a queryable dB range


class ControlInfo(BaseModel):
    """
    One entry of the flat control list enumerated at open time.

    The position (`index`) is stable for the session and is what
    DeviceProfile offsets and slot maps point into.
    """

    model_config = ConfigDict(frozen=True)

    index: int = Field(ge=0, description="Position in the enumerated control list")
    name: str = Field(description="Control name as reported by the hardware")
    capabilities: frozenset[ControlCapability] = Field(
        default_factory=frozenset, description="Capability set of the control"
    )

    @property
    def is_enumerated(self) -> bool:
        return ControlCapability.ENUMERATED in self.capabilities

    @property
    def has_playback_switch(self) -> bool:
        return ControlCapability.PLAYBACK_SWITCH in self.capabilities

    @property
    def has_capture_switch(self) -> bool:
        return ControlCapability.CAPTURE_SWITCH in self.capabilities

    @property
    def has_playback_db(self) -> bool:
        return ControlCapability.PLAYBACK_DB in self.capabilities

    def describe(self) -> str:
        """Short capability summary, e.g. ``"ENUM"`` or ``"dB, PBS"``."""
        tags = []
        if self.is_enumerated:
            tags.append("ENUM")
        if self.has_playback_db:
            tags.append("dB")
        if self.has_playback_switch:
            tags.append("PBS")
        if self.has_capture_switch:
            tags.append("CPS")
        return ", ".join(tags) or "-"
