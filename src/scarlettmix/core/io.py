"""Capability-specific reads and writes on the enumerated control list.

ControlIO is the only place that touches the endpoint by index. Every
access is bounds-checked first; an index outside the list, or a control
lacking the capability the profile expects, raises MissingControlError.
"""

import logging
from collections.abc import Sequence

from scarlettmix.endpoint import ControlEndpoint
from scarlettmix.exceptions import MissingControlError
from scarlettmix.models import ControlCapability, ControlInfo

logger = logging.getLogger(__name__)

# dB writes fan out over channel ids 0..2
FANOUT_CHANNELS = 3


class ControlIO:
    """Read/write path over one endpoint and its enumerated controls."""

    def __init__(self, endpoint: ControlEndpoint, controls: Sequence[ControlInfo],
                 device: str | None = None):
        self.endpoint = endpoint
        self.controls = tuple(controls)
        self.device = device

    def __len__(self) -> int:
        return len(self.controls)

    def control(self, index: int) -> ControlInfo:
        """Return the control at `index` or fail fast."""
        if not 0 <= index < len(self.controls):
            raise MissingControlError(index, len(self.controls), device=self.device)
        return self.controls[index]

    def require(self, index: int, capability: ControlCapability) -> ControlInfo:
        ctrl = self.control(index)
        if capability not in ctrl.capabilities:
            raise MissingControlError(
                index,
                len(self.controls),
                device=self.device,
                detail=f"Control {index} '{ctrl.name}' has no {capability.value} capability",
            )
        return ctrl

    # Reads

    def read_enum(self, index: int) -> int:
        self.require(index, ControlCapability.ENUMERATED)
        return self.endpoint.get_enum(index)

    def enum_item_names(self, index: int) -> list[str]:
        self.require(index, ControlCapability.ENUMERATED)
        return self.endpoint.enum_item_names(index)

    def enum_item_count(self, index: int) -> int:
        return len(self.enum_item_names(index))

    def read_db(self, index: int) -> float:
        self.require(index, ControlCapability.PLAYBACK_DB)
        return self.endpoint.get_db(index) / 100.0

    def db_range(self, index: int) -> tuple[float, float]:
        self.require(index, ControlCapability.PLAYBACK_DB)
        low, high = self.endpoint.db_range(index)
        return low / 100.0, high / 100.0

    def read_mute(self, index: int) -> bool:
        """Mute is the inverse of the playback switch."""
        self.require(index, ControlCapability.PLAYBACK_SWITCH)
        return not self.endpoint.get_playback_switch(index)

    def read_switch(self, index: int, capture_switch: bool = False) -> bool:
        """Read an on/off control stored as enum item 1 or as a capture switch."""
        if capture_switch:
            self.require(index, ControlCapability.CAPTURE_SWITCH)
            return self.endpoint.get_capture_switch(index)
        return self.read_enum(index) == 1

    # Writes

    def write_enum(self, index: int, item: int) -> None:
        self.require(index, ControlCapability.ENUMERATED)
        logger.debug(f"set enum {index} = {item}")
        self.endpoint.set_enum(index, item)

    def write_db(self, index: int, db: float) -> None:
        """
        Write a gain to every present channel.

        Playback sub-elements are always written; capture sub-elements
        only where the control has them.
        """
        self.require(index, ControlCapability.PLAYBACK_DB)
        centibels = int(round(db * 100))
        logger.debug(f"set dB {index} = {db}")
        for channel in range(FANOUT_CHANNELS):
            if self.endpoint.has_playback_channel(index, channel):
                self.endpoint.set_db(index, channel, centibels, capture=False)
            if self.endpoint.has_capture_channel(index, channel):
                self.endpoint.set_db(index, channel, centibels, capture=True)

    def write_mute(self, index: int, muted: bool) -> None:
        self.require(index, ControlCapability.PLAYBACK_SWITCH)
        logger.debug(f"set mute {index} = {muted}")
        for channel in range(FANOUT_CHANNELS):
            if self.endpoint.has_playback_channel(index, channel):
                self.endpoint.set_playback_switch(index, channel, not muted)

    def write_switch(self, index: int, on: bool, capture_switch: bool = False) -> None:
        if not capture_switch:
            self.write_enum(index, 1 if on else 0)
            return
        self.require(index, ControlCapability.CAPTURE_SWITCH)
        logger.debug(f"set capture switch {index} = {on}")
        for channel in range(FANOUT_CHANNELS):
            if self.endpoint.has_capture_channel(index, channel):
                self.endpoint.set_capture_switch(index, channel, on)
