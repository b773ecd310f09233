"""Control endpoint protocol.

A control endpoint is the hardware side of the mixer: it enumerates the
card's controls once and then reads and writes them by flat index. The
engine talks to it only through `ControlIO`.

dB values cross this boundary in hundredths of a dB (ALSA's native unit).
Channel ids follow ALSA simple mixer numbering (0 = front left / mono).
"""

from typing import Protocol, runtime_checkable

from scarlettmix.models import ControlInfo


@runtime_checkable
class ControlEndpoint(Protocol):
    """Hardware mixer element access by flat control index."""

    def card_name(self) -> str:
        """Name reported by the hardware, e.g. ``"Scarlett 18i6 USB"``."""
        ...

    def enumerate_controls(self) -> list[ControlInfo]:
        """All active controls in hardware order."""
        ...

    # Enumerated items
    def get_enum(self, index: int) -> int: ...

    def set_enum(self, index: int, item: int) -> None: ...

    def enum_item_names(self, index: int) -> list[str]: ...

    # Switches
    def get_playback_switch(self, index: int) -> bool: ...

    def set_playback_switch(self, index: int, channel: int, on: bool) -> None: ...

    def get_capture_switch(self, index: int) -> bool: ...

    def set_capture_switch(self, index: int, channel: int, on: bool) -> None: ...

    # Volume in hundredths of a dB
    def get_db(self, index: int) -> int: ...

    def set_db(self, index: int, channel: int, centibels: int, capture: bool = False) -> None: ...

    def db_range(self, index: int) -> tuple[int, int]: ...

    def has_playback_channel(self, index: int, channel: int) -> bool: ...

    def has_capture_channel(self, index: int, channel: int) -> bool: ...

    # Events
    def poll_descriptors(self) -> list[tuple[int, int]]:
        """(fd, eventmask) pairs that become readable on hardware changes."""
        ...

    def handle_events(self) -> int:
        """Drain pending change events; returns the number handled."""
        ...

    def close(self) -> None: ...

