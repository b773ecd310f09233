"""Collaborator protocols for the presentation layer and the host.

- Mixer observers: receive displayed values tagged with a ControlId
- Host runtime: owns the engine and tears it down on request
"""

from typing import Protocol, runtime_checkable

from scarlettmix.models import ControlId


@runtime_checkable
class MixerObserver(Protocol):
    """
    Observer that receives displayed control values.

    Gains arrive as dial positions in [0, 1], selectors as item indices and
    switches/mutes as booleans. Observers may write back through
    `MixerEngine.write`; writes made while the engine is refreshing are
    ignored, so echoing a refreshed value never reaches the hardware.
    """

    def on_control_value(self, control_id: ControlId, value: float | int | bool) -> None:
        """
        Handle a changed displayed value.

        Args:
            control_id: Which displayed control changed
            value: New value in display space
        """
        ...


@runtime_checkable
class HostRuntime(Protocol):
    """The application hosting the engine."""

    def request_close(self, reason: str) -> None:
        """Ask the host to tear the engine down after a fatal endpoint failure."""
        ...
