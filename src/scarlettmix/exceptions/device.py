"""Mixer device exceptions.

This module defines exceptions raised while opening and driving a device:
- MixerDeviceError: Base class for device errors
- UnsupportedDeviceError: No profile could be selected for the card
- MissingControlError: A profile index points outside the control list
- EndpointIOError: The control endpoint failed during I/O
- DeviceOpenError: The card could not be opened at all
"""

from typing import Optional

from .base import ScarlettMixError


class MixerDeviceError(ScarlettMixError):
    """Mixer device initialization or operation failed."""

    def __init__(self, user_message: str, device: Optional[str] = None, **kwargs):
        """
        Initialize mixer device error.

        Args:
            user_message: User-friendly error message
            device: The device identifier involved (if known)
        """
        super().__init__(user_message, **kwargs)
        self.device = device


class UnsupportedDeviceError(MixerDeviceError):
    """No static profile matched and autodetection was disabled or incomplete."""

    def __init__(self, card_name: str, autodetect: bool, device: Optional[str] = None):
        """
        Initialize unsupported-device error.

        Args:
            card_name: Name reported by the hardware
            autodetect: Whether autodetection was attempted
            device: The device identifier that was opened
        """
        user_msg = f"'{card_name}' is not a supported mixer device."
        if autodetect:
            tech_msg = f"No profile for '{card_name}' and the derived layout is incomplete"
            recovery = "Run 'scarlettmix probe' on the device and check the control names."
        else:
            tech_msg = f"No profile for '{card_name}' and autodetection is disabled"
            recovery = "Retry without --preset-only to let the layout be derived from control names."

        super().__init__(
            user_message=user_msg,
            technical_message=tech_msg,
            device=device,
            recoverable=False,
            recovery_hint=recovery,
        )
        self.card_name = card_name
        self.autodetect = autodetect


class MissingControlError(MixerDeviceError):
    """A resolved control index lies outside the enumerated control list."""

    def __init__(self, index: int, control_count: int, device: Optional[str] = None,
                 detail: Optional[str] = None):
        """
        Initialize missing-control error.

        Args:
            index: The resolved flat control index
            control_count: Number of controls enumerated at open
            device: The device identifier (if known)
            detail: What was wrong with the control, if it exists but is unusable
        """
        tech_msg = detail or f"Control index {index} out of range (device has {control_count} controls)"
        super().__init__(
            user_message="The device profile does not match the hardware controls.",
            technical_message=tech_msg,
            device=device,
            recoverable=False,
        )
        self.index = index
        self.control_count = control_count


class EndpointIOError(MixerDeviceError):
    """Reading, writing or polling the control endpoint failed."""

    def __init__(self, operation: str, original_error: Optional[str] = None,
                 device: Optional[str] = None):
        """
        Initialize endpoint I/O error.

        Args:
            operation: What was being attempted (e.g. "poll descriptors")
            original_error: Message from the underlying library
            device: The device identifier (if known)
        """
        tech_msg = f"Endpoint I/O failure during {operation}"
        if original_error:
            tech_msg += f": {original_error}"

        super().__init__(
            user_message="Lost connection to the mixer device.",
            technical_message=tech_msg,
            device=device,
            recoverable=True,
            recovery_hint="Check the USB connection and start the mixer again.",
        )
        self.operation = operation
        self.original_error = original_error


class DeviceOpenError(MixerDeviceError):
    """The sound card could not be opened."""

    def __init__(self, device: str, original_error: Optional[str] = None):
        """
        Initialize device-open error.

        Args:
            device: The device identifier that failed to open
            original_error: Message from the underlying library
        """
        tech_msg = f"Cannot open control device {device}"
        if original_error:
            tech_msg += f": {original_error}"

        super().__init__(
            user_message=f"Cannot open sound card '{device}'.",
            technical_message=tech_msg,
            device=device,
            recoverable=True,
            recovery_hint="Run 'scarlettmix list' to see connected devices.",
        )
        self.original_error = original_error
