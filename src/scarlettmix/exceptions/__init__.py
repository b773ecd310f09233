"""
Custom exception hierarchy for scarlettmix.

## Exception Hierarchy

```
ScarlettMixError (base)
├── MixerDeviceError
│   ├── UnsupportedDeviceError
│   ├── MissingControlError
│   ├── EndpointIOError
│   └── DeviceOpenError
└── ConfigurationError
    ├── ConfigFileInvalidError
    └── ConfigValidationError
```

`MissingControlError` signals a profile/hardware mismatch and is never
caught by the engine. `EndpointIOError` raised while polling makes the
engine ask its host to close it.
"""

from .base import ScarlettMixError
from .config import ConfigFileInvalidError, ConfigurationError, ConfigValidationError
from .device import (
    DeviceOpenError,
    EndpointIOError,
    MissingControlError,
    MixerDeviceError,
    UnsupportedDeviceError,
)
from .handlers import (
    ErrorContext,
    format_error_for_display,
    handle_errors,
    wrap_alsa_error,
    wrap_pydantic_error,
)

__all__ = [
    # Base
    "ScarlettMixError",
    # Config
    "ConfigFileInvalidError",
    "ConfigValidationError",
    "ConfigurationError",
    # Device
    "DeviceOpenError",
    "EndpointIOError",
    "MissingControlError",
    "MixerDeviceError",
    "UnsupportedDeviceError",
    # Handlers
    "ErrorContext",
    "format_error_for_display",
    "handle_errors",
    "wrap_alsa_error",
    "wrap_pydantic_error",
]
