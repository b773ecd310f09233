"""
Centralized error handling utilities.

Each layer translates errors to be more useful at the next level up:

```
┌─────────────────────────────────────┐
│  USER LAYER (CLI)                   │
│  - Formats error.user_message       │
│  - Shows error.recovery_hint        │
└─────────────────────────────────────┘
                  ↑
                  │ ScarlettMixError
                  │
┌─────────────────────────────────────┐
│  ENGINE LAYER                       │
│  - Requests host shutdown on I/O    │
│  - Fails fast on profile mismatch   │
└─────────────────────────────────────┘
                  ↑
                  │ ALSAAudioError, OSError, ValidationError
                  │
┌─────────────────────────────────────┐
│  LOW LEVEL (ALSA, files)            │
└─────────────────────────────────────┘
```

| Scenario | Use This |
|----------|----------|
| Log and re-raise around an operation | `@handle_errors(operation_name="reset mixer")` |
| Critical section with auto-logging | `with ErrorContext("open mixer"): ...` |
| ALSA call failed | `raise wrap_alsa_error(e, "set enum", device="hw:2")` |
| Config file failed to validate | `raise wrap_pydantic_error(e, str(path))` |
"""

import logging
from functools import wraps
from typing import Callable, Optional, TypeVar

from .base import ScarlettMixError
from .config import ConfigFileInvalidError, ConfigValidationError
from .device import DeviceOpenError, EndpointIOError

logger = logging.getLogger(__name__)

T = TypeVar('T')


def handle_errors(*, operation_name: str, log_level: int = logging.ERROR) -> Callable:
    """
    Decorator that logs failures of an operation and re-raises them.

    Args:
        operation_name: Name of the operation for logging (e.g., "reset mixer")
        log_level: Logging level for the error (default: ERROR)

    Returns:
        Decorated function
    """
    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @wraps(func)
        def wrapper(*args, **kwargs) -> T:
            try:
                return func(*args, **kwargs)

            except ScarlettMixError as e:
                logger.log(log_level, f"Failed to {operation_name}: {e.technical_message}")
                raise

            except Exception as e:
                logger.log(
                    log_level,
                    f"Unexpected error during {operation_name}: {e}",
                    exc_info=True
                )
                raise

        return wrapper
    return decorator


class ErrorContext:
    """
    Context manager that logs a failed operation and lets the error propagate.

    Example:
        ```python
        with ErrorContext("open mixer", logger_instance=logger):
            engine = MixerEngine.open(endpoint, config, host)
        ```
    """

    def __init__(self, operation: str, logger_instance: Optional[logging.Logger] = None):
        """
        Initialize error context.

        Args:
            operation: Description of the operation
            logger_instance: Logger to use (defaults to module logger)
        """
        self.operation = operation
        self.logger = logger_instance or logger
        self.error: Optional[Exception] = None

    def __enter__(self):
        self.logger.debug(f"Starting: {self.operation}")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is None:
            self.logger.debug(f"Completed: {self.operation}")
            return False

        self.error = exc_val

        if isinstance(exc_val, ScarlettMixError):
            self.logger.error(f"Failed to {self.operation}: {exc_val.technical_message}")
        else:
            self.logger.error(f"Failed to {self.operation}: {exc_val}", exc_info=True)

        return False


def wrap_pydantic_error(error: Exception, file_path: str) -> ScarlettMixError:
    """
    Convert Pydantic validation errors to scarlettmix exceptions.

    Args:
        error: The Pydantic ValidationError
        file_path: Path to the config file that failed validation

    Returns:
        A ConfigurationError with appropriate type and message
    """
    from pydantic import ValidationError

    error_msg = str(error)

    if "Invalid JSON" in error_msg or "json_invalid" in error_msg:
        # Format: "Invalid JSON: <actual error> [type=json_invalid, ..."
        if "Invalid JSON:" in error_msg:
            parse_error = error_msg.split("Invalid JSON:")[1].split("[type=")[0].strip()
        else:
            parse_error = error_msg
        return ConfigFileInvalidError(file_path, parse_error)

    if isinstance(error, ValidationError):
        errors = error.errors()
        if len(errors) == 1:
            first_error = errors[0]
            field = ".".join(str(loc) for loc in first_error.get('loc', ('unknown',)))
            return ConfigValidationError(
                field=field,
                value=first_error.get('input'),
                error_msg=first_error.get('msg', 'validation failed'),
                file_path=file_path
            )
        if errors:
            error_lines = []
            for err in errors:
                field = ".".join(str(loc) for loc in err.get('loc', ('unknown',)))
                error_lines.append(f"  - {field}: {err.get('msg', 'validation failed')}")

            return ConfigValidationError(
                field="multiple fields",
                value=None,
                error_msg=f"{len(errors)} validation errors:\n" + "\n".join(error_lines),
                file_path=file_path
            )

    return ConfigValidationError(field="unknown", value=None, error_msg=error_msg, file_path=file_path)


def wrap_alsa_error(error: Exception, operation: str, device: Optional[str] = None) -> ScarlettMixError:
    """
    Convert low-level ALSA errors to scarlettmix exceptions.

    Failures while opening or attaching the card become DeviceOpenError,
    everything else is an EndpointIOError.

    Args:
        error: The original exception from the ALSA bindings
        operation: What was being attempted
        device: The device identifier involved in the error

    Returns:
        A ScarlettMixError with appropriate type and message
    """
    error_msg = str(error)

    if operation.startswith("open") and device is not None:
        return DeviceOpenError(device, original_error=error_msg)

    return EndpointIOError(operation, original_error=error_msg, device=device)


def format_error_for_display(error: Exception) -> tuple[str, Optional[str]]:
    """
    Format an exception for user display.

    Args:
        error: The exception to format

    Returns:
        Tuple of (user_message, recovery_hint or None)
    """
    if isinstance(error, ScarlettMixError):
        return error.user_message, error.recovery_hint

    error_type = type(error).__name__
    return f"{error_type}: {error}", None
