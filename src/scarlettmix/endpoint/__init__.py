"""Hardware control endpoints.

`scarlettmix.endpoint.alsa` holds the ALSA implementation; it is imported
on demand so the engine can be used without the ALSA bindings loaded.
"""

from .protocols import ControlEndpoint

__all__ = ["ControlEndpoint"]
