"""Scarlett Mixer: mixer control sync for Focusrite Scarlett USB interfaces."""

__version__ = "0.1.0"

# Core engine
from .core import MixerEngine

# Profiles
from .devices import ProfileRegistry, get_registry

__all__ = [
    "MixerEngine",
    "ProfileRegistry",
    "get_registry",
]
