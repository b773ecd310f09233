"""Protocols implemented by the engine's collaborators."""

from .observers import HostRuntime, MixerObserver

__all__ = ["HostRuntime", "MixerObserver"]
