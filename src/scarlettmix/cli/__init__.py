"""Command-line interface for scarlettmix."""

from .main import cli

__all__ = ["cli"]
