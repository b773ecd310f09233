"""CLI commands for scarlettmix."""

from .list import list_cards
from .probe import probe
from .reset import reset
from .run import run

__all__ = ["list_cards", "probe", "reset", "run"]
