"""Helpers shared by the CLI commands."""

import logging
import sys
from pathlib import Path
from typing import Optional

import click

from scarlettmix.exceptions import format_error_for_display
from scarlettmix.models import ControlBank, ControlId, MixerConfig
from scarlettmix.utils import GainMarker, GainValue

from .. import hardware

logger = logging.getLogger(__name__)


def load_config(ctx: click.Context, device: Optional[str], preset_only: bool = False) -> MixerConfig:
    """
    Build the engine configuration from the config file and command line.

    A device from the command line wins, then one set in the config file;
    otherwise the first discovered card is used, falling back to the
    built-in default.
    """
    config_path: Optional[Path] = ctx.obj.get("config_path")
    config = MixerConfig.load_or_default(
        config_path,
        device=device,
        autodetect=False if preset_only else None,
        verbose=ctx.obj.get("verbose") or None,
    )

    if "device" not in config.model_fields_set:
        cards = hardware.find_cards()
        if cards:
            found, name = cards[0]
            logger.info(f"Using discovered card {found} ({name})")
            config = config.model_copy(update={"device": found})

    return config


def report_error(error: Exception) -> None:
    """Print a user-facing error and exit with status 1."""
    logger.exception("Command failed")
    user_message, recovery_hint = format_error_for_display(error)

    click.echo(f"ERROR: {user_message}", err=True)
    if recovery_hint:
        click.echo(f"\n{recovery_hint}", err=True)
    sys.exit(1)


def format_value(control_id: ControlId, value) -> str:
    if control_id.bank.is_gain:
        gain = GainValue.from_knob(value)
        if gain.marker is GainMarker.OFF:
            return "off"
        if gain.marker is GainMarker.UNITY:
            return "0 dB (unity)"
        return f"{gain.db:+d} dB"
    if control_id.bank in (ControlBank.BUS_MUTE, ControlBank.MASTER_MUTE):
        return "muted" if value else "on"
    if control_id.bank.is_switch:
        return "on" if value else "off"
    return str(value)


class ConsoleObserver:
    """Prints every displayed value change."""

    def __init__(self, engine):
        self.engine = engine

    def on_control_value(self, control_id: ControlId, value) -> None:
        text = format_value(control_id, value)
        if control_id.bank.is_selector:
            items = self.engine.enum_items(control_id)
            if 0 <= value < len(items):
                text = items[value]
        click.echo(f"{control_id}: {text}")


class ConsoleHost:
    """Host side of the engine for the tick loop."""

    def __init__(self):
        self.close_reason: Optional[str] = None

    def request_close(self, reason: str) -> None:
        logger.warning(f"Engine requested close: {reason}")
        self.close_reason = reason
