"""Reset command - re-send the complete mixer state to the card."""

from typing import Optional

import click

from scarlettmix.core import MixerEngine
from scarlettmix.exceptions import ScarlettMixError

from .. import hardware
from .common import load_config, report_error


@click.command()
@click.argument('device', required=False)
@click.option(
    '--preset-only',
    is_flag=True,
    help='Only use built-in profiles, never autodetect the layout'
)
@click.pass_context
def reset(ctx, device: Optional[str], preset_only: bool):
    """
    Force the card to re-apply every mixer setting.

    Each control is briefly moved away from its value and written back,
    so the card re-sends its state. Values are unchanged afterwards.
    """
    try:
        config = load_config(ctx, device, preset_only)
        with MixerEngine.open(hardware.open_endpoint(config.device), config) as engine:
            count = engine.reset()
    except ScarlettMixError as e:
        report_error(e)
        return

    click.echo(f"Re-sent {count} controls on {config.device}")
