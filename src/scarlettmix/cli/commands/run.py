"""Run command - keep the mixer display in sync with the hardware."""

import logging
import time
from typing import Optional

import click

from scarlettmix.core import MixerEngine
from scarlettmix.exceptions import ScarlettMixError

from .. import hardware
from .common import ConsoleHost, ConsoleObserver, load_config, report_error

logger = logging.getLogger(__name__)


@click.command()
@click.argument('device', required=False)
@click.option(
    '--preset-only',
    is_flag=True,
    help='Only use built-in profiles, never autodetect the layout'
)
@click.option(
    '--interval',
    type=click.FloatRange(min=0.001, max=5.0),
    default=None,
    help='Seconds between hardware polls (default: from config, 0.05)'
)
@click.option(
    '--max-ticks',
    type=click.IntRange(min=0),
    default=0,
    help='Stop after this many polls (0: run until interrupted)'
)
@click.pass_context
def run(ctx, device: Optional[str], preset_only: bool, interval: Optional[float], max_ticks: int):
    """
    Watch a card and print every mixer change.

    \b
    Examples:
      scarlettmix run hw:2
      scarlettmix run --preset-only hw:USB
    """
    try:
        config = load_config(ctx, device, preset_only)
        if interval is not None:
            config = config.model_copy(update={"poll_interval": interval})

        host = ConsoleHost()
        engine = MixerEngine.open(hardware.open_endpoint(config.device), config, host=host)
    except ScarlettMixError as e:
        report_error(e)
        return

    click.echo(f"Connected to {engine.profile.name} on {config.device}")
    with engine:
        engine.register_observer(ConsoleObserver(engine))
        ticks = 0
        try:
            while host.close_reason is None:
                engine.tick()
                ticks += 1
                if max_ticks and ticks >= max_ticks:
                    break
                time.sleep(config.poll_interval)
        except KeyboardInterrupt:
            logger.info("Interrupted by user")
            click.echo("\nShutting down...", err=True)

    if host.close_reason is not None:
        click.echo(f"ERROR: {host.close_reason}", err=True)
        ctx.exit(1)
