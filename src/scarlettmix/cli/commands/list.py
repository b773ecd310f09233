"""List command - show the cards the mixer can drive."""

import click

from scarlettmix.exceptions import ScarlettMixError

from .. import hardware
from .common import report_error


@click.command(name="list")
def list_cards():
    """List supported sound cards."""
    try:
        cards = hardware.find_cards()
    except ScarlettMixError as e:
        report_error(e)
        return

    if not cards:
        click.echo("No supported cards found.")
        return

    click.echo("Supported cards:\n")
    for device, name in cards:
        click.echo(f"  [{device}] {name}")
