"""Probe command - show what the mixer sees on a card."""

from typing import Optional

import click

from scarlettmix.devices import derive_profile, get_registry
from scarlettmix.exceptions import ScarlettMixError
from scarlettmix.models import DeviceProfile

from .. import hardware
from .common import load_config, report_error


def _describe_profile(profile: DeviceProfile) -> None:
    click.echo(f"    Matrix: {profile.matrix_inputs} x {profile.matrix_outputs} "
               f"(offset {profile.matrix_offset}, stride {profile.matrix_stride}"
               f"{', column-major' if profile.column_major else ''})")
    click.echo(f"    Matrix inputs: offset {profile.matrix_input_offset}, "
               f"stride {profile.matrix_input_stride}")
    click.echo(f"    Capture inputs: {profile.capture_inputs} (offset {profile.capture_offset})")
    click.echo(f"    Output buses: {profile.output_buses}")
    click.echo(f"    Stereo buses: {profile.stereo_master_buses}, aux buses: {profile.mono_aux_buses}")
    click.echo(f"    Hi-Z: {profile.hiz_count}, pad: {profile.pad_count}, air: {profile.air_count}")


@click.command()
@click.argument('device', required=False)
@click.pass_context
def probe(ctx, device: Optional[str]):
    """
    List a card's controls and the layout derived from them.

    Nothing is written to the hardware.
    """
    try:
        config = load_config(ctx, device)
        endpoint = hardware.open_endpoint(config.device)
    except ScarlettMixError as e:
        report_error(e)
        return

    try:
        card_name = endpoint.card_name()
        controls = endpoint.enumerate_controls()
    except ScarlettMixError as e:
        endpoint.close()
        report_error(e)
        return

    click.echo(f"Card: {card_name} ({config.device})")
    click.echo(f"Controls: {len(controls)}\n")
    for control in controls:
        click.echo(f"  [{control.index:3d}] {control.name}: {control.describe()}")

    static = get_registry().lookup(card_name)
    click.echo()
    if static is not None:
        click.echo("Built-in profile:")
        _describe_profile(static)
    else:
        click.echo("Built-in profile: none")

    candidate = derive_profile(controls, name=card_name)
    state = "complete" if candidate.is_complete() else \
        f"incomplete, missing {', '.join(candidate.missing_fields())}"
    click.echo(f"\nDerived layout ({state}):")
    _describe_profile(candidate)

    endpoint.close()
