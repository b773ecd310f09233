"""Force-update protocol.

The driver only forwards a write to the hardware when the value changes,
so re-sending the current state needs a detour: every control is moved
to a different value and then back. The value after the sequence equals
the value before it.

- Enumerated controls: ``(current + 1) mod items``, then ``current``;
  controls with fewer than two items are skipped
- Gains: the opposite end of the control's dB range, then the real value
- Mutes and capture switches: toggle, then restore
"""

import logging

from scarlettmix.devices import ControlResolver
from scarlettmix.models import ControlBank

from .io import ControlIO

logger = logging.getLogger(__name__)


def resend_enum(io: ControlIO, index: int) -> bool:
    """Returns False for controls with fewer than two items, which have no detour."""
    items = io.enum_item_count(index)
    if items < 2:
        logger.debug(f"Skipping enum {index}: {items} item(s)")
        return False
    current = io.read_enum(index)
    io.write_enum(index, (current + 1) % items)
    io.write_enum(index, current)
    return True


def resend_gain(io: ControlIO, index: int) -> None:
    current = io.read_db(index)
    low, high = io.db_range(index)
    io.write_db(index, high if current <= low else low)
    io.write_db(index, current)


def resend_mute(io: ControlIO, index: int) -> None:
    muted = io.read_mute(index)
    io.write_mute(index, not muted)
    io.write_mute(index, muted)


def resend_capture_switch(io: ControlIO, index: int) -> None:
    on = io.read_switch(index, capture_switch=True)
    io.write_switch(index, not on, capture_switch=True)
    io.write_switch(index, on, capture_switch=True)


def force_update(io: ControlIO, resolver: ControlResolver) -> int:
    """
    Re-send every resolvable control of the profile to the hardware.

    Args:
        io: Read/write path of the engine
        resolver: Addressing for the adopted profile

    Returns:
        Number of controls re-sent
    """
    pad_is_switch = resolver.profile.pad_is_switch
    count = 0

    for control_id, index in resolver.resolved():
        bank = control_id.bank
        if bank.is_gain:
            resend_gain(io, index)
        elif bank in (ControlBank.BUS_MUTE, ControlBank.MASTER_MUTE):
            resend_mute(io, index)
        elif bank is ControlBank.PAD and pad_is_switch:
            resend_capture_switch(io, index)
        elif not resend_enum(io, index):
            continue
        count += 1

    logger.info(f"Re-sent {count} controls")
    return count
