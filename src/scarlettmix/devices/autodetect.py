"""Derive a device profile from raw control names.

This is a best-effort heuristic for cards without a built-in profile (or
whose layout differs from the built-in one, e.g. a newer firmware or driver
generation reporting the same card name). Control names are matched in
hardware order:

- ``Master``                          -> main master gain + mute
- ``Matrix NN Mix X``                 -> matrix cell, row-major
- ``Mix X Input NN``                  -> matrix cell, column-major
- ``... Impedance`` / ``... Level``    -> hi-z switch
- ``... Pad``                         -> pad (enum, or capture switch)
- ``... Air``                         -> air switch
- ``Input Source NN`` / ``PCM NN``    -> capture selector
- ``Matrix NN Input`` / ``Mixer Input NN`` -> matrix input selector
- ``Master ...`` / ``... Output``     -> output bus selector (enum),
  stereo bus gain (dB + switch) or mono aux gain (dB only)

The result is only a candidate. It is adopted when `is_complete()` holds,
otherwise the built-in profile (if any) is used unchanged.
"""

import logging
import re
from collections.abc import Sequence

from scarlettmix.exceptions import UnsupportedDeviceError
from scarlettmix.models import ControlInfo, DeviceProfile, SlotMap

from .registry import ProfileRegistry

logger = logging.getLogger(__name__)

_MATRIX_CELL_ROW_MAJOR = re.compile(r"^Matrix (\d+) Mix ([A-Z])$")
_MATRIX_CELL_COLUMN_MAJOR = re.compile(r"^Mix ([A-Z]) Input (\d+)$")
_MATRIX_INPUT = re.compile(r"^(?:Matrix|Mixer)\b.*\bInput\b")
_HIZ = re.compile(r"\b(?:Impedance|Level)\b")
_PAD = re.compile(r"\bPad\b")
_AIR = re.compile(r"\bAir\b")
_LABEL = re.compile(r"\(([^)]*)\)")
_LABEL_NOISE = re.compile(r"\b(?:Master|Output)\b")


def derive_label(name: str) -> str:
    """
    Extract a display label from a bus control name.

    ``"Master 1 (Monitor)"`` gives ``"Monitor"``, ``"Headphones Output"``
    gives ``"Headphones"``.
    """
    match = _LABEL.search(name)
    if match and match.group(1).strip():
        return match.group(1).strip()
    label = " ".join(_LABEL_NOISE.sub(" ", name).split())
    return label or name


def _progression(indices: Sequence[int]) -> tuple[int, int, int]:
    """
    Leading arithmetic run of a sorted index list.

    Returns:
        (offset, stride, count); all zero for an empty list
    """
    if not indices:
        return 0, 0, 0
    if len(indices) == 1:
        return indices[0], 0, 1
    offset = indices[0]
    stride = indices[1] - indices[0]
    count = 1
    while count < len(indices) and indices[count] == offset + count * stride:
        count += 1
    return offset, stride, count


def _matrix_layout(cells: dict[tuple[int, int], int]) -> tuple[int, int, int, bool, int]:
    """
    Work out addressing for the parsed matrix cells.

    Returns:
        (rows, columns, offset, column_major, stride). offset is 0 when the
        cells do not form a regular grid.
    """
    if not cells:
        return 0, 0, 0, False, 0

    rows = max(r for r, _ in cells) + 1
    columns = max(c for _, c in cells) + 1
    offset = cells.get((0, 0), 0)

    if cells.get((1, 0)) == offset + 1 and columns > 1:
        column_major = True
        stride = cells.get((0, 1), offset + rows) - offset
    else:
        column_major = False
        stride = cells.get((1, 0), offset + columns) - offset

    for r in range(rows):
        for c in range(columns):
            expected = offset + c * stride + r if column_major else offset + r * stride + c
            if cells.get((r, c)) != expected:
                logger.warning(
                    f"Matrix cell ({r},{c}) at {cells.get((r, c))}, expected {expected}; "
                    "matrix layout not derivable"
                )
                return rows, columns, 0, column_major, stride

    return rows, columns, offset, column_major, stride


def derive_profile(controls: Sequence[ControlInfo], name: str = "autodetected") -> DeviceProfile:
    """
    Build a candidate profile by pattern-matching control names.

    Args:
        controls: Enumerated controls in hardware order
        name: Card name to carry in the candidate

    Returns:
        A DeviceProfile which may be incomplete (see `is_complete()`)
    """
    master_index = None
    cells: dict[tuple[int, int], int] = {}
    hiz: list[int] = []
    pad: list[int] = []
    air: list[int] = []
    capture: list[int] = []
    matrix_in: list[int] = []
    gains: list[int] = []
    gain_labels: list[str] = []
    aux: list[int] = []
    aux_labels: list[str] = []
    buses: list[int] = []
    pad_is_switch = False

    for ctrl in controls:
        name_ = ctrl.name

        if name_ == "Master" and ctrl.has_playback_db:
            master_index = ctrl.index
            continue

        match = _MATRIX_CELL_ROW_MAJOR.match(name_)
        if match and ctrl.has_playback_db:
            cells[(int(match.group(1)) - 1, ord(match.group(2)) - ord("A"))] = ctrl.index
            continue

        match = _MATRIX_CELL_COLUMN_MAJOR.match(name_)
        if match and ctrl.has_playback_db:
            cells[(int(match.group(2)) - 1, ord(match.group(1)) - ord("A"))] = ctrl.index
            continue

        if _HIZ.search(name_) and ctrl.is_enumerated:
            hiz.append(ctrl.index)
        elif _PAD.search(name_) and (ctrl.is_enumerated or ctrl.has_capture_switch):
            pad.append(ctrl.index)
            if not ctrl.is_enumerated:
                pad_is_switch = True
        elif _AIR.search(name_) and ctrl.is_enumerated:
            air.append(ctrl.index)
        elif (name_.startswith("Input Source") or name_.startswith("PCM ")) and ctrl.is_enumerated:
            capture.append(ctrl.index)
        elif _MATRIX_INPUT.match(name_) and ctrl.is_enumerated:
            matrix_in.append(ctrl.index)
        elif name_.startswith("Master ") or " Output" in name_:
            if ctrl.is_enumerated:
                buses.append(ctrl.index)
            elif ctrl.has_playback_db and ctrl.has_playback_switch:
                gains.append(ctrl.index)
                gain_labels.append(derive_label(name_))
            elif ctrl.has_playback_db:
                aux.append(ctrl.index)
                aux_labels.append(derive_label(name_))

    capture_offset, _, capture_count = _progression(capture)
    if capture_count < len(capture):
        logger.warning(f"Capture selectors not contiguous, using the first {capture_count}")

    in_offset, in_stride, in_count = _progression(matrix_in)
    rows, columns, matrix_offset, column_major, stride = _matrix_layout(cells)

    candidate = DeviceProfile(
        name=name,
        matrix_inputs=min(in_count, rows),
        matrix_outputs=columns,
        capture_inputs=capture_count,
        output_buses=len(buses),
        stereo_master_buses=len(gains),
        mono_aux_buses=len(aux),
        hiz_count=len(hiz),
        pad_count=len(pad),
        air_count=len(air),
        matrix_offset=matrix_offset,
        matrix_stride=stride,
        matrix_input_offset=in_offset,
        matrix_input_stride=in_stride,
        capture_offset=capture_offset,
        column_major=column_major,
        pad_is_switch=pad_is_switch,
        master_index=master_index,
        gain_map=SlotMap(tuple(gains)),
        aux_map=SlotMap(tuple(aux)),
        output_bus_map=SlotMap(tuple(buses)),
        hiz_map=SlotMap(tuple(hiz)),
        pad_map=SlotMap(tuple(pad)),
        air_map=SlotMap(tuple(air)),
        gain_labels=tuple(gain_labels),
        aux_labels=tuple(aux_labels),
    )
    logger.debug(f"Derived profile candidate: {candidate}")
    return candidate


def select_profile(
    card_name: str,
    controls: Sequence[ControlInfo],
    registry: ProfileRegistry,
    autodetect: bool = True,
) -> DeviceProfile:
    """
    Pick the profile to adopt for a card.

    A complete autodetected candidate wins; otherwise the built-in profile
    for `card_name` is used unchanged.

    Raises:
        UnsupportedDeviceError: If there is neither a built-in profile nor a
            complete candidate
    """
    static = registry.lookup(card_name)

    if autodetect:
        candidate = derive_profile(controls, name=card_name)
        if candidate.is_complete():
            logger.info(f"Using autodetected layout for '{card_name}'")
            return candidate
        logger.info(
            f"Autodetected layout for '{card_name}' incomplete "
            f"(missing {', '.join(candidate.missing_fields())})"
        )

    if static is not None:
        logger.info(f"Using built-in profile for '{card_name}'")
        return static

    raise UnsupportedDeviceError(card_name, autodetect)
