"""Tagged identifiers for displayed mixer controls.

Every value sent to, or received from, the presentation layer carries a
ControlId naming the bank and slot it belongs to. The presentation layer
never sees hardware indices.
"""

from dataclasses import dataclass
from enum import Enum


class ControlBank(str, Enum):
    """Groups of displayed controls."""

    CAPTURE_SOURCE = "capture_source"  # Capture input routing selector (row)
    MATRIX_SOURCE = "matrix_source"  # Matrix input routing selector (row)
    MATRIX_GAIN = "matrix_gain"  # Matrix cell gain (row, column)
    BUS_GAIN = "bus_gain"  # Stereo master bus gain (slot)
    BUS_MUTE = "bus_mute"  # Stereo master bus mute (slot)
    AUX_GAIN = "aux_gain"  # Mono aux bus gain (slot)
    MASTER_GAIN = "master_gain"  # Main master gain
    MASTER_MUTE = "master_mute"  # Main master mute
    HIZ = "hiz"  # Instrument impedance switch (slot)
    PAD = "pad"  # Input pad switch (slot)
    AIR = "air"  # Air mode switch (slot)
    OUTPUT_SOURCE = "output_source"  # Output bus routing selector (slot)

    @property
    def is_gain(self) -> bool:
        return self in _GAIN_BANKS

    @property
    def is_selector(self) -> bool:
        return self in _SELECTOR_BANKS

    @property
    def is_switch(self) -> bool:
        return self in _SWITCH_BANKS


_GAIN_BANKS = frozenset({
    ControlBank.MATRIX_GAIN, ControlBank.BUS_GAIN, ControlBank.AUX_GAIN, ControlBank.MASTER_GAIN,
})
_SELECTOR_BANKS = frozenset({
    ControlBank.CAPTURE_SOURCE, ControlBank.MATRIX_SOURCE, ControlBank.OUTPUT_SOURCE,
})
_SWITCH_BANKS = frozenset({
    ControlBank.BUS_MUTE, ControlBank.MASTER_MUTE, ControlBank.HIZ, ControlBank.PAD, ControlBank.AIR,
})


@dataclass(frozen=True)
class ControlId:
    """
    Identifier of one displayed control.

    `index` is the row or slot number; `column` is only used by
    matrix gain cells.
    """

    bank: ControlBank
    index: int = 0
    column: int = 0

    @classmethod
    def matrix(cls, row: int, column: int) -> "ControlId":
        return cls(ControlBank.MATRIX_GAIN, row, column)

    def __str__(self) -> str:
        if self.bank is ControlBank.MATRIX_GAIN:
            return f"matrix cell ({self.index},{self.column})"
        if self.bank in (ControlBank.MASTER_GAIN, ControlBank.MASTER_MUTE):
            return self.bank.value.replace("_", " ")
        return f"{self.bank.value.replace('_', ' ')} slot {self.index}"
