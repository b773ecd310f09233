"""Control addressing: map displayed controls to flat control indices.

Pure index arithmetic over a DeviceProfile. Every lookup returns either a
flat index or None ("absent"); callers treat None as a no-op, never as a
fallback index.
"""

from typing import Iterator, Optional

from scarlettmix.models import ControlBank, ControlId, DeviceProfile


class ControlResolver:
    """
    Resolve (bank, slot) identifiers against one profile.

    Matrix cells use ``offset + r * stride + c`` for row-major layouts and
    ``offset + c * stride + r`` for column-major ones.
    """

    def __init__(self, profile: DeviceProfile):
        self.profile = profile

    def matrix_cell(self, row: int, column: int) -> Optional[int]:
        p = self.profile
        if not (0 <= row < p.matrix_inputs and 0 <= column < p.matrix_outputs):
            return None
        if p.column_major:
            return p.matrix_offset + column * p.matrix_stride + row
        return p.matrix_offset + row * p.matrix_stride + column

    def matrix_input(self, row: int) -> Optional[int]:
        p = self.profile
        if not 0 <= row < p.matrix_inputs:
            return None
        return p.matrix_input_offset + row * p.matrix_input_stride

    def capture_input(self, row: int) -> Optional[int]:
        p = self.profile
        if not 0 <= row < p.capture_inputs:
            return None
        return p.capture_offset + row

    def gain(self, slot: int) -> Optional[int]:
        if slot >= self.profile.stereo_master_buses:
            return None
        return self.profile.gain_map.get(slot)

    def aux_gain(self, slot: int) -> Optional[int]:
        if slot >= self.profile.mono_aux_buses:
            return None
        return self.profile.aux_map.get(slot)

    def output_bus(self, slot: int) -> Optional[int]:
        if slot >= self.profile.output_buses:
            return None
        return self.profile.output_bus_map.get(slot)

    def hiz(self, slot: int) -> Optional[int]:
        if slot >= self.profile.hiz_count:
            return None
        return self.profile.hiz_map.get(slot)

    def pad(self, slot: int) -> Optional[int]:
        if slot >= self.profile.pad_count:
            return None
        return self.profile.pad_map.get(slot)

    def air(self, slot: int) -> Optional[int]:
        if slot >= self.profile.air_count:
            return None
        return self.profile.air_map.get(slot)

    def master(self) -> Optional[int]:
        return self.profile.master_index

    def resolve(self, control_id: ControlId) -> Optional[int]:
        """Resolve any displayed control to its flat index (or None)."""
        bank = control_id.bank
        n = control_id.index
        if bank is ControlBank.MATRIX_GAIN:
            return self.matrix_cell(n, control_id.column)
        if bank is ControlBank.MATRIX_SOURCE:
            return self.matrix_input(n)
        if bank is ControlBank.CAPTURE_SOURCE:
            return self.capture_input(n)
        if bank in (ControlBank.BUS_GAIN, ControlBank.BUS_MUTE):
            return self.gain(n)
        if bank is ControlBank.AUX_GAIN:
            return self.aux_gain(n)
        if bank in (ControlBank.MASTER_GAIN, ControlBank.MASTER_MUTE):
            return self.master() if n == 0 else None
        if bank is ControlBank.HIZ:
            return self.hiz(n)
        if bank is ControlBank.PAD:
            return self.pad(n)
        if bank is ControlBank.AIR:
            return self.air(n)
        if bank is ControlBank.OUTPUT_SOURCE:
            return self.output_bus(n)
        return None

    def control_ids(self) -> Iterator[ControlId]:
        """
        Every displayed control the profile defines, in refresh order.

        Capture selectors, matrix selectors and cells, stereo bus gains and
        mutes, aux gains, master gain and mute, hi-z/pad/air, output buses.
        """
        p = self.profile
        for r in range(p.capture_inputs):
            yield ControlId(ControlBank.CAPTURE_SOURCE, r)
        for r in range(p.matrix_inputs):
            yield ControlId(ControlBank.MATRIX_SOURCE, r)
            for c in range(p.matrix_outputs):
                yield ControlId.matrix(r, c)
        for slot in range(p.stereo_master_buses):
            yield ControlId(ControlBank.BUS_GAIN, slot)
            yield ControlId(ControlBank.BUS_MUTE, slot)
        for slot in range(p.mono_aux_buses):
            yield ControlId(ControlBank.AUX_GAIN, slot)
        if p.master_index is not None:
            yield ControlId(ControlBank.MASTER_GAIN)
            yield ControlId(ControlBank.MASTER_MUTE)
        for slot in range(p.hiz_count):
            yield ControlId(ControlBank.HIZ, slot)
        for slot in range(p.pad_count):
            yield ControlId(ControlBank.PAD, slot)
        for slot in range(p.air_count):
            yield ControlId(ControlBank.AIR, slot)
        for slot in range(p.output_buses):
            yield ControlId(ControlBank.OUTPUT_SOURCE, slot)

    def resolved(self) -> Iterator[tuple[ControlId, int]]:
        """(ControlId, index) for every control that is not absent."""
        for control_id in self.control_ids():
            index = self.resolve(control_id)
            if index is not None:
                yield control_id, index
