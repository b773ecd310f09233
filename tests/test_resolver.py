"""Tests for control addressing."""

import pytest

from scarlettmix.devices import ControlResolver
from scarlettmix.models import ControlBank, ControlId, DeviceProfile, SlotMap


def _profile(**overrides) -> DeviceProfile:
    fields = dict(
        name="Test",
        matrix_inputs=18,
        matrix_outputs=6,
        capture_inputs=18,
        output_buses=6,
        stereo_master_buses=3,
        hiz_count=2,
        matrix_offset=33,
        matrix_stride=7,
        matrix_input_offset=32,
        matrix_input_stride=7,
        capture_offset=13,
        master_index=0,
        gain_map=SlotMap((1, 4, 7)),
        output_bus_map=SlotMap((2, 3, 5, 6, 8, 9)),
        hiz_map=SlotMap((11, 12)),
    )
    fields.update(overrides)
    return DeviceProfile(**fields)


@pytest.fixture
def resolver():
    return ControlResolver(_profile())


@pytest.mark.unit
class TestMatrixAddressing:
    """Matrix cells in both orders."""

    def test_row_major(self, resolver):
        assert resolver.matrix_cell(0, 0) == 33
        assert resolver.matrix_cell(17, 5) == 33 + 17 * 7 + 5 == 157
        assert resolver.matrix_cell(2, 4) == 51

    def test_row_out_of_range(self, resolver):
        assert resolver.matrix_cell(18, 0) is None
        assert resolver.matrix_cell(-1, 0) is None

    def test_column_out_of_range(self, resolver):
        assert resolver.matrix_cell(0, 6) is None

    def test_column_major(self):
        resolver = ControlResolver(_profile(
            matrix_inputs=8, matrix_outputs=4, matrix_offset=20, matrix_stride=8, column_major=True
        ))
        assert resolver.matrix_cell(0, 0) == 20
        assert resolver.matrix_cell(3, 2) == 20 + 2 * 8 + 3 == 39
        assert resolver.matrix_cell(8, 0) is None

    def test_matrix_inputs(self, resolver):
        assert resolver.matrix_input(0) == 32
        assert resolver.matrix_input(17) == 32 + 17 * 7
        assert resolver.matrix_input(18) is None


@pytest.mark.unit
class TestSlotAddressing:
    """Selectors, buses and switches."""

    def test_capture(self, resolver):
        assert resolver.capture_input(0) == 13
        assert resolver.capture_input(17) == 30
        assert resolver.capture_input(18) is None

    def test_gain_slots(self, resolver):
        assert [resolver.gain(n) for n in range(4)] == [1, 4, 7, None]

    def test_output_buses(self, resolver):
        assert resolver.output_bus(5) == 9
        assert resolver.output_bus(6) is None

    def test_unused_slot_is_absent(self):
        resolver = ControlResolver(_profile(hiz_map=SlotMap((None, 12))))
        assert resolver.hiz(0) is None
        assert resolver.hiz(1) == 12

    def test_count_limits_map(self):
        """Slots beyond the profile count are absent even if mapped."""
        resolver = ControlResolver(_profile(hiz_count=1))
        assert resolver.hiz(1) is None

    def test_missing_banks(self, resolver):
        assert resolver.aux_gain(0) is None
        assert resolver.pad(0) is None
        assert resolver.air(0) is None

    def test_master(self, resolver):
        assert resolver.master() == 0
        assert resolver.resolve(ControlId(ControlBank.MASTER_GAIN)) == 0
        assert resolver.resolve(ControlId(ControlBank.MASTER_MUTE, 1)) is None

    def test_no_master(self):
        resolver = ControlResolver(_profile(master_index=None))
        assert resolver.resolve(ControlId(ControlBank.MASTER_GAIN)) is None


@pytest.mark.unit
class TestResolve:
    """Generic resolution and iteration order."""

    def test_resolve_dispatch(self, resolver):
        assert resolver.resolve(ControlId.matrix(2, 4)) == 51
        assert resolver.resolve(ControlId(ControlBank.MATRIX_SOURCE, 1)) == 39
        assert resolver.resolve(ControlId(ControlBank.CAPTURE_SOURCE, 1)) == 14
        assert resolver.resolve(ControlId(ControlBank.BUS_GAIN, 1)) == 4
        assert resolver.resolve(ControlId(ControlBank.BUS_MUTE, 1)) == 4
        assert resolver.resolve(ControlId(ControlBank.HIZ, 1)) == 12
        assert resolver.resolve(ControlId(ControlBank.OUTPUT_SOURCE, 0)) == 2

    def test_refresh_order(self, resolver):
        banks = []
        for control_id in resolver.control_ids():
            if not banks or banks[-1] != control_id.bank:
                banks.append(control_id.bank)

        # Matrix selectors and cells interleave row by row
        assert banks[0] == ControlBank.CAPTURE_SOURCE
        assert banks[1:3] == [ControlBank.MATRIX_SOURCE, ControlBank.MATRIX_GAIN]
        tail = [b for b in banks if b not in (ControlBank.MATRIX_SOURCE, ControlBank.MATRIX_GAIN)]
        assert tail == [
            ControlBank.CAPTURE_SOURCE,
            ControlBank.BUS_GAIN,
            ControlBank.BUS_MUTE,
            ControlBank.BUS_GAIN,
            ControlBank.BUS_MUTE,
            ControlBank.BUS_GAIN,
            ControlBank.BUS_MUTE,
            ControlBank.MASTER_GAIN,
            ControlBank.MASTER_MUTE,
            ControlBank.HIZ,
            ControlBank.OUTPUT_SOURCE,
        ]

    def test_resolved_count(self, resolver):
        pairs = list(resolver.resolved())
        # 18 capture + 18 * (1 + 6) matrix + 3 * 2 bus + 2 master + 2 hiz + 6 outputs
        assert len(pairs) == 18 + 18 * 7 + 6 + 2 + 2 + 6

    def test_resolved_skips_absent(self):
        resolver = ControlResolver(_profile(hiz_map=SlotMap((None, 12))))
        hiz = [cid for cid, _ in resolver.resolved() if cid.bank is ControlBank.HIZ]
        assert hiz == [ControlId(ControlBank.HIZ, 1)]
