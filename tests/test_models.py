"""Tests for the data models."""

import pytest
from pydantic import ValidationError

from scarlettmix.models import (
    SLOT_CAPACITY,
    ControlBank,
    ControlCapability,
    ControlId,
    ControlInfo,
    DeviceProfile,
    SlotMap,
)


@pytest.mark.unit
class TestSlotMap:
    """Sized optional index maps."""

    def test_get(self):
        slots = SlotMap((5, None, 9))
        assert slots.get(0) == 5
        assert slots.get(1) is None
        assert slots.get(2) == 9

    def test_out_of_range_is_absent(self):
        slots = SlotMap((5,))
        assert slots.get(1) is None
        assert slots.get(-1) is None

    def test_absent_is_never_zero(self):
        """An unused slot must not be confused with control index 0."""
        slots = SlotMap((None, 0))
        assert slots.get(0) is None
        assert slots.get(1) == 0

    def test_present(self):
        assert list(SlotMap((5, None, 9)).present()) == [(0, 5), (2, 9)]

    def test_empty_default(self):
        assert len(SlotMap()) == 0

    def test_negative_index_rejected(self):
        with pytest.raises(ValidationError):
            SlotMap((-1,))

    def test_capacity(self):
        with pytest.raises(ValidationError):
            SlotMap(tuple(range(SLOT_CAPACITY + 1)))


@pytest.mark.unit
class TestDeviceProfile:
    """Profile validation and completeness."""

    def _complete(self, **overrides) -> DeviceProfile:
        fields = dict(
            name="Test",
            matrix_inputs=2,
            matrix_outputs=2,
            capture_inputs=2,
            output_buses=2,
            stereo_master_buses=1,
            matrix_offset=10,
            matrix_stride=3,
            matrix_input_offset=9,
            matrix_input_stride=3,
            capture_offset=5,
            gain_map=SlotMap((1,)),
            output_bus_map=SlotMap((2, 3)),
        )
        fields.update(overrides)
        return DeviceProfile(**fields)

    def test_complete(self):
        profile = self._complete()
        assert profile.is_complete()
        assert profile.missing_fields() == []

    @pytest.mark.parametrize("field", [
        "matrix_inputs", "matrix_outputs", "capture_inputs", "output_buses",
        "matrix_offset", "matrix_input_offset", "capture_offset",
    ])
    def test_zero_required_field_is_incomplete(self, field):
        profile = self._complete(**{field: 0})
        assert not profile.is_complete()
        assert field in profile.missing_fields()

    def test_no_stereo_buses_is_incomplete(self):
        profile = self._complete(stereo_master_buses=0, gain_map=SlotMap())
        assert profile.missing_fields() == ["stereo_master_buses"]

    def test_negative_count_rejected(self):
        with pytest.raises(ValidationError):
            self._complete(matrix_inputs=-1)

    def test_frozen(self):
        profile = self._complete()
        with pytest.raises(ValidationError):
            profile.matrix_inputs = 4

    def test_with_name(self):
        profile = self._complete()
        renamed = profile.with_name("Other")
        assert renamed.name == "Other"
        assert renamed.matrix_offset == profile.matrix_offset
        assert profile.name == "Test"

    def test_labels_fall_back_to_slot_numbers(self):
        profile = self._complete(gain_labels=("Monitor",))
        assert profile.gain_label(0) == "Monitor"
        assert profile.gain_label(1) == "Out 2"
        assert profile.aux_label(0) == "Aux 1"


@pytest.mark.unit
class TestControls:
    """Control descriptions and identifiers."""

    def test_capabilities(self):
        ctrl = ControlInfo(
            index=3,
            name="Master 1 (Monitor)",
            capabilities=frozenset({ControlCapability.PLAYBACK_DB, ControlCapability.PLAYBACK_SWITCH}),
        )
        assert ctrl.has_playback_db
        assert ctrl.has_playback_switch
        assert not ctrl.is_enumerated
        assert not ctrl.has_capture_switch
        assert ctrl.describe() == "dB, PBS"

    def test_no_capabilities(self):
        assert ControlInfo(index=0, name="Sync Status").describe() == "-"

    def test_control_id_equality(self):
        assert ControlId.matrix(2, 4) == ControlId(ControlBank.MATRIX_GAIN, 2, 4)
        assert hash(ControlId.matrix(2, 4)) == hash(ControlId(ControlBank.MATRIX_GAIN, 2, 4))
        assert ControlId.matrix(2, 4) != ControlId.matrix(4, 2)

    def test_control_id_str(self):
        assert str(ControlId.matrix(2, 4)) == "matrix cell (2,4)"
        assert str(ControlId(ControlBank.OUTPUT_SOURCE, 3)) == "output source slot 3"
        assert str(ControlId(ControlBank.MASTER_MUTE)) == "master mute"

    def test_bank_kinds(self):
        assert ControlBank.MATRIX_GAIN.is_gain
        assert ControlBank.CAPTURE_SOURCE.is_selector
        assert ControlBank.BUS_MUTE.is_switch
        assert not ControlBank.BUS_MUTE.is_gain
