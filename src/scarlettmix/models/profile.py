"""Device profile model: one hardware model's control layout and addressing."""

from typing import Iterator, Optional

from pydantic import BaseModel, ConfigDict, Field, RootModel, field_validator, model_validator

# Largest number of slots any index map may hold
SLOT_CAPACITY = 32


class SlotMap(RootModel[tuple[Optional[int], ...]]):
    """
    Sized mapping from logical slot to an optional flat control index.

    ``None`` marks an unused slot. Looking up a slot beyond the map size is
    also absent, so an unused slot can never turn into index 0 or -1.
    """

    model_config = ConfigDict(frozen=True)

    root: tuple[Optional[int], ...] = ()

    @field_validator("root")
    @classmethod
    def validate_indices(cls, v: tuple[Optional[int], ...]) -> tuple[Optional[int], ...]:
        if len(v) > SLOT_CAPACITY:
            raise ValueError(f"at most {SLOT_CAPACITY} slots allowed, got {len(v)}")
        for index in v:
            if index is not None and index < 0:
                raise ValueError(f"control index {index} must be >= 0")
        return v

    def get(self, slot: int) -> Optional[int]:
        """Return the control index for a slot, or None if absent."""
        if not 0 <= slot < len(self.root):
            return None
        return self.root[slot]

    def present(self) -> Iterator[tuple[int, int]]:
        """Iterate (slot, index) pairs for every non-absent slot."""
        for slot, index in enumerate(self.root):
            if index is not None:
                yield slot, index

    def __len__(self) -> int:
        return len(self.root)


class DeviceProfile(BaseModel):
    """
    Control layout of one hardware model.

    Immutable: the engine adopts a profile wholesale and never edits it.
    Autodetection builds a separate candidate which is only adopted when
    `is_complete()` holds.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1, description="Card name reported by the hardware")

    # Sizes
    matrix_inputs: int = Field(default=0, ge=0, description="Matrix mixer input rows")
    matrix_outputs: int = Field(default=0, ge=0, description="Matrix mixer output columns")
    capture_inputs: int = Field(default=0, ge=0, description="Capture routing selectors")
    output_buses: int = Field(default=0, ge=0, description="Output bus routing selectors")
    stereo_master_buses: int = Field(default=0, ge=0, description="Stereo buses with gain + mute")
    mono_aux_buses: int = Field(default=0, ge=0, description="Mono buses with gain only")
    hiz_count: int = Field(default=0, ge=0)
    pad_count: int = Field(default=0, ge=0)
    air_count: int = Field(default=0, ge=0)

    # Addressing
    matrix_offset: int = Field(default=0, ge=0, description="Index of matrix cell (0,0)")
    matrix_stride: int = Field(default=0, ge=0)
    matrix_input_offset: int = Field(default=0, ge=0, description="Index of matrix input selector 0")
    matrix_input_stride: int = Field(default=0, ge=0)
    capture_offset: int = Field(default=0, ge=0, description="Index of capture selector 0")
    column_major: bool = Field(default=False, description="Matrix cells ordered column by column")
    pad_is_switch: bool = Field(default=False, description="Pad is a capture switch, not an enum")
    master_index: Optional[int] = Field(default=None, ge=0, description="Main master gain + mute")

    # Index maps
    gain_map: SlotMap = Field(default_factory=SlotMap)
    aux_map: SlotMap = Field(default_factory=SlotMap)
    output_bus_map: SlotMap = Field(default_factory=SlotMap)
    hiz_map: SlotMap = Field(default_factory=SlotMap)
    pad_map: SlotMap = Field(default_factory=SlotMap)
    air_map: SlotMap = Field(default_factory=SlotMap)

    # Display labels
    gain_labels: tuple[str, ...] = ()
    aux_labels: tuple[str, ...] = ()

    @model_validator(mode="after")
    def check_maps_cover_counts(self) -> "DeviceProfile":
        pairs = (
            ("stereo_master_buses", self.stereo_master_buses, "gain_map", self.gain_map),
            ("mono_aux_buses", self.mono_aux_buses, "aux_map", self.aux_map),
            ("output_buses", self.output_buses, "output_bus_map", self.output_bus_map),
            ("hiz_count", self.hiz_count, "hiz_map", self.hiz_map),
            ("pad_count", self.pad_count, "pad_map", self.pad_map),
            ("air_count", self.air_count, "air_map", self.air_map),
        )
        for count_name, count, map_name, slot_map in pairs:
            if count > len(slot_map):
                raise ValueError(f"{count_name}={count} exceeds {map_name} size {len(slot_map)}")
        return self

    def is_complete(self) -> bool:
        """
        Check every field required for adoption is non-zero.

        Matrix dimensions, capture count, bus count, stereo-master count
        and the three base offsets must all be set.
        """
        return all((
            self.matrix_inputs,
            self.matrix_outputs,
            self.capture_inputs,
            self.output_buses,
            self.stereo_master_buses,
            self.matrix_offset,
            self.matrix_input_offset,
            self.capture_offset,
        ))

    def missing_fields(self) -> list[str]:
        """Names of the required fields that are still zero."""
        required = (
            "matrix_inputs", "matrix_outputs", "capture_inputs", "output_buses",
            "stereo_master_buses", "matrix_offset", "matrix_input_offset", "capture_offset",
        )
        return [name for name in required if not getattr(self, name)]

    def with_name(self, name: str) -> "DeviceProfile":
        """Return a copy carrying a different card name."""
        return self.model_copy(update={"name": name})

    def gain_label(self, slot: int) -> str:
        if slot < len(self.gain_labels):
            return self.gain_labels[slot]
        return f"Out {slot + 1}"

    def aux_label(self, slot: int) -> str:
        if slot < len(self.aux_labels):
            return self.aux_labels[slot]
        return f"Aux {slot + 1}"
