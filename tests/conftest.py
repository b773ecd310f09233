"""Pytest fixtures for tests."""

import os
import select
from pathlib import Path
from tempfile import TemporaryDirectory

import pytest

from scarlettmix.devices import ProfileRegistry
from scarlettmix.exceptions import EndpointIOError
from scarlettmix.models import ControlCapability, ControlInfo, MixerConfig

ENUM = frozenset({ControlCapability.ENUMERATED})
GAIN = frozenset({ControlCapability.PLAYBACK_DB, ControlCapability.PLAYBACK_SWITCH})
DB = frozenset({ControlCapability.PLAYBACK_DB})
CAPTURE = frozenset({ControlCapability.CAPTURE_SWITCH})

# Routing sources offered by every selector (31 items)
SOURCES = (
    ["Off"]
    + [f"Analog {n}" for n in range(1, 9)]
    + ["SPDIF 1", "SPDIF 2"]
    + [f"ADAT {n}" for n in range(1, 9)]
    + [f"Mix {c}" for c in "ABCDEF"]
    + [f"PCM {n}" for n in range(1, 7)]
)


def build_controls(specs: list[tuple[str, frozenset]]) -> list[ControlInfo]:
    """Turn (name, capabilities) pairs into an enumerated control list."""
    return [
        ControlInfo(index=index, name=name, capabilities=caps)
        for index, (name, caps) in enumerate(specs)
    ]


def gen1_specs(
    labels: list[str],
    inputs: list[tuple[str, frozenset]],
    captures: int,
    matrix_outputs: int = 6,
) -> list[tuple[str, frozenset]]:
    """
    Control names of a first generation card, in driver order.

    Master, then gain and left/right source per labelled bus, "Sync Status",
    the per-input switches, the capture selectors, "Sample Clock Source"
    and finally 18 matrix rows of one input selector plus one cell per mix.
    """
    specs = [("Master", GAIN)]
    for n, label in enumerate(labels, start=1):
        specs += [
            (f"Master {n} ({label})", GAIN),
            (f"Master {n}L ({label}) Source", ENUM),
            (f"Master {n}R ({label}) Source", ENUM),
        ]
    specs.append(("Sync Status", ENUM))
    specs += inputs
    specs += [(f"Input Source {n:02d}", ENUM) for n in range(1, captures + 1)]
    specs.append(("Sample Clock Source", ENUM))
    mixes = "ABCDEFGH"[:matrix_outputs]
    for r in range(1, 19):
        specs.append((f"Matrix {r:02d} Input", ENUM))
        specs += [(f"Matrix {r:02d} Mix {c}", DB) for c in mixes]
    return specs


def gen1_18i6_specs() -> list[tuple[str, frozenset]]:
    """
    First generation 18i6.

    Matches the built-in profile: master 0, bus gains 1/4/7, hi-z 11/12,
    capture selectors from 13, matrix inputs from 32 and cells from 33,
    both with stride 7. 158 controls in total.
    """
    return gen1_specs(
        ["Monitor", "Headphone", "SPDIF"],
        [("Input 1 Impedance", ENUM), ("Input 2 Impedance", ENUM)],
        captures=18,
    )


# Element order of the other first generation cards in the built-in table
GEN1_MODEL_SPECS = {
    "Scarlett 18i6 USB": gen1_18i6_specs,
    "Scarlett 18i8 USB": lambda: gen1_specs(
        ["Monitor", "Headphone 1", "Headphone 2", "SPDIF"],
        [
            ("Input 1 Impedance", ENUM), ("Input 1 Pad", ENUM),
            ("Input 2 Impedance", ENUM), ("Input 2 Pad", ENUM),
            ("Input 3 Pad", ENUM), ("Input 4 Pad", ENUM),
        ],
        captures=18,
        matrix_outputs=8,
    ),
    "Scarlett 18i20 USB": lambda: gen1_specs(
        ["Monitor", "Line 3/4", "Line 5/6", "Line 7/8", "Line 9/10",
         "SPDIF", "ADAT 1/2", "ADAT 3/4", "ADAT 5/6", "ADAT 7/8"],
        [],
        captures=18,
        matrix_outputs=8,
    ),
    "Scarlett 6i6 USB": lambda: gen1_specs(
        ["Monitor", "Headphone", "SPDIF"],
        [
            ("Input 1 Impedance", ENUM), ("Input 1 Pad", ENUM),
            ("Input 2 Impedance", ENUM), ("Input 2 Pad", ENUM),
        ],
        captures=6,
    ),
    "Scarlett 8i6 USB": lambda: gen1_specs(
        ["Monitor", "Headphone"],
        [
            ("Input 1 Impedance", ENUM), ("Input 2 Impedance", ENUM),
            ("Input 1 Pad", ENUM), ("Input 2 Pad", ENUM),
        ],
        captures=8,
    ),
}


def column_major_specs() -> list[tuple[str, frozenset]]:
    """
    Control names of a newer driver generation with a column-major matrix.

    Two stereo buses (0, 1), one aux bus (2), four bus selectors (3-6),
    hi-z 7, pad as capture switch 8, air 9, capture selectors 10-13,
    matrix inputs 14-21 and an 8x4 matrix from 22 with stride 8.
    54 controls in total.
    """
    specs = [
        ("Monitor Output", GAIN),
        ("Headphones Output", GAIN),
        ("Line 5 Output", DB),
        ("Master 1L Source", ENUM),
        ("Master 1R Source", ENUM),
        ("Master 2L Source", ENUM),
        ("Master 2R Source", ENUM),
        ("Line In 1 Level", ENUM),
        ("Line In 1 Pad", CAPTURE),
        ("Line In 1 Air", ENUM),
    ]
    specs += [(f"Input Source {n:02d}", ENUM) for n in range(1, 5)]
    specs += [(f"Mixer Input {n:02d}", ENUM) for n in range(1, 9)]
    for c in "ABCD":
        specs += [(f"Mix {c} Input {r:02d}", DB) for r in range(1, 9)]
    return specs


class FakeEndpoint:
    """
    In-memory control endpoint.

    Readiness is a real pipe: `signal()` makes the read end readable and
    `handle_events()` drains it. Every write is recorded in `writes`.
    """

    def __init__(self, card_name: str, specs: list[tuple[str, frozenset]]):
        self._card_name = card_name
        self.controls = build_controls(specs)

        self.items: dict[int, list[str]] = {}
        self.enums: dict[int, int] = {}
        self.db: dict[int, int] = {}
        self.ranges: dict[int, tuple[int, int]] = {}
        self.switches: dict[int, bool] = {}
        self.capture_switches: dict[int, bool] = {}
        self.playback_channels: dict[int, int] = {}
        self.capture_channels: dict[int, int] = {}

        for ctrl in self.controls:
            if ctrl.is_enumerated:
                if ctrl.name.endswith("Impedance") or ctrl.name.endswith("Level"):
                    self.items[ctrl.index] = ["Line", "Hi-Z"]
                elif "Source" in ctrl.name or "Input" in ctrl.name:
                    self.items[ctrl.index] = list(SOURCES)
                else:
                    self.items[ctrl.index] = ["Off", "On"]
                self.enums[ctrl.index] = 0
            if ctrl.has_playback_db:
                self.db[ctrl.index] = -12800
                self.ranges[ctrl.index] = (-12800, 600)
                self.playback_channels[ctrl.index] = 2
            if ctrl.has_playback_switch:
                self.switches[ctrl.index] = True
                self.playback_channels[ctrl.index] = 2
            if ctrl.has_capture_switch:
                self.capture_switches[ctrl.index] = False
                self.capture_channels[ctrl.index] = 1

        self.writes: list[tuple] = []
        self.failing_reads: set[int] = set()
        self.fail_poll = False
        self.closed = False
        self._read_fd, self._write_fd = os.pipe()
        os.set_blocking(self._read_fd, False)

    # Test helpers

    def signal(self) -> None:
        """Make the readiness descriptor readable."""
        os.write(self._write_fd, b"\x01")

    def snapshot(self) -> tuple:
        return (
            dict(self.enums), dict(self.db), dict(self.switches), dict(self.capture_switches)
        )

    def _check_read(self, index: int, operation: str) -> None:
        if index in self.failing_reads:
            raise EndpointIOError(operation, "device disconnected", device="hw:fake")

    # ControlEndpoint

    def card_name(self) -> str:
        return self._card_name

    def enumerate_controls(self) -> list[ControlInfo]:
        return list(self.controls)

    def get_enum(self, index: int) -> int:
        self._check_read(index, f"get enum {index}")
        return self.enums[index]

    def set_enum(self, index: int, item: int) -> None:
        self.writes.append(("enum", index, item))
        self.enums[index] = item

    def enum_item_names(self, index: int) -> list[str]:
        return list(self.items[index])

    def get_playback_switch(self, index: int) -> bool:
        self._check_read(index, f"get switch {index}")
        return self.switches[index]

    def set_playback_switch(self, index: int, channel: int, on: bool) -> None:
        self.writes.append(("switch", index, channel, on))
        self.switches[index] = on

    def get_capture_switch(self, index: int) -> bool:
        self._check_read(index, f"get capture switch {index}")
        return self.capture_switches[index]

    def set_capture_switch(self, index: int, channel: int, on: bool) -> None:
        self.writes.append(("capture_switch", index, channel, on))
        self.capture_switches[index] = on

    def get_db(self, index: int) -> int:
        self._check_read(index, f"get dB {index}")
        return self.db[index]

    def set_db(self, index: int, channel: int, centibels: int, capture: bool = False) -> None:
        self.writes.append(("db", index, channel, centibels, capture))
        if not capture:
            self.db[index] = centibels

    def db_range(self, index: int) -> tuple[int, int]:
        return self.ranges[index]

    def has_playback_channel(self, index: int, channel: int) -> bool:
        return channel < self.playback_channels.get(index, 0)

    def has_capture_channel(self, index: int, channel: int) -> bool:
        return channel < self.capture_channels.get(index, 0)

    def poll_descriptors(self) -> list[tuple[int, int]]:
        if self.fail_poll:
            raise EndpointIOError("get poll descriptors", "device disconnected", device="hw:fake")
        return [(self._read_fd, select.POLLIN)]

    def handle_events(self) -> int:
        handled = 0
        while True:
            try:
                data = os.read(self._read_fd, 64)
            except BlockingIOError:
                break
            if not data:
                break
            handled += len(data)
        return handled

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        os.close(self._read_fd)
        os.close(self._write_fd)


@pytest.fixture
def temp_dir():
    """Create a temporary directory that gets cleaned up."""
    with TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def registry():
    """Registry loaded from the bundled profile table."""
    return ProfileRegistry()


@pytest.fixture
def config():
    return MixerConfig(device="hw:fake")


@pytest.fixture
def gen1_controls():
    return build_controls(gen1_18i6_specs())


@pytest.fixture
def column_major_controls():
    return build_controls(column_major_specs())


@pytest.fixture
def fake_18i6():
    """Fake first generation 18i6."""
    endpoint = FakeEndpoint("Scarlett 18i6 USB", gen1_18i6_specs())
    yield endpoint
    endpoint.close()


@pytest.fixture
def fake_column_major():
    """Fake newer-generation card reporting a 6i6 name."""
    endpoint = FakeEndpoint("Scarlett 6i6 USB", column_major_specs())
    yield endpoint
    endpoint.close()
