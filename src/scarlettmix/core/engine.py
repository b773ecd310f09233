"""Synchronization engine between hardware controls and displayed values.

State machine::

    INIT ──► READY ──► POLLING ──► READY
               │                     ▲
               └──────► WRITING ─────┘
    (any) ──► CLOSED

`tick()` is called periodically by the host. It checks the endpoint's
descriptors with a zero timeout; when one is ready it drains the pending
events and re-reads every displayed value from the hardware. While that
refresh runs, writes are suppressed so a presentation layer echoing the
refreshed values back cannot trigger hardware writes.

`write()` is the user-interaction path. It resolves the control, skips
absent ones and performs the capability-specific write.
"""

import logging
import select
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from enum import Enum

from scarlettmix.devices import ControlResolver, ProfileRegistry, get_registry, select_profile
from scarlettmix.endpoint import ControlEndpoint
from scarlettmix.exceptions import EndpointIOError, ErrorContext, UnsupportedDeviceError, handle_errors
from scarlettmix.models import (
    ControlBank,
    ControlCapability,
    ControlId,
    ControlInfo,
    DeviceProfile,
    MixerConfig,
)
from scarlettmix.protocols import HostRuntime, MixerObserver
from scarlettmix.utils import GainValue, ObserverManager

from .io import ControlIO
from .reset import force_update

logger = logging.getLogger(__name__)

Value = float | int | bool

_POLL_FAILURE = select.POLLERR | select.POLLNVAL

# Item selected by "restore default" on each selector bank: (base + slot)
_DEFAULT_ITEM_BASE = {
    ControlBank.CAPTURE_SOURCE: 7,
    ControlBank.MATRIX_SOURCE: 1,
    ControlBank.OUTPUT_SOURCE: 25,
}


class EngineState(str, Enum):
    """Lifecycle states of the engine."""

    INIT = "init"
    READY = "ready"
    POLLING = "polling"
    WRITING = "writing"
    CLOSED = "closed"


class MixerEngine:
    """
    Owns the enumerated control list and keeps displayed values in sync.

    Single-threaded: the engine has no thread of its own and never blocks.
    It is re-entered once per host tick and once per user interaction,
    both from the same thread.
    """

    def __init__(
        self,
        endpoint: ControlEndpoint,
        profile: DeviceProfile,
        controls: Sequence[ControlInfo],
        host: HostRuntime | None = None,
        device: str | None = None,
    ):
        """
        Initialize the engine with an already selected profile.

        Args:
            endpoint: Control endpoint the controls were enumerated from
            profile: Adopted device profile
            controls: Enumerated controls in hardware order
            host: Host to notify when the endpoint fails
            device: Device identifier, for error messages

        Raises:
            MissingControlError: If the profile addresses a control the
                hardware does not have
        """
        self._state = EngineState.INIT
        self._endpoint = endpoint
        self._host = host
        self.profile = profile
        self.resolver = ControlResolver(profile)
        self.io = ControlIO(endpoint, controls, device=device)

        self._observers = ObserverManager[MixerObserver](observer_type_name="mixer")
        self._values: dict[ControlId, Value] = {}
        self._suppressed = False
        self._close_requested = False

        self._validate_addresses()
        self._state = EngineState.READY
        logger.info(f"Engine ready for '{profile.name}' ({len(self.io)} controls)")

    @classmethod
    def open(
        cls,
        endpoint: ControlEndpoint,
        config: MixerConfig,
        host: HostRuntime | None = None,
        registry: ProfileRegistry | None = None,
    ) -> "MixerEngine":
        """
        Enumerate controls, select a profile and build a READY engine.

        The engine takes ownership of `endpoint`; if opening fails the
        endpoint is closed and no engine is produced.

        Raises:
            UnsupportedDeviceError: No profile could be selected
            MissingControlError: The selected profile does not fit the controls
        """
        try:
            with ErrorContext(f"open mixer {config.device}", logger_instance=logger):
                card_name = endpoint.card_name()
                controls = endpoint.enumerate_controls()
                logger.info(f"'{card_name}' has {len(controls)} controls")
                if not controls:
                    raise UnsupportedDeviceError(card_name, config.autodetect, device=config.device)

                profile = select_profile(
                    card_name, controls, registry or get_registry(), autodetect=config.autodetect
                )
                engine = cls(endpoint, profile, controls, host=host, device=config.device)
                engine.refresh()
        except Exception:
            endpoint.close()
            raise
        return engine

    # Lifecycle

    @property
    def state(self) -> EngineState:
        return self._state

    @property
    def close_requested(self) -> bool:
        return self._close_requested

    def close(self) -> None:
        """Release the control list and the endpoint."""
        if self._state is EngineState.CLOSED:
            return
        self._state = EngineState.CLOSED
        self._observers.clear()
        self._values.clear()
        self._endpoint.close()
        logger.info(f"Engine for '{self.profile.name}' closed")

    def __enter__(self) -> "MixerEngine":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    # Observers

    def register_observer(self, observer: MixerObserver, replay: bool = True) -> None:
        """
        Register a presentation observer.

        Args:
            observer: Object implementing MixerObserver
            replay: Send the current value of every control to the new observer
        """
        self._observers.register(observer)
        if not replay:
            return
        with self._suppress_writes():
            for control_id, value in list(self._values.items()):
                try:
                    observer.on_control_value(control_id, value)
                except Exception as e:
                    logger.error(f"Error replaying {control_id} to {observer}: {e}", exc_info=True)

    def unregister_observer(self, observer: MixerObserver) -> None:
        self._observers.unregister(observer)

    # Polling

    def tick(self) -> bool:
        """
        Run one polling cycle.

        Returns:
            True if the hardware signalled a change and values were refreshed
        """
        if self._state is EngineState.CLOSED or self._close_requested:
            return False

        try:
            if not self._drain_events():
                return False
            self.refresh()
        except EndpointIOError as e:
            self._fail(e)
            return False
        return True

    def _drain_events(self) -> bool:
        """Zero-timeout readiness check; drain events when readable."""
        poller = select.poll()
        for fd, eventmask in self._endpoint.poll_descriptors():
            poller.register(fd, eventmask)

        try:
            events = poller.poll(0)
        except OSError as e:
            raise EndpointIOError("poll descriptors", str(e), device=self.io.device) from e

        if not events:
            return False

        revents = 0
        for _, event in events:
            revents |= event

        if revents & _POLL_FAILURE:
            raise EndpointIOError(
                "poll descriptors", f"poll error (revents=0x{revents:x})", device=self.io.device
            )
        if revents & select.POLLIN:
            self._state = EngineState.POLLING
            handled = self._endpoint.handle_events()
            logger.debug(f"Handled {handled} mixer events")
        return True

    def refresh(self) -> list[ControlId]:
        """
        Re-read every displayed value from the hardware.

        Order: capture selectors, matrix selectors and cells, stereo bus
        gains and mutes, aux gains, master gain and mute, hi-z/pad/air,
        output bus selectors. Observers are told about changed values only.

        Returns:
            Identifiers of the values that changed
        """
        changed: list[ControlId] = []
        with self._suppress_writes():
            self._state = EngineState.POLLING
            try:
                for control_id, index in self.resolver.resolved():
                    value = self._read(control_id, index)
                    if control_id in self._values and self._values[control_id] == value:
                        continue
                    self._values[control_id] = value
                    changed.append(control_id)
                    self._observers.notify("on_control_value", control_id, value)
            finally:
                if self._state is not EngineState.CLOSED:
                    self._state = EngineState.READY

        if changed:
            logger.debug(f"Refresh updated {len(changed)} values")
        return changed

    @contextmanager
    def _suppress_writes(self) -> Iterator[None]:
        """Hold the write-suppression flag for the duration of the block."""
        if self._suppressed:
            raise RuntimeError("write suppression is already held")
        self._suppressed = True
        try:
            yield
        finally:
            self._suppressed = False

    @property
    def writes_suppressed(self) -> bool:
        return self._suppressed

    def _read(self, control_id: ControlId, index: int) -> Value:
        bank = control_id.bank
        if bank.is_gain:
            return GainValue.from_db(self.io.read_db(index)).knob
        if bank in (ControlBank.BUS_MUTE, ControlBank.MASTER_MUTE):
            return self.io.read_mute(index)
        if bank.is_selector:
            return self.io.read_enum(index)
        return self.io.read_switch(index, capture_switch=self._is_capture_switch(bank))

    def _is_capture_switch(self, bank: ControlBank) -> bool:
        return bank is ControlBank.PAD and self.profile.pad_is_switch

    # Writing

    def write(self, control_id: ControlId, value: Value) -> bool:
        """
        Apply a user change to the hardware.

        Gains take a dial position in [0, 1], selectors an item index and
        switches/mutes a boolean.

        Returns:
            True if a hardware write was made; False for suppressed echoes,
            absent controls or a closed engine

        Raises:
            ValueError: If a selector item is out of range
            MissingControlError: If the profile does not fit the hardware
        """
        if self._suppressed:
            logger.debug(f"Ignoring write to {control_id} during refresh")
            return False
        if self._state is EngineState.CLOSED or self._close_requested:
            logger.warning(f"Ignoring write to {control_id}: engine is closed")
            return False

        index = self.resolver.resolve(control_id)
        if index is None:
            logger.debug(f"{control_id} is not present on '{self.profile.name}'")
            return False

        self._state = EngineState.WRITING
        try:
            self._values[control_id] = self._write(control_id, index, value)
        except EndpointIOError as e:
            self._fail(e)
            return False
        finally:
            if self._state is EngineState.WRITING:
                self._state = EngineState.READY
        return True

    def _write(self, control_id: ControlId, index: int, value: Value) -> Value:
        bank = control_id.bank
        if bank.is_gain:
            gain = GainValue.from_knob(float(value))
            self.io.write_db(index, gain.db)
            return gain.knob
        if bank in (ControlBank.BUS_MUTE, ControlBank.MASTER_MUTE):
            self.io.write_mute(index, bool(value))
            return bool(value)
        if bank.is_selector:
            item = int(value)
            count = self.io.enum_item_count(index)
            if not 0 <= item < count:
                raise ValueError(f"{control_id}: item {item} out of range (0-{count - 1})")
            self.io.write_enum(index, item)
            return item
        self.io.write_switch(index, bool(value), capture_switch=self._is_capture_switch(bank))
        return bool(value)

    def solo_matrix_cell(self, row: int, column: int) -> None:
        """
        Toggle a matrix cell as the only active cell of its row.

        An off cell goes to 0 dB and every other cell of the row is turned
        off; a cell that is already on is turned off with the rest.
        """
        target = ControlId.matrix(row, column)
        if self.resolver.resolve(target) is None:
            return
        unity = GainValue.from_db(0).knob
        was_off = self._values.get(target, 0.0) == 0.0
        for c in range(self.profile.matrix_outputs):
            cell = ControlId.matrix(row, c)
            self.write(cell, unity if (c == column and was_off) else 0.0)

    @handle_errors(operation_name="reset mixer")
    def reset(self) -> int:
        """
        Re-send the full mixer state to the hardware.

        Returns:
            Number of controls re-sent
        """
        if self._state is EngineState.CLOSED:
            return 0
        with self._suppress_writes():
            self._state = EngineState.WRITING
            try:
                return force_update(self.io, self.resolver)
            except EndpointIOError as e:
                self._fail(e)
                raise
            finally:
                if self._state is EngineState.WRITING:
                    self._state = EngineState.READY

    # Queries for the presentation layer

    def control_ids(self) -> list[ControlId]:
        """Every present control, in refresh order."""
        return [control_id for control_id, _ in self.resolver.resolved()]

    def value(self, control_id: ControlId) -> Value | None:
        """Last displayed value of a control."""
        return self._values.get(control_id)

    def enum_items(self, control_id: ControlId) -> list[str]:
        """Item names of a selector (empty for anything else)."""
        if not control_id.bank.is_selector:
            return []
        index = self.resolver.resolve(control_id)
        if index is None:
            return []
        return self.io.enum_item_names(index)

    def default_item(self, control_id: ControlId) -> int | None:
        """Item a selector returns to when reset to its default."""
        base = _DEFAULT_ITEM_BASE.get(control_id.bank)
        index = self.resolver.resolve(control_id)
        if base is None or index is None:
            return None
        count = self.io.enum_item_count(index)
        return (base + control_id.index) % count if count else None

    def label(self, control_id: ControlId) -> str:
        """Display label of a control."""
        bank = control_id.bank
        n = control_id.index
        if bank in (ControlBank.BUS_GAIN, ControlBank.BUS_MUTE):
            return self.profile.gain_label(n)
        if bank is ControlBank.AUX_GAIN:
            return self.profile.aux_label(n)
        if bank is ControlBank.MATRIX_GAIN:
            return f"Mix {chr(ord('A') + control_id.column)}"
        if bank in (ControlBank.MASTER_GAIN, ControlBank.MASTER_MUTE):
            return "Master"
        if bank is ControlBank.HIZ:
            return "Hi-Z"
        if bank is ControlBank.PAD:
            return "Pad"
        if bank is ControlBank.AIR:
            return "Air"
        return str(n + 1)

    # Internals

    def _validate_addresses(self) -> None:
        """Fail fast if any resolvable index is outside the list or unusable."""
        for control_id, index in self.resolver.resolved():
            bank = control_id.bank
            if bank.is_gain:
                self.io.require(index, ControlCapability.PLAYBACK_DB)
            elif bank in (ControlBank.BUS_MUTE, ControlBank.MASTER_MUTE):
                self.io.require(index, ControlCapability.PLAYBACK_SWITCH)
            elif self._is_capture_switch(bank):
                self.io.require(index, ControlCapability.CAPTURE_SWITCH)
            else:
                self.io.require(index, ControlCapability.ENUMERATED)

    def _fail(self, error: EndpointIOError) -> None:
        """Stop polling and ask the host to close the engine."""
        logger.error(f"Mixer endpoint failed: {error.technical_message}")
        if self._close_requested:
            return
        self._close_requested = True
        if self._state is not EngineState.CLOSED:
            self._state = EngineState.READY
        if self._host is not None:
            self._host.request_close(error.user_message)
