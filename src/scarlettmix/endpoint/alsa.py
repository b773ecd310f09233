"""ALSA simple-mixer endpoint built on pyalsaaudio."""

import logging
from dataclasses import dataclass

import alsaaudio

from scarlettmix.devices import ProfileRegistry
from scarlettmix.exceptions import DeviceOpenError, wrap_alsa_error
from scarlettmix.models import ControlCapability, ControlInfo

logger = logging.getLogger(__name__)

# Card names that are worth offering even without a built-in profile
_FAMILY_PREFIXES = ("Scarlett", "Clarett")


def resolve_card_index(device: str) -> int:
    """
    Turn ``hw:N``, ``hw:ID`` or ``N`` into an ALSA card index.

    Raises:
        DeviceOpenError: If no such card exists
    """
    card = device[3:] if device.startswith("hw:") else device
    # Trailing ",dev" is irrelevant to the control interface
    card = card.split(",", 1)[0]

    try:
        indexes = list(alsaaudio.card_indexes())
        ids = list(alsaaudio.cards())
    except alsaaudio.ALSAAudioError as e:
        raise wrap_alsa_error(e, "open card list", device=device) from e

    if card.isdigit():
        index = int(card)
        if index in indexes:
            return index
    else:
        for index, card_id in zip(indexes, ids):
            if card_id == card:
                return index

    raise DeviceOpenError(device, original_error=f"no card matches '{card}'")


@dataclass(frozen=True)
class CardInfo:
    """A sound card found by `discover_cards`."""

    index: int
    card_id: str
    name: str
    long_name: str

    @property
    def device(self) -> str:
        return f"hw:{self.index}"


def discover_cards(registry: ProfileRegistry) -> list[CardInfo]:
    """
    Scan every sound card and keep the ones this mixer can drive.

    A card qualifies when its name has a built-in profile or belongs to
    a supported product family (it may still be autodetected).

    Raises:
        EndpointIOError: If the card list cannot be read
    """
    try:
        indexes = list(alsaaudio.card_indexes())
        ids = list(alsaaudio.cards())
    except alsaaudio.ALSAAudioError as e:
        raise wrap_alsa_error(e, "list cards") from e

    found = []
    for index, card_id in zip(indexes, ids):
        try:
            name, long_name = alsaaudio.card_name(index)
        except alsaaudio.ALSAAudioError as e:
            logger.debug(f"Skipping card {index}: {e}")
            continue

        if name in registry or name.startswith(_FAMILY_PREFIXES):
            logger.debug(f"Found candidate card {index}: {name}")
            found.append(CardInfo(index=index, card_id=card_id, name=name, long_name=long_name))
    return found


class AlsaEndpoint:
    """
    Control endpoint for one ALSA card.

    Simple-mixer elements are addressed by (name, id); the flat index used
    by the engine is the element's position in `alsaaudio.mixers()`.
    One `alsaaudio.Mixer` is kept per element so that cached element
    values are refreshed by `handle_events`.

    `alsaaudio.mixers()` also lists inactive elements, so the flat index
    counts them. The kernel driver reports every Scarlett element as
    active, which keeps the built-in offsets valid. On other drivers an
    inactive element shifts later indices, which open-time validation
    reports when a shifted index lands on a control of the wrong kind.
    """

    def __init__(self, device: str = "hw:2"):
        """
        Attach to the card's mixer.

        Args:
            device: ``hw:N``, ``hw:ID`` or a bare card number

        Raises:
            DeviceOpenError: If the card cannot be found or opened
        """
        self.device = device
        self.cardindex = resolve_card_index(device)
        self._elements: list[tuple[str, int]] = []
        self._mixers: dict[int, alsaaudio.Mixer] = {}

        try:
            names = alsaaudio.mixers(cardindex=self.cardindex)
        except alsaaudio.ALSAAudioError as e:
            raise wrap_alsa_error(e, "open mixer", device=device) from e

        seen: dict[str, int] = {}
        for name in names:
            element_id = seen.get(name, 0)
            seen[name] = element_id + 1
            self._elements.append((name, element_id))

        logger.info(f"Opened {device} (card {self.cardindex}, {len(self._elements)} elements)")

    def _mixer(self, index: int) -> alsaaudio.Mixer:
        mixer = self._mixers.get(index)
        if mixer is None:
            name, element_id = self._elements[index]
            try:
                mixer = alsaaudio.Mixer(control=name, id=element_id, cardindex=self.cardindex)
            except alsaaudio.ALSAAudioError as e:
                raise wrap_alsa_error(e, f"attach element '{name}'", device=self.device) from e
            self._mixers[index] = mixer
        return mixer

    def card_name(self) -> str:
        try:
            return alsaaudio.card_name(self.cardindex)[0]
        except alsaaudio.ALSAAudioError as e:
            raise wrap_alsa_error(e, "read card name", device=self.device) from e

    def enumerate_controls(self) -> list[ControlInfo]:
        controls = []
        for index, (name, _) in enumerate(self._elements):
            mixer = self._mixer(index)
            try:
                capabilities = self._capabilities(mixer)
            except alsaaudio.ALSAAudioError as e:
                raise wrap_alsa_error(e, f"inspect element '{name}'", device=self.device) from e
            controls.append(ControlInfo(index=index, name=name, capabilities=capabilities))
        return controls

    @staticmethod
    def _capabilities(mixer: alsaaudio.Mixer) -> frozenset[ControlCapability]:
        caps = set()
        if mixer.getenum():
            caps.add(ControlCapability.ENUMERATED)
        switches = mixer.switchcap()
        if "Playback Mute" in switches or "Mute" in switches:
            caps.add(ControlCapability.PLAYBACK_SWITCH)
        if "Capture Mute" in switches:
            caps.add(ControlCapability.CAPTURE_SWITCH)
        volumes = mixer.volumecap()
        if "Playback Volume" in volumes or "Volume" in volumes:
            caps.add(ControlCapability.PLAYBACK_DB)
        return frozenset(caps)

    # Enumerated items

    def get_enum(self, index: int) -> int:
        try:
            current, items = self._mixer(index).getenum()
        except alsaaudio.ALSAAudioError as e:
            raise wrap_alsa_error(e, f"get enum {index}", device=self.device) from e
        return items.index(current)

    def set_enum(self, index: int, item: int) -> None:
        try:
            self._mixer(index).setenum(item)
        except alsaaudio.ALSAAudioError as e:
            raise wrap_alsa_error(e, f"set enum {index}", device=self.device) from e

    def enum_item_names(self, index: int) -> list[str]:
        try:
            enum = self._mixer(index).getenum()
        except alsaaudio.ALSAAudioError as e:
            raise wrap_alsa_error(e, f"get enum items {index}", device=self.device) from e
        return list(enum[1]) if enum else []

    # Switches

    def get_playback_switch(self, index: int) -> bool:
        try:
            return not self._mixer(index).getmute()[0]
        except alsaaudio.ALSAAudioError as e:
            raise wrap_alsa_error(e, f"get switch {index}", device=self.device) from e

    def set_playback_switch(self, index: int, channel: int, on: bool) -> None:
        try:
            self._mixer(index).setmute(0 if on else 1, channel)
        except alsaaudio.ALSAAudioError as e:
            raise wrap_alsa_error(e, f"set switch {index}", device=self.device) from e

    def get_capture_switch(self, index: int) -> bool:
        try:
            return bool(self._mixer(index).getrec()[0])
        except alsaaudio.ALSAAudioError as e:
            raise wrap_alsa_error(e, f"get capture switch {index}", device=self.device) from e

    def set_capture_switch(self, index: int, channel: int, on: bool) -> None:
        try:
            self._mixer(index).setrec(1 if on else 0, channel)
        except alsaaudio.ALSAAudioError as e:
            raise wrap_alsa_error(e, f"set capture switch {index}", device=self.device) from e

    # Volume in hundredths of a dB

    def get_db(self, index: int) -> int:
        try:
            return self._mixer(index).getvolume(alsaaudio.PCM_PLAYBACK, alsaaudio.VOLUME_UNITS_DB)[0]
        except alsaaudio.ALSAAudioError as e:
            raise wrap_alsa_error(e, f"get dB {index}", device=self.device) from e

    def set_db(self, index: int, channel: int, centibels: int, capture: bool = False) -> None:
        pcmtype = alsaaudio.PCM_CAPTURE if capture else alsaaudio.PCM_PLAYBACK
        try:
            self._mixer(index).setvolume(centibels, channel, pcmtype, alsaaudio.VOLUME_UNITS_DB)
        except alsaaudio.ALSAAudioError as e:
            raise wrap_alsa_error(e, f"set dB {index}", device=self.device) from e

    def db_range(self, index: int) -> tuple[int, int]:
        try:
            low, high = self._mixer(index).getrange(alsaaudio.PCM_PLAYBACK, alsaaudio.VOLUME_UNITS_DB)
        except alsaaudio.ALSAAudioError as e:
            raise wrap_alsa_error(e, f"get dB range {index}", device=self.device) from e
        return low, high

    def has_playback_channel(self, index: int, channel: int) -> bool:
        mixer = self._mixer(index)
        try:
            if "Playback Volume" in mixer.volumecap() or "Volume" in mixer.volumecap():
                return channel < len(mixer.getvolume(alsaaudio.PCM_PLAYBACK))
            if mixer.switchcap():
                return channel < len(mixer.getmute())
        except alsaaudio.ALSAAudioError as e:
            raise wrap_alsa_error(e, f"get channels {index}", device=self.device) from e
        return False

    def has_capture_channel(self, index: int, channel: int) -> bool:
        mixer = self._mixer(index)
        try:
            if "Capture Volume" in mixer.volumecap():
                return channel < len(mixer.getvolume(alsaaudio.PCM_CAPTURE))
            if "Capture Mute" in mixer.switchcap():
                return channel < len(mixer.getrec())
        except alsaaudio.ALSAAudioError as e:
            raise wrap_alsa_error(e, f"get capture channels {index}", device=self.device) from e
        return False

    # Events

    def poll_descriptors(self) -> list[tuple[int, int]]:
        if not self._elements:
            return []
        try:
            return list(self._mixer(0).polldescriptors())
        except alsaaudio.ALSAAudioError as e:
            raise wrap_alsa_error(e, "get poll descriptors", device=self.device) from e

    def handle_events(self) -> int:
        """Drain events on every attached element so cached values are current."""
        handled = 0
        try:
            for index, mixer in self._mixers.items():
                count = mixer.handleevents()
                if index == 0:
                    handled = count
        except alsaaudio.ALSAAudioError as e:
            raise wrap_alsa_error(e, "handle events", device=self.device) from e
        return handled

    def close(self) -> None:
        for mixer in self._mixers.values():
            mixer.close()
        self._mixers.clear()
        logger.debug(f"Closed {self.device}")
