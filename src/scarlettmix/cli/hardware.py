"""Hardware access used by the CLI commands.

Kept apart from the commands so the ALSA bindings are only loaded when a
command actually talks to a card.
"""

from scarlettmix.devices import get_registry
from scarlettmix.endpoint import ControlEndpoint


def open_endpoint(device: str) -> ControlEndpoint:
    """Open the control interface of an ALSA card."""
    from scarlettmix.endpoint.alsa import AlsaEndpoint

    return AlsaEndpoint(device)


def find_cards() -> list[tuple[str, str]]:
    """(device, card name) of every card the mixer can drive."""
    from scarlettmix.endpoint.alsa import discover_cards

    return [(card.device, card.name) for card in discover_cards(get_registry())]
