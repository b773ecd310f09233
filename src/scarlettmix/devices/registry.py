"""
Static registry of known hardware layouts.

The registry reads profiles.json once, validates it with Pydantic and
answers exact-name lookups::

    Card reports: "Scarlett 18i6 USB"
                        ↓
    registry.lookup("Scarlett 18i6 USB")
                        ↓
    DeviceProfile(matrix 18x6, capture 18, buses 6, ...)

A card whose name is not in the table gets ``None``; the caller may then
derive a layout from the control names (see `autodetect`).
"""

import logging
from pathlib import Path

from scarlettmix.models import DeviceProfile

from .schema import ProfileTableSchema

logger = logging.getLogger(__name__)


class ProfileRegistry:
    """
    Registry of all built-in device profiles.

    Lookups have no side effects and the returned profiles are frozen.
    """

    def __init__(self, config_path: Path | None = None):
        """
        Initialize the registry.

        Args:
            config_path: Path to a profile table. If None, uses the bundled
                        profiles.json.
        """
        if config_path is None:
            config_path = Path(__file__).parent / "profiles.json"

        self.config_path = config_path
        self.schema: ProfileTableSchema = self._load_schema()
        self._by_name: dict[str, DeviceProfile] = {p.name: p for p in self.schema.profiles}

    def _load_schema(self) -> ProfileTableSchema:
        """Load and validate the profile table from JSON."""
        try:
            schema = ProfileTableSchema.from_json_file(self.config_path)
            logger.info(f"Loaded {len(schema.profiles)} device profiles from {self.config_path}")
            return schema
        except Exception as e:
            logger.error(f"Failed to load device profiles from {self.config_path}: {e}")
            raise

    def lookup(self, reported_name: str) -> DeviceProfile | None:
        """
        Find the profile for a card name (exact match).

        Args:
            reported_name: Card name as reported by the hardware

        Returns:
            Matching DeviceProfile or None
        """
        profile = self._by_name.get(reported_name)
        if profile is None:
            logger.debug(f"No built-in profile for '{reported_name}'")
        else:
            logger.debug(f"Found built-in profile for '{reported_name}'")
        return profile

    def names(self) -> list[str]:
        """Names of all known hardware models."""
        return list(self._by_name)

    def __contains__(self, reported_name: str) -> bool:
        return reported_name in self._by_name

    def __len__(self) -> int:
        return len(self._by_name)


# Singleton instance
_registry: ProfileRegistry | None = None


def get_registry() -> ProfileRegistry:
    """Get singleton ProfileRegistry instance."""
    global _registry
    if _registry is None:
        _registry = ProfileRegistry()
    return _registry
