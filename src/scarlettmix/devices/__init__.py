"""Device profiles: built-in table, autodetection and control addressing."""

from .autodetect import derive_label, derive_profile, select_profile
from .registry import ProfileRegistry, get_registry
from .resolver import ControlResolver
from .schema import ProfileTableSchema

__all__ = [
    "ControlResolver",
    "ProfileRegistry",
    "ProfileTableSchema",
    "derive_label",
    "derive_profile",
    "get_registry",
    "select_profile",
]
