"""Pydantic schema for the built-in profile table (profiles.json)."""

from pathlib import Path

from pydantic import BaseModel, Field, field_validator

from scarlettmix.models import DeviceProfile


class ProfileTableSchema(BaseModel):
    """Root schema for the profiles.json table."""

    profiles: list[DeviceProfile] = Field(
        default_factory=list, description="Known hardware layouts"
    )

    @field_validator("profiles")
    @classmethod
    def validate_unique_names(cls, v: list[DeviceProfile]) -> list[DeviceProfile]:
        """Lookup is by exact name, so names must be unique."""
        seen = set()
        for profile in v:
            if profile.name in seen:
                raise ValueError(f"Duplicate profile name: {profile.name}")
            seen.add(profile.name)
        return v

    @classmethod
    def from_json_file(cls, path: Path) -> "ProfileTableSchema":
        """Load the table from JSON with validation."""
        with open(path) as f:
            return cls.model_validate_json(f.read())
