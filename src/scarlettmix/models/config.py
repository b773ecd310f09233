"""Mixer configuration model."""

import logging
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

from scarlettmix.exceptions import ConfigurationError, wrap_pydantic_error

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path.home() / ".scarlettmix" / "config.json"


class MixerConfig(BaseModel):
    """
    Resolved configuration handed to the engine by its host.

    The core consumes `(device, autodetect, verbose)`; `poll_interval`
    only paces the bundled tick loop.
    """

    device: str = Field(default="hw:2", min_length=1, description="ALSA control device, e.g. 'hw:2'")
    autodetect: bool = Field(
        default=True,
        description=(
            "Derive the control layout from control names. When disabled only "
            "the built-in profiles are used (--preset-only)."
        ),
    )
    verbose: int = Field(default=0, ge=0, description="Verbosity level (0 = warnings only)")
    poll_interval: float = Field(
        default=0.05, gt=0, le=5.0, description="Seconds between ticks of the run loop"
    )

    @classmethod
    def load(cls, path: Path) -> "MixerConfig":
        """
        Load a config file. The file is only ever read.

        Raises:
            ConfigFileInvalidError: If the file has invalid JSON syntax
            ConfigValidationError: If values fail validation
            ConfigurationError: If the file cannot be read
        """
        try:
            text = path.read_text()
        except OSError as e:
            raise ConfigurationError(
                user_message=f"Cannot read configuration file {path}",
                technical_message=f"Reading {path} failed: {e}",
                recoverable=True,
            ) from e

        try:
            config = cls.model_validate_json(text)
        except ValidationError as e:
            raise wrap_pydantic_error(e, str(path)) from e

        logger.info(f"Loaded configuration from {path}")
        return config

    @classmethod
    def load_or_default(cls, path: Path | None = None, **overrides) -> "MixerConfig":
        """
        Load the config file if it exists, then apply explicit overrides.

        Only values present in the file or given as overrides count as set,
        so callers can tell them apart from defaults via `model_fields_set`.

        Args:
            path: Config file path (defaults to ~/.scarlettmix/config.json)
            **overrides: Values from the command line; ``None`` entries are ignored
        """
        if path is None:
            path = DEFAULT_CONFIG_PATH

        if path.exists():
            base = cls.load(path).model_dump(exclude_unset=True)
        else:
            logger.debug(f"No configuration file at {path}, using defaults")
            base = {}

        base.update({key: value for key, value in overrides.items() if value is not None})
        try:
            return cls.model_validate(base)
        except ValidationError as e:
            raise wrap_pydantic_error(e, str(path)) from e
