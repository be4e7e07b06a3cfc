"""Configuration management for domainarch.

Settings come from default values, an optional TOML file, and
command-line options (which take precedence over the file).

Example TOML file::

    [summary]
    target_models = ["SH2", "Pkinase"]
    i_e_value_threshold = 1e-5
    fs_e_value_threshold = 1e-10
    species = "MOUSE"
    exclude_models = ["RRM_1", "RRM_2"]

Example:
    >>> from domainarch.config import SummaryConfig
    >>> config = SummaryConfig.load("domainarch.toml")
    >>> config.target_models
    ('SH2', 'Pkinase')
"""

from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Any

import attrs

# =============================================================================
# Default Configuration Values
# =============================================================================

DEFAULT_SPECIES = "HUMAN"

# Separator of the -m/--models option ("SH2/Pkinase")
MODEL_LIST_SEPARATOR = "/"

# Table holding the settings in a TOML file
CONFIG_TABLE = "summary"


class ConfigurationError(ValueError):
    """Raised when settings are missing or out of range."""

    pass


def parse_model_list(value: str) -> tuple[str, ...]:
    """Split a slash-separated model list, dropping empty entries.

    Example:
        >>> parse_model_list("SH2/Pkinase")
        ('SH2', 'Pkinase')
    """
    return tuple(m.strip() for m in value.split(MODEL_LIST_SEPARATOR) if m.strip())


def _optional_float(value: Any) -> float | None:
    return None if value is None else float(value)


# =============================================================================
# Configuration Classes
# =============================================================================


@attrs.define
class SummaryConfig:
    """Settings for summarizing domain architectures.

    Attributes:
        target_models: Profiles that must all be present, in report order.
        i_e_value_threshold: Maximum independent E-value (None = no limit).
        fs_e_value_threshold: Maximum full-sequence E-value of target hits
            (None = no limit).
        species: Label written in the second report column.
        exclude_models: Profiles ignored entirely.
        short_ids: Report "sp|ACC|ID" style queries as "ID".
    """

    target_models: tuple[str, ...] = attrs.field(default=(), converter=tuple)
    i_e_value_threshold: float | None = attrs.field(default=None, converter=_optional_float)
    fs_e_value_threshold: float | None = attrs.field(default=None, converter=_optional_float)
    species: str = DEFAULT_SPECIES
    exclude_models: tuple[str, ...] = attrs.field(default=(), converter=tuple)
    short_ids: bool = False

    @property
    def extracts_linkers(self) -> bool:
        """Whether linkers are defined (exactly two targets)."""
        return len(self.target_models) == 2

    def validate(self) -> None:
        """Check settings before processing starts.

        Raises:
            ConfigurationError: If no target model is given, a target is
                repeated, or a threshold is negative.
        """
        if not self.target_models:
            raise ConfigurationError("At least one target model is required")
        duplicates = sorted({m for m in self.target_models if self.target_models.count(m) > 1})
        if duplicates:
            raise ConfigurationError(f"Duplicate target model(s): {', '.join(duplicates)}")
        if self.i_e_value_threshold is not None and self.i_e_value_threshold < 0:
            raise ConfigurationError("Attempt to use a negative i-E-value threshold")
        if self.fs_e_value_threshold is not None and self.fs_e_value_threshold < 0:
            raise ConfigurationError("Attempt to use a negative E-value threshold")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SummaryConfig:
        """Build a configuration from a mapping, rejecting unknown keys."""
        known = {field.name for field in attrs.fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigurationError(f"Unknown configuration key(s): {', '.join(unknown)}")

        values = dict(data)
        if isinstance(values.get("target_models"), str):
            values["target_models"] = parse_model_list(values["target_models"])
        try:
            return cls(**values)
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Invalid configuration: {e}") from e

    @classmethod
    def load(cls, path: Path | str | None = None) -> SummaryConfig:
        """Load configuration from a TOML file.

        Args:
            path: Path to the TOML file. If None, returns defaults.

        Returns:
            Loaded configuration object.

        Raises:
            FileNotFoundError: If the file doesn't exist.
            ConfigurationError: If the file is not valid TOML or has
                unknown keys.
        """
        if path is None:
            return cls()

        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        try:
            with open(path, "rb") as f:
                data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigurationError(f"Invalid TOML in {path}: {e}") from e

        return cls.from_dict(data.get(CONFIG_TABLE, {}))

    def evolve(self, **changes: Any) -> SummaryConfig:
        """Return a copy with the non-None ``changes`` applied."""
        return attrs.evolve(self, **{k: v for k, v in changes.items() if v is not None})

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to dictionary."""
        return attrs.asdict(self)
