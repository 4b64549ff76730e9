"""
Configuration schema and loading for rowflow.

Uses Pydantic for validation and Dynaconf for multi-source loading.
Settings are frozen (immutable) after construction.
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from rowflow.contracts.enums import FilterHandle, JoinHandle, JoinMode

_CANONICAL_HANDLES = frozenset({*(h.value for h in FilterHandle), *(h.value for h in JoinHandle)})


class LoggingSettings(BaseModel):
    """Log level and renderer selection.

    Example YAML:
        logging:
          level: DEBUG
          json_output: true
    """

    model_config = {"frozen": True}

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Root log level",
    )
    json_output: bool = Field(
        default=False,
        description="Emit JSON log lines instead of console output",
    )

    @field_validator("level", mode="before")
    @classmethod
    def normalize_level(cls, v: object) -> object:
        """Accept lowercase level names from env vars."""
        return v.upper() if isinstance(v, str) else v


class SnapshotSettings(BaseModel):
    """How editor graph documents are interpreted.

    The editor names node ports with its own ids. handle_aliases maps those
    ids onto the canonical handles ("filtered", "all", "a", "b"). Canonical
    ids are always accepted as-is.

    Example YAML:
        snapshot:
          handle_aliases:
            schema-filtered: filtered
            schema-all: all
            join-a: a
            join-b: b
          default_join_mode: full
    """

    model_config = {"frozen": True}

    handle_aliases: dict[str, str] = Field(
        default_factory=dict,
        description="Editor handle id -> canonical handle id",
    )
    default_join_mode: JoinMode = Field(
        default=JoinMode.INNER,
        description="Join mode for join nodes that don't declare one",
    )

    @field_validator("handle_aliases")
    @classmethod
    def validate_handle_targets(cls, v: dict[str, str]) -> dict[str, str]:
        """Every alias must point at a canonical handle."""
        for editor_id, canonical in v.items():
            if canonical not in _CANONICAL_HANDLES:
                raise ValueError(
                    f"Handle alias '{editor_id}' maps to unknown handle '{canonical}'. "
                    f"Valid handles: {sorted(_CANONICAL_HANDLES)}"
                )
        return v

    def canonical_handle(self, handle: str | None) -> str | None:
        """Translate an editor handle id to its canonical id."""
        if handle is None or handle == "":
            return None
        return self.handle_aliases.get(handle, handle)


class RowflowSettings(BaseModel):
    """Top-level rowflow configuration.

    All sections are optional; an empty settings file is valid.
    """

    model_config = {"frozen": True}

    logging: LoggingSettings = Field(
        default_factory=LoggingSettings,
        description="Logging configuration",
    )
    snapshot: SnapshotSettings = Field(
        default_factory=SnapshotSettings,
        description="Editor document interpretation",
    )


def load_settings(config_path: Path) -> RowflowSettings:
    """Load settings from YAML file with environment variable overrides.

    Uses Dynaconf for multi-source loading with precedence:
    1. Environment variables (ROWFLOW_*) - highest priority
    2. Config file (settings.yaml)
    3. Defaults from Pydantic schema - lowest priority

    Environment variable format: ROWFLOW_LOGGING__LEVEL for nested keys.

    Args:
        config_path: Path to YAML configuration file

    Returns:
        Validated RowflowSettings instance

    Raises:
        ValidationError: If configuration fails Pydantic validation
        FileNotFoundError: If config file doesn't exist
    """
    from dynaconf import Dynaconf

    # Dynaconf silently accepts missing files
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    dynaconf_settings = Dynaconf(
        envvar_prefix="ROWFLOW",
        settings_files=[str(config_path)],
        environments=False,
        load_dotenv=False,
        merge_enabled=True,
    )

    # Dynaconf returns uppercase keys; Pydantic fields are lowercase
    internal_keys = {"LOAD_DOTENV", "ENVIRONMENTS", "SETTINGS_FILES"}
    raw_config = {k.lower(): v for k, v in dynaconf_settings.as_dict().items() if k not in internal_keys}

    return RowflowSettings(**raw_config)
