# src/jobweave/core/config.py
"""
Configuration schema and loading for jobweave.

Uses Pydantic for validation and Dynaconf for multi-source loading.
Settings are frozen (immutable) after construction.
"""

import re
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from jobweave.contracts.enums import ProducerPolicy

_PREFIX_PATTERN = re.compile(r"^[A-Za-z][A-Za-z0-9_\-]*$")


class ResolverSettings(BaseModel):
    """Settings for a workflow resolution run.

    Example YAML:
        resolver:
          producer_policy: reject
          synthetic_prefix: "load_"
          require_registered_roles: true
    """

    model_config = {"frozen": True, "extra": "forbid"}

    producer_policy: ProducerPolicy = Field(
        default=ProducerPolicy.FIRST,
        description="Tie-break when several earlier nodes produce a consumed role",
    )
    synthetic_prefix: str = Field(
        default="load_",
        description="Display name prefix for synthesized source jobs",
    )
    require_registered_roles: bool = Field(
        default=False,
        description="Fail when a job references a role missing from the registry",
    )
    validate_workflows: bool = Field(
        default=True,
        description="Run structural validation on every resolved workflow",
    )

    @field_validator("synthetic_prefix")
    @classmethod
    def validate_synthetic_prefix(cls, v: str) -> str:
        """Prefix must start with a letter and contain no whitespace or separators."""
        if not _PREFIX_PATTERN.match(v):
            raise ValueError(f"synthetic_prefix must start with a letter and contain only letters, digits, '_' or '-', got {v!r}")
        return v


class JobweaveSettings(BaseModel):
    """Top-level settings."""

    model_config = {"frozen": True, "extra": "forbid"}

    resolver: ResolverSettings = Field(default_factory=ResolverSettings)
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "WARNING"
    log_json: bool = False

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: object) -> object:
        """Accept lowercase level names from YAML and environment variables."""
        if isinstance(v, str):
            return v.upper()
        return v


def load_settings(config_path: Path) -> JobweaveSettings:
    """Load settings from YAML file with environment variable overrides.

    Uses Dynaconf for multi-source loading with precedence:
    1. Environment variables (JOBWEAVE_*) - highest priority
    2. Config file
    3. Defaults from Pydantic schema - lowest priority

    Environment variable format: JOBWEAVE_RESOLVER__PRODUCER_POLICY for nested keys.

    Raises:
        ValidationError: If configuration fails Pydantic validation
        FileNotFoundError: If config file doesn't exist
    """
    from dynaconf import Dynaconf

    # Dynaconf silently accepts missing files
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    dynaconf_settings = Dynaconf(
        envvar_prefix="JOBWEAVE",
        settings_files=[str(config_path)],
        environments=False,
        load_dotenv=False,
        merge_enabled=True,
    )

    # Dynaconf returns uppercase keys, nested ones included
    internal_keys = {"LOAD_DOTENV", "ENVIRONMENTS", "SETTINGS_FILES"}
    raw_config = {k.lower(): v for k, v in dynaconf_settings.as_dict().items() if k not in internal_keys}
    if isinstance(raw_config.get("resolver"), dict):
        raw_config["resolver"] = {k.lower(): v for k, v in raw_config["resolver"].items()}

    return JobweaveSettings(**raw_config)
