"""
Settings file for dupsweep.

Optional YAML file providing defaults for the CLI:

    dupsweep:
      recursive: true
      keep: newest
      min_size: 1M
      algorithm: secure
      max_workers: 8
      output: reports/duplicates.txt
      log: logs/deletions.log

Explicit command-line flags override values from the file.
"""

import os
from pathlib import Path
from typing import Optional, Union

import structlog
import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from dupsweep.exceptions import InvalidConfigFile

logger = structlog.get_logger(__name__)

CONFIG_ENV_VAR = "DUPSWEEP_CONFIG"


class DedupSettings(BaseModel):
    """Schema of the `dupsweep` section."""

    recursive: Optional[bool] = Field(default=None, description="Walk subdirectories")
    keep: Optional[str] = Field(default=None, description="Retention policy name")
    min_size: Optional[str] = Field(default=None, description="Size floor, e.g. 1K, 10M")
    algorithm: Optional[str] = Field(default=None, description="fast or secure")
    max_workers: Optional[int] = Field(default=None, ge=1, le=256, description="Digest workers")
    chunk_size: Optional[int] = Field(default=None, gt=0, description="Read chunk in bytes")
    output: Optional[str] = Field(default=None, description="Report file")
    log: Optional[str] = Field(default=None, description="Audit log file")

    @field_validator("min_size", mode="before")
    @classmethod
    def coerce_min_size(cls, v):
        """Accept bare integers (`min_size: 1024`) as well as strings."""
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v


def load_settings(config_path: Union[str, Path]) -> DedupSettings:
    """
    Load and validate a settings file.

    Raises:
        InvalidConfigFile: Unreadable file, bad YAML, missing root key or
            schema violation
    """
    config_path = Path(config_path)

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f)
    except OSError as e:
        raise InvalidConfigFile(f"Cannot read config {config_path}: {e.strerror or e}") from e
    except yaml.YAMLError as e:
        raise InvalidConfigFile(f"Invalid YAML in {config_path}: {e}") from e

    if not isinstance(raw, dict) or "dupsweep" not in raw:
        raise InvalidConfigFile(f"Invalid config {config_path}: missing 'dupsweep' root key")

    try:
        settings = DedupSettings(**(raw["dupsweep"] or {}))
    except (TypeError, ValidationError) as e:
        raise InvalidConfigFile(f"Invalid config {config_path}: {e}") from e

    logger.debug(
        "dedup_config_loaded",
        config_path=str(config_path),
        values=settings.model_dump(exclude_none=True),
    )

    return settings


def resolve_config_path(cli_value: Optional[str]) -> Optional[Path]:
    """Settings path from the CLI flag, else from $DUPSWEEP_CONFIG."""
    value = cli_value or os.getenv(CONFIG_ENV_VAR)
    return Path(value) if value else None
