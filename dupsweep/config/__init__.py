"""Logging and settings-file configuration."""

from dupsweep.config.logging import configure_logging
from dupsweep.config.settings import DedupSettings, load_settings, resolve_config_path

__all__ = [
    "DedupSettings",
    "configure_logging",
    "load_settings",
    "resolve_config_path",
]
