"""
dupsweep - Canonical exception hierarchy.

Configuration errors are fatal and raised before any scanning starts.
Per-file errors (UnreadableFile, DeletionFailed) are recovered locally by
the pipeline and only surface as warnings and counters.
"""

from pathlib import Path
from typing import Union


class DupsweepError(Exception):
    """Base exception dupsweep."""


class ConfigurationError(DupsweepError):
    """Invalid invocation (exit code 2)."""


class InvalidRoot(ConfigurationError):
    """Root path missing or not a directory."""


class InvalidPolicy(ConfigurationError):
    """Unknown retention policy name."""


class InvalidSize(ConfigurationError):
    """Malformed human size string."""


class InvalidAlgorithm(ConfigurationError):
    """Unknown digest algorithm name."""


class InvalidConfigFile(ConfigurationError):
    """Settings file unreadable or invalid."""


class FileError(DupsweepError):
    """Error scoped to a single file."""

    def __init__(self, path: Union[str, Path], reason: str):
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"{self.path}: {reason}")


class UnreadableFile(FileError):
    """Candidate could not be read for hashing."""


class DeletionFailed(FileError):
    """Candidate could not be removed."""
