"""Human size strings <-> bytes."""

from __future__ import annotations

import re

from dupsweep.exceptions import InvalidSize

_UNITS = {
    "": 1,
    "K": 1024,
    "M": 1024**2,
    "G": 1024**3,
    "T": 1024**4,
}

_SIZE_PATTERN = re.compile(r"^\s*(\d+)\s*([KMGT]?)B?\s*$", re.IGNORECASE)


def parse_size(size_str: str) -> int:
    """
    Parse a human size string to bytes.

    Accepts a non-negative integer with an optional binary unit:
    ``512``, ``1K``, ``10M``, ``1G``, ``2T`` (case-insensitive, optional
    trailing ``B`` as in ``10MB``).

    Raises:
        InvalidSize: If the string does not match
    """
    match = _SIZE_PATTERN.match(str(size_str))
    if match is None:
        raise InvalidSize(f"Invalid size: {size_str!r} (expected e.g. 512, 1K, 10M, 1G)")
    number, unit = match.groups()
    return int(number) * _UNITS[unit.upper()]


def format_size(size_bytes: int) -> str:
    """Format bytes to human-readable size."""
    if size_bytes >= 1024**4:
        return f"{size_bytes / 1024**4:.2f} TB"
    elif size_bytes >= 1024**3:
        return f"{size_bytes / 1024**3:.2f} GB"
    elif size_bytes >= 1024**2:
        return f"{size_bytes / 1024**2:.2f} MB"
    elif size_bytes >= 1024:
        return f"{size_bytes / 1024:.2f} KB"
    return f"{size_bytes} B"
