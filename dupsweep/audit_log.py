"""
Append-only audit log of deletions and per-file failures.

One plain-text line per event:
    [2026-10-19T14:35:22+00:00] Deleted: /data/photos/img (1).jpg
    [2026-10-19T14:35:23+00:00] Failed: /data/photos/img (2).jpg (Permission denied)

A log that cannot be written is a warning, never an error.
"""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Union

import structlog

logger = structlog.get_logger(__name__)


class AuditLog:
    """Append-only text sink, opened per write."""

    def __init__(self, log_path: Union[str, Path]):
        self.log_path = Path(log_path)

    def record_deletion(self, file_path: Union[str, Path]) -> None:
        self._append(f"Deleted: {file_path}")

    def record_failure(self, file_path: Union[str, Path], reason: str) -> None:
        self._append(f"Failed: {file_path} ({reason})")

    def _append(self, message: str) -> None:
        timestamp = datetime.now(timezone.utc).isoformat(timespec="seconds")
        try:
            with open(self.log_path, "a", encoding="utf-8") as f:
                f.write(f"[{timestamp}] {message}\n")
        except OSError as e:
            logger.warning(
                "dedup_audit_log_write_failed",
                log_path=str(self.log_path),
                error=e.strerror or str(e),
            )
