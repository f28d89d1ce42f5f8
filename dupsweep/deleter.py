"""
Deletion of duplicate candidates with safety checks.

Modes (fixed for the whole run):
- dry_run: report what would be deleted, touch nothing
- interactive: ask for confirmation per file
- automatic: delete every candidate

Safety checks (per file, before unlinking):
1. Candidate is not the keeper
2. Keeper still exists (never remove the last copy)

A failed deletion is reported, counted and never retried within the run.
"""

from __future__ import annotations

from typing import Callable, Optional

import structlog

from dupsweep.audit_log import AuditLog
from dupsweep.exceptions import ConfigurationError, DeletionFailed
from dupsweep.models import (
    DeletionOutcome,
    DuplicateSet,
    ExecutionMode,
    FileRecord,
    Resolution,
    RunStatistics,
)

logger = structlog.get_logger(__name__)

ConfirmCallback = Callable[[FileRecord], bool]


class SafeDeleter:
    """Resolve the deletion candidates of duplicate sets under one mode."""

    def __init__(
        self,
        mode: ExecutionMode = ExecutionMode.dry_run,
        confirm: Optional[ConfirmCallback] = None,
        audit_log: Optional[AuditLog] = None,
    ):
        """
        Initialize deleter.

        Args:
            mode: dry_run, interactive or automatic
            confirm: Per-file confirmation, required in interactive mode
            audit_log: Optional append-only sink for deletions and failures
        """
        self.mode = ExecutionMode(mode)
        if self.mode == ExecutionMode.interactive and confirm is None:
            raise ConfigurationError("Interactive mode requires a confirmation callback")
        self.confirm = confirm
        self.audit_log = audit_log

    def resolve_set(
        self,
        duplicate_set: DuplicateSet,
        stats: RunStatistics,
    ) -> list[Resolution]:
        """
        Resolve the candidates of one set and record the outcomes on it.

        Candidates are handled one at a time. An interrupt raised while a
        candidate is being resolved propagates, and the later candidates
        are left untouched and unresolved.

        Raises:
            ValueError: If no keeper was selected for the set
        """
        if duplicate_set.keeper is None:
            raise ValueError(f"Duplicate set {duplicate_set.set_id} has no keeper")

        resolutions = []

        for record in duplicate_set.candidates:
            resolution = self._resolve(record, duplicate_set, stats)
            resolutions.append(resolution)
            duplicate_set.resolutions.append(resolution)

        return resolutions

    def _resolve(
        self,
        record: FileRecord,
        duplicate_set: DuplicateSet,
        stats: RunStatistics,
    ) -> Resolution:
        if self.mode == ExecutionMode.dry_run:
            stats.files_deleted += 1
            stats.bytes_reclaimed += record.size_bytes
            logger.debug("dedup_would_delete", file_path=str(record.path))
            return Resolution(record=record, outcome=DeletionOutcome.would_delete)

        if self.mode == ExecutionMode.interactive and not self.confirm(record):
            stats.files_declined += 1
            logger.debug("dedup_delete_declined", file_path=str(record.path))
            return Resolution(record=record, outcome=DeletionOutcome.declined)

        try:
            self._delete(record, duplicate_set)
        except DeletionFailed as e:
            stats.deletion_failures += 1
            logger.warning(
                "dedup_delete_failed",
                file_path=str(e.path),
                error=e.reason,
            )
            if self.audit_log is not None:
                self.audit_log.record_failure(e.path, e.reason)
            return Resolution(record=record, outcome=DeletionOutcome.failed, error=e.reason)

        stats.files_deleted += 1
        stats.bytes_reclaimed += record.size_bytes
        logger.info(
            "dedup_file_deleted",
            file_path=str(record.path),
            size_bytes=record.size_bytes,
        )
        if self.audit_log is not None:
            self.audit_log.record_deletion(record.path)
        return Resolution(record=record, outcome=DeletionOutcome.deleted)

    def _safety_check(
        self,
        record: FileRecord,
        duplicate_set: DuplicateSet,
    ) -> tuple[bool, str]:
        """
        Run safety checks before deleting a file.

        Returns:
            (is_safe, reason_if_not_safe)
        """
        keeper = duplicate_set.keeper

        # Check 1: Never the keeper
        if keeper is None or record.path == keeper.path:
            return False, "Refusing to delete the keeper"

        # Check 2: Keeper still exists
        if not keeper.path.exists():
            return False, "Keeper file no longer exists"

        return True, ""

    def _delete(self, record: FileRecord, duplicate_set: DuplicateSet) -> None:
        """Unlink one candidate, raising DeletionFailed on any refusal or error."""
        safe, reason = self._safety_check(record, duplicate_set)
        if not safe:
            raise DeletionFailed(record.path, reason)

        try:
            record.path.unlink()
        except FileNotFoundError as e:
            raise DeletionFailed(record.path, "File no longer exists") from e
        except PermissionError as e:
            raise DeletionFailed(record.path, f"Permission denied: {e.strerror or e}") from e
        except OSError as e:
            raise DeletionFailed(record.path, e.strerror or str(e)) from e
