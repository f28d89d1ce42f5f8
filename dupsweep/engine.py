"""
Dedup pipeline.

Scanner (enumerate + digest + group) -> RetentionSelector -> SafeDeleter,
one duplicate set at a time, with all counters kept in one RunStatistics.

Only the scan runs on an event loop. Sets are resolved afterwards in plain
synchronous code, so Ctrl-C raises KeyboardInterrupt right where it lands
(at a prompt or between two candidates) and nothing after it runs.
"""

from __future__ import annotations

import asyncio
from typing import Callable, Optional, Union

import structlog

from dupsweep.audit_log import AuditLog
from dupsweep.deleter import ConfirmCallback, SafeDeleter
from dupsweep.models import (
    DedupRun,
    DuplicateSet,
    ExecutionMode,
    RetentionPolicy,
    RunStatistics,
    ScanConfig,
)
from dupsweep.retention import RetentionSelector, parse_policy
from dupsweep.scanner import DedupScanner, validate_root

logger = structlog.get_logger(__name__)


def run_dedup(
    config: ScanConfig,
    policy: Union[str, RetentionPolicy] = RetentionPolicy.first,
    mode: ExecutionMode = ExecutionMode.dry_run,
    confirm: Optional[ConfirmCallback] = None,
    audit_log: Optional[AuditLog] = None,
    on_set: Optional[Callable[[DuplicateSet], None]] = None,
) -> DedupRun:
    """
    Find duplicates under config.root_path and resolve them.

    Must not be called from a running event loop.

    Args:
        config: Scan configuration
        policy: Retention policy used to pick each keeper
        mode: dry_run, interactive or automatic
        confirm: Per-file confirmation (interactive mode)
        audit_log: Optional deletion/failure sink
        on_set: Called with each set once it is resolved

    Returns:
        DedupRun with statistics and the processed sets

    Raises:
        ConfigurationError: Invalid root, policy or mode setup, before any
            file is read
        KeyboardInterrupt: Ctrl-C; deletions already done are kept
    """
    # Everything that can be rejected is rejected before scanning
    validate_root(config.root_path)
    selector = RetentionSelector(parse_policy(policy))
    stats = RunStatistics(mode=ExecutionMode(mode))
    deleter = SafeDeleter(mode=stats.mode, confirm=confirm, audit_log=audit_log)
    scanner = DedupScanner(config=config, stats=stats, audit_log=audit_log)

    run = DedupRun(stats=stats)

    try:
        sets = asyncio.run(scanner.scan())

        for duplicate_set in sets:
            selector.select_keeper(duplicate_set)
            candidates = duplicate_set.candidates

            stats.duplicate_set_count += 1
            stats.duplicate_file_count += len(candidates)
            stats.bytes_duplicated += sum(c.size_bytes for c in candidates)

            run.sets.append(duplicate_set)
            deleter.resolve_set(duplicate_set, stats)

            if on_set is not None:
                on_set(duplicate_set)
    except KeyboardInterrupt:
        logger.warning(
            "dedup_run_interrupted",
            sets_processed=len(run.sets),
            files_deleted=stats.files_deleted,
        )
        raise

    logger.info(
        "dedup_run_completed",
        mode=stats.mode.value,
        policy=selector.policy.value,
        total_scanned=stats.total_scanned,
        duplicate_sets=stats.duplicate_set_count,
        duplicate_files=stats.duplicate_file_count,
        files_deleted=stats.files_deleted,
        bytes_reclaimed=stats.bytes_reclaimed,
        deletion_failures=stats.deletion_failures,
    )

    return run
