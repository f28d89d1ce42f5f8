"""
Directory scanner with content-digest deduplication.

Features:
- Lazy walk (top level or full tree) with size floor
- Symlinks and special files skipped, symlinked directories never followed
- Deterministic discovery order (lexicographic per directory)
- Chunked hashing in worker threads, bounded by max_workers
- Grouping in discovery order regardless of which digest finishes first
"""

from __future__ import annotations

import asyncio
import os
import time
from pathlib import Path
from typing import Iterator, Optional, Union

import structlog

from dupsweep.audit_log import AuditLog
from dupsweep.exceptions import InvalidRoot, UnreadableFile
from dupsweep.grouper import DuplicateGrouper
from dupsweep.hasher import read_file_record
from dupsweep.models import DuplicateSet, FileRecord, RunStatistics, ScanConfig


logger = structlog.get_logger(__name__)

# Candidates digested per gather() batch, per worker
WINDOW_PER_WORKER = 8


def validate_root(root: Union[str, Path]) -> Path:
    """Return root as a Path, raising InvalidRoot if it is not a directory."""
    root_path = Path(root)
    if not root_path.exists():
        raise InvalidRoot(f"Directory not found: {root_path}")
    if not root_path.is_dir():
        raise InvalidRoot(f"Not a directory: {root_path}")
    return root_path


def iter_candidate_paths(
    root: Union[str, Path],
    recursive: bool = False,
    min_size: int = 1,
) -> Iterator[Path]:
    """
    Yield regular files under root whose size is >= min_size.

    The root is validated immediately; the walk itself is lazy.

    Args:
        root: Directory to walk
        recursive: Descend into subdirectories
        min_size: Size floor in bytes

    Raises:
        InvalidRoot: If root is missing or not a directory
    """
    root_path = validate_root(root)
    return _walk(root_path, recursive, min_size)


def _walk(root_path: Path, recursive: bool, min_size: int) -> Iterator[Path]:
    # Depth-first; files of a directory come before its subdirectories
    pending = [str(root_path)]

    while pending:
        directory = pending.pop()
        try:
            with os.scandir(directory) as it:
                entries = sorted(it, key=lambda e: e.name)
        except OSError as e:
            logger.warning(
                "dedup_directory_unreadable",
                directory=directory,
                error=e.strerror or str(e),
            )
            continue

        subdirs = []
        for entry in entries:
            try:
                if entry.is_symlink():
                    continue
                if entry.is_dir(follow_symlinks=False):
                    subdirs.append(entry.path)
                    continue
                if not entry.is_file(follow_symlinks=False):
                    continue
                size = entry.stat(follow_symlinks=False).st_size
            except OSError as e:
                logger.warning(
                    "dedup_stat_failed",
                    file_path=entry.path,
                    error=e.strerror or str(e),
                )
                continue

            if size >= min_size:
                yield Path(entry.path)

        if recursive:
            # Reversed so the smallest name is popped first
            pending.extend(reversed(subdirs))


class DedupScanner:
    """
    Scan a directory and group its files by content digest.

    Digests run in threads via asyncio.to_thread, at most max_workers at a
    time. Candidates are digested in windows and each window's results are
    added to the grouper in enumeration order, so tie-breaks only depend on
    discovery order.
    """

    def __init__(
        self,
        config: ScanConfig,
        stats: Optional[RunStatistics] = None,
        audit_log: Optional[AuditLog] = None,
    ):
        """
        Initialize scanner.

        Args:
            config: Scan configuration
            stats: Accumulator to update (a fresh one if omitted)
            audit_log: Optional sink for unreadable-file records
        """
        self.config = config
        self.stats = stats if stats is not None else RunStatistics()
        self.audit_log = audit_log
        self.grouper = DuplicateGrouper()

    async def scan(self) -> list[DuplicateSet]:
        """
        Main scan entry point.

        Returns:
            Duplicate sets (no keeper selected yet)

        Raises:
            InvalidRoot: If the configured root is not a directory
        """
        start_time = time.time()

        candidates = iter_candidate_paths(
            self.config.root_path,
            recursive=self.config.recursive,
            min_size=self.config.min_file_size,
        )

        logger.info(
            "dedup_scan_started",
            root_path=str(self.config.root_path),
            recursive=self.config.recursive,
            min_file_size=self.config.min_file_size,
            algorithm=self.config.algorithm.value,
            max_workers=self.config.max_workers,
        )

        semaphore = asyncio.Semaphore(self.config.max_workers)
        window_size = self.config.max_workers * WINDOW_PER_WORKER
        window: list[Path] = []

        for file_path in candidates:
            window.append(file_path)
            self.stats.total_scanned += 1

            if len(window) >= window_size:
                await self._digest_window(window, semaphore)
                window = []

        if window:
            await self._digest_window(window, semaphore)

        sets = self.grouper.duplicate_sets()

        logger.info(
            "dedup_scan_completed",
            total_scanned=self.stats.total_scanned,
            total_errors=self.stats.total_errors,
            distinct_digests=self.grouper.digest_count,
            duplicate_sets=len(sets),
            elapsed_seconds=round(time.time() - start_time, 2),
        )

        return sets

    async def _digest_window(
        self,
        window: list[Path],
        semaphore: asyncio.Semaphore,
    ) -> None:
        # gather() returns results in argument order
        records = await asyncio.gather(
            *(self._digest(file_path, semaphore) for file_path in window)
        )

        for record in records:
            if record is not None:
                self.grouper.add(record)

    async def _digest(
        self,
        file_path: Path,
        semaphore: asyncio.Semaphore,
    ) -> Optional[FileRecord]:
        """Digest one candidate; unreadable files are counted and skipped."""
        async with semaphore:
            logger.debug("dedup_hashing", file_path=str(file_path))
            try:
                return await asyncio.to_thread(
                    read_file_record,
                    file_path,
                    self.config.algorithm,
                    self.config.chunk_size,
                )
            except UnreadableFile as e:
                self.stats.total_errors += 1
                logger.warning(
                    "dedup_file_unreadable",
                    file_path=str(e.path),
                    error=e.reason,
                )
                if self.audit_log is not None:
                    self.audit_log.record_failure(e.path, f"unreadable: {e.reason}")
                return None
