"""
Pydantic models for the dedup pipeline.

Models:
- ScanConfig: Scan configuration (root, recursion, size floor, digest)
- FileRecord: Single hashed file with metadata
- DuplicateSet: Group of files sharing one digest
- Resolution: What happened to one deletion candidate
- RunStatistics: Counters accumulated over one invocation
- DedupRun: Final run result
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class HashAlgorithm(str, Enum):
    """Digest algorithm used to fingerprint file content."""

    fast = "fast"  # MD5
    secure = "secure"  # SHA-256


class RetentionPolicy(str, Enum):
    """Rule used to pick the single keeper of a duplicate set."""

    first = "first"
    newest = "newest"
    oldest = "oldest"
    smallest = "smallest"
    largest = "largest"


class ExecutionMode(str, Enum):
    """How deletion candidates are resolved. Fixed for a whole run."""

    dry_run = "dry_run"
    interactive = "interactive"
    automatic = "automatic"


class DeletionOutcome(str, Enum):
    """Outcome of one deletion candidate."""

    deleted = "deleted"
    would_delete = "would_delete"
    declined = "declined"
    failed = "failed"


class ScanConfig(BaseModel):
    """Configuration for a dedup scan."""

    root_path: Path = Field(description="Root directory to scan")
    recursive: bool = Field(
        default=False,
        description="Walk the whole tree instead of the top level only",
    )
    min_file_size: int = Field(
        default=1,
        ge=0,
        description="Minimum file size in bytes (skip smaller)",
    )
    algorithm: HashAlgorithm = Field(
        default=HashAlgorithm.fast,
        description="Digest algorithm",
    )
    chunk_size: int = Field(
        default=65536,
        gt=0,
        description="Hashing chunk size in bytes",
    )
    max_workers: int = Field(
        default=4,
        ge=1,
        description="Concurrent digest workers",
    )


class FileRecord(BaseModel):
    """Single hashed file. Immutable once created."""

    model_config = ConfigDict(frozen=True)

    path: Path
    size_bytes: int
    modified_at: datetime
    digest: str


class Resolution(BaseModel):
    """Outcome for a single deletion candidate."""

    record: FileRecord
    outcome: DeletionOutcome
    error: Optional[str] = None


class DuplicateSet(BaseModel):
    """Group of two or more files sharing the same digest."""

    model_config = ConfigDict(validate_assignment=True)

    set_id: int
    digest: str
    members: list[FileRecord] = Field(min_length=2)
    keeper: Optional[FileRecord] = None
    resolutions: list[Resolution] = Field(default_factory=list)

    @model_validator(mode="after")
    def keeper_is_a_member(self) -> "DuplicateSet":
        if self.keeper is not None and self.keeper.path not in {m.path for m in self.members}:
            raise ValueError(f"keeper {self.keeper.path} is not a member of set {self.set_id}")
        return self

    @property
    def candidates(self) -> list[FileRecord]:
        """Every member except the keeper, in discovery order."""
        if self.keeper is None:
            return []
        return [m for m in self.members if m.path != self.keeper.path]

    def resolution_for(self, record: FileRecord) -> Optional[Resolution]:
        for resolution in self.resolutions:
            if resolution.record.path == record.path:
                return resolution
        return None


class RunStatistics(BaseModel):
    """Counters for one invocation."""

    mode: ExecutionMode = ExecutionMode.dry_run
    total_scanned: int = 0
    total_errors: int = 0
    duplicate_set_count: int = 0
    duplicate_file_count: int = 0
    bytes_duplicated: int = 0
    files_deleted: int = 0
    bytes_reclaimed: int = 0
    files_declined: int = 0
    deletion_failures: int = 0

    @property
    def projected(self) -> bool:
        """Deletion counters describe would-be deletions (dry-run)."""
        return self.mode == ExecutionMode.dry_run


class DedupRun(BaseModel):
    """Final run result."""

    stats: RunStatistics = Field(default_factory=RunStatistics)
    sets: list[DuplicateSet] = Field(default_factory=list)
