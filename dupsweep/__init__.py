"""
dupsweep - content-addressable duplicate file finder.

Modules:
- scanner: directory walk, chunked digesting, grouping
- retention: keeper selection policies
- deleter: dry-run / interactive / automatic resolution
- report_generator: set listings, summary, report files
- engine: the full pipeline
- models: Pydantic data models
"""

__version__ = "1.0.0"

from dupsweep.models import (  # noqa: E402
    DedupRun,
    DeletionOutcome,
    DuplicateSet,
    ExecutionMode,
    FileRecord,
    HashAlgorithm,
    Resolution,
    RetentionPolicy,
    RunStatistics,
    ScanConfig,
)

__all__ = [
    "DedupRun",
    "DeletionOutcome",
    "DuplicateSet",
    "ExecutionMode",
    "FileRecord",
    "HashAlgorithm",
    "Resolution",
    "RetentionPolicy",
    "RunStatistics",
    "ScanConfig",
    "__version__",
]
