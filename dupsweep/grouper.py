"""
Duplicate grouper.

Accumulates hashed files by digest in a single pass, preserving the order
in which each digest's members were discovered.
"""

from __future__ import annotations

from dupsweep.models import DuplicateSet, FileRecord


class DuplicateGrouper:
    """Multimap digest -> ordered FileRecords."""

    def __init__(self) -> None:
        self._hash_groups: dict[str, list[FileRecord]] = {}

    def add(self, record: FileRecord) -> None:
        """Append a record to its digest group (discovery order)."""
        self._hash_groups.setdefault(record.digest, []).append(record)

    @property
    def digest_count(self) -> int:
        return len(self._hash_groups)

    def duplicate_sets(self) -> list[DuplicateSet]:
        """
        Build duplicate sets from the digest index.

        Only groups with 2+ files are duplicates. Sets are numbered in the
        order their digest was first seen.

        Returns:
            List of DuplicateSet without keeper
        """
        sets = []
        set_id = 1

        for digest, records in self._hash_groups.items():
            if len(records) < 2:
                continue

            sets.append(
                DuplicateSet(
                    set_id=set_id,
                    digest=digest,
                    members=list(records),
                )
            )
            set_id += 1

        return sets
