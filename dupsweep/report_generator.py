"""
Report rendering for dedup runs.

Renders:
- One listing per duplicate set (keep / delete decisions and outcomes)
- A summary of run statistics
- A report file: plain text, or CSV when the path ends in .csv

Rendering is pure: the same input always renders the same text.
"""

from __future__ import annotations

import csv
import io
from pathlib import Path
from typing import Union

import structlog

from dupsweep.models import (
    DedupRun,
    DeletionOutcome,
    DuplicateSet,
    FileRecord,
    RunStatistics,
)
from dupsweep.sizes import format_size

logger = structlog.get_logger(__name__)

OUTCOME_LABELS = {
    DeletionOutcome.deleted: "DELETED",
    DeletionOutcome.would_delete: "WOULD DELETE",
    DeletionOutcome.declined: "DECLINED",
    DeletionOutcome.failed: "FAILED",
}


class ReportGenerator:
    """Render duplicate sets and run statistics."""

    CSV_COLUMNS = [
        "set_id",
        "digest",
        "file_path",
        "size_bytes",
        "modified_at",
        "action",
        "outcome",
        "error",
    ]

    def render_set(self, duplicate_set: DuplicateSet) -> str:
        """Render the member listing of one set."""
        lines = [
            f"Set {duplicate_set.set_id} - {duplicate_set.digest[:12]}... "
            f"({len(duplicate_set.members)} copies)"
        ]

        for member in duplicate_set.members:
            label, suffix = self._member_label(duplicate_set, member)
            lines.append(
                f"  {label:<12} [{format_size(member.size_bytes):>10}] {member.path}{suffix}"
            )

        return "\n".join(lines)

    def render_summary(self, stats: RunStatistics) -> str:
        """Render run statistics."""
        lines = [
            "Summary:",
            f"  Total files scanned:  {stats.total_scanned:,}",
            f"  Unreadable files:     {stats.total_errors:,}",
            f"  Duplicate sets found: {stats.duplicate_set_count:,}",
            f"  Duplicate files:      {stats.duplicate_file_count:,}",
            f"  Reclaimable space:    {format_size(stats.bytes_duplicated)}",
        ]

        if stats.projected:
            lines.append(f"  Files that would be deleted: {stats.files_deleted:,}")
            lines.append(f"  Space that would be saved:   {format_size(stats.bytes_reclaimed)}")
        else:
            lines.append(f"  Files deleted:        {stats.files_deleted:,}")
            lines.append(f"  Space saved:          {format_size(stats.bytes_reclaimed)}")
            lines.append(f"  Files declined:       {stats.files_declined:,}")
            lines.append(f"  Failed deletions:     {stats.deletion_failures:,}")

        return "\n".join(lines)

    def render_report(self, run: DedupRun) -> str:
        """Render every set listing followed by the summary."""
        if not run.sets:
            blocks = ["No duplicate files found."]
        else:
            blocks = [self.render_set(s) for s in run.sets]
        blocks.append(self.render_summary(run.stats))
        return "\n\n".join(blocks) + "\n"

    def render_csv(self, run: DedupRun) -> str:
        """Render the report as CSV, summary lines as leading comments."""
        output = io.StringIO()

        for line in self.render_summary(run.stats).splitlines():
            output.write(f"# {line.strip()}\n")

        writer = csv.DictWriter(output, fieldnames=self.CSV_COLUMNS, lineterminator="\n")
        writer.writeheader()

        for duplicate_set in run.sets:
            for member in duplicate_set.members:
                is_keeper = duplicate_set.keeper is not None and member.path == duplicate_set.keeper.path
                resolution = duplicate_set.resolution_for(member)
                writer.writerow(
                    {
                        "set_id": duplicate_set.set_id,
                        "digest": duplicate_set.digest,
                        "file_path": str(member.path),
                        "size_bytes": member.size_bytes,
                        "modified_at": member.modified_at.isoformat(),
                        "action": "keep" if is_keeper else "delete",
                        "outcome": resolution.outcome.value if resolution else "-",
                        "error": (resolution.error if resolution else None) or "",
                    }
                )

        return output.getvalue()

    def write_report(self, run: DedupRun, output_path: Union[str, Path]) -> Path:
        """
        Write the report, overwriting output_path.

        Args:
            run: Finished run
            output_path: Destination (.csv selects CSV output)

        Returns:
            Path to the written report

        Raises:
            OSError: If the file cannot be written
        """
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        if output_path.suffix.lower() == ".csv":
            content = self.render_csv(run)
        else:
            content = self.render_report(run)

        with open(output_path, "w", newline="", encoding="utf-8") as f:
            f.write(content)

        logger.info(
            "dedup_report_generated",
            output_path=str(output_path),
            sets=len(run.sets),
        )

        return output_path

    @staticmethod
    def _member_label(duplicate_set: DuplicateSet, member: FileRecord) -> tuple[str, str]:
        if duplicate_set.keeper is not None and member.path == duplicate_set.keeper.path:
            return "KEEP", ""

        resolution = duplicate_set.resolution_for(member)
        if resolution is None:
            return "DELETE", ""

        suffix = f" ({resolution.error})" if resolution.error else ""
        return OUTCOME_LABELS[resolution.outcome], suffix
