"""Pure merge logic for the reports index shared by all backends.

Every backend stores the index differently but mutates it only through the
functions in this module.
"""

from datetime import datetime, timezone

from trace_reports.models.report import Report, ReportIndex, ReportIndexEntry

MAX_INDEX_ENTRIES = 100
INDEX_PATH = "reports/index.json"


def report_path(report_id: str) -> str:
    """Root-relative folder of a report."""
    return f"reports/{report_id}"


def index_entry_for(report: Report) -> ReportIndexEntry:
    """Project a report onto its index entry."""
    return ReportIndexEntry(
        id=report.execution_id,
        timestamp=report.timestamps.start,
        developer=report.developer,
        branch=report.branch,
        summary=report.summary,
        url=f"{report_path(report.execution_id)}/report.json",
    )


def empty_index(updated_at: datetime | None = None) -> ReportIndex:
    return ReportIndex(last_updated=updated_at or datetime.now(timezone.utc))


def update_index(
    existing: ReportIndex | None,
    entry: ReportIndexEntry,
    *,
    max_entries: int = MAX_INDEX_ENTRIES,
    updated_at: datetime | None = None,
) -> ReportIndex:
    """Put entry at the front, replacing any entry with the same id.

    The result never holds more than max_entries; the oldest entries are
    dropped.
    """
    current = existing if existing is not None else empty_index(updated_at)
    others = [e for e in current.reports if e.id != entry.id]
    return ReportIndex(
        version=current.version,
        last_updated=updated_at or datetime.now(timezone.utc),
        reports=[entry, *others][:max_entries],
    )


def remove_from_index(
    existing: ReportIndex | None,
    report_id: str,
    *,
    updated_at: datetime | None = None,
) -> ReportIndex:
    """Drop the entry for report_id, if present."""
    current = existing if existing is not None else empty_index(updated_at)
    return ReportIndex(
        version=current.version,
        last_updated=updated_at or datetime.now(timezone.utc),
        reports=[e for e in current.reports if e.id != report_id],
    )
