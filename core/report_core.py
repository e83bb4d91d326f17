"""
Report Core - Detection Report Generation.

Builds the tabular report payload and the structured (JSON) projection from
aggregated summary rows. Rendering the payload to a file is left to
utils.pdf_report.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from core.aggregation_core import total_count
from core.entities import AggregatedRow

REPORT_TITLE = "VisionBox Detection Report"
SUMMARY_LABEL = "Detection Summary:"
TABLE_HEADER = ("Sr. No.", "Type of Box", "Count", "Timestamps")
REPORT_FILENAME = "VisionBox_Detection_Report.pdf"

DEFAULT_TIMESTAMP_FORMAT = "%m/%d/%Y, %I:%M:%S %p"


class NoResultsError(ValueError):
    """Raised when a report is requested without any detection results."""


@dataclass(frozen=True)
class ReportDocument:
    """
    Renderer-independent report payload.

    Attributes:
        title: Report title line.
        generated_at: Timestamp shown on the "Generated At" line.
        summary_label: Label printed above the table.
        header: Table header cells.
        body: One tuple of cells per summary row, in row order.
        total_count: Sum of all row counts.
        filename: Suggested file name for the rendered artifact.
    """

    title: str
    generated_at: str
    summary_label: str
    header: tuple[str, ...]
    body: tuple[tuple[Any, ...], ...]
    total_count: int
    filename: str

    @property
    def generated_line(self) -> str:
        return f"Generated At: {self.generated_at}"

    @property
    def total_line(self) -> str:
        return f"Overall Total Count: {self.total_count}"


def format_timestamp(moment: datetime, fmt: str = DEFAULT_TIMESTAMP_FORMAT) -> str:
    """Formats a datetime the way timestamps appear in results and reports."""
    return moment.strftime(fmt)


def to_document(rows: Sequence[AggregatedRow], generated_at: str) -> ReportDocument:
    """
    Builds the report payload.

    Raises:
        NoResultsError: if there are no rows to report
    """
    if not rows:
        raise NoResultsError("No data available to generate a report.")

    return ReportDocument(
        title=REPORT_TITLE,
        generated_at=generated_at,
        summary_label=SUMMARY_LABEL,
        header=TABLE_HEADER,
        body=tuple((row.id, row.type, row.count, row.timestamps) for row in rows),
        total_count=total_count(rows),
        filename=REPORT_FILENAME,
    )


def to_structured_view(rows: Sequence[AggregatedRow]) -> list[dict[str, Any]]:
    """Projects rows to ``{type, count, timestamps}`` dicts, dropping the id."""
    return [
        {"type": row.type, "count": row.count, "timestamps": row.timestamps}
        for row in rows
    ]
