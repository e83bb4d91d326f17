"""
Report Service - Web Layer Service for Detection Summaries and Reports.

Thin wrapper over core.session_core and utils.pdf_report.
"""

from typing import Any

from core.aggregation_core import total_count
from core.session_core import VisionSession
from utils.pdf_report import render_pdf


def get_summary(session: VisionSession) -> dict[str, Any]:
    """
    Get summary rows and the overall total for the current result set.

    Delegates to core.session_core.
    """
    rows = session.summary_rows()
    return {
        "rows": [row.to_dict() for row in rows],
        "total": total_count(rows),
    }


def get_structured_view(session: VisionSession) -> list[dict[str, Any]]:
    """Get the {type, count, timestamps} projection of the summary."""
    return session.structured_view()


def build_pdf(session: VisionSession) -> tuple[bytes, str]:
    """
    Render the detection report.

    Returns:
        Tuple of (pdf bytes, suggested filename)

    Raises:
        NoResultsError: if there are no results to report
    """
    document = session.build_report()
    return render_pdf(document), document.filename
