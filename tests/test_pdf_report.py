"""Tests for PDF rendering of detection reports."""

from PIL import ImageDraw

from core.entities import AggregatedRow
from core.report_core import to_document
from utils.pdf_report import render_pages, render_pdf


def _doc(rows):
    return to_document(rows, "10/18/2026, 09:01:00 AM")


def test_render_produces_pdf_bytes():
    doc = _doc(
        [
            AggregatedRow(1, "box", 2, "10/18/2026, 09:00:00 AM, 10/18/2026, 09:00:05 AM"),
            AggregatedRow(2, "bottle", 1, "10/18/2026, 09:00:05 AM"),
        ]
    )

    assert render_pdf(doc).startswith(b"%PDF")
    assert len(render_pages(doc)) == 1


def test_long_tables_spill_onto_more_pages():
    stamps = ", ".join(["10/18/2026, 09:00:00 AM"] * 40)
    rows = [AggregatedRow(i, f"type{i}", 40, stamps) for i in range(1, 31)]

    pages = render_pages(_doc(rows))

    assert len(pages) > 1
    assert all(page.size == pages[0].size for page in pages)
    assert render_pdf(_doc(rows)).startswith(b"%PDF")


def test_row_taller_than_a_page_is_split_without_losing_lines(monkeypatch):
    stamps = ", ".join(["10/18/2026, 09:00:00 AM"] * 600)
    drawn: list[tuple[float, float, str]] = []
    original_text = ImageDraw.ImageDraw.text

    def _recording_text(self, xy, text, *args, **kwargs):
        drawn.append((xy[0], xy[1], text))
        return original_text(self, xy, text, *args, **kwargs)

    monkeypatch.setattr(ImageDraw.ImageDraw, "text", _recording_text)

    pages = render_pages(to_document([AggregatedRow(1, "box", 600, stamps)], "now"))

    page_height = pages[0].size[1]
    assert len(pages) > 2
    assert all(y < page_height for _, y, _ in drawn)
    column_x = max(x for x, _, _ in drawn)
    column = [text for x, _, text in drawn if x == column_x]
    assert column[0] == "Timestamps"
    timestamp_lines = column[1:]
    assert " ".join(timestamp_lines) == stamps
