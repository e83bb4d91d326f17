"""
PDF rendering for detection reports.

Draws a ReportDocument onto A4 pages with Pillow and saves them as a PDF.
Layout follows the classic VisionBox report: title, generation time, summary
label, a gridded table and the overall total below it.
"""

import io

from PIL import Image, ImageDraw, ImageFont

from core.report_core import ReportDocument

DPI = 144
PAGE_WIDTH_MM = 210
PAGE_HEIGHT_MM = 297
MARGIN_MM = 14
TEXT_X_MM = 20

TITLE_PT = 16
TEXT_PT = 12
TABLE_PT = 10
CELL_PADDING_MM = 1.8

# Relative widths of Sr. No. / Type of Box / Count / Timestamps.
COLUMN_WEIGHTS = (0.12, 0.22, 0.12, 0.54)

HEADER_FILL = (41, 128, 185)
HEADER_TEXT = (255, 255, 255)
STRIPE_FILL = (245, 245, 245)
GRID_COLOR = (200, 200, 200)
TEXT_COLOR = (0, 0, 0)


def _mm(value: float) -> int:
    return round(value * DPI / 25.4)


def _pt(value: float) -> int:
    return round(value * DPI / 72)


def _font(size_pt: float) -> ImageFont.ImageFont:
    return ImageFont.load_default(size=_pt(size_pt))


def _wrap(draw: ImageDraw.ImageDraw, text: str, font, max_width: int) -> list[str]:
    """Greedy word wrap; words wider than a line are split by character."""
    lines: list[str] = []
    current = ""
    for word in text.split(" "):
        candidate = f"{current} {word}" if current else word
        if draw.textlength(candidate, font=font) <= max_width:
            current = candidate
            continue
        if current:
            lines.append(current)
        current = ""
        for char in word:
            if draw.textlength(current + char, font=font) > max_width and current:
                lines.append(current)
                current = ""
            current += char
    lines.append(current)
    return lines


class _PageWriter:
    def __init__(self):
        self.width = _mm(PAGE_WIDTH_MM)
        self.height = _mm(PAGE_HEIGHT_MM)
        self.pages: list[Image.Image] = []
        self.draw: ImageDraw.ImageDraw | None = None
        self.new_page()

    def new_page(self) -> None:
        page = Image.new("RGB", (self.width, self.height), "white")
        self.pages.append(page)
        self.draw = ImageDraw.Draw(page)

    @property
    def bottom(self) -> int:
        return self.height - _mm(MARGIN_MM)


def _text_line(writer: _PageWriter, x: int, baseline: int, text: str, font, size_pt: float) -> None:
    """Draws a single line of text whose baseline sits at ``baseline``."""
    writer.draw.text((x, baseline - _pt(size_pt)), text, font=font, fill=TEXT_COLOR)


def _draw_row(writer: _PageWriter, y: int, cells, widths, font, fill=None, color=TEXT_COLOR) -> int:
    """
    Draws one table row at ``y`` and returns the y below it.

    A row that fits on a fresh page is moved there whole. A row taller than
    a page is split across pages, each part drawn with its own cell frames.
    """
    pad = _mm(CELL_PADDING_MM)
    line_height = _pt(TABLE_PT) + _pt(2)
    top = _mm(MARGIN_MM)
    wrapped = [
        _wrap(writer.draw, str(cell), font, width - 2 * pad)
        for cell, width in zip(cells, widths)
    ]
    total_lines = max(len(lines) for lines in wrapped)
    fits_fresh_page = top + total_lines * line_height + 2 * pad <= writer.bottom

    start = 0
    while start < total_lines:
        remaining = total_lines - start
        room = (writer.bottom - y - 2 * pad) // line_height
        if room < 1 or (room < remaining and start == 0 and fits_fresh_page):
            writer.new_page()
            y = top
            continue

        count = min(room, remaining)
        chunk_height = count * line_height + 2 * pad
        x = _mm(MARGIN_MM)
        for lines, width in zip(wrapped, widths):
            writer.draw.rectangle(
                [x, y, x + width, y + chunk_height], fill=fill, outline=GRID_COLOR
            )
            for i, line in enumerate(lines[start:start + count]):
                writer.draw.text((x + pad, y + pad + i * line_height), line, font=font, fill=color)
            x += width
        y += chunk_height
        start += count
    return y


def render_pages(document: ReportDocument) -> list[Image.Image]:
    """Draws ``document`` onto as many A4 pages as the table needs."""
    writer = _PageWriter()
    title_font = _font(TITLE_PT)
    text_font = _font(TEXT_PT)
    table_font = _font(TABLE_PT)
    text_x = _mm(TEXT_X_MM)

    _text_line(writer, text_x, _mm(20), document.title, title_font, TITLE_PT)
    _text_line(writer, text_x, _mm(30), document.generated_line, text_font, TEXT_PT)
    _text_line(writer, text_x, _mm(40), document.summary_label, text_font, TEXT_PT)

    table_width = writer.width - 2 * _mm(MARGIN_MM)
    widths = [round(table_width * weight) for weight in COLUMN_WEIGHTS]

    y = _draw_row(writer, _mm(50), document.header, widths, table_font, fill=HEADER_FILL, color=HEADER_TEXT)
    for index, cells in enumerate(document.body):
        fill = STRIPE_FILL if index % 2 else None
        y = _draw_row(writer, y, cells, widths, table_font, fill=fill)

    y += _mm(10)
    if y > writer.bottom:
        writer.new_page()
        y = _mm(20)
    _text_line(writer, text_x, y, document.total_line, text_font, TEXT_PT)

    return writer.pages


def render_pdf(document: ReportDocument) -> bytes:
    """Renders ``document`` and returns the PDF bytes."""
    buf = io.BytesIO()
    first, *rest = render_pages(document)
    first.save(buf, format="PDF", resolution=DPI, save_all=True, append_images=rest)
    return buf.getvalue()
