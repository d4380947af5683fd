"""
fitplan.layout — page geometry, text wrapping and table layout

Pure layout: positions are computed in millimetres on an A4 page with the
origin at the top-left corner. Nothing here draws; ``fitplan.output``
renders the result with reportlab.

Table layout rules:
  - grid of fixed column widths starting at the left margin
  - header row repeated at the top of every page the table spans
  - a row that does not fit above the bottom margin moves to a new page
    (rows are never split)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from reportlab.lib.units import mm
from reportlab.lib.utils import simpleSplit

logger = logging.getLogger(__name__)

# ── Page geometry (mm) ───────────────────────────────────────────

PAGE_WIDTH = 210.0
PAGE_HEIGHT = 297.0
MARGIN_LEFT = 14.0
MARGIN_TOP = 20.0
MARGIN_BOTTOM = 14.0
TABLE_WIDTH = PAGE_WIDTH - 2 * MARGIN_LEFT

BODY_FONT = "Helvetica"
BOLD_FONT = "Helvetica-Bold"
LINE_HEIGHT_FACTOR = 1.15

RGB = tuple[int, int, int]


def pt_to_mm(value: float) -> float:
    return value * 25.4 / 72


def wrap_text(
    text: str,
    width: float,
    font_name: str = BODY_FONT,
    font_size: float = 11,
) -> list[str]:
    """
    Word-wrap ``text`` to ``width`` mm using the font's glyph metrics.

    Explicit newlines start new lines. Empty text yields one empty line.
    """
    lines = simpleSplit(text, font_name, font_size, width * mm) if text else []
    return lines or [""]


# ── Layout records ───────────────────────────────────────────────

@dataclass
class TextBlock:
    """Text placed on a page; ``y`` is the baseline of the first line."""
    page: int
    x: float
    y: float
    lines: list[str]
    font_name: str = BODY_FONT
    font_size: float = 11
    color: RGB = (0, 0, 0)
    line_height: float = 6.0

    @property
    def text(self) -> str:
        return "\n".join(self.lines)


@dataclass
class PlacedRow:
    """One table row on a page; ``y`` is the row's top edge."""
    page: int
    y: float
    height: float
    values: list[str]
    cell_lines: list[list[str]]
    header: bool = False


@dataclass
class TableLayout:
    """Result of laying out one table."""
    columns: list[str]
    widths: list[float]
    x: float
    font_size: float
    padding: float
    line_height: float
    head_fill: RGB
    rows: list[PlacedRow] = field(default_factory=list)
    final_y: float = 0.0
    final_page: int = 0

    @property
    def body_rows(self) -> list[PlacedRow]:
        return [r for r in self.rows if not r.header]

    @property
    def pages(self) -> list[int]:
        return sorted({r.page for r in self.rows})

    def rows_on_page(self, page: int) -> list[PlacedRow]:
        return [r for r in self.rows if r.page == page]


def _measure(
    values: list[str],
    widths: list[float],
    font_name: str,
    font_size: float,
    padding: float,
    line_height: float,
) -> tuple[list[list[str]], float]:
    cell_lines = [
        wrap_text(value, max(width - 2 * padding, 1.0), font_name, font_size)
        for value, width in zip(values, widths)
    ]
    height = max(len(lines) for lines in cell_lines) * line_height + 2 * padding
    return cell_lines, height


def layout_table(
    columns: list[str],
    body: list[list[str]],
    widths: list[float],
    start_y: float,
    start_page: int = 0,
    x: float = MARGIN_LEFT,
    font_size: float = 10,
    padding: float = 3.0,
    head_fill: RGB = (41, 128, 185),
    page_height: float = PAGE_HEIGHT,
    margin_top: float = MARGIN_TOP,
    margin_bottom: float = MARGIN_BOTTOM,
) -> TableLayout:
    """
    Lay out a grid table starting at ``start_y`` on ``start_page``.

    Args:
        columns: header labels
        body: one list of cell strings per row, in display order
        widths: column widths (mm)
        start_y: top of the table (mm from page top)
        start_page: zero-based page index where the table starts

    Returns:
        TableLayout with every placed row and the cursor after the table
    """
    if len(widths) != len(columns):
        raise ValueError("widths and columns differ in length")
    for row in body:
        if len(row) != len(columns):
            raise ValueError(f"row has {len(row)} cells, expected {len(columns)}")

    line_height = pt_to_mm(font_size * LINE_HEIGHT_FACTOR)
    bottom = page_height - margin_bottom
    table = TableLayout(
        columns=list(columns),
        widths=list(widths),
        x=x,
        font_size=font_size,
        padding=padding,
        line_height=line_height,
        head_fill=head_fill,
    )

    head_lines, head_height = _measure(columns, widths, BOLD_FONT, font_size, padding, line_height)
    measured = [
        (row, *_measure(row, widths, BODY_FONT, font_size, padding, line_height))
        for row in body
    ]

    page, y = start_page, start_y

    # header and first row start together
    first_height = measured[0][2] if measured else 0.0
    if y + head_height + first_height > bottom and y > margin_top:
        page, y = page + 1, margin_top

    def place_header() -> None:
        nonlocal y
        table.rows.append(PlacedRow(page, y, head_height, list(columns), head_lines, header=True))
        y += head_height

    place_header()
    rows_here = 0
    for values, cell_lines, height in measured:
        if rows_here and y + height > bottom:
            page, y = page + 1, margin_top
            place_header()
            rows_here = 0
        table.rows.append(PlacedRow(page, y, height, list(values), cell_lines))
        y += height
        rows_here += 1

    table.final_y = y
    table.final_page = page
    if page != start_page:
        logger.debug("table spans pages %d-%d", start_page, page)
    return table
