"""
fitplan.output — plan document export

Plan + profile → paginated PDF document.

Layout (A4, mm, fixed):
  1. header block: title, "Generated for" subtitle, motivation line
  2. workout section: heading, wrapped summary, Day/Focus/Exercises table
  3. page break if the cursor after the workout table passes the threshold
  4. diet section: heading, wrapped summary, Meal/Options table

The exporter only lays out and renders in memory; writing the file is up
to the caller (``DocumentArtifact.write``).
"""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass, field
from pathlib import Path

from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.pdfgen import canvas

from fitplan.layout import (
    BODY_FONT,
    BOLD_FONT,
    MARGIN_LEFT,
    MARGIN_TOP,
    PAGE_HEIGHT,
    RGB,
    PlacedRow,
    TableLayout,
    TextBlock,
    layout_table,
    pt_to_mm,
    wrap_text,
)
from fitplan.schema import Plan, ProfileRecord

logger = logging.getLogger(__name__)

DOCUMENT_NAME = "my-fitness-plan"
DOCUMENT_TITLE = "AI Fitness Coach - Personalized Plan"

# ── Colors ───────────────────────────────────────────────────────

TITLE_COLOR: RGB = (40, 40, 40)
SUBTITLE_COLOR: RGB = (100, 100, 100)
MOTIVATION_COLOR: RGB = (60, 60, 60)
WORKOUT_COLOR: RGB = (0, 51, 102)
DIET_COLOR: RGB = (0, 100, 0)
GRID_COLOR: RGB = (200, 200, 200)
TEXT_COLOR: RGB = (0, 0, 0)


# ── Artifact ─────────────────────────────────────────────────────

@dataclass
class DocumentArtifact:
    """Laid-out plan document, renderable to PDF."""
    filename: str = f"{DOCUMENT_NAME}.pdf"
    page_count: int = 1
    texts: list[TextBlock] = field(default_factory=list)
    workout_table: TableLayout | None = None
    diet_table: TableLayout | None = None
    cursor_after_workout: float = 0.0
    diet_page_break: bool = False

    @property
    def tables(self) -> list[TableLayout]:
        return [t for t in (self.workout_table, self.diet_table) if t is not None]

    def find_text(self, starts_with: str) -> TextBlock | None:
        """First text block whose first line starts with ``starts_with``."""
        for block in self.texts:
            if block.lines and block.lines[0].startswith(starts_with):
                return block
        return None

    def texts_on_page(self, page: int) -> list[TextBlock]:
        return [t for t in self.texts if t.page == page]

    def to_pdf_bytes(self) -> bytes:
        """Render to PDF. Identical layouts give identical bytes."""
        buffer = io.BytesIO()
        pdf = canvas.Canvas(buffer, pagesize=A4, invariant=1)
        pdf.setTitle("My Fitness Plan")
        pdf.setAuthor("fitplan")

        for page in range(self.page_count):
            for block in self.texts_on_page(page):
                _draw_text(pdf, block)
            for table in self.tables:
                for row in table.rows_on_page(page):
                    _draw_row(pdf, table, row)
            pdf.showPage()

        pdf.save()
        return buffer.getvalue()

    def write(self, target: str | Path) -> Path:
        """
        Write the PDF to ``target`` (a file path, or a directory that
        receives ``self.filename``).
        """
        path = Path(target)
        if path.is_dir():
            path = path / self.filename
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(self.to_pdf_bytes())
        logger.info("document written: %s (%d pages)", path, self.page_count)
        return path


# ── Rendering ────────────────────────────────────────────────────

def _set_fill(pdf: canvas.Canvas, color: RGB) -> None:
    pdf.setFillColorRGB(*(c / 255 for c in color))


def _pdf_y(y: float) -> float:
    return (PAGE_HEIGHT - y) * mm


def _draw_text(pdf: canvas.Canvas, block: TextBlock) -> None:
    pdf.setFont(block.font_name, block.font_size)
    _set_fill(pdf, block.color)
    for i, line in enumerate(block.lines):
        pdf.drawString(block.x * mm, _pdf_y(block.y + i * block.line_height), line)


def _draw_row(pdf: canvas.Canvas, table: TableLayout, row: PlacedRow) -> None:
    pdf.setLineWidth(0.1 * mm)
    pdf.setStrokeColorRGB(*(c / 255 for c in GRID_COLOR))
    if row.header:
        _set_fill(pdf, table.head_fill)
        font, color = BOLD_FONT, (255, 255, 255)
    else:
        font, color = BODY_FONT, TEXT_COLOR

    x = table.x
    # baseline of the first line sits roughly one ascent below the padding
    ascent = pt_to_mm(table.font_size) * 0.8
    for width, lines in zip(table.widths, row.cell_lines):
        pdf.rect(x * mm, _pdf_y(row.y + row.height), width * mm, row.height * mm,
                 stroke=1, fill=1 if row.header else 0)
        pdf.setFont(font, table.font_size)
        _set_fill(pdf, color)
        for i, line in enumerate(lines):
            baseline = row.y + table.padding + ascent + i * table.line_height
            pdf.drawString((x + table.padding) * mm, _pdf_y(baseline), line)
        if row.header:
            _set_fill(pdf, table.head_fill)
        x += width


# ── Exporter ─────────────────────────────────────────────────────

class DocumentExporter:
    """
    Deterministic plan → document layout.

    Usage:
        artifact = DocumentExporter().export(plan, profile)
        artifact.write("out/")
    """

    TITLE_Y = 20.0
    SUBTITLE_Y = 30.0
    MOTIVATION_Y = 40.0
    CONTENT_START_Y = 55.0

    SUMMARY_WIDTH = 180.0
    SUMMARY_LINE_HEIGHT = 6.0
    HEADING_ADVANCE = 10.0
    SECTION_GAP = 10.0
    TABLE_GAP = 20.0

    # cursor past this point moves the diet section to a new page
    BREAK_THRESHOLD = 240.0

    WORKOUT_COLUMNS = ["Day", "Focus", "Exercises"]
    WORKOUT_WIDTHS = [30.0, 45.0, 107.0]
    DIET_COLUMNS = ["Meal", "Options"]
    DIET_WIDTHS = [40.0, 142.0]

    def __init__(self, break_threshold: float | None = None):
        if break_threshold is not None:
            self.BREAK_THRESHOLD = break_threshold

    def export(self, plan: Plan, profile: ProfileRecord) -> DocumentArtifact:
        """Lay out ``plan`` for ``profile``."""
        doc = DocumentArtifact()
        page = 0

        # ── header block ─────────────────────────────────────
        doc.texts.append(TextBlock(page, MARGIN_LEFT, self.TITLE_Y, [DOCUMENT_TITLE],
                                   font_size=22, color=TITLE_COLOR))
        subtitle = f"Generated for: {profile.display_name} | Goal: {profile.goal}"
        doc.texts.append(TextBlock(page, MARGIN_LEFT, self.SUBTITLE_Y, [subtitle],
                                   font_size=10, color=SUBTITLE_COLOR))
        doc.texts.append(TextBlock(page, MARGIN_LEFT, self.MOTIVATION_Y,
                                   [f'Motivation: "{plan.motivation}"'],
                                   font_size=12, color=MOTIVATION_COLOR))
        y = self.CONTENT_START_Y

        # ── workout section ──────────────────────────────────
        y = self._section_intro(doc, page, y, "Workout Strategy",
                                plan.workout_plan.summary, WORKOUT_COLOR)
        workout_rows = [
            [day.day, day.focus, "\n".join(ex.label for ex in day.exercises)]
            for day in plan.workout_plan.schedule
        ]
        doc.workout_table = layout_table(
            self.WORKOUT_COLUMNS, workout_rows, self.WORKOUT_WIDTHS,
            start_y=y, start_page=page, head_fill=WORKOUT_COLOR,
        )
        page = doc.workout_table.final_page
        y = doc.workout_table.final_y + self.TABLE_GAP
        doc.cursor_after_workout = y

        # ── page break check (workout → diet only) ───────────
        if y > self.BREAK_THRESHOLD:
            page += 1
            y = MARGIN_TOP
            doc.diet_page_break = True
            logger.debug("diet section moved to page %d", page + 1)

        # ── diet section ─────────────────────────────────────
        y = self._section_intro(doc, page, y, "Diet Strategy",
                                plan.diet_plan.summary, DIET_COLOR)
        diet_rows = [
            [meal.type, "\n".join(meal.options)]
            for meal in plan.diet_plan.meals
        ]
        doc.diet_table = layout_table(
            self.DIET_COLUMNS, diet_rows, self.DIET_WIDTHS,
            start_y=y, start_page=page, head_fill=DIET_COLOR,
        )

        doc.page_count = doc.diet_table.final_page + 1
        logger.info(
            "document laid out: %d page(s), %d workout row(s), %d diet row(s)",
            doc.page_count, len(workout_rows), len(diet_rows),
        )
        return doc

    def _section_intro(
        self,
        doc: DocumentArtifact,
        page: int,
        y: float,
        heading: str,
        summary: str,
        color: RGB,
    ) -> float:
        """Heading + wrapped summary; returns the cursor for the table."""
        doc.texts.append(TextBlock(page, MARGIN_LEFT, y, [heading],
                                   font_name=BOLD_FONT, font_size=16, color=color))
        y += self.HEADING_ADVANCE
        lines = wrap_text(summary, self.SUMMARY_WIDTH, BODY_FONT, 11)
        doc.texts.append(TextBlock(page, MARGIN_LEFT, y, lines, font_size=11,
                                   color=TEXT_COLOR, line_height=self.SUMMARY_LINE_HEIGHT))
        return y + len(lines) * self.SUMMARY_LINE_HEIGHT + self.SECTION_GAP


def export_plan(plan: Plan, profile: ProfileRecord) -> DocumentArtifact:
    """Lay out ``plan`` with the default exporter."""
    return DocumentExporter().export(plan, profile)


def write_plan_pdf(
    plan: Plan,
    profile: ProfileRecord,
    output_dir: str | Path,
) -> Path:
    """
    Export ``plan`` and write ``my-fitness-plan.pdf`` into ``output_dir``.

    Returns:
        path of the written file
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    return export_plan(plan, profile).write(output_dir)
