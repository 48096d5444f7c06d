"""
Printable PDF of a budget document.

Drawn directly on a reportlab canvas: a title block, the meta-field grid,
optional guardrails, one table per bucket with its subtotal row, the budget
summary with the grand total, and signature lines. Tables continue on a new
page (header row repeated) when the current page is full.
"""

from __future__ import annotations

import io
import logging
from typing import Sequence

from budget_template import settings
from budget_template.amounts import parse_optional
from budget_template.cells import compute_row
from budget_template.document import Bucket, BucketColumn, BudgetDocument
from budget_template.export import summary_headers
from budget_template.totals import BucketTotal, DocumentTotals, document_totals

logger = logging.getLogger(__name__)

# Optional for PDF export
try:
    from reportlab.lib.colors import HexColor, white
    from reportlab.lib.pagesizes import A4
    from reportlab.lib.units import inch
    from reportlab.pdfbase.pdfmetrics import stringWidth
    from reportlab.pdfgen import canvas
    HAS_REPORTLAB = True
except ImportError:
    HAS_REPORTLAB = False


NUMERIC_TYPES = ("number", "currency", "computed")


# -----------------------------
# Layout helpers
# -----------------------------
def column_fractions(columns: Sequence[BucketColumn]) -> list[float]:
    """Relative widths from '<n>%' strings; columns without one share what is left."""
    widths = []
    for c in columns:
        w = parse_optional(c.width.rstrip("%")) if c.width else None
        widths.append(w if w is not None and w > 0 else None)

    known = sum(w for w in widths if w is not None)
    missing = [i for i, w in enumerate(widths) if w is None]
    if missing:
        share = max(100.0 - known, 0.0) / len(missing) or 100.0 / len(widths)
        for i in missing:
            widths[i] = share

    total = sum(widths) or 1.0
    return [w / total for w in widths]


def column_align(column: BucketColumn) -> str:
    if column.align in ("right", "center"):
        return column.align
    return "right" if column.type in NUMERIC_TYPES or column.compute else "left"


def fit_text(text: str, width: float, font: str, size: float) -> str:
    """Trim ``text`` with an ellipsis so it fits in ``width`` points."""
    if stringWidth(text, font, size) <= width:
        return text
    while text and stringWidth(text + "...", font, size) > width:
        text = text[:-1]
    return text + "..." if text else ""


if HAS_REPORTLAB:
    class NumberedCanvas(canvas.Canvas):
        """Canvas that stamps 'Page x of y' once the page count is known."""

        def __init__(self, *args, footer_left: str = "", footer_note: str = "", **kwargs):
            super().__init__(*args, **kwargs)
            self._saved_pages = []
            self.footer_left = footer_left
            self.footer_note = footer_note

        def showPage(self):
            self._saved_pages.append(dict(self.__dict__))
            self._startPage()

        def save(self):
            total = len(self._saved_pages)
            for state in self._saved_pages:
                self.__dict__.update(state)
                self._draw_footer(total)
                super().showPage()
            super().save()

        def _draw_footer(self, total: int):
            width, _ = self._pagesize
            margin = settings.PAGE_MARGIN_INCH * inch
            y = margin
            self.setStrokeColor(HexColor(settings.COLOR_BORDER))
            self.setLineWidth(0.5)
            self.line(margin, y + 10, width - margin, y + 10)
            self.setFont(settings.FONT_REGULAR, settings.SMALL_FONT_SIZE)
            self.setFillColor(HexColor(settings.COLOR_MUTED))
            self.drawString(margin, y, self.footer_left)
            note_width = (width - 2 * margin) * 0.6
            note = fit_text(self.footer_note, note_width, settings.FONT_REGULAR, settings.SMALL_FONT_SIZE)
            self.drawCentredString(width / 2, y, note)
            self.drawRightString(width - margin, y, f"Page {self._pageNumber} of {total}")


# -----------------------------
# Writer
# -----------------------------
class BudgetPdfWriter:
    def __init__(self, document: BudgetDocument, totals: DocumentTotals):
        self.document = document
        self.meta = document.meta
        self.totals = totals
        self.buf = io.BytesIO()
        self.page_width, self.page_height = A4
        self.margin = settings.PAGE_MARGIN_INCH * inch
        self.content_width = self.page_width - 2 * self.margin
        self.bottom = self.margin + settings.FOOTER_HEIGHT_INCH * inch
        self.c = NumberedCanvas(
            self.buf,
            pagesize=A4,
            footer_left=self.meta.org_name.split("/")[0].strip(),
            footer_note=self.meta.footer_note,
        )
        self.c.setTitle(f"{self.meta.template_title} - {self.meta.template_subtitle}".strip(" -"))
        self.c.setAuthor(self.meta.org_name)
        self.y = self.page_height - self.margin

    # --- page flow ---
    def page_header(self):
        self.y = self.page_height - self.margin
        self.c.setFont(settings.FONT_REGULAR, settings.SMALL_FONT_SIZE)
        self.c.setFillColor(HexColor(settings.COLOR_MUTED))
        self.c.drawString(self.margin, self.y, self.meta.org_name)
        self.y -= 10
        self.c.setStrokeColor(HexColor(settings.COLOR_HEADER_BG))
        self.c.setLineWidth(1.5)
        self.c.line(self.margin, self.y, self.page_width - self.margin, self.y)
        self.y -= 12

    def new_page(self):
        self.c.showPage()
        self.page_header()

    def ensure_space(self, height: float) -> bool:
        """Start a new page if ``height`` does not fit. Return True when a page was added."""
        if self.y - height < self.bottom:
            self.new_page()
            return True
        return False

    # --- blocks ---
    def title_block(self):
        m = self.meta
        self.c.setFillColor(HexColor(settings.COLOR_HEADER_BG))
        self.c.setFont(settings.FONT_BOLD, settings.TITLE_FONT_SIZE)
        self.c.drawCentredString(self.page_width / 2, self.y - settings.TITLE_FONT_SIZE, m.template_title)
        self.y -= settings.TITLE_FONT_SIZE + 8
        if m.template_subtitle:
            self.c.setFillColor(HexColor(settings.COLOR_SECTION_BG))
            self.c.setFont(settings.FONT_BOLD, settings.SUBTITLE_FONT_SIZE)
            self.c.drawCentredString(self.page_width / 2, self.y, m.template_subtitle)
            self.y -= 12
        if m.tagline:
            self.c.setFillColor(HexColor(settings.COLOR_MUTED))
            self.c.setFont(settings.FONT_REGULAR, settings.BODY_FONT_SIZE)
            tagline = fit_text(m.tagline, self.content_width, settings.FONT_REGULAR, settings.BODY_FONT_SIZE)
            self.c.drawCentredString(self.page_width / 2, self.y, tagline)
            self.y -= 14

    def meta_grid(self):
        fields = self.meta.meta_fields
        if not fields:
            return
        cell_w = self.content_width / 2
        label_w = 130
        for i in range(0, len(fields), 2):
            self.ensure_space(settings.ROW_HEIGHT)
            for j, f in enumerate(fields[i:i + 2]):
                x = self.margin + j * cell_w
                self.c.setFont(settings.FONT_REGULAR, settings.BODY_FONT_SIZE)
                self.c.setFillColor(HexColor(settings.COLOR_MUTED))
                self.c.drawString(x, self.y, fit_text(f.label, label_w - 4, settings.FONT_REGULAR, settings.BODY_FONT_SIZE))
                self.c.setFont(settings.FONT_BOLD, settings.BODY_FONT_SIZE)
                self.c.setFillColor(HexColor(settings.COLOR_TEXT))
                value = fit_text(f.value or settings.EMPTY_MARK, cell_w - label_w - 8, settings.FONT_BOLD, settings.BODY_FONT_SIZE)
                self.c.drawString(x + label_w, self.y, value)
                self.c.setStrokeColor(HexColor(settings.COLOR_BORDER))
                self.c.setLineWidth(0.5)
                self.c.line(x, self.y - 3, x + cell_w - 8, self.y - 3)
            self.y -= settings.ROW_HEIGHT
        self.y -= 6

    def section_header(self, title: str, tip: str = ""):
        height = settings.ROW_HEIGHT + 4
        # keep the header with at least two table rows
        self.ensure_space(height + 3 * settings.ROW_HEIGHT)
        self.c.setFillColor(HexColor(settings.COLOR_SECTION_BG))
        self.c.rect(self.margin, self.y - height, self.content_width, height, stroke=0, fill=1)
        text_y = self.y - height + 5
        self.c.setFillColor(white)
        self.c.setFont(settings.FONT_BOLD, settings.SECTION_FONT_SIZE)
        self.c.drawString(self.margin + 6, text_y, title)
        if tip:
            title_w = stringWidth(title, settings.FONT_BOLD, settings.SECTION_FONT_SIZE)
            tip_w = self.content_width - title_w - 24
            self.c.setFillColor(HexColor(settings.COLOR_SECTION_TIP))
            self.c.setFont(settings.FONT_ITALIC, settings.SMALL_FONT_SIZE)
            self.c.drawRightString(
                self.margin + self.content_width - 6,
                text_y,
                fit_text(tip, tip_w, settings.FONT_ITALIC, settings.SMALL_FONT_SIZE),
            )
        self.y -= height

    def table_row(self, cells: Sequence[str], widths: Sequence[float], aligns: Sequence[str],
                  font: str = settings.FONT_REGULAR, fill: str | None = None, text_color: str = settings.COLOR_TEXT):
        h = settings.ROW_HEIGHT
        pad = settings.CELL_PADDING
        if fill:
            self.c.setFillColor(HexColor(fill))
            self.c.rect(self.margin, self.y - h, self.content_width, h, stroke=0, fill=1)

        x = self.margin
        text_y = self.y - h + 4
        self.c.setFont(font, settings.BODY_FONT_SIZE)
        self.c.setFillColor(HexColor(text_color))
        for text, frac, align in zip(cells, widths, aligns):
            w = frac * self.content_width
            text = fit_text(text or "", w - 2 * pad, font, settings.BODY_FONT_SIZE)
            if align == "right":
                self.c.drawRightString(x + w - pad, text_y, text)
            elif align == "center":
                self.c.drawCentredString(x + w / 2, text_y, text)
            else:
                self.c.drawString(x + pad, text_y, text)
            x += w
        self.y -= h

    def table(self, header: Sequence[str], rows: Sequence[Sequence[str]], widths: Sequence[float],
              aligns: Sequence[str], footer_rows: Sequence[tuple[Sequence[str], str]] = ()):
        """Draw a table; ``footer_rows`` are (cells, kind) pairs with kind 'subtotal' or 'total'."""
        def draw_header():
            self.table_row(header, widths, aligns, font=settings.FONT_BOLD,
                           fill=settings.COLOR_HEADER_BG, text_color="#ffffff")

        draw_header()
        for i, cells in enumerate(rows):
            if self.ensure_space(settings.ROW_HEIGHT):
                draw_header()
            fill = settings.COLOR_ROW_EVEN if i % 2 else None
            self.table_row(cells, widths, aligns, fill=fill)

        for cells, kind in footer_rows:
            if self.ensure_space(settings.ROW_HEIGHT):
                draw_header()
            if kind == "total":
                self.table_row(cells, widths, aligns, font=settings.FONT_BOLD,
                               fill=settings.COLOR_HEADER_BG, text_color="#ffffff")
            else:
                self.table_row(cells, widths, aligns, font=settings.FONT_BOLD,
                               fill=settings.COLOR_SUBTOTAL_BG)
        self.y -= 12

    def guardrails(self):
        if not self.meta.show_guardrails or not self.meta.guardrails:
            return
        self.section_header("Budget Guardrails (Recommended)")
        rows = [[g.bucket, g.purpose, g.cap or settings.EMPTY_MARK, g.notes] for g in self.meta.guardrails]
        self.table(
            ["Bucket", "Purpose", "Cap Rule", "Notes"],
            rows,
            [0.20, 0.30, 0.28, 0.22],
            ["left"] * 4,
        )

    def bucket(self, bucket: Bucket, subtotal: BucketTotal | None):
        columns = bucket.columns
        if not columns:
            return
        widths = column_fractions(columns)
        aligns = [column_align(c) for c in columns]
        rows = [compute_row(r, columns, self.meta) for r in bucket.rows]

        sub_cells = [""] * len(columns)
        sub_cells[0] = f"SUBTOTAL — {bucket.name.split('—')[0].strip()}"
        if subtotal is not None:
            primary_idx = self._primary_total_index(bucket)
            secondary_idx = self._secondary_index(columns)
            if primary_idx is not None:
                sub_cells[primary_idx] = subtotal.primary_display
            if secondary_idx is not None:
                sub_cells[secondary_idx] = subtotal.secondary_display

        self.section_header(bucket.name, bucket.subtitle)
        self.table([c.label for c in columns], rows, widths, aligns, [(sub_cells, "subtotal")])

    @staticmethod
    def _primary_total_index(bucket: Bucket) -> int | None:
        # same column bucket_subtotal sums
        key = bucket.approved_key or bucket.total_key
        if key:
            for i, c in enumerate(bucket.columns):
                if c.key == key:
                    return i
            return None
        last = None
        for i, c in enumerate(bucket.columns):
            if c.type == "currency" and not c.compute:
                last = i
        return last

    @staticmethod
    def _secondary_index(columns: Sequence[BucketColumn]) -> int | None:
        for i, c in enumerate(columns):
            if c.compute in ("usd_equiv", "usd_approved"):
                return i
        return None

    def summary(self):
        m = self.meta
        self.section_header("Budget Summary (Totals)")
        rows = [[t.name, t.primary_display, t.secondary_display] for t in self.totals.buckets]
        self.table(
            ["Bucket", *summary_headers(m)],
            rows,
            [0.55, 0.25, 0.20],
            ["left", "right", "right"],
            [(["GRAND TOTAL", self.totals.grand_total_display,
               self.totals.grand_total_secondary_display], "total")],
        )

    def signatures(self):
        m = self.meta
        block_h = 60
        self.ensure_space(block_h)
        block_w = self.content_width * 0.45
        blocks = [
            ("Prepared By (Name/Signature):", m.prepared_by, m.prepared_date),
            ("Approved By (Name/Signature):", m.approved_by, m.approved_date),
        ]
        for i, (label, name, date) in enumerate(blocks):
            x = self.margin + i * (self.content_width - block_w)
            y = self.y
            self.c.setFont(settings.FONT_REGULAR, settings.BODY_FONT_SIZE)
            self.c.setFillColor(HexColor(settings.COLOR_MUTED))
            self.c.drawString(x, y, label)
            self.c.drawString(x, y - 30, "Date:")
            self.c.setFillColor(HexColor(settings.COLOR_TEXT))
            self.c.drawString(x, y - 16, name)
            self.c.drawString(x, y - 44, date)
            self.c.setStrokeColor(HexColor(settings.COLOR_TEXT))
            self.c.setLineWidth(1)
            self.c.line(x, y - 19, x + block_w, y - 19)
            self.c.line(x, y - 47, x + block_w, y - 47)
        self.y -= block_h

    def build(self) -> bytes:
        self.page_header()
        self.title_block()
        self.meta_grid()
        self.guardrails()
        # totals.buckets is in document order
        for b, t in zip(self.document.buckets, self.totals.buckets):
            self.bucket(b, t)
        self.summary()
        self.signatures()
        self.c.showPage()
        self.c.save()
        self.buf.seek(0)
        return self.buf.getvalue()


def make_budget_pdf(document: BudgetDocument, totals: DocumentTotals | None = None) -> bytes:
    if not HAS_REPORTLAB:
        logger.warning("reportlab is not installed; PDF export disabled")
        return b""
    totals = totals or document_totals(document)
    data = BudgetPdfWriter(document, totals).build()
    logger.debug("Rendered budget PDF (%d bytes, %d bucket(s))", len(data), len(document.buckets))
    return data
