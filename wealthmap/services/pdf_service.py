"""PDF export for saved-property reports."""

from __future__ import annotations

import io
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, List, Sequence

from reportlab.lib import colors
from reportlab.lib.pagesizes import landscape, letter
from reportlab.lib.units import inch
from reportlab.pdfgen import canvas

# More columns than this switch the page to landscape.
PORTRAIT_MAX_COLUMNS = 6
HEADER_COLOR = "#0A2342"
TABLE_HEADER_COLOR = "#3B82F6"
STRIPE_COLOR = "#F2F4F7"


@dataclass
class ReportTable:
    title: str
    headers: List[str]
    rows: List[List[str]]
    right_aligned: List[bool]
    totals: Dict[str, float] = field(default_factory=dict)
    property_count: int = 0


class PDFService:
    def render(self, table: ReportTable) -> bytes:
        pagesize = landscape(letter) if len(table.headers) > PORTRAIT_MAX_COLUMNS else letter
        buffer = io.BytesIO()
        c = canvas.Canvas(buffer, pagesize=pagesize)
        c.setTitle(table.title)
        width, height = pagesize
        margin = 0.6 * inch

        y = self._draw_header(c, table, width, height, margin)
        y = self._draw_table(c, table, width, height, y - 20, margin)
        self._draw_summary(c, table, width, height, y - 20, margin)

        c.showPage()
        c.save()
        buffer.seek(0)
        return buffer.read()

    def _draw_header(
        self,
        c: canvas.Canvas,
        table: ReportTable,
        width: float,
        height: float,
        margin: float,
    ) -> float:
        header_height = 56
        top = height - margin
        c.setFillColor(colors.HexColor(HEADER_COLOR))
        c.rect(margin, top - header_height, width - 2 * margin, header_height, fill=1, stroke=0)
        c.setFillColor(colors.white)
        c.setFont("Helvetica-Bold", 18)
        c.drawString(margin + 16, top - 24, table.title)
        c.setFont("Helvetica", 10)
        generated = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M UTC")
        c.drawString(margin + 16, top - 42, f"Generated {generated} · {table.property_count} properties")
        return top - header_height

    def _column_widths(self, table: ReportTable, usable: float) -> List[float]:
        if not table.headers:
            return []
        return [usable / len(table.headers)] * len(table.headers)

    def _draw_column_headers(
        self,
        c: canvas.Canvas,
        table: ReportTable,
        widths: Sequence[float],
        top: float,
        margin: float,
    ) -> float:
        row_height = 16
        c.setFillColor(colors.HexColor(TABLE_HEADER_COLOR))
        c.rect(margin, top - row_height, sum(widths), row_height, fill=1, stroke=0)
        c.setFillColor(colors.white)
        c.setFont("Helvetica-Bold", 8)
        x = margin
        for header, col_width, right in zip(table.headers, widths, table.right_aligned):
            text = self._truncate(header, col_width - 8, char_width=4.8)
            if right:
                c.drawRightString(x + col_width - 4, top - 11, text)
            else:
                c.drawString(x + 4, top - 11, text)
            x += col_width
        return top - row_height - 12

    def _draw_table(
        self,
        c: canvas.Canvas,
        table: ReportTable,
        width: float,
        height: float,
        top: float,
        margin: float,
    ) -> float:
        widths = self._column_widths(table, width - 2 * margin)
        row_height = 12
        y = self._draw_column_headers(c, table, widths, top, margin)
        if not table.rows:
            c.setFont("Helvetica", 10)
            c.setFillColor(colors.black)
            c.drawString(margin + 4, y, "No properties selected.")
            return y - row_height

        for idx, row in enumerate(table.rows):
            if y < margin + row_height:
                c.showPage()
                y = self._draw_column_headers(c, table, widths, height - margin, margin)
            self._draw_row_stripe(c, idx, margin, width, y, row_height)
            c.setFont("Helvetica", 8)
            c.setFillColor(colors.black)
            x = margin
            for value, col_width, right in zip(row, widths, table.right_aligned):
                text = self._truncate(value, col_width - 8)
                if right:
                    c.drawRightString(x + col_width - 4, y, text)
                else:
                    c.drawString(x + 4, y, text)
                x += col_width
            y -= row_height
        return y

    def _draw_summary(
        self,
        c: canvas.Canvas,
        table: ReportTable,
        width: float,
        height: float,
        top: float,
        margin: float,
    ) -> None:
        lines = [f"Total Properties: {table.property_count}"]
        lines.extend(f"Total {label}: {self._fmt_currency(total)}" for label, total in table.totals.items())
        needed = 30 + 12 * len(lines)
        if top - needed < margin:
            c.showPage()
            top = height - margin

        c.setFont("Helvetica-Bold", 12)
        c.setFillColor(colors.HexColor(HEADER_COLOR))
        c.drawString(margin, top - 14, "Summary")
        c.setFont("Helvetica", 10)
        c.setFillColor(colors.black)
        y = top - 30
        for line in lines:
            c.drawString(margin, y, line)
            y -= 12

    def _draw_row_stripe(
        self,
        c: canvas.Canvas,
        row_index: int,
        margin: float,
        width: float,
        baseline: float,
        row_height: float,
        *,
        x_padding: float = 0.0,
        y_padding: float = 3.0,
    ) -> None:
        """Shade every other row to create alternating horizontal stripes."""
        if row_index % 2 != 0:
            return
        stripe_y = baseline - row_height + y_padding + 6
        stripe_width = width - 2 * margin - 2 * x_padding
        if stripe_width <= 0:
            return
        c.saveState()
        c.setFillColor(colors.HexColor(STRIPE_COLOR))
        c.rect(margin + x_padding, stripe_y, stripe_width, row_height, stroke=0, fill=1)
        c.restoreState()

    def _fmt_currency(self, value: float) -> str:
        return f"${value:,.0f}"

    def _truncate(self, text: str, width: float, char_width: float = 4.4) -> str:
        max_chars = max(4, int(width / char_width))
        if len(text) <= max_chars:
            return text
        return text[: max_chars - 3] + "..."
