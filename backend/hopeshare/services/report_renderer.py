"""Render report data as PDF (reportlab canvas) or CSV."""

import csv
from datetime import date, datetime
from decimal import Decimal
from io import BytesIO, StringIO

from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas

MARGIN = 50
LINE_HEIGHT = 14
MAX_LINE_CHARS = 95


def format_value(value: object) -> str:
    if value is None:
        return "-"
    if isinstance(value, Decimal):
        return f"{value:.2f}"
    if isinstance(value, datetime):
        return value.strftime("%Y-%m-%d %H:%M")
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, bool):
        return "yes" if value else "no"
    return str(value)


def flatten(data: object, prefix: str = "") -> list[tuple[str, str]]:
    """Nested dicts/lists -> [("a.b", "1"), ...] in insertion order."""
    rows: list[tuple[str, str]] = []
    if isinstance(data, dict):
        for key, value in data.items():
            rows.extend(flatten(value, f"{prefix}.{key}" if prefix else str(key)))
    elif isinstance(data, list):
        if not data:
            rows.append((prefix, "-"))
        for index, value in enumerate(data, start=1):
            rows.extend(flatten(value, f"{prefix}[{index}]"))
    else:
        rows.append((prefix, format_value(data)))
    return rows


class _PdfWriter:
    def __init__(self, title: str):
        self.buffer = BytesIO()
        self.canvas = canvas.Canvas(self.buffer, pagesize=A4)
        self.canvas.setTitle(title)
        self.width, self.height = A4
        self.y = self.height - MARGIN
        self.font = ("Helvetica", 9)

    def _set_font(self, name: str, size: int) -> None:
        self.font = (name, size)
        self.canvas.setFont(name, size)

    def _ensure_room(self, lines: int = 1) -> None:
        if self.y - lines * LINE_HEIGHT < MARGIN:
            # showPage resets the canvas font
            self.canvas.showPage()
            self.canvas.setFont(*self.font)
            self.y = self.height - MARGIN

    def heading(self, text: str, size: int = 12) -> None:
        self._ensure_room(2)
        self.y -= LINE_HEIGHT / 2
        self._set_font("Helvetica-Bold", size)
        self.canvas.drawString(MARGIN, self.y, text)
        self.y -= LINE_HEIGHT + 2

    def line(self, text: str) -> None:
        self._set_font("Helvetica", 9)
        while text:
            self._ensure_room()
            chunk, text = text[:MAX_LINE_CHARS], text[MAX_LINE_CHARS:]
            self.canvas.drawString(MARGIN, self.y, chunk)
            self.y -= LINE_HEIGHT

    def finish(self) -> bytes:
        self.canvas.showPage()
        self.canvas.save()
        return self.buffer.getvalue()


def render_pdf(title: str, data: dict) -> bytes:
    """One section per top-level key of ``data``."""
    pdf = _PdfWriter(title)
    pdf.heading(title, size=16)
    for section, content in data.items():
        pdf.heading(section.replace("_", " ").title())
        for label, value in flatten(content):
            pdf.line(f"{label}: {value}" if label else value)
    return pdf.finish()


def render_csv(rows: list[dict]) -> bytes:
    if not rows:
        return b""
    output = StringIO()
    writer = csv.DictWriter(output, fieldnames=list(rows[0].keys()))
    writer.writeheader()
    for row in rows:
        writer.writerow({k: format_value(v) for k, v in row.items()})
    return output.getvalue().encode("utf-8")
