# app/shared/services/pdf_renderer.py
import io
import logging
from datetime import datetime
from typing import Any, Iterable, List, Tuple

from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas

from app.core.exceptions import InternalError

logger = logging.getLogger(__name__)

PAGE_WIDTH, PAGE_HEIGHT = A4
MARGIN = 50
LINE_HEIGHT = 16
MAX_VALUE_CHARS = 70


def _format_value(value: Any) -> str:
    if value is None or value == "":
        return "-"
    if isinstance(value, datetime):
        return value.strftime("%d/%m/%Y %H:%M")
    if isinstance(value, bool):
        return "Sí" if value else "No"
    if isinstance(value, float):
        return f"{value:,.2f}"
    if isinstance(value, dict):
        return ", ".join(f"{k}: {_format_value(v)}" for k, v in value.items())
    if isinstance(value, list):
        return "; ".join(_format_value(v) for v in value)
    return str(value)


def _wrap(text: str, width: int = MAX_VALUE_CHARS) -> List[str]:
    lines = []
    while len(text) > width:
        cut = text.rfind(" ", 0, width)
        if cut <= 0:
            cut = width
        lines.append(text[:cut])
        text = text[cut:].lstrip()
    lines.append(text)
    return lines


class _PdfWriter:
    """Cursor vertical sobre un canvas de reportlab con salto de página"""

    def __init__(self, pdf: canvas.Canvas):
        self.pdf = pdf
        self.y = PAGE_HEIGHT - MARGIN

    def _ensure_space(self, lines: int = 1):
        if self.y - lines * LINE_HEIGHT < MARGIN:
            self.pdf.showPage()
            self.y = PAGE_HEIGHT - MARGIN

    def title(self, text: str):
        self._ensure_space(2)
        self.pdf.setFont("Helvetica-Bold", 16)
        self.pdf.drawString(MARGIN, self.y, text)
        self.y -= LINE_HEIGHT * 2

    def section(self, text: str):
        self._ensure_space(2)
        self.y -= LINE_HEIGHT / 2
        self.pdf.setFont("Helvetica-Bold", 12)
        self.pdf.drawString(MARGIN, self.y, text)
        self.y -= LINE_HEIGHT

    def field(self, label: str, value: Any):
        lines = _wrap(_format_value(value))
        self._ensure_space(len(lines))
        self.pdf.setFont("Helvetica-Bold", 10)
        self.pdf.drawString(MARGIN, self.y, f"{label}:")
        self.pdf.setFont("Helvetica", 10)
        for line in lines:
            self.pdf.drawString(MARGIN + 170, self.y, line)
            self.y -= LINE_HEIGHT

    def signatures(self, labels: Iterable[str]):
        self._ensure_space(5)
        self.y -= LINE_HEIGHT * 3
        x = MARGIN
        for label in labels:
            self.pdf.line(x, self.y, x + 180, self.y)
            self.pdf.setFont("Helvetica", 9)
            self.pdf.drawString(x, self.y - 12, label)
            x += 250


def render_affiliation_pdf(
    affiliation_id: int,
    summary: List[Tuple[str, Any]],
    form_data: dict
) -> bytes:
    """
    Generar el PDF de una ficha.

    `summary` son pares (etiqueta, valor) del encabezado; `form_data` se
    vuelca completo debajo. Cualquier error de reportlab se reporta como
    InternalError.
    """
    buffer = io.BytesIO()
    try:
        pdf = canvas.Canvas(buffer, pagesize=A4)
        pdf.setTitle(f"Ficha de afiliación {affiliation_id}")
        writer = _PdfWriter(pdf)

        writer.title(f"Ficha de Afiliación N° {affiliation_id}")

        writer.section("Resumen")
        for label, value in summary:
            writer.field(label, value)

        writer.section("Datos de la ficha")
        for key in sorted(form_data):
            writer.field(key, form_data[key])

        writer.signatures(["Firma del titular", "Firma y sello del vendedor"])

        pdf.save()
        return buffer.getvalue()
    except Exception as e:
        logger.exception(f"❌ Error generando PDF de la ficha {affiliation_id}")
        raise InternalError(f"Error al generar el PDF: {e}")
    finally:
        buffer.close()
