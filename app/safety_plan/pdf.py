"""PDF rendering for safety plan page layouts."""

from __future__ import annotations

import logging
from io import BytesIO

from reportlab.lib.units import mm
from reportlab.pdfgen import canvas

from app.safety_plan.layout import RGB, PageLayout, RectOp, TextOp

logger = logging.getLogger(__name__)

FONT_NAME = "Helvetica"


def _set_fill(canvas_obj: canvas.Canvas, color: RGB) -> None:
    red, green, blue = color
    canvas_obj.setFillColorRGB(red / 255, green / 255, blue / 255)


def render_pdf(layout: PageLayout, *, title: str = "Safety Plan", compress: bool = True) -> bytes:
    """
    Draw a page layout onto a single PDF page and return the file contents.

    Layout coordinates are millimetres from the top-left corner; reportlab draws in
    points from the bottom-left, so y is flipped here. Invariant mode keeps the output
    byte-identical for identical layouts.
    """
    page_height = layout.height * mm
    buffer = BytesIO()
    canvas_obj = canvas.Canvas(
        buffer,
        pagesize=(layout.width * mm, page_height),
        invariant=1,
        pageCompression=1 if compress else 0,
    )
    canvas_obj.setTitle(title)

    for op in layout.ops:
        if isinstance(op, RectOp):
            _set_fill(canvas_obj, op.fill)
            canvas_obj.rect(
                op.x * mm,
                page_height - (op.y + op.height) * mm,
                op.width * mm,
                op.height * mm,
                stroke=0,
                fill=1,
            )
        elif isinstance(op, TextOp):
            _set_fill(canvas_obj, op.color)
            canvas_obj.setFont(FONT_NAME, op.font_size)
            if op.align == "center":
                canvas_obj.drawCentredString(op.x * mm, page_height - op.y * mm, op.text)
            else:
                canvas_obj.drawString(op.x * mm, page_height - op.y * mm, op.text)
        else:
            raise TypeError(f"Unsupported draw operation: {type(op).__name__}")

    canvas_obj.showPage()
    canvas_obj.save()
    pdf_bytes = buffer.getvalue()
    logger.debug(f"Rendered {len(layout.ops)} draw operations into {len(pdf_bytes)} bytes")
    return pdf_bytes
