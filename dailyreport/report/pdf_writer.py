from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from typing import Iterable

from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen.canvas import Canvas

from ..errors import SerializationFailure
from .geometry import LINE_HEIGHT_FACTOR
from .sink import DrawOp, ImageOp, RoundRectOp, TextOp


logger = logging.getLogger(__name__)

PAGE_WIDTH, PAGE_HEIGHT = A4
STROKE_WIDTH = 0.57


@dataclass(frozen=True)
class PdfMetadata:
    title: str
    author: str
    subject: str = 'Daily site report'
    invariant: bool = False


def _gray(level: int) -> float:
    return max(0, min(255, int(level))) / 255.0


def _to_pdf_y(y_mm: float) -> float:
    return PAGE_HEIGHT - y_mm * mm


def _draw_text(canvas: Canvas, op: TextOp) -> None:
    canvas.setFont(op.font_name, op.font_size)
    canvas.setFillGray(_gray(op.gray))
    leading = op.font_size * LINE_HEIGHT_FACTOR
    x = op.x * mm
    for index, line in enumerate(op.lines):
        baseline = _to_pdf_y(op.y) - index * leading
        if op.align == 'center':
            canvas.drawCentredString(x, baseline, line)
        elif op.align == 'right':
            canvas.drawRightString(x, baseline, line)
        else:
            canvas.drawString(x, baseline, line)


def _draw_round_rect(canvas: Canvas, op: RoundRectOp) -> None:
    canvas.setStrokeGray(_gray(op.stroke_gray))
    canvas.setLineWidth(STROKE_WIDTH)
    canvas.roundRect(
        op.x * mm,
        _to_pdf_y(op.y + op.height),
        op.width * mm,
        op.height * mm,
        op.radius * mm,
        stroke=1,
        fill=0,
    )


def _draw_image(canvas: Canvas, op: ImageOp) -> None:
    canvas.drawImage(
        ImageReader(io.BytesIO(op.image.data)),
        op.x * mm,
        _to_pdf_y(op.y + op.height),
        width=op.width * mm,
        height=op.height * mm,
        mask='auto' if op.image.is_png else None,
    )


def write_pdf(pages: Iterable[list[DrawOp]], metadata: PdfMetadata) -> bytes:
    """Replay recorded page operations onto a reportlab canvas and return the PDF bytes."""
    buffer = io.BytesIO()
    try:
        canvas = Canvas(buffer, pagesize=A4, invariant=1 if metadata.invariant else 0)
        canvas.setTitle(metadata.title)
        canvas.setAuthor(metadata.author)
        canvas.setSubject(metadata.subject)
        canvas.setProducer(metadata.author)

        page_total = 0
        for ops in pages:
            for op in ops:
                if isinstance(op, TextOp):
                    _draw_text(canvas, op)
                elif isinstance(op, RoundRectOp):
                    _draw_round_rect(canvas, op)
                elif isinstance(op, ImageOp):
                    _draw_image(canvas, op)
                else:
                    raise TypeError(f'unsupported draw operation: {op!r}')
            canvas.showPage()
            page_total += 1
        canvas.save()
    except Exception as exc:
        raise SerializationFailure(f'failed to write PDF: {exc}') from exc

    payload = buffer.getvalue()
    if not payload:
        raise SerializationFailure('PDF writer produced no output')
    logger.debug('Serialized %d pages into %d bytes', page_total, len(payload))
    return payload
