from __future__ import annotations

import re
from dataclasses import dataclass

from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.pdfbase import pdfmetrics

from ..errors import MeasurementFailure


# All layout arithmetic is in millimetres, origin at the top-left corner.
PAGE_WIDTH_MM = A4[0] / mm
PAGE_HEIGHT_MM = A4[1] / mm
MARGIN_X_MM = 14.0
BOTTOM_MARGIN_MM = 16.0
CONTENT_WIDTH_MM = PAGE_WIDTH_MM - MARGIN_X_MM * 2

MIN_TEXT_BLOCK_MM = 18.0
TEXT_LINE_MM = 5.0
TEXT_BLOCK_EXTRA_MM = 10.0

# Leading of multi-line text runs, as a multiple of the font size.
LINE_HEIGHT_FACTOR = 1.15

_SLUG_STRIP_PATTERN = re.compile(r'[^\w\s-]', re.ASCII)
_SLUG_SPACE_PATTERN = re.compile(r'\s+')
_SLUG_DASH_PATTERN = re.compile(r'-+')


@dataclass(frozen=True)
class Rect:
    x: float
    y: float
    width: float
    height: float

    @property
    def bottom(self) -> float:
        return self.y + self.height

    def offset(self, dx: float, dy: float) -> 'Rect':
        return Rect(self.x + dx, self.y + dy, self.width, self.height)

    def inset(self, amount: float) -> 'Rect':
        return Rect(
            self.x + amount,
            self.y + amount,
            self.width - amount * 2,
            self.height - amount * 2,
        )


@dataclass(frozen=True)
class FitBox:
    draw_width: float
    draw_height: float
    offset_x: float
    offset_y: float

    def placed_in(self, box: Rect) -> Rect:
        return Rect(box.x + self.offset_x, box.y + self.offset_y, self.draw_width, self.draw_height)


def text_width_points(text: str, *, font_name: str, font_size: float) -> float:
    if not text:
        return 0.0
    try:
        return float(pdfmetrics.stringWidth(text, font_name, font_size))
    except Exception as exc:
        raise MeasurementFailure(f'cannot measure text with font {font_name!r}: {exc}') from exc


def _split_token_by_width(
    token: str,
    *,
    max_width_points: float,
    font_name: str,
    font_size: float,
) -> list[str]:
    chunks: list[str] = []
    current = ''
    for char in token:
        candidate = f'{current}{char}'
        if text_width_points(candidate, font_name=font_name, font_size=font_size) <= max_width_points:
            current = candidate
            continue
        if current:
            chunks.append(current)
            current = char
            continue
        chunks.append(char)
    if current:
        chunks.append(current)
    return chunks


def _wrap_paragraph(
    paragraph: str,
    *,
    max_width_points: float,
    font_name: str,
    font_size: float,
) -> list[str]:
    if not paragraph.strip():
        return ['']

    tokens = re.findall(r'\s+|\S+', paragraph)
    wrapped: list[str] = []
    current = ''

    for token in tokens:
        candidate = f'{current}{token}'
        if text_width_points(candidate, font_name=font_name, font_size=font_size) <= max_width_points:
            current = candidate
            continue

        if token.isspace():
            # Whitespace at a break point is dropped.
            if current.strip():
                wrapped.append(current.rstrip())
            current = ''
            continue

        if current.strip():
            wrapped.append(current.rstrip())
            current = ''

        if text_width_points(token, font_name=font_name, font_size=font_size) <= max_width_points:
            current = token
            continue

        chunks = _split_token_by_width(
            token,
            max_width_points=max_width_points,
            font_name=font_name,
            font_size=font_size,
        )
        wrapped.extend(chunks[:-1])
        current = chunks[-1] if chunks else ''

    if current.strip() or not wrapped:
        wrapped.append(current.rstrip())
    return wrapped


def measure_wrapped_text(
    text: str,
    max_width_mm: float,
    font_size: float,
    *,
    font_name: str = 'Helvetica',
) -> list[str]:
    """Split ``text`` into lines no wider than ``max_width_mm``.

    Explicit newlines always start a new line; words longer than the available
    width are broken by character. Empty text yields a single empty line.
    """
    max_width_points = max(1.0, float(max_width_mm) * mm)
    normalized = str(text or '').replace('\r\n', '\n').replace('\r', '\n').replace('\t', '    ')
    lines: list[str] = []
    for paragraph in normalized.split('\n'):
        lines.extend(
            _wrap_paragraph(
                paragraph,
                max_width_points=max_width_points,
                font_name=font_name,
                font_size=float(font_size),
            )
        )
    return lines or ['']


def text_block_height(line_count: int) -> float:
    return max(MIN_TEXT_BLOCK_MM, line_count * TEXT_LINE_MM + TEXT_BLOCK_EXTRA_MM)


def contain_fit(src_width: float, src_height: float, box_width: float, box_height: float) -> FitBox:
    """Scale a source into a box preserving aspect ratio, centred (object-fit: contain)."""
    if src_width <= 0 or src_height <= 0:
        raise MeasurementFailure(f'invalid image dimensions {src_width}x{src_height}')
    scale = min(box_width / src_width, box_height / src_height)
    draw_width = src_width * scale
    draw_height = src_height * scale
    return FitBox(
        draw_width=draw_width,
        draw_height=draw_height,
        offset_x=(box_width - draw_width) / 2,
        offset_y=(box_height - draw_height) / 2,
    )


def slugify(value: str) -> str:
    token = str(value or '').lower().strip()
    token = _SLUG_STRIP_PATTERN.sub('', token)
    token = _SLUG_SPACE_PATTERN.sub('-', token)
    return _SLUG_DASH_PATTERN.sub('-', token)
