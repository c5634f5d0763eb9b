from __future__ import annotations

from dataclasses import dataclass

from ..adapters.images import EncodedImage
from .geometry import MARGIN_X_MM, PAGE_HEIGHT_MM, PAGE_WIDTH_MM, Rect, contain_fit
from .sink import PageSink


REPORT_TITLE = 'Daily Report'
META_GRAY = 80
FOOTER_GRAY = 140
FOOTER_FONT_SIZE = 9
FOOTER_OFFSET_MM = 10.0


@dataclass(frozen=True)
class HeaderMetrics:
    top: float
    logo_box: float
    title_size: float
    meta_size: float
    title_offset: float
    body_gap: float

    @property
    def body_start(self) -> float:
        return self.top + self.logo_box + self.body_gap


FIRST_PAGE_HEADER = HeaderMetrics(top=12, logo_box=24, title_size=15, meta_size=11, title_offset=11, body_gap=14)
LATER_PAGE_HEADER = HeaderMetrics(top=8, logo_box=14, title_size=11, meta_size=9, title_offset=9, body_gap=10)


def header_metrics(first_page: bool) -> HeaderMetrics:
    return FIRST_PAGE_HEADER if first_page else LATER_PAGE_HEADER


@dataclass(frozen=True)
class HeaderContent:
    project_name: str
    report_date: str
    logo: EncodedImage | None
    font_name: str
    bold_font_name: str


def draw_header(sink: PageSink, content: HeaderContent | None, *, first_page: bool) -> float:
    """Draw the page header into ``sink`` and return the body cursor below it.

    With no ``content`` only the space is reserved.
    """
    metrics = header_metrics(first_page)
    if content is None or not sink.drawing:
        return metrics.body_start

    if content.logo is not None:
        box = Rect(MARGIN_X_MM, metrics.top, metrics.logo_box, metrics.logo_box)
        placed = contain_fit(content.logo.width, content.logo.height, box.width, box.height).placed_in(box)
        sink.image(placed.x, placed.y, placed.width, placed.height, content.logo)

    sink.text(
        PAGE_WIDTH_MM / 2,
        metrics.top + metrics.title_offset,
        REPORT_TITLE,
        font_name=content.bold_font_name,
        font_size=metrics.title_size,
        align='center',
    )

    right_x = PAGE_WIDTH_MM - MARGIN_X_MM
    if content.project_name.strip():
        sink.text(
            right_x,
            metrics.top + 7,
            content.project_name,
            font_name=content.font_name,
            font_size=metrics.meta_size,
            gray=META_GRAY,
            align='right',
        )
    sink.text(
        right_x,
        metrics.top + 13,
        f'Report date: {content.report_date}',
        font_name=content.font_name,
        font_size=metrics.meta_size,
        gray=META_GRAY,
        align='right',
    )
    return metrics.body_start


def footer_label(page_number: int, total: int) -> str:
    return f'Page {page_number} / {total}'


def stamp_footers(sink: PageSink, *, font_name: str) -> int:
    """Second pass: once the page total is known, add ``Page p / total`` to every page."""
    total = sink.page_count
    if not sink.drawing:
        return total
    for page_number in range(1, total + 1):
        sink.set_page(page_number)
        sink.text(
            PAGE_WIDTH_MM / 2,
            PAGE_HEIGHT_MM - FOOTER_OFFSET_MM,
            footer_label(page_number, total),
            font_name=font_name,
            font_size=FOOTER_FONT_SIZE,
            gray=FOOTER_GRAY,
            align='center',
        )
    return total
