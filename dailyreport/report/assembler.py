from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable

from ..adapters.images import EncodedImage, compress_photo, load_embeddable
from ..config import Settings, get_settings
from ..types import Entry, Photo, ReportDocument
from .entry_layout import ENTRY_PADDING_MM, EntryBlock, layout_entry
from .geometry import CONTENT_WIDTH_MM, MARGIN_X_MM, contain_fit, slugify
from .header_footer import HeaderContent, REPORT_TITLE, stamp_footers
from .pagination import PageCursor
from .pdf_writer import PdfMetadata, write_pdf
from .sink import DrawOp, PageSink, RecordingSink


logger = logging.getLogger(__name__)

PhotoLoader = Callable[[Photo], EncodedImage]

ENTRY_FRAME_RADIUS_MM = 4.0
ENTRY_FRAME_GRAY = 220
TEXT_FRAME_RADIUS_MM = 3.0
TEXT_FRAME_GRAY = 200
CELL_FRAME_RADIUS_MM = 3.0
CELL_FRAME_GRAY = 220
CELL_INSET_MM = 1.0
PHOTOS_LABEL = 'Photos'
PHOTOS_LABEL_FONT_SIZE = 11
DEFAULT_PROJECT_SLUG = 'site'


@dataclass(frozen=True)
class LayoutResult:
    page_count: int
    pages: list[list[DrawOp]] = field(default_factory=list)

    @property
    def draw_ops(self) -> list[DrawOp]:
        return [op for page in self.pages for op in page]


@dataclass(frozen=True)
class RenderedReport:
    blob: bytes
    file_name: str
    page_count: int


def build_file_name(report_date: str, project_name: str | None) -> str:
    return f'{report_date}__{slugify(project_name or DEFAULT_PROJECT_SLUG)}__daily-report.pdf'


def _draw_entry(
    sink: PageSink,
    entry: Entry,
    block: EntryBlock,
    *,
    left: float,
    top: float,
    settings: Settings,
    photo_loader: PhotoLoader,
) -> None:
    sink.round_rect(
        left,
        top,
        block.width,
        block.height,
        radius=ENTRY_FRAME_RADIUS_MM,
        stroke_gray=ENTRY_FRAME_GRAY,
    )

    text_box = block.text_box.offset(left, top)
    sink.round_rect(
        text_box.x,
        text_box.y,
        text_box.width,
        text_box.height,
        radius=TEXT_FRAME_RADIUS_MM,
        stroke_gray=TEXT_FRAME_GRAY,
    )
    text_x, text_y = block.text_origin
    sink.text(
        left + text_x,
        top + text_y,
        block.text_lines,
        font_name=settings.pdf_font_name,
        font_size=settings.pdf_body_font_size,
    )

    if not block.has_photos:
        return

    sink.text(
        left + ENTRY_PADDING_MM,
        top + block.photos_label_y,
        PHOTOS_LABEL,
        font_name=settings.pdf_bold_font_name,
        font_size=PHOTOS_LABEL_FONT_SIZE,
    )
    for photo, cell in zip(entry.layout_photos, block.photo_cells):
        placed_cell = cell.offset(left, top)
        sink.round_rect(
            placed_cell.x,
            placed_cell.y,
            placed_cell.width,
            placed_cell.height,
            radius=CELL_FRAME_RADIUS_MM,
            stroke_gray=CELL_FRAME_GRAY,
        )
        encoded = photo_loader(photo)
        target = placed_cell.inset(CELL_INSET_MM)
        placed = contain_fit(encoded.width, encoded.height, target.width, target.height).placed_in(target)
        sink.image(placed.x, placed.y, placed.width, placed.height, encoded)


def layout_report(
    document: ReportDocument,
    *,
    sink: PageSink,
    settings: Settings,
    header: HeaderContent | None = None,
    photo_loader: PhotoLoader | None = None,
) -> LayoutResult:
    """Lay ``document`` out page by page into ``sink``.

    The same arithmetic runs for estimation and rendering; only a drawing sink
    receives text, frames and images (and only then is ``photo_loader`` called).
    """
    if sink.drawing and photo_loader is None:
        raise ValueError('a drawing sink requires a photo_loader')

    cursor = PageCursor(sink, header)
    for entry in document.entries:
        block = layout_entry(
            entry,
            CONTENT_WIDTH_MM,
            font_name=settings.pdf_font_name,
            font_size=settings.pdf_body_font_size,
        )
        if block is None:
            continue
        top = cursor.reserve(block)
        if sink.drawing:
            _draw_entry(
                sink,
                entry,
                block,
                left=MARGIN_X_MM,
                top=top,
                settings=settings,
                photo_loader=photo_loader,
            )
        cursor.advance(block)

    page_count = stamp_footers(sink, font_name=settings.pdf_font_name)
    pages = sink.pages if isinstance(sink, RecordingSink) else []
    return LayoutResult(page_count=page_count, pages=pages)


def estimate_page_count(document: ReportDocument, *, settings: Settings | None = None) -> int:
    settings = settings or get_settings()
    result = layout_report(document, sink=PageSink(), settings=settings)
    return result.page_count


def render_to_pdf(document: ReportDocument, *, settings: Settings | None = None) -> RenderedReport:
    settings = settings or get_settings()

    logo = load_embeddable(document.logo) if document.logo is not None else None
    header = HeaderContent(
        project_name=document.project_name,
        report_date=document.report_date,
        logo=logo,
        font_name=settings.pdf_font_name,
        bold_font_name=settings.pdf_bold_font_name,
    )

    def _load_photo(photo: Photo) -> EncodedImage:
        return compress_photo(
            photo,
            max_width=settings.image_max_width,
            quality=settings.image_jpeg_quality,
        )

    sink = RecordingSink()
    result = layout_report(
        document,
        sink=sink,
        settings=settings,
        header=header,
        photo_loader=_load_photo,
    )

    project = document.project_name.strip()
    blob = write_pdf(
        result.pages,
        PdfMetadata(
            title=f'{REPORT_TITLE} - {project}' if project else REPORT_TITLE,
            author=settings.app_name,
            invariant=settings.pdf_invariant,
        ),
    )
    file_name = build_file_name(document.report_date, document.project_name)
    logger.info('Rendered %s: %d pages, %d bytes', file_name, result.page_count, len(blob))
    return RenderedReport(blob=blob, file_name=file_name, page_count=result.page_count)
