from __future__ import annotations

from dataclasses import dataclass, field

from ..types import Entry
from .geometry import Rect, measure_wrapped_text, text_block_height


ENTRY_PADDING_MM = 6.0
GRID_COLUMNS = 2
GRID_GAP_MM = 6.0
PHOTO_CELL_HEIGHT_MM = 55.0
# Gap between the text box and the "Photos" label baseline, then label to grid.
PHOTOS_LABEL_GAP_MM = 10.0
PHOTOS_LABEL_TO_GRID_MM = 6.0
TEXT_BASELINE_OFFSET_MM = 7.0


@dataclass(frozen=True)
class EntryBlock:
    """Vertical footprint of one entry, with rectangles relative to the entry's top-left corner."""

    height: float
    width: float
    text_lines: list[str]
    text_box: Rect
    photo_count: int = 0
    photo_rows: int = 0
    photos_height: float = 0.0
    photos_label_y: float | None = None
    photo_cells: list[Rect] = field(default_factory=list)

    @property
    def has_photos(self) -> bool:
        return self.photo_count > 0

    @property
    def text_origin(self) -> tuple[float, float]:
        return (ENTRY_PADDING_MM * 2, self.text_box.y + TEXT_BASELINE_OFFSET_MM)


def photo_rows_for(count: int) -> int:
    if count > 2:
        return 2
    if count > 0:
        return 1
    return 0


def photo_grid_height(rows: int) -> float:
    if rows <= 0:
        return 0.0
    return rows * PHOTO_CELL_HEIGHT_MM + (rows - 1) * GRID_GAP_MM


def layout_entry(
    entry: Entry,
    content_width: float,
    *,
    font_name: str,
    font_size: float,
) -> EntryBlock | None:
    """Compute the block geometry for ``entry``; empty entries yield ``None``."""
    if entry.is_empty:
        return None

    padding = ENTRY_PADDING_MM
    text_lines = measure_wrapped_text(
        entry.text,
        content_width - padding * 4,
        font_size,
        font_name=font_name,
    )
    text_height = text_block_height(len(text_lines))
    text_box = Rect(padding, padding, content_width - padding * 2, text_height)

    photo_count = len(entry.layout_photos)
    rows = photo_rows_for(photo_count)
    photos_height = photo_grid_height(rows)

    height = padding + text_height
    if photo_count:
        height += PHOTOS_LABEL_GAP_MM + PHOTOS_LABEL_TO_GRID_MM + photos_height
    height += padding

    if not photo_count:
        return EntryBlock(height=height, width=content_width, text_lines=text_lines, text_box=text_box)

    label_y = text_box.bottom + PHOTOS_LABEL_GAP_MM
    grid_top = label_y + PHOTOS_LABEL_TO_GRID_MM
    cell_width = (content_width - padding * 2 - GRID_GAP_MM) / GRID_COLUMNS
    cells: list[Rect] = []
    for index in range(photo_count):
        col = index % GRID_COLUMNS
        row = index // GRID_COLUMNS
        cells.append(
            Rect(
                padding + col * (cell_width + GRID_GAP_MM),
                grid_top + row * (PHOTO_CELL_HEIGHT_MM + GRID_GAP_MM),
                cell_width,
                PHOTO_CELL_HEIGHT_MM,
            )
        )

    return EntryBlock(
        height=height,
        width=content_width,
        text_lines=text_lines,
        text_box=text_box,
        photo_count=photo_count,
        photo_rows=rows,
        photos_height=photos_height,
        photos_label_y=label_y,
        photo_cells=cells,
    )
