from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from ..adapters.images import EncodedImage


@dataclass(frozen=True)
class TextOp:
    x: float
    y: float
    lines: tuple[str, ...]
    font_name: str
    font_size: float
    gray: int = 0
    align: str = 'left'


@dataclass(frozen=True)
class RoundRectOp:
    x: float
    y: float
    width: float
    height: float
    radius: float
    stroke_gray: int


@dataclass(frozen=True)
class ImageOp:
    x: float
    y: float
    width: float
    height: float
    image: EncodedImage


DrawOp = Union[TextOp, RoundRectOp, ImageOp]


class PageSink:
    """Page-based drawing surface that only keeps track of pages.

    The page estimator lays out against this sink, so it shares every page-break
    decision with the renderer without touching any image.
    """

    drawing = False

    def __init__(self) -> None:
        self._page_total = 1
        self._current = 1

    @property
    def page_count(self) -> int:
        return self._page_total

    @property
    def current_page(self) -> int:
        return self._current

    def add_page(self) -> int:
        self._page_total += 1
        self._current = self._page_total
        return self._current

    def set_page(self, page_number: int) -> None:
        if not 1 <= page_number <= self._page_total:
            raise IndexError(f'page {page_number} out of range 1..{self._page_total}')
        self._current = page_number

    def text(
        self,
        x: float,
        y: float,
        lines: str | list[str] | tuple[str, ...],
        *,
        font_name: str,
        font_size: float,
        gray: int = 0,
        align: str = 'left',
    ) -> None:
        return None

    def round_rect(self, x: float, y: float, width: float, height: float, *, radius: float, stroke_gray: int) -> None:
        return None

    def image(self, x: float, y: float, width: float, height: float, image: EncodedImage) -> None:
        return None


class RecordingSink(PageSink):
    """Records draw operations per page so earlier pages can be revisited."""

    drawing = True

    def __init__(self) -> None:
        super().__init__()
        self.pages: list[list[DrawOp]] = [[]]

    def add_page(self) -> int:
        page_number = super().add_page()
        self.pages.append([])
        return page_number

    def _emit(self, op: DrawOp) -> None:
        self.pages[self.current_page - 1].append(op)

    def text(self, x, y, lines, *, font_name, font_size, gray=0, align='left') -> None:
        if isinstance(lines, str):
            lines = (lines,)
        self._emit(
            TextOp(
                x=x,
                y=y,
                lines=tuple(lines),
                font_name=font_name,
                font_size=font_size,
                gray=gray,
                align=align,
            )
        )

    def round_rect(self, x, y, width, height, *, radius, stroke_gray) -> None:
        self._emit(RoundRectOp(x, y, width, height, radius, stroke_gray))

    def image(self, x, y, width, height, image) -> None:
        self._emit(ImageOp(x, y, width, height, image))

    def draw_ops(self) -> list[DrawOp]:
        return [op for page in self.pages for op in page]
