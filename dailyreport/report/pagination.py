from __future__ import annotations

import logging

from .entry_layout import EntryBlock
from .geometry import BOTTOM_MARGIN_MM, PAGE_HEIGHT_MM
from .header_footer import HeaderContent, draw_header
from .sink import PageSink


logger = logging.getLogger(__name__)

# Space reserved below an entry for the page-break check, and the actual advance
# after placing it. The two differ and both feed the page count.
ENTRY_BREAK_RESERVE_MM = 10.0
ENTRY_ADVANCE_GAP_MM = 12.0


class PageCursor:
    """Greedy single-pass fitter tracking the vertical position on the current page.

    One instance belongs to one layout run.
    """

    def __init__(self, sink: PageSink, header: HeaderContent | None = None) -> None:
        self.sink = sink
        self.header = header
        self.y = draw_header(sink, header, first_page=True)

    @property
    def page_count(self) -> int:
        return self.sink.page_count

    @property
    def limit(self) -> float:
        return PAGE_HEIGHT_MM - BOTTOM_MARGIN_MM

    def ensure_space(self, needed: float) -> bool:
        if self.y + needed <= self.limit:
            return False
        page_number = self.sink.add_page()
        self.y = draw_header(self.sink, self.header, first_page=False)
        logger.debug('Page break before %.1fmm block; now on page %d', needed, page_number)
        return True

    def reserve(self, block: EntryBlock) -> float:
        """Make room for ``block`` and return the y where its top goes."""
        self.ensure_space(block.height + ENTRY_BREAK_RESERVE_MM)
        return self.y

    def advance(self, block: EntryBlock) -> None:
        self.y += block.height + ENTRY_ADVANCE_GAP_MM
