import pytest

from dailyreport.report.assembler import estimate_page_count
from dailyreport.report.entry_layout import layout_entry
from dailyreport.report.geometry import BOTTOM_MARGIN_MM, CONTENT_WIDTH_MM, PAGE_HEIGHT_MM
from dailyreport.report.header_footer import header_metrics
from dailyreport.report.pagination import PageCursor
from dailyreport.report.sink import PageSink
from dailyreport.types import Entry, ReportDocument


LOREM = (
    'Lorem ipsum dolor sit amet, consectetur adipiscing elit. Sed do eiusmod tempor '
    'incididunt ut labore et dolore magna aliqua. Ut enim ad minim veniam, quis nostrud '
    'exercitation ullamco laboris nisi ut aliquip ex ea commodo consequat. Duis aute irure '
    'dolor in reprehenderit in voluptate velit esse cillum dolore eu fugiat nulla pariatur. '
    'Excepteur sint occaecat cupidatat non proident, sunt in culpa qui officia deserunt '
    'mollit anim id est laborum. Curabitur pretium tincidunt lacus nulla gravida orci.'
)


def _doc(entries, **kwargs):
    return ReportDocument(report_date='2024-03-01', entries=entries, **kwargs)


def _short(n):
    return [Entry(text=f'Item {i}') for i in range(n)]


def test_header_reserves_body_start():
    assert header_metrics(True).body_start == 50
    assert header_metrics(False).body_start == 32


def test_empty_document_is_one_page(settings):
    assert estimate_page_count(_doc([]), settings=settings) == 1


@pytest.mark.parametrize('count, pages', [(1, 1), (5, 1), (6, 2), (10, 2), (11, 3)])
def test_short_entries_paginate(settings, count, pages):
    # 30mm blocks: five fit on the first page (cursor 50..218) and five on later pages (32..200).
    assert estimate_page_count(_doc(_short(count)), settings=settings) == pages


def test_photo_entries_one_per_page_after_first(settings):
    entries = [Entry(text='Pour', photos=[b'x'] * 4) for _ in range(3)]
    # 162mm blocks with a 10mm reserve: only one fits per later page.
    assert estimate_page_count(_doc(entries), settings=settings) == 3


def test_empty_entries_are_invisible(settings):
    real = _short(7)
    blank = [Entry(text='  '), Entry(), Entry(text='\n\t')]
    interleaved = [real[0], blank[0], real[1], real[2], blank[1], real[3], real[4], real[5], blank[2], real[6]]
    assert estimate_page_count(_doc(interleaved), settings=settings) == estimate_page_count(
        _doc(real), settings=settings
    )


def test_adding_entries_never_decreases_pages(settings):
    entries = []
    previous = estimate_page_count(_doc(entries), settings=settings)
    for i in range(25):
        if i % 3 == 0:
            entries.append(Entry(text=LOREM, photos=[b'x'] * (i % 5)))
        else:
            entries.append(Entry(text=f'Note {i}'))
        current = estimate_page_count(_doc(entries), settings=settings)
        assert current >= previous
        previous = current


def test_single_lorem_entry_fits_first_page(settings):
    block = layout_entry(Entry(text=LOREM[:500]), CONTENT_WIDTH_MM, font_name='Helvetica', font_size=11)
    available = PAGE_HEIGHT_MM - BOTTOM_MARGIN_MM - header_metrics(True).body_start
    expected = 1 if block.height + 10 <= available else 2
    assert estimate_page_count(_doc([Entry(text=LOREM[:500])]), settings=settings) == expected == 1


def test_oversized_entry_moves_to_next_page(settings):
    tall = Entry(text='\n'.join(f'line {i}' for i in range(60)))
    # Taller than any page: it still triggers exactly one break and overflows.
    assert estimate_page_count(_doc([tall]), settings=settings) == 2


def test_break_check_uses_reserve_but_advance_uses_gap():
    sink = PageSink()
    cursor = PageCursor(sink)
    block = layout_entry(Entry(text='x'), CONTENT_WIDTH_MM, font_name='Helvetica', font_size=11)
    assert cursor.reserve(block) == 50
    cursor.advance(block)
    assert cursor.y == 50 + 30 + 12

    # Limit is 281mm: a 40mm reservation fits from 240.75 but not from 241.25.
    cursor.y = 240.75
    assert cursor.ensure_space(block.height + 10) is False
    cursor.y = 241.25
    assert cursor.ensure_space(block.height + 10) is True
    assert cursor.page_count == 2
    assert cursor.y == 32


def test_estimate_never_opens_photos(settings, tmp_path):
    missing = tmp_path / 'not-there.jpg'
    document = _doc([Entry(text='a', photos=[missing, b'not an image'])])
    assert estimate_page_count(document, settings=settings) == 1
