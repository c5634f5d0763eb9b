from io import BytesIO

import pytest
from PIL import Image

from dailyreport.config import Settings


@pytest.fixture
def settings(tmp_path):
    return Settings(data_dir=tmp_path / 'data', pdf_invariant=True)


@pytest.fixture
def make_image(tmp_path):
    counter = {'n': 0}

    def _make(width=320, height=240, *, fmt='JPEG', color=(180, 120, 60), mode='RGB'):
        counter['n'] += 1
        suffix = 'png' if fmt == 'PNG' else 'jpg'
        path = tmp_path / f'photo_{counter["n"]:02d}.{suffix}'
        fill = color if mode == 'RGB' else color + (128,)
        Image.new(mode, (width, height), color=fill).save(path, format=fmt)
        return path

    return _make


@pytest.fixture
def image_bytes():
    def _bytes(width=200, height=100, fmt='PNG'):
        buffer = BytesIO()
        Image.new('RGB', (width, height), color=(10, 200, 30)).save(buffer, format=fmt)
        return buffer.getvalue()

    return _bytes
