from __future__ import annotations

import logging
from dataclasses import dataclass, field
from io import BytesIO

from PIL import Image, UnidentifiedImageError

from ..errors import EncodingFailure, MeasurementFailure
from ..types import Photo


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EncodedImage:
    data: bytes = field(repr=False)
    width: int
    height: int
    format: str = 'JPEG'

    @property
    def is_png(self) -> bool:
        return self.format.upper() == 'PNG'


def _read_source(photo: Photo) -> bytes:
    if photo.data is not None:
        return photo.data
    try:
        return photo.path.read_bytes()
    except OSError as exc:
        raise MeasurementFailure(f'cannot read image {photo.label}: {exc}') from exc


def _decode(raw: bytes, label: str) -> Image.Image:
    try:
        image = Image.open(BytesIO(raw))
        image.load()
    except (UnidentifiedImageError, OSError, ValueError) as exc:
        raise MeasurementFailure(f'cannot decode image {label}: {exc}') from exc
    if image.width <= 0 or image.height <= 0:
        raise MeasurementFailure(f'image {label} has no pixels')
    return image


def read_image_size(photo: Photo) -> tuple[int, int]:
    with _decode(_read_source(photo), photo.label) as image:
        return image.width, image.height


def load_embeddable(photo: Photo) -> EncodedImage:
    """Return the original bytes of ``photo`` when the PDF writer can embed them directly."""
    raw = _read_source(photo)
    with _decode(raw, photo.label) as image:
        fmt = (image.format or '').upper()
        width, height = image.width, image.height
    if fmt in {'PNG', 'JPEG'}:
        return EncodedImage(data=raw, width=width, height=height, format=fmt)
    return compress_photo(photo, max_width=width, quality=0.92)


def _flatten_to_rgb(image: Image.Image) -> Image.Image:
    if image.mode == 'RGB':
        return image
    if image.mode in {'RGBA', 'LA'} or (image.mode == 'P' and 'transparency' in image.info):
        rgba = image.convert('RGBA')
        background = Image.new('RGB', rgba.size, (255, 255, 255))
        background.paste(rgba, mask=rgba.getchannel('A'))
        return background
    return image.convert('RGB')


def compress_photo(photo: Photo, *, max_width: int, quality: float) -> EncodedImage:
    """Downscale ``photo`` to at most ``max_width`` pixels wide and re-encode it as JPEG."""
    raw = _read_source(photo)
    with _decode(raw, photo.label) as image:
        width, height = image.width, image.height
        if width > max_width:
            ratio = width / height
            width = int(max_width)
            height = max(1, round(max_width / ratio))
        try:
            resized = image if (width, height) == image.size else image.resize((width, height), Image.LANCZOS)
            rgb = _flatten_to_rgb(resized)
            buffer = BytesIO()
            rgb.save(buffer, format='JPEG', quality=max(1, min(95, round(quality * 100))))
        except (OSError, ValueError) as exc:
            raise EncodingFailure(f'cannot encode image {photo.label}: {exc}') from exc

    payload = buffer.getvalue()
    logger.debug('Compressed %s to %dx%d JPEG (%d bytes)', photo.label, width, height, len(payload))
    return EncodedImage(data=payload, width=width, height=height, format='JPEG')
