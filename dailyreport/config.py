from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file='.env',
        env_file_encoding='utf-8',
        case_sensitive=False,
        extra='ignore',
    )

    app_name: str = 'Daily Report Builder'

    data_dir: Path = Field(default=Path('./data'))

    # Fonts are shared by measurement and drawing.
    pdf_font_name: str = 'Helvetica'
    pdf_bold_font_name: str = 'Helvetica-Bold'
    pdf_body_font_size: float = 11

    # Photo compression before embedding
    image_max_width: int = Field(
        default=1400,
        validation_alias=AliasChoices('IMAGE_MAX_WIDTH', 'PHOTO_MAX_WIDTH'),
    )
    image_jpeg_quality: float = Field(
        default=0.72,
        ge=0.05,
        le=1.0,
        validation_alias=AliasChoices('IMAGE_JPEG_QUALITY', 'PHOTO_JPEG_QUALITY'),
    )

    # Deterministic PDF bytes (no timestamp or random document id)
    pdf_invariant: bool = False

    log_level: str = 'INFO'

    def reports_dir(self) -> Path:
        return self.data_dir / 'reports'


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
