from __future__ import annotations

from datetime import date, datetime, timedelta
from pathlib import Path
from typing import Any
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


MAX_PHOTOS_PER_ENTRY = 4


def default_report_date() -> str:
    # Reports are usually filed the morning after.
    return (date.today() - timedelta(days=1)).isoformat()


def make_entry_id() -> str:
    return uuid4().hex[:12]


class Photo(BaseModel):
    model_config = ConfigDict(frozen=True)

    path: Path | None = None
    data: bytes | None = Field(default=None, repr=False)
    name: str | None = None

    @model_validator(mode='after')
    def _require_source(self) -> 'Photo':
        if self.path is None and self.data is None:
            raise ValueError('photo requires either a path or raw data')
        if self.path is not None and self.data is not None:
            raise ValueError('photo accepts a path or raw data, not both')
        return self

    @property
    def label(self) -> str:
        if self.name:
            return self.name
        if self.path is not None:
            return self.path.name
        return '<bytes>'


def _coerce_photo(value: Any) -> Any:
    if isinstance(value, (str, Path)):
        return {'path': value}
    if isinstance(value, (bytes, bytearray)):
        return {'data': bytes(value)}
    return value


class Entry(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=make_entry_id)
    text: str = ''
    photos: list[Photo] = Field(default_factory=list)

    @field_validator('text', mode='before')
    @classmethod
    def _text_not_none(cls, value: Any) -> Any:
        return '' if value is None else value

    @field_validator('photos', mode='before')
    @classmethod
    def _coerce_photos(cls, value: Any) -> Any:
        if value is None:
            return []
        return [_coerce_photo(item) for item in value]

    @property
    def is_empty(self) -> bool:
        return not self.text.strip() and not self.photos

    @property
    def layout_photos(self) -> list[Photo]:
        return list(self.photos[:MAX_PHOTOS_PER_ENTRY])


class ReportDocument(BaseModel):
    model_config = ConfigDict(frozen=True)

    project_name: str = ''
    report_date: str = Field(default_factory=default_report_date)
    logo: Photo | None = None
    entries: list[Entry] = Field(default_factory=list)

    @field_validator('project_name', mode='before')
    @classmethod
    def _project_not_none(cls, value: Any) -> Any:
        return '' if value is None else value

    @field_validator('report_date', mode='before')
    @classmethod
    def _normalize_date(cls, value: Any) -> Any:
        if isinstance(value, datetime):
            return value.date().isoformat()
        if isinstance(value, date):
            return value.isoformat()
        if value is None or not str(value).strip():
            return default_report_date()
        token = str(value).strip()
        try:
            return date.fromisoformat(token).isoformat()
        except ValueError as exc:
            raise ValueError(f'report_date must be an ISO date: {value!r}') from exc

    @field_validator('logo', mode='before')
    @classmethod
    def _coerce_logo(cls, value: Any) -> Any:
        return _coerce_photo(value)

    def visible_entries(self) -> list[Entry]:
        return [entry for entry in self.entries if not entry.is_empty]
