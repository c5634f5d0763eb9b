from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from .config import get_settings
from .types import ReportDocument


def reports_root() -> Path:
    root = get_settings().reports_dir()
    root.mkdir(parents=True, exist_ok=True)
    return root


def events_path(root: Path | None = None) -> Path:
    return (root or reports_root()) / 'events.jsonl'


def write_bytes_atomic(path: Path, content: bytes) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_suffix(path.suffix + '.tmp')
    tmp.write_bytes(content)
    tmp.replace(path)


def read_json(path: Path) -> dict[str, Any]:
    return json.loads(path.read_text(encoding='utf-8'))


def _resolve_path(value: Any, base_dir: Path) -> Any:
    if not isinstance(value, str) or not value.strip():
        return value
    candidate = Path(value).expanduser()
    if not candidate.is_absolute():
        candidate = base_dir / candidate
    return str(candidate)


def _resolve_photo(value: Any, base_dir: Path) -> Any:
    if isinstance(value, dict) and 'path' in value:
        return {**value, 'path': _resolve_path(value['path'], base_dir)}
    return _resolve_path(value, base_dir)


def load_report_document(manifest_path: Path) -> ReportDocument:
    """Load a report manifest; relative image paths resolve against its directory."""
    payload = read_json(manifest_path)
    base_dir = manifest_path.resolve().parent

    if payload.get('logo'):
        payload['logo'] = _resolve_photo(payload['logo'], base_dir)

    entries: list[dict[str, Any]] = []
    for raw in payload.get('entries') or []:
        item = dict(raw)
        item['photos'] = [_resolve_photo(photo, base_dir) for photo in item.get('photos') or []]
        entries.append(item)
    payload['entries'] = entries

    return ReportDocument.model_validate(payload)


def append_event(event: str, *, root: Path | None = None, **extra: Any) -> None:
    now = datetime.now(timezone.utc).isoformat()
    row = {
        'ts': now,
        'event': event,
        **extra,
    }
    events_file = events_path(root)
    events_file.parent.mkdir(parents=True, exist_ok=True)
    with events_file.open('a', encoding='utf-8') as f:
        f.write(json.dumps(row, ensure_ascii=False) + '\n')
