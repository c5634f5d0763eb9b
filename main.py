from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path

from dailyreport.config import get_settings
from dailyreport.errors import ReportError
from dailyreport.report.assembler import estimate_page_count, render_to_pdf
from dailyreport.storage import append_event, load_report_document, reports_root, write_bytes_atomic


def _print_json(payload: dict) -> None:
    print(json.dumps(payload, ensure_ascii=False, indent=2))


def _error(message: str) -> int:
    _print_json({'status': 'error', 'message': message})
    return 2


def _load_manifest(raw_path: str):
    manifest_path = Path(raw_path).expanduser().resolve()
    if not manifest_path.exists() or not manifest_path.is_file():
        raise FileNotFoundError(f'Manifest not found: {manifest_path}')
    return load_report_document(manifest_path)


def cmd_estimate(args: argparse.Namespace) -> int:
    try:
        document = _load_manifest(args.manifest)
        page_count = estimate_page_count(document)
    except (FileNotFoundError, ValueError, ReportError) as exc:
        return _error(str(exc))

    _print_json({'page_count': page_count, 'entries': len(document.visible_entries())})
    return 0


def cmd_render(args: argparse.Namespace) -> int:
    try:
        document = _load_manifest(args.manifest)
        rendered = render_to_pdf(document)
    except (FileNotFoundError, ValueError, ReportError) as exc:
        return _error(str(exc))

    out_dir = Path(args.out_dir).expanduser().resolve() if args.out_dir else reports_root()
    pdf_path = out_dir / rendered.file_name
    write_bytes_atomic(pdf_path, rendered.blob)
    append_event(
        'rendered',
        root=out_dir,
        file_name=rendered.file_name,
        page_count=rendered.page_count,
        bytes=len(rendered.blob),
    )

    _print_json(
        {
            'file_name': rendered.file_name,
            'pdf_path': str(pdf_path),
            'page_count': rendered.page_count,
            'bytes': len(rendered.blob),
        }
    )
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Daily site report builder')
    sub = parser.add_subparsers(dest='command', required=True)

    estimate = sub.add_parser('estimate', help='Estimate the page count of a report manifest')
    estimate.add_argument('--manifest', required=True, help='Path to report manifest JSON')
    estimate.set_defaults(func=cmd_estimate)

    render = sub.add_parser('render', help='Render a report manifest to PDF')
    render.add_argument('--manifest', required=True, help='Path to report manifest JSON')
    render.add_argument('--out-dir', required=False, help='Output directory (defaults to data_dir/reports)')
    render.set_defaults(func=cmd_render)

    return parser


def main(argv: list[str] | None = None) -> int:
    settings = get_settings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )
    parser = build_parser()
    args = parser.parse_args(argv)
    return int(args.func(args))


if __name__ == '__main__':
    raise SystemExit(main())
