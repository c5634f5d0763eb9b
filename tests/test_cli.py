import json

import main


def _write_manifest(tmp_path, make_image, **overrides):
    photos_dir = tmp_path / 'photos'
    photos_dir.mkdir()
    first = make_image(500, 300)
    second = make_image(300, 500)
    first.rename(photos_dir / 'a.jpg')
    second.rename(photos_dir / 'b.jpg')
    payload = {
        'project_name': 'Site #4/North',
        'report_date': '2024-03-01',
        'entries': [
            {'text': 'Slab pour on level 2.', 'photos': ['photos/a.jpg', 'photos/b.jpg']},
            {'text': '   ', 'photos': []},
            {'text': 'Scaffold check.'},
        ],
    }
    payload.update(overrides)
    manifest = tmp_path / 'report.json'
    manifest.write_text(json.dumps(payload), encoding='utf-8')
    return manifest


def test_estimate_command(tmp_path, make_image, capsys):
    manifest = _write_manifest(tmp_path, make_image)
    assert main.main(['estimate', '--manifest', str(manifest)]) == 0
    out = json.loads(capsys.readouterr().out)
    assert out == {'page_count': 1, 'entries': 2}


def test_render_command_writes_pdf(tmp_path, make_image, capsys):
    manifest = _write_manifest(tmp_path, make_image)
    out_dir = tmp_path / 'out'
    assert main.main(['render', '--manifest', str(manifest), '--out-dir', str(out_dir)]) == 0
    out = json.loads(capsys.readouterr().out)
    assert out['file_name'] == '2024-03-01__site-4north__daily-report.pdf'
    assert out['page_count'] == 1
    pdf_path = out_dir / out['file_name']
    assert pdf_path.exists()
    assert pdf_path.read_bytes().startswith(b'%PDF')
    events = (out_dir / 'events.jsonl').read_text(encoding='utf-8').splitlines()
    assert json.loads(events[-1])['event'] == 'rendered'


def test_missing_manifest_is_reported(tmp_path, capsys):
    assert main.main(['estimate', '--manifest', str(tmp_path / 'nope.json')]) == 2
    out = json.loads(capsys.readouterr().out)
    assert out['status'] == 'error'


def test_render_reports_broken_photo(tmp_path, make_image, capsys):
    manifest = _write_manifest(
        tmp_path,
        make_image,
        entries=[{'text': 'bad', 'photos': ['photos/missing.jpg']}],
    )
    assert main.main(['render', '--manifest', str(manifest), '--out-dir', str(tmp_path / 'out')]) == 2
    out = json.loads(capsys.readouterr().out)
    assert out['status'] == 'error'
