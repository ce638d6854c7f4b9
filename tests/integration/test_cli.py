"""End-to-end tests of the ``classification-viewer`` generator."""

import json

import pytest
from lxml import html as lxml_html

from classification_viewer.cli import OUTPUT_FILENAME, main, write_document


@pytest.fixture
def export_file(tmp_path, sample_export):
    path = tmp_path / "uniclass.json"
    path.write_text(json.dumps(sample_export), encoding="utf-8")
    return path


def test_generates_viewer_document(export_file, tmp_path, capsys):
    out_dir = tmp_path / "out" / "uniclass"

    status = main([str(export_file), str(out_dir), "uniclass"])

    assert status == 0
    target = out_dir / OUTPUT_FILENAME
    assert target.exists()
    tree = lxml_html.fromstring(target.read_text(encoding="utf-8"))
    assert tree.findtext(".//title") == "Uniclass 2015 | Takeoff and Estimating"

    output = capsys.readouterr().out
    assert f"Reading: {export_file}" in output
    assert "Transforming data..." in output
    assert "Found 2 top-level items, 5 total items" in output
    assert "Generating HTML..." in output
    assert f"Generated: {target}" in output
    assert "Title: Uniclass 2015 Jan 2020" in output
    assert "Items: 5" in output


def test_system_key_is_case_insensitive(export_file, tmp_path):
    assert main([str(export_file), str(tmp_path / "out"), "NBS"]) == 0
    text = (tmp_path / "out" / OUTPUT_FILENAME).read_text(encoding="utf-8")
    assert "NBS Create" in text


def test_overwrites_existing_output(export_file, tmp_path):
    out_dir = tmp_path / "out"
    out_dir.mkdir()
    (out_dir / OUTPUT_FILENAME).write_text("stale", encoding="utf-8")

    assert main([str(export_file), str(out_dir), "omniclass"]) == 0

    assert "OmniClass" in (out_dir / OUTPUT_FILENAME).read_text(encoding="utf-8")
    assert sorted(p.name for p in out_dir.iterdir()) == [OUTPUT_FILENAME]


def test_unknown_system_key_fails_without_output(export_file, tmp_path, capsys):
    out_dir = tmp_path / "out"

    status = main([str(export_file), str(out_dir), "foo"])

    assert status == 1
    assert not out_dir.exists()
    captured = capsys.readouterr()
    assert "Unknown system key: foo" in captured.err
    assert "uniclass, omniclass, uniformat, nbs" in captured.out


def test_missing_arguments_print_usage(tmp_path, capsys):
    status = main([str(tmp_path / "only-input.json")])

    assert status == 1
    output = capsys.readouterr().out
    assert "usage:" in output
    assert "uniclass" in output


def test_help_exits_cleanly(capsys):
    assert main(["--help"]) == 0
    assert "usage:" in capsys.readouterr().out


def test_missing_input_file(tmp_path, capsys):
    out_dir = tmp_path / "out"

    status = main([str(tmp_path / "absent.json"), str(out_dir), "uniclass"])

    assert status == 1
    assert not out_dir.exists()
    assert "not found" in capsys.readouterr().err


def test_invalid_json(tmp_path, capsys):
    source = tmp_path / "broken.json"
    source.write_text("{ not json", encoding="utf-8")
    out_dir = tmp_path / "out"

    assert main([str(source), str(out_dir), "uniclass"]) == 1
    assert not out_dir.exists()
    assert "invalid JSON" in capsys.readouterr().err


def test_structure_error_writes_nothing(tmp_path, capsys):
    source = tmp_path / "wrong.json"
    source.write_text(json.dumps({"Something": "else"}), encoding="utf-8")
    out_dir = tmp_path / "out"

    assert main([str(source), str(out_dir), "uniformat"]) == 1
    assert not out_dir.exists()
    assert "Invalid JSON structure - cannot find System" in capsys.readouterr().err


def test_write_document_creates_nested_folders(tmp_path):
    target = write_document(tmp_path / "a" / "b", "<html></html>")

    assert target == tmp_path / "a" / "b" / OUTPUT_FILENAME
    assert target.read_text(encoding="utf-8") == "<html></html>"
    assert [p.name for p in target.parent.iterdir()] == [OUTPUT_FILENAME]


def test_logs_are_written_to_configured_directory(export_file, tmp_path):
    main([str(export_file), str(tmp_path / "out"), "uniclass"])

    log_file = tmp_path / "logs" / "app.log"
    assert log_file.exists()
    assert "Generated" in log_file.read_text(encoding="utf-8")
