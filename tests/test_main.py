"""Tests for the CLI entrypoint (main.run / main.main)."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from unittest.mock import patch

import pytest

import main


def _write_writeup(directory: Path, name: str, title: str, date: str) -> None:
    (directory / name).write_text(f"---\ntitle: {title}\ndate: {date}\n---\nBody of {title}.\n", encoding="utf-8")


def test_run_writes_sorted_feed(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    source = tmp_path / "writeups-md"
    source.mkdir()
    _write_writeup(source, "first.md", "First", "2024-01-01")
    _write_writeup(source, "second.md", "Second", "2024-02-01")
    output = tmp_path / "out" / "writeups.json"

    with caplog.at_level(logging.INFO):
        status = main.run(source, output)

    assert status == 0
    payload = json.loads(output.read_text(encoding="utf-8"))
    assert [item["id"] for item in payload] == ["second", "first"]
    assert f"Found 2 markdown file(s) in {source}" in caplog.text
    assert "✓ Converted 2 writeup(s)" in caplog.text
    assert str(output) in caplog.text


def test_run_missing_input_dir_returns_error(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    output = tmp_path / "writeups.json"

    with caplog.at_level(logging.ERROR):
        status = main.run(tmp_path / "nope", output)

    assert status == 1
    assert "not found" in caplog.text
    assert not output.exists()


def test_run_survives_out_of_range_offset_date(tmp_path: Path) -> None:
    _write_writeup(tmp_path, "a.md", "Recent", "2024-01-01")
    _write_writeup(tmp_path, "b.md", "Ancient", "0001-01-01T00:00:00+01:00")
    output = tmp_path / "out.json"

    assert main.run(tmp_path, output) == 0
    assert [item["id"] for item in json.loads(output.read_text(encoding="utf-8"))] == ["recent", "ancient"]


def test_run_empty_dir_warns_and_exits_cleanly(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    output = tmp_path / "writeups.json"

    with caplog.at_level(logging.WARNING):
        status = main.run(tmp_path, output)

    assert status == 0
    assert "No .md files found" in caplog.text
    assert not output.exists()


def test_run_dry_run_does_not_write(tmp_path: Path) -> None:
    _write_writeup(tmp_path, "a.md", "A", "2024-01-01")
    output = tmp_path / "out.json"

    with patch("main.write_feed") as mock_write:
        status = main.run(tmp_path, output, dry_run=True)

    assert status == 0
    mock_write.assert_not_called()


def test_run_keeps_going_when_one_file_fails(tmp_path: Path) -> None:
    _write_writeup(tmp_path, "good.md", "Good", "2024-01-01")
    (tmp_path / "bad.md").write_text("no frontmatter", encoding="utf-8")
    output = tmp_path / "out.json"

    assert main.run(tmp_path, output) == 0
    assert [item["id"] for item in json.loads(output.read_text(encoding="utf-8"))] == ["good"]


def test_parse_args_positional_and_env_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("WRITEUPS_INPUT_DIR", "env-in")
    monkeypatch.setenv("WRITEUPS_OUTPUT_PATH", "env-out.json")

    defaults = main.parse_args([])
    explicit = main.parse_args(["src", "dst.json", "--dry-run"])

    assert (defaults.input_dir, defaults.output_file, defaults.dry_run) == ("env-in", "env-out.json", False)
    assert (explicit.input_dir, explicit.output_file, explicit.dry_run) == ("src", "dst.json", True)


def test_parse_args_builtin_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("WRITEUPS_INPUT_DIR", raising=False)
    monkeypatch.delenv("WRITEUPS_OUTPUT_PATH", raising=False)

    args = main.parse_args([])

    assert args.input_dir == "./writeups-md"
    assert args.output_file == "./assets/data/writeups.json"


def test_main_exits_with_run_status(tmp_path: Path) -> None:
    with patch("main.load_dotenv"), pytest.raises(SystemExit) as excinfo:
        main.main([str(tmp_path / "missing"), str(tmp_path / "out.json")])

    assert excinfo.value.code == 1
