"""Tests for CLI commands."""

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from httprecorder.cli import app
from httprecorder.modules.anonymize import SENTINEL
from httprecorder.modules.archive import dumps_archive, interaction_to_archive, loads_archive
from httprecorder.modules.interaction import Interaction

runner = CliRunner()


@pytest.fixture
def archive_file(archive_dir: Path, interaction: Interaction, make_message) -> Path:
    interaction.append(make_message(request_headers=[("Authorization", "Bearer live-token")]))
    path = archive_dir / "sample.har"
    path.write_text(dumps_archive(interaction_to_archive(interaction)), encoding="utf-8")
    return path


class TestVersion:
    def test_version(self):
        result = runner.invoke(app, ["version"])
        assert result.exit_code == 0
        assert "httprecorder" in result.output


class TestInspect:
    def test_lists_entries(self, archive_file: Path):
        result = runner.invoke(app, ["inspect", str(archive_file)])
        assert result.exit_code == 0
        assert "3 entries" in result.output
        assert "POST" in result.output
        assert "201" in result.output

    def test_missing_file(self, temp_dir: Path):
        result = runner.invoke(app, ["inspect", str(temp_dir / "nope.har")])
        assert result.exit_code == 1
        assert "Archive not found" in result.output

    def test_malformed_file(self, temp_dir: Path):
        path = temp_dir / "bad.har"
        path.write_text(json.dumps({"log": {"version": "9"}}))
        result = runner.invoke(app, ["inspect", str(path)])
        assert result.exit_code == 1
        assert "Invalid archive" in result.output


class TestAnonymize:
    def test_in_place(self, archive_file: Path):
        result = runner.invoke(app, ["anonymize", str(archive_file)])
        assert result.exit_code == 0

        text = archive_file.read_text(encoding="utf-8")
        assert "live-token" not in text
        assert "secret123" not in text
        assert SENTINEL in text
        assert len(loads_archive(text).entries) == 3

    def test_to_output(self, archive_file: Path, temp_dir: Path):
        output = temp_dir / "clean.har"
        original = archive_file.read_text(encoding="utf-8")
        result = runner.invoke(app, ["anonymize", str(archive_file), "--output", str(output)])
        assert result.exit_code == 0
        assert archive_file.read_text(encoding="utf-8") == original
        assert "live-token" not in output.read_text(encoding="utf-8")


class TestMode:
    def test_auto_without_archive_records(self, archive_dir: Path):
        result = runner.invoke(app, ["mode", "fresh", "--archive-dir", str(archive_dir)])
        assert result.exit_code == 0
        assert "fresh: Record" in result.output

    def test_auto_with_archive_replays(self, archive_file: Path):
        result = runner.invoke(app, ["mode", "sample", "--archive-dir", str(archive_file.parent)])
        assert result.exit_code == 0
        assert "sample: Replay" in result.output

    def test_explicit_mode(self, archive_dir: Path):
        result = runner.invoke(
            app, ["mode", "x", "--archive-dir", str(archive_dir), "--mode", "Passthrough"]
        )
        assert result.exit_code == 0
        assert "x: Passthrough" in result.output

    def test_override_wins(self, archive_dir: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("HTTP_RECORDER_MODE", "Replay")
        result = runner.invoke(app, ["mode", "x", "--archive-dir", str(archive_dir)])
        assert result.exit_code == 0
        assert "x: Replay" in result.output


class TestPackageExports:
    def test_lazy_exports(self):
        import httprecorder
        from httprecorder.modules.recorder import RecorderTransport

        assert httprecorder.RecorderTransport is RecorderTransport
        assert "activate" in dir(httprecorder)
        with pytest.raises(AttributeError):
            httprecorder.does_not_exist
