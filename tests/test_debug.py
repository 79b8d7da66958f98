"""Tests for debug output."""

from collections.abc import Generator

import pytest

from httprecorder.utils import debug


@pytest.fixture(autouse=True)
def reset_debug_state() -> Generator[None, None, None]:
    yield
    if hasattr(debug._debug_state, "enabled"):
        del debug._debug_state.enabled


class TestDebugToggle:
    def test_disabled_by_default(self):
        assert debug.is_debug_enabled() is False

    def test_enabled_from_env(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("HTTP_RECORDER_DEBUG", "true")
        assert debug.is_debug_enabled() is True

    def test_thread_toggle_wins(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("HTTP_RECORDER_DEBUG", "true")
        debug.set_debug_enabled(False)
        assert debug.is_debug_enabled() is False


class TestDebugPrint:
    def test_silent_when_disabled(self, capsys):
        debug.set_debug_enabled(False)
        debug.debug_print("mode", "nothing to see")
        assert capsys.readouterr().err == ""

    def test_prints_category_and_data(self, capsys):
        debug.set_debug_enabled(True)
        debug.debug_print("replay", "GET https://h/[x]", Status=200, Skipped=None)
        err = capsys.readouterr().err
        assert "[DEBUG:replay] GET https://h/[x]" in err
        assert "Status: 200" in err
        assert "Skipped" not in err

    def test_exchange_formats_elapsed(self, capsys):
        debug.set_debug_enabled(True)
        debug.debug_exchange("Record", "GET", "https://h/", 200, 0.0125)
        err = capsys.readouterr().err
        assert "[DEBUG:record] GET https://h/" in err
        assert "Elapsed: 12.5 ms" in err
