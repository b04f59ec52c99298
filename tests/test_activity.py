import sys
import types

from journal.activity import InputActivityMonitor
from windows import idle


def test_new_input_between_captures(monkeypatch):
    ticks = iter([100, 100, 250])
    monkeypatch.setattr(idle, "last_input_tick", lambda: next(ticks))
    monitor = InputActivityMonitor()

    assert monitor.has_new_input() is True
    monitor.mark_captured()
    assert monitor.has_new_input() is False
    assert monitor.has_new_input() is True


def test_tick_not_remembered_without_capture(monkeypatch):
    monkeypatch.setattr(idle, "last_input_tick", lambda: 100)
    monitor = InputActivityMonitor()

    assert monitor.has_new_input() is True
    assert monitor.has_new_input() is True
    assert monitor.last_tick is None


def test_wrapped_tick_counts_as_input(monkeypatch):
    ticks = iter([4_294_967_000, 12])
    monkeypatch.setattr(idle, "last_input_tick", lambda: next(ticks))
    monitor = InputActivityMonitor()

    assert monitor.has_new_input() is True
    monitor.mark_captured()
    assert monitor.has_new_input() is True


def test_unavailable_activity_does_not_block(monkeypatch):
    monkeypatch.setattr(idle, "last_input_tick", lambda: None)
    monitor = InputActivityMonitor()

    assert monitor.has_new_input() is True
    monitor.mark_captured()
    assert monitor.has_new_input() is True


def test_disabled_from_config(monkeypatch):
    monkeypatch.setattr(idle, "last_input_tick", lambda: 1)
    monitor = InputActivityMonitor.from_config({"capture": {"skip_when_idle": False}})

    assert monitor.has_new_input() is True
    monitor.mark_captured()
    assert monitor.has_new_input() is True


def test_last_input_tick_off_windows(monkeypatch):
    monkeypatch.setattr(idle.sys, "platform", "linux")

    assert idle.last_input_tick() is None


class _Win32Error(Exception):
    pass


def _fake_win32(monkeypatch, get_last_input_info):
    monkeypatch.setattr(idle.sys, "platform", "win32")
    monkeypatch.setitem(sys.modules, "pywintypes", types.SimpleNamespace(error=_Win32Error))
    monkeypatch.setitem(sys.modules, "win32api", types.SimpleNamespace(GetLastInputInfo=get_last_input_info))


def test_last_input_tick_on_windows(monkeypatch):
    _fake_win32(monkeypatch, lambda: 123456)

    assert idle.last_input_tick() == 123456


def test_last_input_tick_failure_returns_none(monkeypatch):
    def broken():
        raise _Win32Error(5, "GetLastInputInfo", "Access is denied.")

    _fake_win32(monkeypatch, broken)

    assert idle.last_input_tick() is None
