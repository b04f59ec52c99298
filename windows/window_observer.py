"""Foreground window queries for AutoGameJournal.

Assumptions:
    - Windows only; ``pywin32`` provides the Win32 bindings.
    - Only the foreground window is considered. It counts as fullscreen when
      its rectangle covers the monitor it sits on.

The module imports the Win32 bindings lazily so it stays importable (and the
geometry helpers testable) on other platforms.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass
from typing import Optional, Tuple

Rect = Tuple[int, int, int, int]

MONITOR_DEFAULTTONEAREST = 2


class UnsupportedPlatformError(RuntimeError):
    """Raised when window queries are attempted outside Windows."""


class WindowQueryError(RuntimeError):
    """Raised when the OS rejects a window or monitor query."""


@dataclass(frozen=True)
class WindowInfo:
    handle: int
    title: str
    pid: int
    rect: Rect
    monitor_rect: Optional[Rect] = None

    @property
    def monitor_region(self) -> Optional[Tuple[int, int, int, int]]:
        """Monitor as (left, top, width, height), the form screen capture expects."""
        if self.monitor_rect is None:
            return None
        left, top, right, bottom = self.monitor_rect
        return left, top, right - left, bottom - top


def covers(rect: Rect, monitor_rect: Rect, tolerance: int = 0) -> bool:
    left, top, right, bottom = rect
    m_left, m_top, m_right, m_bottom = monitor_rect
    return (
        left <= m_left + tolerance
        and top <= m_top + tolerance
        and right >= m_right - tolerance
        and bottom >= m_bottom - tolerance
    )


def is_fullscreen(window: WindowInfo, tolerance: int = 0) -> bool:
    """Return True when the window covers its whole monitor."""
    if window.monitor_rect is None:
        return False
    return covers(window.rect, window.monitor_rect, tolerance)


def get_foreground_window() -> Optional[WindowInfo]:
    """Return the current foreground window, or None if there is none."""
    if sys.platform != "win32":
        raise UnsupportedPlatformError(f"Window observation is not supported on {sys.platform}")

    import pywintypes
    import win32api
    import win32gui
    import win32process

    try:
        handle = win32gui.GetForegroundWindow()
        if not handle:
            return None
        title = win32gui.GetWindowText(handle)
        _, pid = win32process.GetWindowThreadProcessId(handle)
        rect = tuple(int(v) for v in win32gui.GetWindowRect(handle))
        monitor = win32api.MonitorFromWindow(handle, MONITOR_DEFAULTTONEAREST)
        monitor_rect = tuple(int(v) for v in win32api.GetMonitorInfo(monitor)["Monitor"]) if monitor else None
    except pywintypes.error as exc:
        raise WindowQueryError(f"Foreground window query failed: {exc}") from exc

    return WindowInfo(handle=int(handle), title=title, pid=int(pid), rect=rect, monitor_rect=monitor_rect)
