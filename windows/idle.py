"""Win32 last-input helper (GetLastInputInfo).

This module must be safe to import on non-Windows platforms.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

logger = logging.getLogger(__name__)


def last_input_tick() -> Optional[int]:
    """Return the tick count (ms since boot) of the last user input, else None.

    The value only changes when the user types or moves the mouse, so callers
    should compare ticks for equality rather than ordering; the counter wraps
    every ~49.7 days.
    """
    if sys.platform != "win32":
        return None

    import pywintypes
    import win32api

    try:
        return int(win32api.GetLastInputInfo())
    except pywintypes.error as exc:
        logger.warning("GetLastInputInfo failed: %s", exc)
        return None
