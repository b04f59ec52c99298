"""Screen capture helpers for AutoGameJournal.

Assumptions:
    - Regions are given in virtual-screen coordinates, so monitors left of or
      above the primary display have negative offsets.

This module wraps ``pyautogui.screenshot`` to provide full-screen and region
captures, returning PIL Image objects, and encodes them for the journal.
"""

from __future__ import annotations

import io
import sys
from typing import Tuple

from PIL import Image

FORMAT_EXTENSIONS = {"jpeg": "jpg", "png": "png"}

# Virtual desktop metrics (GetSystemMetrics indices).
SM_XVIRTUALSCREEN = 76
SM_YVIRTUALSCREEN = 77


def capture_fullscreen() -> Image.Image:
    """Capture the entire primary display."""
    import pyautogui

    return pyautogui.screenshot()


def virtual_screen_origin() -> Tuple[int, int]:
    """Return the top-left corner of the virtual desktop in screen coordinates."""
    if sys.platform != "win32":
        return 0, 0

    import win32api

    return (
        int(win32api.GetSystemMetrics(SM_XVIRTUALSCREEN)),
        int(win32api.GetSystemMetrics(SM_YVIRTUALSCREEN)),
    )


def capture_region(region: Tuple[int, int, int, int]) -> Image.Image:
    """Capture a rectangular region given (left, top, width, height).

    The whole virtual desktop is grabbed and cropped here; its image origin is
    the desktop's top-left corner, not the primary monitor's.
    """
    left, top, width, height = region
    if width <= 0 or height <= 0:
        raise ValueError(f"Capture region must have a positive size: {region}")

    import pyautogui

    desktop = pyautogui.screenshot(allScreens=True)
    origin_x, origin_y = virtual_screen_origin()
    x0 = left - origin_x
    y0 = top - origin_y
    return desktop.crop((x0, y0, x0 + width, y0 + height))


def extension_for(image_format: str) -> str:
    return FORMAT_EXTENSIONS[image_format.lower()]


def encode_image(image: Image.Image, image_format: str = "jpeg", quality: int = 90) -> bytes:
    """Encode a screenshot to JPEG or PNG bytes."""
    image_format = image_format.lower()
    if image_format not in FORMAT_EXTENSIONS:
        raise ValueError(f"Unsupported image format: {image_format}")

    buffer = io.BytesIO()
    if image_format == "jpeg":
        # JPEG has no alpha channel.
        if image.mode != "RGB":
            image = image.convert("RGB")
        image.save(buffer, format="JPEG", quality=quality)
    else:
        image.save(buffer, format="PNG", optimize=True)
    return buffer.getvalue()
