import io
import sys
import types

import pytest
from PIL import Image

from capture import screen_capture


def test_jpeg_encoding_drops_alpha():
    image = Image.new("RGBA", (20, 10), color=(255, 0, 0, 128))

    data = screen_capture.encode_image(image, "jpeg", quality=70)

    with Image.open(io.BytesIO(data)) as decoded:
        assert decoded.format == "JPEG"
        assert decoded.mode == "RGB"
        assert decoded.size == (20, 10)


def test_png_encoding():
    data = screen_capture.encode_image(Image.new("RGB", (4, 4)), "PNG")

    assert data.startswith(b"\x89PNG")


def test_unknown_format_rejected():
    with pytest.raises(ValueError):
        screen_capture.encode_image(Image.new("RGB", (4, 4)), "gif")


def test_extension_for():
    assert screen_capture.extension_for("JPEG") == "jpg"
    assert screen_capture.extension_for("png") == "png"


def test_empty_region_rejected():
    with pytest.raises(ValueError):
        screen_capture.capture_region((0, 0, 0, 1080))


def _fake_desktop():
    # Secondary monitor at x=-1280 (red), primary at x=0 (white).
    desktop = Image.new("RGB", (3200, 1080), color="white")
    desktop.paste((255, 0, 0), (0, 0, 1280, 1080))
    return desktop


def _patch_desktop(monkeypatch, origin=(-1280, 0)):
    calls = []

    def fake_screenshot(**kwargs):
        calls.append(kwargs)
        return _fake_desktop()

    monkeypatch.setitem(sys.modules, "pyautogui", types.SimpleNamespace(screenshot=fake_screenshot))
    monkeypatch.setattr(screen_capture, "virtual_screen_origin", lambda: origin)
    return calls


def test_region_on_primary_monitor_is_offset_by_virtual_origin(monkeypatch):
    calls = _patch_desktop(monkeypatch)

    shot = screen_capture.capture_region((0, 0, 1920, 1080))

    assert calls == [{"allScreens": True}]
    assert shot.size == (1920, 1080)
    assert shot.getpixel((10, 10)) == (255, 255, 255)


def test_region_on_monitor_left_of_primary(monkeypatch):
    _patch_desktop(monkeypatch)

    shot = screen_capture.capture_region((-1280, 0, 1280, 1024))

    assert shot.size == (1280, 1024)
    assert shot.getpixel((10, 10)) == (255, 0, 0)
    assert shot.getpixel((1279, 1023)) == (255, 0, 0)


def test_virtual_screen_origin_reads_system_metrics(monkeypatch):
    metrics = {screen_capture.SM_XVIRTUALSCREEN: -1280, screen_capture.SM_YVIRTUALSCREEN: -200}
    monkeypatch.setattr(screen_capture.sys, "platform", "win32")
    monkeypatch.setitem(sys.modules, "win32api", types.SimpleNamespace(GetSystemMetrics=metrics.__getitem__))

    assert screen_capture.virtual_screen_origin() == (-1280, -200)


def test_virtual_screen_origin_off_windows(monkeypatch):
    monkeypatch.setattr(screen_capture.sys, "platform", "linux")

    assert screen_capture.virtual_screen_origin() == (0, 0)
