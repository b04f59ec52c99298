"""Single polling tick of the journal.

This module glues together window observation, identity resolution, screen
capture and the journal store to decide whether the current foreground window
deserves a screenshot, and to file it if so.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Iterable, Mapping, Optional

from capture import screen_capture
from journal import journal_store
from journal.activity import InputActivityMonitor
from windows import identity_resolver, window_observer
from windows.identity_resolver import CaptureRule, GameIdentity

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TickResult:
    status: str
    timestamp: str
    identity: Optional[GameIdentity] = None
    path: Optional[Path] = None
    details: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status,
            "timestamp": self.timestamp,
            "identity": self.identity.to_dict() if self.identity else None,
            "path": str(self.path) if self.path else None,
            "details": self.details,
        }


def _journal_settings(config: Mapping[str, Any]) -> Dict[str, Any]:
    journal_cfg = config.get("journal", {})
    image_format = str(journal_cfg.get("image_format", "jpeg")).lower()
    return {
        "root": Path(config.get("paths", {}).get("journal_root", journal_cfg.get("root", "GameJournal"))),
        "image_format": image_format,
        "extension": screen_capture.extension_for(image_format),
        "quality": int(journal_cfg.get("jpeg_quality", 90)),
    }


def _result(status: str, now: datetime, identity: Optional[GameIdentity] = None, **details: Any) -> TickResult:
    return TickResult(status=status, timestamp=now.isoformat(timespec="seconds"), identity=identity, details=details)


def run_tick(
    config: Mapping[str, Any],
    rules: Iterable[CaptureRule],
    activity: Optional[InputActivityMonitor] = None,
) -> TickResult:
    """Observe the foreground window once and capture it if it qualifies."""
    now = datetime.now()

    try:
        window = window_observer.get_foreground_window()
    except window_observer.WindowQueryError as exc:
        logger.warning("No valid window: %s", exc)
        return _result("error", now, message=str(exc))
    if window is None:
        return _result("no_window", now)

    identity = identity_resolver.resolve_identity(window)
    if identity is None:
        logger.debug("Window %s has neither an inspectable process nor a title", window.handle)
        return _result("unidentified", now, handle=window.handle)

    rule = identity_resolver.find_rule(rules, identity.name)
    if rule.ignore:
        return _result("ignored", now, identity)

    tolerance = int(config.get("capture", {}).get("fullscreen_tolerance", 0))
    if rule.needs_fullscreen and not window_observer.is_fullscreen(window, tolerance):
        return _result("not_fullscreen", now, identity)

    identity = identity_resolver.apply_rule(identity, rule, window)

    if activity is not None and not activity.has_new_input():
        logger.info("No input since last screenshot of %s", identity.name)
        return _result("idle", now, identity)

    settings = _journal_settings(config)
    region = window.monitor_region
    try:
        if region is None:
            image = screen_capture.capture_fullscreen()
        else:
            image = screen_capture.capture_region(region)
        event = journal_store.CaptureEvent(
            identity=identity,
            timestamp=now,
            image_bytes=screen_capture.encode_image(image, settings["image_format"], settings["quality"]),
        )
        path = journal_store.save_capture(event, settings["root"], settings["extension"])
    except Exception as exc:
        logger.exception("Could not save screenshot for %s", identity.name)
        return _result("capture_failed", now, identity, message=str(exc))

    if activity is not None:
        activity.mark_captured()
    logger.info("Saved screenshot for %s to %s", identity.name, path)
    return TickResult(
        status="captured",
        timestamp=now.isoformat(timespec="seconds"),
        identity=identity,
        path=path,
        details={"region": list(region) if region else None},
    )
