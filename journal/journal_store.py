"""Write screenshots into per-game journal folders.

Layout: ``<journal-root>/<game folder>/<YYYY-MM-DD_HH-MM-SS>.<ext>``. Timestamps
are local time, zero-padded and most-significant first so filenames sort in
capture order.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from windows.identity_resolver import GameIdentity

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y-%m-%d_%H-%M-%S"
UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._\- ]")
# Windows silently strips trailing dots and spaces from folder names.
TRAILING_JUNK = " ."


@dataclass(frozen=True)
class CaptureEvent:
    identity: GameIdentity
    timestamp: datetime
    image_bytes: bytes


def folder_name(identity_name: str) -> str:
    """Map an identity name to a filesystem-safe folder name."""
    cleaned = UNSAFE_CHARS.sub("_", identity_name).rstrip(TRAILING_JUNK)
    if cleaned in ("", ".", ".."):
        return "_" * max(len(identity_name), 1)
    return cleaned


def journal_folder(journal_root: Path, identity: GameIdentity) -> Path:
    return journal_root / folder_name(identity.name)


def capture_filename(timestamp: datetime, extension: str, attempt: int = 0) -> str:
    stem = timestamp.strftime(TIMESTAMP_FORMAT)
    if attempt:
        stem = f"{stem}_{attempt:03d}"
    return f"{stem}.{extension}"


def save_capture(event: CaptureEvent, journal_root: Path, extension: str) -> Path:
    """Persist a capture event and return the written path.

    The per-game folder is created on first use. A second capture within the
    same second gets a numeric suffix instead of overwriting the first.
    """
    folder = journal_folder(journal_root, event.identity)
    if not folder.exists():
        logger.info("Creating journal folder %s", folder)
    folder.mkdir(parents=True, exist_ok=True)

    attempt = 0
    while True:
        target = folder / capture_filename(event.timestamp, extension, attempt)
        try:
            with target.open("xb") as fh:
                fh.write(event.image_bytes)
        except FileExistsError:
            attempt += 1
            continue
        return target
