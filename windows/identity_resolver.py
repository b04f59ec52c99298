"""Resolve a stable game identity for an observed window.

The owning executable's name is preferred. Protected processes (anti-cheat
drivers, elevated launchers) often refuse inspection, in which case the window
title is used instead. Per-game rules from the config can ignore a game, relax
the fullscreen requirement or rename its journal folder.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from pathlib import PureWindowsPath
from typing import Any, Iterable, List, Mapping, Optional

import psutil

from windows.window_observer import WindowInfo

logger = logging.getLogger(__name__)


class IdentitySource(str, enum.Enum):
    EXECUTABLE_NAME = "executable_name"
    WINDOW_TITLE = "window_title"
    RULE_OVERRIDE = "rule_override"


@dataclass(frozen=True)
class GameIdentity:
    name: str
    source_kind: IdentitySource

    def to_dict(self) -> dict:
        return {"name": self.name, "source_kind": self.source_kind.value}


@dataclass(frozen=True)
class CaptureRule:
    name: str = ""
    ignore: bool = False
    needs_fullscreen: bool = True
    use_window_name: bool = False
    override_name: Optional[str] = None

    def matches(self, identity_name: str) -> bool:
        return bool(self.name) and self.name.lower() == identity_name.lower()


DEFAULT_RULE = CaptureRule()


def build_rules(config: Mapping[str, Any]) -> List[CaptureRule]:
    rules: List[CaptureRule] = []
    for entry in config.get("rules", []) or []:
        override = entry.get("override_name")
        rules.append(
            CaptureRule(
                name=str(entry["name"]).strip(),
                ignore=bool(entry.get("ignore", False)),
                needs_fullscreen=bool(entry.get("needs_fullscreen", True)),
                use_window_name=bool(entry.get("use_window_name", False)),
                override_name=str(override) if override else None,
            )
        )
    return rules


def find_rule(rules: Iterable[CaptureRule], identity_name: str) -> CaptureRule:
    """Return the first rule matching the name case-insensitively, else the default rule."""
    for rule in rules:
        if rule.matches(identity_name):
            return rule
    return DEFAULT_RULE


def executable_name(pid: int) -> Optional[str]:
    """Return the executable stem for ``pid``, or None if it cannot be inspected."""
    if pid <= 0:
        return None
    try:
        process_name = psutil.Process(pid).name()
    except (psutil.AccessDenied, psutil.NoSuchProcess) as exc:
        logger.debug("Process %s not inspectable: %s", pid, exc)
        return None
    stem = PureWindowsPath(process_name).stem
    return stem or None


def resolve_identity(window: WindowInfo) -> Optional[GameIdentity]:
    """Map a window to a GameIdentity, falling back to its title.

    Returns None when neither the executable name nor a title is available.
    """
    name = executable_name(window.pid)
    if name:
        return GameIdentity(name=name, source_kind=IdentitySource.EXECUTABLE_NAME)

    title = window.title.strip()
    if title:
        return GameIdentity(name=title, source_kind=IdentitySource.WINDOW_TITLE)
    return None


def apply_rule(identity: GameIdentity, rule: CaptureRule, window: WindowInfo) -> GameIdentity:
    if rule.override_name:
        return GameIdentity(name=rule.override_name, source_kind=IdentitySource.RULE_OVERRIDE)
    if rule.use_window_name and window.title.strip():
        return GameIdentity(name=window.title.strip(), source_kind=IdentitySource.WINDOW_TITLE)
    return identity
