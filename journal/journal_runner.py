"""Polling loop that keeps the journal running."""

from __future__ import annotations

import json
import logging
import time
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Iterator, List, Mapping, Optional

from journal.activity import InputActivityMonitor
from journal.capture_worker import TickResult, run_tick
from windows.identity_resolver import build_rules

logger = logging.getLogger(__name__)


def _session_log_path(config: Mapping[str, Any], now: Optional[datetime] = None) -> Path:
    logs_dir = Path(config.get("paths", {}).get("logs_dir", "logs"))
    date_str = (now or datetime.now()).strftime("%Y-%m-%d")
    return logs_dir / f"session-{date_str}.json"


def _load_existing_log(path: Path) -> List[Mapping[str, Any]]:
    if not path.exists():
        return []
    with path.open("r", encoding="utf-8") as fh:
        try:
            data = json.load(fh)
        except json.JSONDecodeError:
            logger.warning("Session log %s is corrupt; starting a new one", path)
            return []
    if isinstance(data, list):
        return data
    return []


def _append_log(path: Path, result: TickResult) -> None:
    history = _load_existing_log(path)
    history.append(result.to_dict())
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as fh:
        json.dump(history, fh, indent=2)


def _interval(config: Mapping[str, Any]) -> float:
    return float(config.get("journal", {}).get("interval_seconds", 60.0))


def run_journal(
    config: Mapping[str, Any],
    *,
    max_ticks: Optional[int] = None,
    wait_first: bool = True,
    sleep: Callable[[float], None] = time.sleep,
) -> Iterator[TickResult]:
    """Wait the configured interval, run a tick, repeat.

    Runs forever unless ``max_ticks`` is given. Captures are appended to the
    day's session log when ``logging.session_log`` is enabled.
    """
    rules = build_rules(config)
    activity = InputActivityMonitor.from_config(config)
    interval = _interval(config)
    session_log = bool(config.get("logging", {}).get("session_log", True))

    logger.info("Journal running every %.1fs into %s", interval, config.get("paths", {}).get("journal_root"))

    tick = 0
    while max_ticks is None or tick < max_ticks:
        if wait_first or tick:
            sleep(interval)
        result = run_tick(config, rules, activity)
        tick += 1

        if session_log and result.status == "captured":
            try:
                _append_log(_session_log_path(config), result)
            except OSError as exc:
                logger.warning("Could not update session log: %s", exc)
        yield result
