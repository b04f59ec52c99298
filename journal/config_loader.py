"""Utilities for loading AutoGameJournal runtime configuration.

The default configuration file lives in ``config/config.yaml`` relative to the
current working directory. Callers can pass an alternate path when they want to
override the defaults (e.g., for testing or per-user setups).
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Any, Callable, List, Mapping, MutableMapping, Optional

import yaml

LOG_FILE_NAME = "autogamejournal.log"
IMAGE_FORMATS = ("jpeg", "png")

DEFAULTS: Mapping[str, Mapping[str, Any]] = {
    "journal": {
        "root": "GameJournal",
        "interval_seconds": 60.0,
        "image_format": "jpeg",
        "jpeg_quality": 90,
    },
    "capture": {
        "skip_when_idle": True,
        "fullscreen_tolerance": 0,
    },
    "logging": {
        "directory": "logs",
        "ensure_exists": True,
        "level": "INFO",
        "session_log": True,
    },
}


def _apply_defaults(raw_config: MutableMapping[str, Any]) -> None:
    for section, values in DEFAULTS.items():
        section_cfg = raw_config.get(section)
        if section_cfg is None:
            section_cfg = raw_config[section] = {}
        if not isinstance(section_cfg, dict):
            raise ValueError(f"Config section '{section}' must be a mapping")
        for key, value in values.items():
            section_cfg.setdefault(key, value)
    if raw_config.get("rules") is None:
        raw_config["rules"] = []


def _number(section: Mapping[str, Any], section_name: str, key: str, cast: Callable[[Any], Any]) -> Any:
    value = section[key]
    if isinstance(value, bool):
        raise ValueError(f"{section_name}.{key} must be a number")
    try:
        return cast(value)
    except (TypeError, ValueError):
        raise ValueError(f"{section_name}.{key} must be a number, got {value!r}") from None


def _validate(raw_config: Mapping[str, Any]) -> None:
    journal_cfg = raw_config["journal"]
    if _number(journal_cfg, "journal", "interval_seconds", float) <= 0:
        raise ValueError("journal.interval_seconds must be positive")

    image_format = str(journal_cfg["image_format"]).lower()
    if image_format not in IMAGE_FORMATS:
        raise ValueError(f"journal.image_format must be one of {IMAGE_FORMATS}, got {image_format!r}")

    quality = _number(journal_cfg, "journal", "jpeg_quality", int)
    if not 1 <= quality <= 95:
        raise ValueError("journal.jpeg_quality must be between 1 and 95")

    if _number(raw_config["capture"], "capture", "fullscreen_tolerance", int) < 0:
        raise ValueError("capture.fullscreen_tolerance must not be negative")

    rules = raw_config["rules"]
    if not isinstance(rules, list):
        raise ValueError("rules must be a list")
    for index, rule in enumerate(rules):
        if not isinstance(rule, dict) or not str(rule.get("name") or "").strip():
            raise ValueError(f"rules[{index}] must be a mapping with a non-empty 'name'")


def _resolve_paths(config_file: Path, raw_config: Mapping[str, Any]) -> MutableMapping[str, Path]:
    root = Path.cwd()
    logs_dir = (root / Path(str(raw_config["logging"]["directory"])).expanduser()).resolve()
    journal_root = (root / Path(str(raw_config["journal"]["root"])).expanduser()).resolve()

    return {
        "root": root,
        "config_file": config_file,
        "logs_dir": logs_dir,
        "journal_root": journal_root,
    }


def load_config(path: Optional[str] = None) -> MutableMapping[str, Any]:
    """Load configuration data from disk.

    Parameters
    ----------
    path:
        Optional override relative or absolute path to a YAML config file.

    Returns
    -------
    MutableMapping[str, Any]
        Dict-like object with configuration values, defaults filled in and
        resolved absolute paths under ``paths``.
    """

    config_file = (Path(path).expanduser() if path else Path.cwd() / "config" / "config.yaml").resolve()
    if not config_file.exists():
        raise FileNotFoundError(f"Config file not found: {config_file}")

    with config_file.open("r", encoding="utf-8") as fh:
        try:
            raw_config: MutableMapping[str, Any] = yaml.safe_load(fh) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in {config_file}: {exc}") from exc
    if not isinstance(raw_config, dict):
        raise ValueError(f"Config file must contain a mapping: {config_file}")

    _apply_defaults(raw_config)
    _validate(raw_config)
    raw_config["journal"]["image_format"] = str(raw_config["journal"]["image_format"]).lower()

    paths = _resolve_paths(config_file, raw_config)
    if raw_config["logging"].get("ensure_exists", True):
        paths["logs_dir"].mkdir(parents=True, exist_ok=True)

    raw_config.setdefault("paths", {})
    raw_config["paths"].update({key: str(value) for key, value in paths.items()})

    return raw_config


def configure_logging(config: Mapping[str, Any]) -> None:
    """Send log records to stderr and to a file in the configured logs directory."""
    logging_cfg = config.get("logging", {})
    level = str(logging_cfg.get("level", "INFO")).upper()

    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    logs_dir = config.get("paths", {}).get("logs_dir")
    if logs_dir and Path(logs_dir).is_dir():
        handlers.append(logging.FileHandler(Path(logs_dir) / LOG_FILE_NAME, encoding="utf-8"))

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        handlers=handlers,
        force=True,
    )
