"""Command-line entry point for AutoGameJournal."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional, Sequence

from journal import config_loader, journal_runner
from windows.window_observer import UnsupportedPlatformError

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Periodically screenshot fullscreen games into per-game folders.")
    parser.add_argument("--config", help="Optional alternate config YAML path.")
    parser.add_argument("--once", action="store_true", help="Run a single tick immediately and exit.")
    parser.add_argument("--max-ticks", type=int, help="Stop after this many ticks.")
    parser.add_argument("--interval", type=float, help="Override journal.interval_seconds.")
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    try:
        config = config_loader.load_config(args.config)
    except (FileNotFoundError, ValueError) as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 2

    if args.interval is not None:
        if args.interval <= 0:
            print("Configuration error: --interval must be positive", file=sys.stderr)
            return 2
        config["journal"]["interval_seconds"] = args.interval

    if args.max_ticks is not None and args.max_ticks < 1:
        print("Configuration error: --max-ticks must be at least 1", file=sys.stderr)
        return 2

    config_loader.configure_logging(config)

    max_ticks = 1 if args.once else args.max_ticks
    try:
        for result in journal_runner.run_journal(config, max_ticks=max_ticks, wait_first=not args.once):
            name = result.identity.name if result.identity else "-"
            logger.debug("[%s] %s: %s", result.timestamp, name, result.status)
    except UnsupportedPlatformError as exc:
        logger.error("%s", exc)
        return 1
    except KeyboardInterrupt:
        logger.info("Stopped")
    return 0


if __name__ == "__main__":
    sys.exit(main())
