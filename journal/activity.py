"""Input activity tracking to skip captures of an unattended screen."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from windows import idle

logger = logging.getLogger(__name__)


@dataclass
class InputActivityMonitor:
    """Remember the last-input tick seen at the previous saved capture."""

    enabled: bool = True
    last_tick: Optional[int] = None
    pending_tick: Optional[int] = None

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> "InputActivityMonitor":
        capture_cfg = config.get("capture", {})
        return cls(enabled=bool(capture_cfg.get("skip_when_idle", True)))

    def has_new_input(self) -> bool:
        """Return True if the user did something since the last saved capture.

        When the tick cannot be read the capture is allowed to proceed. The
        tick is only remembered once ``mark_captured`` confirms the capture.
        """
        self.pending_tick = None
        if not self.enabled:
            return True
        tick = idle.last_input_tick()
        if tick is None:
            logger.debug("Input activity unavailable; not skipping capture")
            return True
        if tick == self.last_tick:
            return False
        self.pending_tick = tick
        return True

    def mark_captured(self) -> None:
        if self.pending_tick is not None:
            self.last_tick = self.pending_tick
            self.pending_tick = None
