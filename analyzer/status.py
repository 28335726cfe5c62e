# =============================================================================
# Camera Vision Analyzer - Status Board
# =============================================================================
# Holds the single current status line and the camera overlay shown to the
# user. Each update replaces the previous one; nothing is accumulated.
# =============================================================================

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List

logger = logging.getLogger(__name__)


class StatusKind(str, Enum):
    OK = "ok"
    ERR = "err"
    WARN = "warn"
    NEUTRAL = "neutral"


@dataclass(frozen=True)
class StatusEvent:
    message: str
    kind: StatusKind = StatusKind.NEUTRAL


@dataclass(frozen=True)
class Overlay:
    visible: bool
    title: str = ""
    text: str = ""


class StatusBoard:
    """
    Current status line plus overlay, with change listeners.

    Listeners receive the board itself after every change.
    """

    def __init__(self, message: str = "", kind: StatusKind = StatusKind.NEUTRAL):
        self.status = StatusEvent(message, kind)
        self.overlay = Overlay(visible=False)
        self._listeners: List[Callable[["StatusBoard"], None]] = []

    def subscribe(self, listener: Callable[["StatusBoard"], None]) -> None:
        self._listeners.append(listener)

    def set_status(self, message: str, kind: StatusKind = StatusKind.NEUTRAL) -> None:
        self.status = StatusEvent(message, kind)
        log = logger.warning if kind == StatusKind.ERR else logger.debug
        log("Status [%s]: %s", kind.value, message.splitlines()[0] if message else "")
        self._notify()

    def show_overlay(self, title: str, text: str) -> None:
        self.overlay = Overlay(visible=True, title=title, text=text)
        self._notify()

    def hide_overlay(self) -> None:
        self.overlay = Overlay(visible=False)
        self._notify()

    def _notify(self) -> None:
        for listener in self._listeners:
            listener(self)
