"""
Dashboard side effects the forms trigger: toasts and navigation.

Rendering toasts and routing pages belong to the UI layer; the forms only
talk to these two protocols. The recording implementations keep what was
asked of them (and log it), which is all a headless client or a test needs.
"""
import logging
from dataclasses import dataclass, field
from typing import List, Protocol

logger = logging.getLogger(__name__)


class Notifier(Protocol):
    def success(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...


class Navigator(Protocol):
    def refresh(self) -> None: ...

    def push(self, path: str) -> None: ...


@dataclass
class Notification:
    level: str  # "success" | "error"
    message: str


@dataclass
class NotificationLog:
    """Notifier that records every toast."""
    entries: List[Notification] = field(default_factory=list)

    def success(self, message: str) -> None:
        logger.info(f"toast ✅ {message}")
        self.entries.append(Notification("success", message))

    def error(self, message: str) -> None:
        logger.warning(f"toast ❌ {message}")
        self.entries.append(Notification("error", message))

    @property
    def last(self) -> Notification | None:
        return self.entries[-1] if self.entries else None


@dataclass
class NavigationHistory:
    """Navigator that records refreshes and pushed paths."""
    paths: List[str] = field(default_factory=list)
    refreshes: int = 0

    def refresh(self) -> None:
        self.refreshes += 1

    def push(self, path: str) -> None:
        logger.debug(f"navigate → {path}")
        self.paths.append(path)

    @property
    def current(self) -> str | None:
        return self.paths[-1] if self.paths else None
