"""Implementations of the DomainEventPublisher port."""

import logging
import threading
from typing import Any, List, Tuple

from matchday.usecases.match_use_cases import DomainEventPublisher

logger = logging.getLogger(__name__)


class LoggingEventPublisher(DomainEventPublisher):
    """Writes each published event to the log."""

    def __init__(self, level: int = logging.INFO):
        self.level = level

    def publish(self, event_type: str, payload: Any) -> None:
        logger.log(self.level, "Published %s: %s", event_type, payload)


class RecordingEventPublisher(DomainEventPublisher):
    """Keeps published events in memory, in publication order."""

    def __init__(self):
        self._published: List[Tuple[str, Any]] = []
        self._lock = threading.Lock()

    def publish(self, event_type: str, payload: Any) -> None:
        with self._lock:
            self._published.append((event_type, payload))

    @property
    def published(self) -> List[Tuple[str, Any]]:
        with self._lock:
            return list(self._published)

    def topics(self) -> List[str]:
        return [topic for topic, _ in self.published]

    def clear(self) -> None:
        with self._lock:
            self._published.clear()
