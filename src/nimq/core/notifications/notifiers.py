import logging
from datetime import datetime
from threading import Lock
from typing import Any, Dict, List

from nimq.core.abstract.notifications.base_notifier import BaseNotifier, Variant


class LoggingNotifier(BaseNotifier):
    """Routes notifications to a logger; destructive ones are logged as errors."""

    def __init__(self, logger_name: str = "NIMQ-Notify"):
        self.logger = logging.getLogger(logger_name)

    def notify(self, title: str, description: str, variant: Variant = "default") -> None:
        level = logging.ERROR if variant == "destructive" else logging.INFO
        self.logger.log(level, "%s: %s", title, description)


class TraceNotifier(BaseNotifier):
    """
    Captures notifications in memory.

    Each entry keeps the title, description, variant and the time it was raised.
    Access to the list is thread-safe.

    Usage:
        notifier = TraceNotifier()
        trainer = QLearningTrainer(settings, rng, notifier=notifier)
        titles = [n["title"] for n in notifier.get_notifications()]
    """

    def __init__(self):
        self.notifications: List[Dict[str, Any]] = []
        self._lock = Lock()

    def notify(self, title: str, description: str, variant: Variant = "default") -> None:
        entry = {
            "title": title,
            "description": description,
            "variant": variant,
            "timestamp": datetime.now().isoformat(),
        }
        with self._lock:
            self.notifications.append(entry)

    def get_notifications(self) -> List[Dict[str, Any]]:
        with self._lock:
            return self.notifications.copy()

    def get_titles(self) -> List[str]:
        return [n["title"] for n in self.get_notifications()]

    def clear(self) -> None:
        with self._lock:
            self.notifications.clear()
