from .base_notifier import BaseNotifier

__all__ = ["BaseNotifier"]
