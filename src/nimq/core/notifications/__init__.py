from .notifiers import LoggingNotifier, TraceNotifier

__all__ = ["LoggingNotifier", "TraceNotifier"]
