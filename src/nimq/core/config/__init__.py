from .nimq_config import DEFAULT_CONFIG, NimqConfig

__all__ = ["NimqConfig", "DEFAULT_CONFIG"]
