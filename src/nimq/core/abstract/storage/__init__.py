from .base_key_value_store import BaseKeyValueStore

__all__ = ["BaseKeyValueStore"]
