from typing import Dict, Optional

from nimq.core.abstract.storage.base_key_value_store import BaseKeyValueStore


class InMemoryKeyValueStore(BaseKeyValueStore):
    """Process-local store; nothing survives the interpreter."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)
