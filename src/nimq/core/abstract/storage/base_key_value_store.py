from abc import ABC, abstractmethod
from typing import Optional


class BaseKeyValueStore(ABC):
    """
    Durable string key-value storage, the local equivalent of browser localStorage.

    Every ``set`` replaces the whole value stored under a key.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """
        Read the value stored under ``key``.

        Returns:
            Optional[str]: The stored string, or None if the key is absent
        """
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """
        Store ``value`` under ``key``, replacing any previous value.

        Raises:
            OSError: If the value cannot be written
        """
        pass

    @abstractmethod
    def delete(self, key: str) -> None:
        pass

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None
