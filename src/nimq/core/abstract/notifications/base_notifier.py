from abc import ABC, abstractmethod
from typing import Literal

Variant = Literal["default", "destructive"]


class BaseNotifier(ABC):
    """
    User-facing notifications (toast messages in the browser build).

    Purely cosmetic: nothing in the engine depends on a notification being shown.
    """

    @abstractmethod
    def notify(self, title: str, description: str, variant: Variant = "default") -> None:
        pass
