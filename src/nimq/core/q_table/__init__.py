from .q_table_manager import QTableManager
from .repository import DEFAULT_QTABLE_KEY, QTableRepository

__all__ = ["QTableManager", "QTableRepository", "DEFAULT_QTABLE_KEY"]
