import logging
import uuid
from typing import Optional

from pydantic import ValidationError

from nimq.core.abstract.storage.base_key_value_store import BaseKeyValueStore
from nimq.core.entities.q_table import QTableMetadata
from nimq.core.exceptions import QTableFormatError
from nimq.core.q_table.q_table_manager import QTableManager

logger = logging.getLogger("NIMQ-Repository")

DEFAULT_QTABLE_KEY = "nim-qtable"


class QTableRepository:
    """
    Loads and saves the whole Q-table snapshot through a key-value store.

    The table lives under ``key`` in the portable nested-mapping format;
    training metadata is kept under a separate ``meta_key`` so that the table
    itself stays readable by any other build of the game.
    """

    def __init__(
        self,
        store: BaseKeyValueStore,
        key: str = DEFAULT_QTABLE_KEY,
        meta_key: Optional[str] = None,
        alpha: float = 0.1,
        gamma: float = 0.9,
    ):
        self.store = store
        self.key = key
        self.meta_key = meta_key or f"{key}-meta"
        self.alpha = alpha
        self.gamma = gamma

    def load(self) -> Optional[QTableManager]:
        """
        Load the persisted Q-table.

        Returns:
            Optional[QTableManager]: The table, or None when nothing usable is stored
        """
        try:
            payload = self.store.get(self.key)
        except OSError as e:
            logger.error(f"Failed to read Q-table '{self.key}': {e}")
            return None

        if not payload:
            logger.info(f"No Q-table stored under '{self.key}'")
            return None

        try:
            manager = QTableManager.deserialize(payload, alpha=self.alpha, gamma=self.gamma)
        except QTableFormatError as e:
            logger.warning(f"Discarding corrupt Q-table '{self.key}': {e}")
            return None

        logger.info(f"Loaded {len(manager)} state-action pairs across {len(manager.Q_table)} states")
        return manager

    def save(self, manager: QTableManager, metadata: Optional[QTableMetadata] = None) -> bool:
        """
        Save the Q-table as a single snapshot.

        Args:
            manager: Table to persist
            metadata: Optional training metadata stored alongside

        Returns:
            bool: Success flag
        """
        try:
            self.store.set(self.key, manager.serialize())
            if metadata is not None:
                self.store.set(self.meta_key, metadata.model_dump_json())

            logger.info(f"Q-table saved under '{self.key}' ({len(manager)} entries)")
            return True

        except (OSError, TypeError, ValueError) as e:
            logger.error(f"Failed to save Q-table: {e}")
            return False

    def load_metadata(self) -> Optional[QTableMetadata]:
        try:
            payload = self.store.get(self.meta_key)
        except OSError as e:
            logger.error(f"Failed to read Q-table metadata '{self.meta_key}': {e}")
            return None

        if not payload:
            return None
        try:
            return QTableMetadata.model_validate_json(payload)
        except ValidationError as e:
            logger.warning(f"Ignoring unreadable Q-table metadata: {e}")
            return None

    def clear(self) -> None:
        self.store.delete(self.key)
        self.store.delete(self.meta_key)

    @staticmethod
    def new_metadata(manager: QTableManager, episodes: int, epsilon: Optional[float] = None,
                     prefix_version: Optional[str] = None) -> QTableMetadata:
        version = prefix_version + "_" + str(uuid.uuid4())[:5] if prefix_version else "1.0"
        return QTableMetadata(
            version=version,
            episodes=episodes,
            alpha=manager.alpha,
            gamma=manager.gamma,
            epsilon=epsilon,
            entries=len(manager),
        )

    def export_json(self, manager: QTableManager) -> str:
        """Pretty-printed portable form of ``manager``."""
        return manager.serialize(indent=2)

    def import_json(self, text: str) -> Optional[QTableManager]:
        """
        Parse a table exported by ``export_json`` (or by the browser build).

        Returns:
            Optional[QTableManager]: The table, or None if ``text`` is malformed
        """
        try:
            return QTableManager.deserialize(text, alpha=self.alpha, gamma=self.gamma)
        except QTableFormatError as e:
            logger.error(f"Error importing Q-table: {e}")
            return None
