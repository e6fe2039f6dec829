import logging
from typing import Optional

from nimq.core.abstract.notifications.base_notifier import BaseNotifier
from nimq.core.pipelines.training.trainer import QLearningTrainer
from nimq.core.q_table.q_table_manager import QTableManager
from nimq.core.q_table.repository import QTableRepository

logger = logging.getLogger("NIMQ-Model")


def ensure_model_ready(
    repository: QTableRepository,
    trainer: QLearningTrainer,
    notifier: Optional[BaseNotifier] = None,
    retrain: bool = False,
) -> QTableManager:
    """
    Return a usable Q-table, training one when none is persisted.

    A stored table is reused as-is. When nothing usable is stored (missing,
    empty or corrupt) or ``retrain`` is set, a fresh table is trained and
    saved. A failed save is reported but the trained table is still returned.

    Args:
        repository: Where the table is loaded from and saved to
        trainer: Used when a table has to be trained
        notifier: Optional sink for user-facing messages
        retrain: Ignore any stored table

    Returns:
        QTableManager: Table ready for move selection
    """
    if not retrain:
        q_table = repository.load()
        if q_table is not None and not q_table.is_empty():
            return q_table

    logger.info("No usable Q-table found, training a new one" if not retrain else "Retraining Q-table")
    if notifier:
        notifier.notify(
            "Training AI",
            "Retraining AI model..." if retrain else "First run detected. Training AI model...",
        )
    q_table = trainer.train()

    stats = trainer.last_stats
    metadata = repository.new_metadata(
        q_table,
        episodes=stats.episodes if stats else 0,
        epsilon=trainer.settings.epsilon,
    )
    if repository.save(q_table, metadata):
        if notifier:
            notifier.notify("AI Model Saved", "Q-learning model successfully saved.")
    else:
        logger.error("Trained Q-table could not be saved; continuing with the in-memory table")
        if notifier:
            notifier.notify("Error Saving AI Model", "Failed to save Q-learning model.", "destructive")

    return q_table
