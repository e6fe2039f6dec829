import logging
import time
from typing import Callable, Optional, Protocol

import numpy as np

from nimq.core.abstract.notifications.base_notifier import BaseNotifier
from nimq.core.entities.nim import State, as_state
from nimq.core.entities.settings import QLearningSettings, RulesSettings
from nimq.core.entities.training import TrainingStats
from nimq.core.policy.move_selection import choose_action
from nimq.core.q_table.q_table_manager import QTableManager
from nimq.core.rules.nim_rules import apply_action, generate_initial_state, is_legal, is_terminal

logger = logging.getLogger("NIMQ-Trainer")

LOSS_REWARD = -1.0


class CancelEvent(Protocol):
    def is_set(self) -> bool: ...


class QLearningTrainer:
    """
    Self-play Q-learning for misère Nim.

    Both seats share one table. Each episode starts from a fresh opening and is
    played to the end with an epsilon-greedy policy; every move is scored from
    the mover's side (-1 for emptying the board, 0 otherwise) and backed up
    against the negated best reply of the opponent.
    """

    def __init__(
        self,
        settings: Optional[QLearningSettings] = None,
        rng: Optional[np.random.Generator] = None,
        notifier: Optional[BaseNotifier] = None,
        initial_state_factory: Optional[Callable[[np.random.Generator], State]] = None,
        rules: Optional[RulesSettings] = None,
    ):
        """
        Args:
            settings: Learning rate, discount, exploration and episode count
            rng: Seedable numpy generator shared by openings and exploration
            notifier: Optional sink for the "AI Ready" message
            initial_state_factory: Opening generator; overrides ``settings.start_piles``
            rules: Pile-generation parameters for random openings
        """
        self.settings = settings or QLearningSettings()
        self.rng = rng if rng is not None else np.random.default_rng()
        self.notifier = notifier
        self.rules = rules or RulesSettings()
        self.initial_state_factory = initial_state_factory or self._default_initial_state
        self.last_stats: Optional[TrainingStats] = None

    def _default_initial_state(self, rng: np.random.Generator) -> State:
        if self.settings.start_piles is not None:
            return as_state(self.settings.start_piles)
        return generate_initial_state(
            rng,
            three_pile_probability=self.rules.three_pile_probability,
            min_count=self.rules.min_count,
            max_count=self.rules.max_count,
        )

    def new_q_table(self) -> QTableManager:
        return QTableManager(alpha=self.settings.alpha, gamma=self.settings.gamma)

    def execute_episode(self, q_table: QTableManager) -> int:
        """
        Play one self-play game and apply its TD updates.

        Returns:
            int: Number of updates applied
        """
        state = as_state(self.initial_state_factory(self.rng))
        updates = 0

        while not is_terminal(state):
            action = choose_action(state, q_table, self.settings.epsilon, self.rng)
            assert is_legal(state, action), f"policy produced illegal move {action} for {state}"

            next_state = apply_action(state, action)

            # Emptying the board loses under misère play
            reward = LOSS_REWARD if is_terminal(next_state) else 0.0

            q_table.update_policy(state, action, reward, next_state)
            updates += 1
            state = next_state

        return updates

    def train(
        self,
        q_table: Optional[QTableManager] = None,
        episodes: Optional[int] = None,
        cancel_event: Optional[CancelEvent] = None,
    ) -> QTableManager:
        """
        Run the training loop.

        Args:
            q_table: Table to warm-start from; a fresh one is created when omitted
            episodes: Episode count, defaults to ``settings.episodes``
            cancel_event: Checked between episodes; a set event stops training early

        Returns:
            QTableManager: The trained (possibly partially trained) table
        """
        q_table = q_table if q_table is not None else self.new_q_table()
        episodes = self.settings.episodes if episodes is None else episodes

        logger.info(
            f"Starting Q-learning training: {episodes} episodes "
            f"(alpha={q_table.alpha}, gamma={q_table.gamma}, epsilon={self.settings.epsilon})"
        )
        start = time.perf_counter()
        completed = 0
        updates = 0
        cancelled = False

        for _ in range(episodes):
            if cancel_event is not None and cancel_event.is_set():
                cancelled = True
                logger.warning(f"Training cancelled after {completed} episodes")
                break

            updates += self.execute_episode(q_table)
            completed += 1

            if completed % self.settings.log_every == 0:
                logger.info(f"Completed {completed} training episodes ({len(q_table)} entries)")

        self.last_stats = TrainingStats(
            episodes=completed,
            updates=updates,
            elapsed_seconds=time.perf_counter() - start,
            cancelled=cancelled,
            table_size=len(q_table),
        )

        logger.info(
            f"Q-learning training complete: {completed} episodes, {updates} updates, "
            f"{len(q_table)} entries in {self.last_stats.elapsed_seconds:.2f}s"
        )
        if self.notifier:
            self.notifier.notify("AI Ready", f"Trained on {completed} games.")

        return q_table
