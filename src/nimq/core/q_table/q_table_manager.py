#!/usr/bin/env python3
"""
Nim Q-table

Shared self-play Q-table: both seats read and write the same values, and every
value is scored from the point of view of the player about to move.
"""

import logging

from nimq.core.abstract.q_table.base_q_table_manager import BaseQTableManager
from nimq.core.entities.nim import NimAction, State
from nimq.core.rules.nim_rules import is_terminal

logger = logging.getLogger("NIMQ-Qtable")


class QTableManager(BaseQTableManager):
    """
    Tabular Q-learner for misère Nim.

    Turns alternate, so the value of the position handed to the opponent is
    negated before it is discounted into the mover's target.
    """

    def update_policy(
        self,
        s: State,
        a: NimAction,
        R: float,
        s_prime: State,
    ) -> float:
        """
        Update policy function with the negamax Q-learning formula

        Args:
            s: Current state
            a: Action taken
            R: Reward received by the mover
            s_prime: State handed to the opponent

        Returns:
            float: Updated Q-value for (s, a)
        """
        # Get Q(s, a) or default to 0.0
        Q_sa = self.get(s, a)

        # Opponent's best reply, seen from the mover's side
        future = 0.0 if is_terminal(s_prime) else -self.max_value(s_prime)

        # Q-learning update
        new_Q_sa = Q_sa + self.alpha * (R + self.gamma * future - Q_sa)

        # Update the Q-table
        self.set(s, a, new_Q_sa)

        logger.debug(f"Q-update {list(s)} {tuple(a)}: {Q_sa:.4f} -> {new_Q_sa:.4f}")
        logger.debug(
            f"Formula: {Q_sa:.4f} + {self.alpha:.2f} * ({R:.2f} + {self.gamma:.2f} * {future:.4f} - {Q_sa:.4f})"
        )

        return new_Q_sa
