import logging
from typing import Optional, Sequence, Union

import numpy as np

from nimq.core.abstract.q_table.base_q_table_manager import BaseQTableManager
from nimq.core.entities.nim import Difficulty, NimAction
from nimq.core.exceptions import IllegalStateError
from nimq.core.policy.move_selection import choose_action
from nimq.core.rules.nim_rules import is_legal, random_action

logger = logging.getLogger("NIMQ-AI")

MEDIUM_POLICY_RATE = 0.7


def select_ai_move(
    state: Sequence[int],
    difficulty: Union[Difficulty, str],
    q_table: BaseQTableManager,
    rng: Optional[np.random.Generator] = None,
    policy_rate: float = MEDIUM_POLICY_RATE,
) -> NimAction:
    """
    Pick the computer's move for the given difficulty.

    - hard: always the learned policy
    - medium: the learned policy with probability ``policy_rate``, otherwise a random legal move
    - easy: always a random legal move

    Raises:
        IllegalStateError: If ``state`` is terminal
        ValueError: If ``difficulty`` is not a known difficulty
    """
    difficulty = Difficulty(difficulty)
    rng = rng if rng is not None else np.random.default_rng()

    if difficulty is Difficulty.HARD:
        action = choose_action(state, q_table, 0.0, rng)
    elif difficulty is Difficulty.MEDIUM and rng.random() < policy_rate:
        action = choose_action(state, q_table, 0.0, rng)
    else:
        action = random_action(state, rng)

    if not is_legal(state, action):
        raise IllegalStateError(f"Move selector produced illegal move {tuple(action)} for {list(state)}")

    logger.debug(f"[{difficulty.value}] {list(state)} -> {tuple(action)}")
    return action


class DifficultyAI:
    """Callable computer opponent bound to a table, a difficulty and a generator."""

    def __init__(
        self,
        q_table: BaseQTableManager,
        difficulty: Union[Difficulty, str] = Difficulty.HARD,
        rng: Optional[np.random.Generator] = None,
        policy_rate: float = MEDIUM_POLICY_RATE,
    ):
        self.q_table = q_table
        self.difficulty = Difficulty(difficulty)
        self.rng = rng if rng is not None else np.random.default_rng()
        self.policy_rate = policy_rate

    def __call__(self, state: Sequence[int]) -> NimAction:
        return select_ai_move(state, self.difficulty, self.q_table, self.rng, self.policy_rate)
