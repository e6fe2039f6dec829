import logging
from typing import Optional, Sequence

import numpy as np

from nimq.core.abstract.q_table.base_q_table_manager import BaseQTableManager
from nimq.core.entities.nim import NimAction
from nimq.core.exceptions import IllegalStateError
from nimq.core.rules.nim_rules import valid_actions

logger = logging.getLogger("NIMQ-Policy")


def choose_action(
    state: Sequence[int],
    q_table: BaseQTableManager,
    epsilon: float = 0.0,
    rng: Optional[np.random.Generator] = None,
) -> NimAction:
    """
    Epsilon-greedy move selection over the legal moves of ``state``.

    With probability ``epsilon`` a legal move is drawn uniformly. Otherwise the
    move with the highest Q-value is returned, ties going to the earliest move
    in ``valid_actions`` order. A state the table has never recorded is played
    uniformly at random.

    Args:
        state: Current pile counts
        q_table: Learned values
        epsilon: Exploration probability (0 for pure exploitation)
        rng: Seedable numpy generator

    Returns:
        NimAction: A move legal in ``state``

    Raises:
        IllegalStateError: If ``state`` is terminal; callers must check first
    """
    actions = valid_actions(state)
    if not actions:
        raise IllegalStateError(f"choose_action called on terminal state {list(state)}")

    rng = rng if rng is not None else np.random.default_rng()

    if epsilon > 0.0 and rng.random() < epsilon:
        return actions[int(rng.integers(len(actions)))]

    if not q_table.has_state(state):
        logger.debug(f"Unseen state {list(state)}, playing a random move")
        return actions[int(rng.integers(len(actions)))]

    values = q_table.state_values(state)
    best_action = actions[0]
    best_value = values.get(best_action, 0.0)
    for action in actions[1:]:
        value = values.get(action, 0.0)
        if value > best_value:
            best_value = value
            best_action = action

    return best_action
