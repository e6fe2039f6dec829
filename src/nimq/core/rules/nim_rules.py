"""
Misère Nim rules.

Pure functions over a pile-count tuple. The player whose move empties the
last pile loses.
"""

from functools import reduce
from operator import xor
from typing import List, Optional, Sequence

import numpy as np

from nimq.core.entities.nim import NimAction, State
from nimq.core.exceptions import IllegalStateError, InvalidActionError

THREE_PILE_PROBABILITY = 0.25
MIN_PILE_COUNT = 1
MAX_PILE_COUNT = 10


def generate_initial_state(
    rng: Optional[np.random.Generator] = None,
    three_pile_probability: float = THREE_PILE_PROBABILITY,
    min_count: int = MIN_PILE_COUNT,
    max_count: int = MAX_PILE_COUNT,
) -> State:
    """
    Draw a random opening position.

    Three piles with probability ``three_pile_probability``, four otherwise;
    each pile count is uniform over ``[min_count, max_count]``.

    Args:
        rng: Seedable numpy generator (a fresh one when omitted)
        three_pile_probability: Chance of a three-pile opening
        min_count: Smallest pile count
        max_count: Largest pile count

    Returns:
        State: The opening position
    """
    rng = rng if rng is not None else np.random.default_rng()
    num_piles = 3 if rng.random() < three_pile_probability else 4
    counts = rng.integers(min_count, max_count + 1, size=num_piles)
    return tuple(int(c) for c in counts)


def valid_actions(state: Sequence[int]) -> List[NimAction]:
    """All legal moves, ordered by pile then by count."""
    return [
        NimAction(pile_index, count)
        for pile_index, pile in enumerate(state)
        for count in range(1, pile + 1)
    ]


def is_legal(state: Sequence[int], action: NimAction) -> bool:
    pile_index, count = action
    return 0 <= pile_index < len(state) and 1 <= count <= state[pile_index]


def apply_action(state: Sequence[int], action: NimAction) -> State:
    """
    Return the position reached by playing ``action``. The input is not modified.

    Raises:
        InvalidActionError: If the pile index is out of range or the count
            is outside ``[1, state[pile_index]]``
    """
    pile_index, count = action
    if not 0 <= pile_index < len(state):
        raise InvalidActionError(state, action, f"pile index must be in [0, {len(state) - 1}]")
    if not 1 <= count <= state[pile_index]:
        raise InvalidActionError(state, action, f"count must be in [1, {state[pile_index]}]")

    piles = list(state)
    piles[pile_index] -= count
    return tuple(piles)


def is_terminal(state: Sequence[int]) -> bool:
    return all(pile == 0 for pile in state)


def random_action(state: Sequence[int], rng: Optional[np.random.Generator] = None) -> NimAction:
    """
    Pick a legal move uniformly at random.

    Raises:
        IllegalStateError: If the position has no legal moves
    """
    actions = valid_actions(state)
    if not actions:
        raise IllegalStateError(f"No legal moves from terminal state {list(state)}")
    rng = rng if rng is not None else np.random.default_rng()
    return actions[int(rng.integers(len(actions)))]


def nim_sum(state: Sequence[int]) -> int:
    return reduce(xor, (int(p) for p in state), 0)
