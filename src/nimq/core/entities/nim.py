from enum import Enum
from typing import Iterable, NamedTuple, Tuple

# Pile counts, one slot per pile. Pile positions never change during a game.
State = Tuple[int, ...]


class NimAction(NamedTuple):
    """Remove ``count`` objects from pile ``pile_index``."""

    pile_index: int
    count: int


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


def as_state(piles: Iterable[int]) -> State:
    """
    Normalise any sequence of pile counts into an immutable State.

    Args:
        piles: Iterable of non-negative integers

    Returns:
        State: Tuple of ints

    Raises:
        ValueError: If a pile count is negative
    """
    state = tuple(int(p) for p in piles)
    if any(p < 0 for p in state):
        raise ValueError(f"Pile counts must be non-negative, got {list(state)}")
    return state
