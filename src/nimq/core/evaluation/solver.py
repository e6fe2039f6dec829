"""
Exact misère Nim solver for small positions.

Used as ground truth when checking what the learned policy plays; the agent
itself never consults it.
"""

from functools import lru_cache
from typing import List, Sequence, Tuple

from nimq.core.entities.nim import NimAction
from nimq.core.rules.nim_rules import apply_action, is_terminal, valid_actions


@lru_cache(maxsize=None)
def _solve(piles: Tuple[int, ...]) -> bool:
    if is_terminal(piles):
        # The opponent just emptied the board and lost
        return True
    for action in valid_actions(piles):
        next_piles = tuple(sorted(apply_action(piles, action)))
        if not _solve(next_piles):
            return True
    return False


def is_winning_position(state: Sequence[int]) -> bool:
    """True if the player to move wins with perfect play."""
    return _solve(tuple(sorted(int(p) for p in state)))


def winning_moves(state: Sequence[int]) -> List[NimAction]:
    """Moves that leave the opponent in a lost position, in ``valid_actions`` order."""
    return [
        action
        for action in valid_actions(state)
        if not is_winning_position(apply_action(state, action))
    ]
