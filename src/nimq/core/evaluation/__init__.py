from .arena import evaluate_against_random, play_match, policy_accuracy
from .solver import is_winning_position, winning_moves

__all__ = [
    "evaluate_against_random",
    "play_match",
    "policy_accuracy",
    "is_winning_position",
    "winning_moves",
]
