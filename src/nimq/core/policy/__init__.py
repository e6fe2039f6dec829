from .difficulty import MEDIUM_POLICY_RATE, DifficultyAI, select_ai_move
from .move_selection import choose_action

__all__ = ["choose_action", "select_ai_move", "DifficultyAI", "MEDIUM_POLICY_RATE"]
