from .minimax import best_move, calculate_winner, determine_ai_move, minimax, random_move

__all__ = ["best_move", "calculate_winner", "determine_ai_move", "minimax", "random_move"]
