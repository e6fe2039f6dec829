"""
Tic-Tac-Toe opponent.

The board is small enough for exact minimax, so unlike Nim nothing is learned.
The computer plays ``O``. Scores are from O's side: ``10 - depth`` for an O
win, ``depth - 10`` for an X win, 0 for a draw, so quicker wins and slower
losses are preferred.
"""

import math
from typing import List, Literal, Optional, Sequence, Union

import numpy as np

from nimq.core.entities.nim import Difficulty
from nimq.core.exceptions import IllegalStateError
from nimq.core.policy.difficulty import MEDIUM_POLICY_RATE

Player = Literal["X", "O"]
Cell = Optional[str]

WIN_SCORE = 10

LINES = (
    (0, 1, 2), (3, 4, 5), (6, 7, 8),  # rows
    (0, 3, 6), (1, 4, 7), (2, 5, 8),  # columns
    (0, 4, 8), (2, 4, 6),             # diagonals
)


def calculate_winner(board: Sequence[Cell]) -> Optional[str]:
    """Return ``"X"``, ``"O"``, ``"draw"`` or None while the game is still open."""
    for a, b, c in LINES:
        if board[a] and board[a] == board[b] == board[c]:
            return board[a]
    if all(cell is not None for cell in board):
        return "draw"
    return None


def empty_squares(board: Sequence[Cell]) -> List[int]:
    return [i for i, cell in enumerate(board) if cell is None]


def minimax(board: List[Cell], depth: int, is_maximizing: bool) -> int:
    winner = calculate_winner(board)
    if winner == "O":
        return WIN_SCORE - depth
    if winner == "X":
        return depth - WIN_SCORE
    if winner == "draw":
        return 0

    if is_maximizing:
        best = -math.inf
        for i in empty_squares(board):
            board[i] = "O"
            best = max(best, minimax(board, depth + 1, False))
            board[i] = None
    else:
        best = math.inf
        for i in empty_squares(board):
            board[i] = "X"
            best = min(best, minimax(board, depth + 1, True))
            board[i] = None
    return best


def _check_playable(board: Sequence[Cell]) -> List[Cell]:
    if len(board) != 9:
        raise ValueError(f"Board must have 9 squares, got {len(board)}")
    if calculate_winner(board) is not None:
        raise IllegalStateError("No move available: the game is already over")
    return list(board)


def best_move(board: Sequence[Cell], player: Player = "O") -> int:
    """
    Exact minimax move for ``player``; ties go to the lowest square index.

    Raises:
        IllegalStateError: If the game is already decided
    """
    work = _check_playable(board)
    maximizing = player == "O"
    best_score = -math.inf if maximizing else math.inf
    move = -1

    for i in empty_squares(work):
        work[i] = player
        score = minimax(work, 0, not maximizing)
        work[i] = None

        if (maximizing and score > best_score) or (not maximizing and score < best_score):
            best_score = score
            move = i
    return move


def random_move(board: Sequence[Cell], rng: Optional[np.random.Generator] = None) -> int:
    squares = empty_squares(_check_playable(board))
    rng = rng if rng is not None else np.random.default_rng()
    return squares[int(rng.integers(len(squares)))]


def determine_ai_move(
    board: Sequence[Cell],
    difficulty: Union[Difficulty, str],
    rng: Optional[np.random.Generator] = None,
    policy_rate: float = MEDIUM_POLICY_RATE,
) -> int:
    """Square index for the computer (``O``) at the given difficulty."""
    difficulty = Difficulty(difficulty)
    rng = rng if rng is not None else np.random.default_rng()

    if difficulty is Difficulty.HARD:
        return best_move(board, "O")
    if difficulty is Difficulty.MEDIUM and rng.random() < policy_rate:
        return best_move(board, "O")
    return random_move(board, rng)
