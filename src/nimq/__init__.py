# src/nimq/__init__.py

# --- Version of the nimq package ---

__version__ = "0.1.0"


# --- Rules ---
from .core.entities import Difficulty, NimAction, State
from .core.exceptions import (
    IllegalStateError,
    InvalidActionError,
    NimqError,
    QTableFormatError,
    SessionAbortedError,
)
from .core.rules import apply_action, generate_initial_state, is_terminal, valid_actions

# --- Q-Learning ---
from .core.q_table import QTableManager, QTableRepository
from .core.pipelines import QLearningTrainer, ensure_model_ready

# --- Move selection ---
from .core.policy import DifficultyAI, choose_action, select_ai_move

# --- Session ---
from .session import NimGameSession, SessionPhase


# --- Convenience function to get the package version ---
def get_version():
    return __version__


import logging

logging.getLogger(__name__).addHandler(logging.NullHandler())
