from .nim import Difficulty, NimAction, State, as_state
from .q_table import QTableDocument, QTableMetadata
from .session import GameOutcome, MoveRecord
from .settings import AISettings, NimqSettings, QLearningSettings, RulesSettings, StorageSettings
from .training import MatchReport, TrainingStats

__all__ = [
    "Difficulty",
    "NimAction",
    "State",
    "as_state",
    "QTableDocument",
    "QTableMetadata",
    "GameOutcome",
    "MoveRecord",
    "AISettings",
    "NimqSettings",
    "QLearningSettings",
    "RulesSettings",
    "StorageSettings",
    "MatchReport",
    "TrainingStats",
]
