from .model_ready import ensure_model_ready
from .trainer import LOSS_REWARD, QLearningTrainer

__all__ = ["QLearningTrainer", "ensure_model_ready", "LOSS_REWARD"]
