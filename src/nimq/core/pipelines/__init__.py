from .training import QLearningTrainer, ensure_model_ready

__all__ = ["QLearningTrainer", "ensure_model_ready"]
