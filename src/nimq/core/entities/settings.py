from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from nimq.core.entities.nim import Difficulty


class QLearningSettings(BaseModel):
    alpha: float = Field(0.1, gt=0.0, le=1.0, description="Learning rate")
    gamma: float = Field(0.9, ge=0.0, le=1.0, description="Discount factor")
    epsilon: float = Field(0.1, ge=0.0, le=1.0, description="Exploration rate while training")
    episodes: int = Field(10000, ge=0, description="Self-play episodes per training run")
    log_every: int = Field(1000, gt=0, description="Progress log interval in episodes")
    start_piles: Optional[List[int]] = Field(
        None, description="Fixed opening for every episode; random openings when null"
    )

    @field_validator("start_piles")
    @classmethod
    def _check_start_piles(cls, value):
        if value is None:
            return value
        if not value or any(p < 0 for p in value) or sum(value) == 0:
            raise ValueError("start_piles must hold non-negative counts with at least one object")
        return value


class RulesSettings(BaseModel):
    three_pile_probability: float = Field(0.25, ge=0.0, le=1.0)
    min_count: int = Field(1, ge=1)
    max_count: int = Field(10, ge=1)

    @field_validator("max_count")
    @classmethod
    def _check_range(cls, value, info):
        min_count = info.data.get("min_count", 1)
        if value < min_count:
            raise ValueError(f"max_count ({value}) must be >= min_count ({min_count})")
        return value


class AISettings(BaseModel):
    difficulty: Difficulty = Difficulty.HARD
    policy_rate: float = Field(0.7, ge=0.0, le=1.0, description="Policy share for medium difficulty")


class StorageSettings(BaseModel):
    path: str = ".nimq/storage.json"
    key: str = "nim-qtable"


class NimqSettings(BaseModel):
    q_learning: QLearningSettings = Field(default_factory=QLearningSettings)
    rules: RulesSettings = Field(default_factory=RulesSettings)
    ai: AISettings = Field(default_factory=AISettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)
    seed: Optional[int] = None
