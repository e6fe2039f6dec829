from typing import List, Literal, Optional, Tuple

from pydantic import BaseModel, Field

from nimq.core.entities.nim import Difficulty


class MoveRecord(BaseModel):
    player: Literal[1, 2]
    pile_index: int
    count: int
    piles_after: Tuple[int, ...]


class GameOutcome(BaseModel):
    winner: Literal[1, 2]
    loser: Literal[1, 2] = Field(..., description="Player whose move emptied the last pile")
    initial_piles: Tuple[int, ...]
    moves: List[MoveRecord] = Field(default_factory=list)
    multiplayer: bool = False
    difficulty: Optional[Difficulty] = None
