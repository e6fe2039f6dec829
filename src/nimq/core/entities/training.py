from pydantic import BaseModel, Field


class TrainingStats(BaseModel):
    episodes: int = Field(0, description="Episodes completed")
    updates: int = Field(0, description="TD updates applied")
    elapsed_seconds: float = 0.0
    cancelled: bool = False
    table_size: int = Field(0, description="State-action pairs in the table after training")


class MatchReport(BaseModel):
    games: int
    wins: int
    losses: int

    @property
    def win_rate(self) -> float:
        return self.wins / self.games if self.games else 0.0
