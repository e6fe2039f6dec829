from datetime import datetime, timezone
from typing import Dict, Optional

from pydantic import BaseModel, Field, RootModel, StrictFloat


class QTableDocument(RootModel[Dict[str, Dict[str, StrictFloat]]]):
    """
    Portable Q-table layout: ``{"[3,4,5]": {"1,2": -0.1}}``.

    Values must be JSON numbers; quoted numbers and booleans are rejected.
    """


class QTableMetadata(BaseModel):
    version: str = Field("1.0", description="Q-table version identifier")
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the Q-table was saved",
    )
    episodes: int = Field(0, ge=0, description="Training episodes behind this table")
    alpha: float = Field(..., description="Learning rate used for training")
    gamma: float = Field(..., description="Discount factor used for training")
    epsilon: Optional[float] = Field(None, description="Exploration rate used for training")
    entries: int = Field(0, ge=0, description="Number of stored state-action pairs")
