"""History ledger response schema."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class HistoryEntryResponse(BaseModel):
    """One completed analysis as returned to its owner."""

    id: int
    user_id: int
    type: str
    docs: str
    score: str
    details: str | None
    verdict: str | None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
