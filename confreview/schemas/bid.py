import uuid
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict


class BidCreate(BaseModel):
    submission_id: uuid.UUID
    confidence: int


class BidStatusUpdate(BaseModel):
    status: Literal["pending", "accepted", "rejected"]


class BidRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    conference_id: uuid.UUID
    submission_id: uuid.UUID
    reviewer_id: uuid.UUID
    confidence: int
    status: str
    created_at: datetime
