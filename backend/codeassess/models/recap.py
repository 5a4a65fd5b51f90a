"""Recap-related Pydantic models"""

from pydantic import BaseModel, Field, ConfigDict
from typing import List
from datetime import datetime, timezone


class Recap(BaseModel):
    model_config = ConfigDict(extra="ignore")
    recap_id: str
    subject_id: str
    topic_id: str
    recap: str
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class RecapRequest(BaseModel):
    topic_ids: List[str] = []
