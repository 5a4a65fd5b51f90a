"""Topic-related Pydantic models"""

from pydantic import BaseModel, Field, ConfigDict
from typing import Optional
from datetime import datetime, timezone


class Topic(BaseModel):
    model_config = ConfigDict(extra="ignore")
    topic_id: str
    name: str
    subject_id: str
    recap: str = ""
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class TopicCreate(BaseModel):
    name: str = Field(..., min_length=1)
    recap: str = ""


class TopicUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    recap: Optional[str] = None
