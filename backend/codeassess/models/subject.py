"""Subject-related Pydantic models"""

from pydantic import BaseModel, Field, ConfigDict
from typing import Optional
from datetime import datetime, timezone


class Subject(BaseModel):
    model_config = ConfigDict(extra="ignore")
    subject_id: str
    name: str
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class SubjectCreate(BaseModel):
    name: str = Field(..., min_length=1)


class SubjectUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
