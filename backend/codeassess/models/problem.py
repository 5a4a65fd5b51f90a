"""Problem-related Pydantic models"""

from pydantic import BaseModel, Field, ConfigDict
from typing import Optional, List, Literal
from datetime import datetime, timezone

Difficulty = Literal["easy", "medium", "hard"]
Language = Literal["HTML", "JavaScript", "Python", "C++", "SQL", "NoSQL"]


class Problem(BaseModel):
    model_config = ConfigDict(extra="ignore")
    problem_id: str
    title: str
    description: str
    subject_id: str
    topic_id: str
    difficulty: Difficulty = "easy"
    languages: List[Language] = []
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class ProblemCreate(BaseModel):
    title: str = Field(..., min_length=1)
    description: str
    difficulty: Difficulty = "easy"
    languages: List[Language] = []


class ProblemUpdate(BaseModel):
    """Partial update - only supplied fields are written"""
    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    difficulty: Optional[Difficulty] = None
    languages: Optional[List[Language]] = None
