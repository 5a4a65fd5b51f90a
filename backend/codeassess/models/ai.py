"""AI generation and grading request models"""

from pydantic import BaseModel, Field
from typing import Optional, Dict, Any


class GenerateProblemsRequest(BaseModel):
    subject: Optional[str] = None
    topic: Optional[str] = None
    count: int = Field(5, ge=1, le=20)


class GradeSubmissionRequest(BaseModel):
    problem: Optional[Dict[str, Any]] = None
    code: Optional[str] = None
    language: Optional[str] = None
