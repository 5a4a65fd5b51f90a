"""Assessment-related Pydantic models"""

from pydantic import BaseModel, Field
from typing import Optional, List, Dict, Any

# Fields the client must send back when ending or exporting an assessment
REQUIRED_ASSESSMENT_FIELDS = ["start_time", "end_time", "duration", "problems", "answers"]


class AssessmentStartRequest(BaseModel):
    subject_ids: List[str] = []
    topic_ids: List[str] = []
    duration: float = Field(..., gt=0, allow_inf_nan=False, description="Duration in hours")


class EstimatedTime(BaseModel):
    min: int
    max: int


class AssessmentProblem(BaseModel):
    """Problem as handed to the test-taker"""
    problem_id: str
    title: str
    description: str
    languages: List[str] = []
    difficulty: str
    estimated_time: EstimatedTime


class AssessmentAnswer(BaseModel):
    problem_id: str
    code: str = ""
    language: str = ""
    time_spent: int = 0
    has_attempted: bool = False
    has_run: bool = False


class AssessmentPayload(BaseModel):
    """Body of /assessment/end and /assessment/download"""
    assessment_data: Optional[Dict[str, Any]] = None
