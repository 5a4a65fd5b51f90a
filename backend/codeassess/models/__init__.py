"""Pydantic models for CodeAssess application"""

from .subject import Subject, SubjectCreate, SubjectUpdate
from .topic import Topic, TopicCreate, TopicUpdate
from .problem import Problem, ProblemCreate, ProblemUpdate
from .recap import Recap, RecapRequest
from .assessment import (
    AssessmentStartRequest,
    AssessmentProblem,
    AssessmentAnswer,
    AssessmentPayload,
    EstimatedTime,
)
from .admin import AdminLoginRequest
from .ai import GenerateProblemsRequest, GradeSubmissionRequest
from .code_run import CodeRunRequest
