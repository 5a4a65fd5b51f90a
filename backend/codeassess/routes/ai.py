"""AI routes - problem generation and submission grading."""

from fastapi import APIRouter, HTTPException

from codeassess.config import logger
from codeassess.models.ai import GenerateProblemsRequest, GradeSubmissionRequest
from codeassess.services.ai_service import generate_problems, grade_submission, AIServiceError

router = APIRouter(prefix="/ai", tags=["ai"])


@router.post("/generate-problems")
async def generate_problems_route(request: GenerateProblemsRequest):
    """Draft new problems for a subject/topic with Gemini"""
    if not request.subject or not request.topic:
        raise HTTPException(status_code=400, detail="Subject and topic are required")

    try:
        problems = await generate_problems(request.subject, request.topic, request.count)
    except AIServiceError as e:
        logger.error(f"Error in generate-problems: {e}")
        raise HTTPException(status_code=500, detail=f"Failed to generate problems: {e}")

    return {"message": "Problems generated successfully", "problems": problems}


@router.post("/grade-submission")
async def grade_submission_route(request: GradeSubmissionRequest):
    """Grade a single code submission with Gemini"""
    if not request.problem or not request.code or not request.language:
        raise HTTPException(status_code=400, detail="Problem, code, and language are required")

    try:
        grading = await grade_submission(request.problem, request.code, request.language)
    except AIServiceError as e:
        logger.error(f"Error in grade-submission: {e}")
        raise HTTPException(status_code=500, detail=f"Failed to grade submission: {e}")

    return {"message": "Submission graded successfully", "grading": grading}
