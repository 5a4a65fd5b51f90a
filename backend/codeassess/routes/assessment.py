"""Assessment routes - start (problem allocation), end (AI grading), PDF report."""

from fastapi import APIRouter, HTTPException
from fastapi.responses import Response, PlainTextResponse
from datetime import datetime, timezone
import asyncio
import random

from codeassess.database import db
from codeassess.config import logger
from codeassess.models.assessment import (
    REQUIRED_ASSESSMENT_FIELDS,
    AssessmentStartRequest,
    AssessmentPayload,
    AssessmentProblem,
    AssessmentAnswer,
    EstimatedTime,
)
from codeassess.services.allocator import (
    DIFFICULTY_BANDS,
    allocate,
    compute_distribution,
    midpoint_minutes,
    select_problems,
    ProblemDistribution,
)
from codeassess.services.ai_service import grade_submission, AIServiceError
from codeassess.services.report import (
    build_assessment_pdf,
    build_test_pdf,
    parse_timestamp,
    report_filename,
)

router = APIRouter(prefix="/assessment", tags=["assessment"])


def _to_assessment_problem(problem: dict) -> dict:
    difficulty = problem.get("difficulty", "easy")
    return AssessmentProblem(
        problem_id=problem["problem_id"],
        title=problem.get("title", ""),
        description=problem.get("description", ""),
        languages=problem.get("languages", []),
        difficulty=difficulty,
        estimated_time=EstimatedTime(**DIFFICULTY_BANDS[difficulty]),
    ).model_dump()


def _missing_field(assessment_data: dict):
    for field in REQUIRED_ASSESSMENT_FIELDS:
        if assessment_data.get(field) in (None, ""):
            return field
    return None


@router.post("/start")
async def start_assessment(request: AssessmentStartRequest):
    """Pick problems for the requested subjects/topics to fit the duration"""
    if not request.subject_ids or not request.topic_ids:
        raise HTTPException(status_code=400, detail="Missing required fields")

    try:
        pool = await db.problems.find(
            {
                "subject_id": {"$in": request.subject_ids},
                "topic_id": {"$in": request.topic_ids},
                "difficulty": {"$in": list(DIFFICULTY_BANDS)}
            },
            {"_id": 0}
        ).to_list(None)
    except Exception as e:
        logger.error(f"Error loading problems for assessment: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Error starting assessment")

    if not pool:
        raise HTTPException(status_code=404, detail="No problems found for the selected criteria")

    allocation = allocate(request.duration, pool)
    logger.info(
        f"Assessment started: {request.duration}h, pool={len(pool)}, "
        f"target={allocation.distribution.model_dump()}, selected={len(allocation.selection)}"
    )

    return {
        "problems": [_to_assessment_problem(p) for p in allocation.selection],
        "duration": request.duration,
        "start_time": datetime.now(timezone.utc).isoformat(),
        "total_estimated_time": allocation.total_estimated_time,
        "distribution": allocation.distribution.model_dump()
    }


@router.post("/end")
async def end_assessment(payload: AssessmentPayload):
    """Close an assessment and AI-grade every answer"""
    assessment_data = payload.assessment_data
    if not assessment_data:
        raise HTTPException(status_code=400, detail="Assessment data is required")

    missing = _missing_field(assessment_data)
    if missing:
        raise HTTPException(status_code=400, detail=f"Missing required field: {missing}")

    try:
        start_time = parse_timestamp(assessment_data["start_time"])
        end_time = parse_timestamp(assessment_data["end_time"])
    except (TypeError, ValueError):
        raise HTTPException(status_code=400, detail="start_time and end_time must be ISO-8601 timestamps")

    completed_assessment = {
        **assessment_data,
        "total_time_spent": int((end_time - start_time).total_seconds()),
        "completed_at": datetime.now(timezone.utc).isoformat(),
        "status": "completed"
    }

    problems = assessment_data["problems"]
    if not isinstance(problems, list) or not isinstance(assessment_data["answers"], list):
        raise HTTPException(status_code=400, detail="problems and answers must be lists")
    problems_by_id = {str(p.get("problem_id")): p for p in problems if isinstance(p, dict)}
    grading_results = []
    for raw_answer in assessment_data["answers"]:
        try:
            answer = AssessmentAnswer(**raw_answer)
        except (TypeError, ValueError):
            grading_results.append({"problem_id": None, "error": "Invalid answer"})
            continue

        problem = problems_by_id.get(answer.problem_id)
        if not problem:
            grading_results.append({"problem_id": answer.problem_id, "error": "Problem not found"})
            continue

        try:
            grading = await grade_submission(problem, answer.code, answer.language)
            grading_results.append({"problem_id": answer.problem_id, "grading": grading})
        except AIServiceError as e:
            logger.warning(f"Grading failed for {answer.problem_id}: {e}")
            grading_results.append({
                "problem_id": answer.problem_id,
                "error": "Grading failed",
                "details": str(e)
            })

    return {
        "message": "Assessment completed and graded successfully",
        "assessment": completed_assessment,
        "grading_results": grading_results
    }


@router.post("/download")
async def download_assessment(payload: AssessmentPayload):
    """Render the assessment summary as a PDF attachment"""
    assessment_data = payload.assessment_data
    if not assessment_data:
        raise HTTPException(status_code=400, detail="Assessment data is required")

    try:
        pdf_bytes = await asyncio.to_thread(build_assessment_pdf, assessment_data)
    except Exception as e:
        logger.error(f"Error generating PDF: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Error generating PDF")

    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": f"attachment; filename={report_filename(assessment_data.get('end_time'))}"}
    )


@router.get("/test-download")
async def test_download():
    """Check that PDF generation works"""
    try:
        pdf_bytes = await asyncio.to_thread(build_test_pdf)
    except Exception as e:
        logger.error(f"Error generating test PDF: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Error generating test PDF")

    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": "attachment; filename=test.pdf"}
    )


# ============== SELECTION DIAGNOSTICS ==============

DIAGNOSTIC_DURATIONS = [0.5, 1, 2, 3]

MOCK_POOL = [
    {"problem_id": "mock_1", "difficulty": "easy", "topic_id": "1"},
    {"problem_id": "mock_2", "difficulty": "easy", "topic_id": "2"},
    {"problem_id": "mock_3", "difficulty": "medium", "topic_id": "3"},
    {"problem_id": "mock_4", "difficulty": "medium", "topic_id": "4"},
    {"problem_id": "mock_5", "difficulty": "hard", "topic_id": "5"},
    {"problem_id": "mock_6", "difficulty": "hard", "topic_id": "6"},
]


def run_selection_diagnostics(rng: random.Random = None) -> list:
    lines = ["Testing Problem Selection Logic:", "--------------------------------"]

    for duration in DIAGNOSTIC_DURATIONS:
        dist = compute_distribution(duration)
        total = dist.total
        estimated = sum(dist.count_for(d) * midpoint_minutes(d) for d in DIFFICULTY_BANDS)
        lines.append("")
        lines.append(f"Duration: {duration} hour(s)")
        lines.append("Calculated distribution:")
        for label, count in (("Easy", dist.easy_count), ("Medium", dist.medium_count), ("Hard", dist.hard_count)):
            lines.append(f"- {label} problems: {count} ({round(count / total * 100)}%)")
        lines.append(f"Total estimated time: {round(estimated)} minutes")
        lines.append(f"Time limit: {duration * 60:g} minutes")
        lines.append(f"Time utilization: {round(estimated / (duration * 60) * 100)}%")

    lines.append("")
    lines.append("Testing Topic Coverage:")
    picked = select_problems(
        MOCK_POOL,
        ProblemDistribution(easy_count=2, medium_count=2, hard_count=2),
        rng=rng,
    )
    for difficulty in DIFFICULTY_BANDS:
        topics = [p["topic_id"] for p in picked if p["difficulty"] == difficulty]
        lines.append(f"{difficulty.capitalize()}: {', '.join(topics)}")
    lines.append(f"Used Topics: {', '.join(sorted({p['topic_id'] for p in picked}))}")
    return lines


@router.get("/test-selection", response_class=PlainTextResponse)
async def test_selection():
    """Human-readable dump of the allocation rules for a few durations"""
    return "\n".join(run_selection_diagnostics())
