"""Problem routes."""

from fastapi import APIRouter, Depends, HTTPException
from datetime import datetime, timezone
import uuid

from codeassess.database import db
from codeassess.deps import get_admin_user
from codeassess.models.problem import ProblemCreate, ProblemUpdate

router = APIRouter(tags=["problems"])


@router.get("/problems/{subject_id}/{topic_id}")
async def get_problems(subject_id: str, topic_id: str):
    """Get all problems for a subject and topic"""
    return await db.problems.find(
        {"subject_id": subject_id, "topic_id": topic_id},
        {"_id": 0}
    ).to_list(1000)


@router.get("/problems/{problem_id}")
async def get_problem(problem_id: str):
    """Get a specific problem"""
    problem = await db.problems.find_one({"problem_id": problem_id}, {"_id": 0})
    if not problem:
        raise HTTPException(status_code=404, detail="Problem not found")
    return problem


@router.post("/problems/{subject_id}/{topic_id}", status_code=201)
async def create_problem(
    subject_id: str,
    topic_id: str,
    problem: ProblemCreate,
    admin: dict = Depends(get_admin_user)
):
    """Create a problem under a topic"""
    title = problem.title.strip()
    if not title:
        raise HTTPException(status_code=400, detail="Problem title is required")

    topic = await db.topics.find_one(
        {"topic_id": topic_id, "subject_id": subject_id},
        {"_id": 0, "topic_id": 1}
    )
    if not topic:
        raise HTTPException(status_code=404, detail="Topic not found for this subject")

    now = datetime.now(timezone.utc).isoformat()
    new_problem = {
        "problem_id": f"prob_{uuid.uuid4().hex[:10]}",
        "title": title,
        "description": problem.description,
        "difficulty": problem.difficulty,
        "languages": list(problem.languages),
        "subject_id": subject_id,
        "topic_id": topic_id,
        "created_at": now,
        "updated_at": now
    }
    await db.problems.insert_one(new_problem)
    new_problem.pop("_id", None)
    return new_problem


@router.put("/problems/{problem_id}")
async def update_problem(problem_id: str, update: ProblemUpdate, admin: dict = Depends(get_admin_user)):
    """Update a problem (partial)"""
    changes = update.model_dump(exclude_none=True)
    if "title" in changes:
        changes["title"] = changes["title"].strip()
        if not changes["title"]:
            raise HTTPException(status_code=400, detail="Problem title is required")
    changes["updated_at"] = datetime.now(timezone.utc).isoformat()

    result = await db.problems.update_one({"problem_id": problem_id}, {"$set": changes})
    if result.matched_count == 0:
        raise HTTPException(status_code=404, detail="Problem not found")
    return await db.problems.find_one({"problem_id": problem_id}, {"_id": 0})


@router.delete("/problems/{problem_id}")
async def delete_problem(problem_id: str, admin: dict = Depends(get_admin_user)):
    """Delete a problem"""
    result = await db.problems.delete_one({"problem_id": problem_id})
    if result.deleted_count == 0:
        raise HTTPException(status_code=404, detail="Problem not found")
    return {"message": "Problem deleted successfully"}
