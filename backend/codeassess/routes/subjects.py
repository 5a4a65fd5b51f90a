"""Subject routes."""

from fastapi import APIRouter, Depends, HTTPException
from datetime import datetime, timezone
import re
import uuid

from codeassess.database import db
from codeassess.deps import get_admin_user
from codeassess.models.subject import SubjectCreate, SubjectUpdate

router = APIRouter(tags=["subjects"])


async def _name_taken(name: str, exclude_subject_id: str = None) -> bool:
    query = {"name": {"$regex": f"^{re.escape(name)}$", "$options": "i"}}
    if exclude_subject_id:
        query["subject_id"] = {"$ne": exclude_subject_id}
    return await db.subjects.find_one(query, {"_id": 0, "subject_id": 1}) is not None


@router.get("/subjects")
async def get_subjects():
    """Get all subjects"""
    return await db.subjects.find({}, {"_id": 0}).to_list(1000)


@router.get("/subjects/admin")
async def get_subjects_admin(admin: dict = Depends(get_admin_user)):
    """Get all subjects (admin view)"""
    return await db.subjects.find({}, {"_id": 0}).to_list(1000)


@router.post("/subjects", status_code=201)
async def create_subject(subject: SubjectCreate, admin: dict = Depends(get_admin_user)):
    """Create a new subject"""
    name = subject.name.strip()
    if not name:
        raise HTTPException(status_code=400, detail="Subject name is required")
    if await _name_taken(name):
        raise HTTPException(status_code=400, detail="Subject already exists")

    now = datetime.now(timezone.utc).isoformat()
    new_subject = {
        "subject_id": f"subj_{uuid.uuid4().hex[:8]}",
        "name": name,
        "created_at": now,
        "updated_at": now
    }
    await db.subjects.insert_one(new_subject)
    new_subject.pop("_id", None)
    return new_subject


@router.put("/subjects/{subject_id}")
async def update_subject(subject_id: str, update: SubjectUpdate, admin: dict = Depends(get_admin_user)):
    """Rename a subject"""
    changes = update.model_dump(exclude_none=True)
    if "name" in changes:
        changes["name"] = changes["name"].strip()
        if not changes["name"]:
            raise HTTPException(status_code=400, detail="Subject name is required")
        if await _name_taken(changes["name"], exclude_subject_id=subject_id):
            raise HTTPException(status_code=400, detail="Subject already exists")
    changes["updated_at"] = datetime.now(timezone.utc).isoformat()

    result = await db.subjects.update_one({"subject_id": subject_id}, {"$set": changes})
    if result.matched_count == 0:
        raise HTTPException(status_code=404, detail="Subject not found")
    return await db.subjects.find_one({"subject_id": subject_id}, {"_id": 0})


@router.delete("/subjects/{subject_id}")
async def delete_subject(subject_id: str, admin: dict = Depends(get_admin_user)):
    """Delete a subject"""
    result = await db.subjects.delete_one({"subject_id": subject_id})
    if result.deleted_count == 0:
        raise HTTPException(status_code=404, detail="Subject not found")
    return {"message": "Subject deleted successfully"}
