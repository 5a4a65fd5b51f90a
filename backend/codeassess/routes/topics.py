"""Topic routes."""

from fastapi import APIRouter, Depends, HTTPException
from datetime import datetime, timezone
import uuid

from codeassess.database import db
from codeassess.deps import get_admin_user
from codeassess.models.topic import TopicCreate, TopicUpdate

router = APIRouter(tags=["topics"])


@router.get("/topics/{subject_id}")
async def get_topics(subject_id: str):
    """Get all topics for a subject"""
    return await db.topics.find({"subject_id": subject_id}, {"_id": 0}).to_list(1000)


@router.post("/topics/{subject_id}", status_code=201)
async def create_topic(subject_id: str, topic: TopicCreate, admin: dict = Depends(get_admin_user)):
    """Create a topic under a subject"""
    name = topic.name.strip()
    if not name:
        raise HTTPException(status_code=400, detail="Topic name is required")

    subject = await db.subjects.find_one({"subject_id": subject_id}, {"_id": 0, "subject_id": 1})
    if not subject:
        raise HTTPException(status_code=404, detail="Subject not found")

    now = datetime.now(timezone.utc).isoformat()
    new_topic = {
        "topic_id": f"topic_{uuid.uuid4().hex[:8]}",
        "name": name,
        "subject_id": subject_id,
        "recap": topic.recap.strip(),
        "created_at": now,
        "updated_at": now
    }
    await db.topics.insert_one(new_topic)
    new_topic.pop("_id", None)
    return new_topic


@router.put("/topics/{topic_id}")
async def update_topic(topic_id: str, update: TopicUpdate, admin: dict = Depends(get_admin_user)):
    """Update a topic's name or recap"""
    changes = {k: v.strip() for k, v in update.model_dump(exclude_none=True).items()}
    if "name" in changes and not changes["name"]:
        raise HTTPException(status_code=400, detail="Topic name is required")
    changes["updated_at"] = datetime.now(timezone.utc).isoformat()

    result = await db.topics.update_one({"topic_id": topic_id}, {"$set": changes})
    if result.matched_count == 0:
        raise HTTPException(status_code=404, detail="Topic not found")
    return await db.topics.find_one({"topic_id": topic_id}, {"_id": 0})


@router.delete("/topics/{topic_id}")
async def delete_topic(topic_id: str, admin: dict = Depends(get_admin_user)):
    """Delete a topic"""
    result = await db.topics.delete_one({"topic_id": topic_id})
    if result.deleted_count == 0:
        raise HTTPException(status_code=404, detail="Topic not found")
    return {"message": "Topic deleted successfully"}
