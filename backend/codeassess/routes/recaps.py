"""Topic recap routes."""

from fastapi import APIRouter, HTTPException

from codeassess.database import db
from codeassess.config import logger
from codeassess.models.recap import RecapRequest

router = APIRouter(tags=["recaps"])


@router.post("/recaps")
@router.post("/recap", include_in_schema=False)
async def get_recaps(request: RecapRequest):
    """Recaps for the requested topics, preferring a dedicated recap document"""
    if not request.topic_ids:
        raise HTTPException(status_code=400, detail="topic_ids are required.")

    try:
        topics = await db.topics.find(
            {"topic_id": {"$in": request.topic_ids}},
            {"_id": 0}
        ).to_list(len(request.topic_ids))
        recaps = await db.recaps.find(
            {"topic_id": {"$in": request.topic_ids}},
            {"_id": 0}
        ).to_list(1000)
    except Exception as e:
        logger.error(f"Recap fetch error: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to fetch recaps.")

    topic_map = {t["topic_id"]: t for t in topics}
    recap_map = {r["topic_id"]: r for r in recaps}

    result = []
    for topic_id in request.topic_ids:
        topic = topic_map.get(topic_id)
        if not topic:
            continue
        recap = recap_map.get(topic_id)
        result.append({
            "topic_id": topic_id,
            "name": topic["name"],
            "recap": recap["recap"] if recap else topic.get("recap", "")
        })

    return {"recaps": result}
