"""
CSV bulk import of subjects, topics and problems.
"""

import csv
import io
import re
import uuid
from datetime import datetime, timezone
from typing import Dict, List

from codeassess.database import db
from codeassess.config import logger

VALID_DIFFICULTIES = ("easy", "medium", "hard")

COLUMN_SUBJECT = "Subject Name"
COLUMN_TOPIC = "Topic Name"
COLUMN_RECAP = "Topic Recap"
COLUMN_TITLE = "Problem Title"
COLUMN_DESCRIPTION = "Problem Description"
COLUMN_DIFFICULTY = "Problem Difficulty"


class BulkUploadError(Exception):
    """Raised when the uploaded file cannot be read as CSV."""


def _exact_ci(value: str) -> dict:
    """Case-insensitive exact-match query for a literal string"""
    return {"$regex": f"^{re.escape(value)}$", "$options": "i"}


def _cell(row: dict, column: str) -> str:
    return (row.get(column) or "").strip()


def parse_rows(content: bytes) -> List[Dict[str, str]]:
    try:
        text = content.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise BulkUploadError("File must be UTF-8 encoded CSV") from e

    reader = csv.DictReader(io.StringIO(text), skipinitialspace=True)
    if not reader.fieldnames:
        raise BulkUploadError("CSV file has no header row")
    try:
        return [
            {(key or "").strip(): value for key, value in row.items()}
            for row in reader
        ]
    except csv.Error as e:
        raise BulkUploadError(f"Malformed CSV: {e}") from e


async def import_csv(content: bytes) -> Dict[str, List[str]]:
    """
    Create missing subjects/topics and new problems from CSV rows.

    Subjects and topics are matched case-insensitively; a problem whose title
    already exists in its topic is skipped.
    """
    rows = parse_rows(content)

    created_subjects: List[str] = []
    created_topics: List[str] = []
    created_problems: List[str] = []
    skipped: List[str] = []

    for row in rows:
        subject_name = _cell(row, COLUMN_SUBJECT)
        topic_name = _cell(row, COLUMN_TOPIC)
        topic_recap = _cell(row, COLUMN_RECAP)
        problem_title = _cell(row, COLUMN_TITLE)
        problem_description = _cell(row, COLUMN_DESCRIPTION)
        problem_difficulty = _cell(row, COLUMN_DIFFICULTY).lower()

        if not subject_name or not topic_name or not problem_title:
            skipped.append(f"Missing required fields in row: {row}")
            continue

        now = datetime.now(timezone.utc).isoformat()

        subject = await db.subjects.find_one({"name": _exact_ci(subject_name)}, {"_id": 0})
        if not subject:
            subject = {
                "subject_id": f"subj_{uuid.uuid4().hex[:8]}",
                "name": subject_name,
                "created_at": now,
                "updated_at": now
            }
            await db.subjects.insert_one(dict(subject))
            created_subjects.append(subject_name)

        topic = await db.topics.find_one(
            {"name": _exact_ci(topic_name), "subject_id": subject["subject_id"]},
            {"_id": 0}
        )
        if not topic:
            topic = {
                "topic_id": f"topic_{uuid.uuid4().hex[:8]}",
                "name": topic_name,
                "subject_id": subject["subject_id"],
                "recap": topic_recap,
                "created_at": now,
                "updated_at": now
            }
            await db.topics.insert_one(dict(topic))
            created_topics.append(f"{subject_name} > {topic_name}")
        elif topic_recap and topic.get("recap") != topic_recap:
            await db.topics.update_one(
                {"topic_id": topic["topic_id"]},
                {"$set": {"recap": topic_recap, "updated_at": now}}
            )

        existing = await db.problems.find_one(
            {"title": _exact_ci(problem_title), "topic_id": topic["topic_id"]},
            {"_id": 0, "problem_id": 1}
        )
        if existing:
            skipped.append(f"Problem already exists: {subject_name} > {topic_name} > {problem_title}")
            continue

        await db.problems.insert_one({
            "problem_id": f"prob_{uuid.uuid4().hex[:10]}",
            "title": problem_title,
            "description": problem_description,
            "difficulty": problem_difficulty if problem_difficulty in VALID_DIFFICULTIES else "easy",
            "languages": [],
            "subject_id": subject["subject_id"],
            "topic_id": topic["topic_id"],
            "created_at": now,
            "updated_at": now
        })
        created_problems.append(f"{subject_name} > {topic_name} > {problem_title}")

    logger.info(
        f"Bulk upload: {len(created_subjects)} subjects, {len(created_topics)} topics, "
        f"{len(created_problems)} problems created, {len(skipped)} rows skipped"
    )
    return {
        "created_subjects": created_subjects,
        "created_topics": created_topics,
        "created_problems": created_problems,
        "skipped": skipped
    }
