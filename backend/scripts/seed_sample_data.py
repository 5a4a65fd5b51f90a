#!/usr/bin/env python3
"""
Seed a sample catalogue (subjects -> topics -> problems).

Usage:
    MONGO_URL=... DB_NAME=... python scripts/seed_sample_data.py [--reset]
"""

import argparse
import os
import sys
import uuid
from datetime import datetime, timezone
from typing import List

from pymongo import MongoClient
from pydantic import BaseModel

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from codeassess.models.problem import ProblemCreate


class SeedTopic(BaseModel):
    name: str
    recap: str
    problems: List[ProblemCreate]


class SeedSubject(BaseModel):
    name: str
    topics: List[SeedTopic]


SAMPLE_CATALOGUE = [
    SeedSubject(name="JavaScript", topics=[
        SeedTopic(
            name="Arrays",
            recap="Arrays are ordered, zero-indexed lists. Prefer map/filter/reduce over manual loops when transforming data.",
            problems=[
                ProblemCreate(title="Sum of Array", difficulty="easy", languages=["JavaScript"],
                              description="Write a function `sum(nums)` that returns the sum of all numbers in the array. Return 0 for an empty array."),
                ProblemCreate(title="Remove Duplicates", difficulty="medium", languages=["JavaScript"],
                              description="Write `unique(items)` returning a new array with duplicates removed, keeping the first occurrence order."),
                ProblemCreate(title="Rotate Matrix", difficulty="hard", languages=["JavaScript"],
                              description="Rotate an N x N matrix 90 degrees clockwise in place."),
            ],
        ),
        SeedTopic(
            name="Objects",
            recap="Objects map string keys to values. Use Object.keys/entries to iterate and the spread operator to copy.",
            problems=[
                ProblemCreate(title="Count Characters", difficulty="easy", languages=["JavaScript"],
                              description="Return an object mapping each character of a string to the number of times it appears."),
                ProblemCreate(title="Deep Merge", difficulty="hard", languages=["JavaScript"],
                              description="Implement `deepMerge(a, b)` that recursively merges plain objects; values from `b` win on conflicts."),
            ],
        ),
        SeedTopic(
            name="HOFs",
            recap="Higher-order functions take or return functions: map, filter, reduce, and your own wrappers like debounce.",
            problems=[
                ProblemCreate(title="Compose Functions", difficulty="medium", languages=["JavaScript"],
                              description="Write `compose(...fns)` returning a function that applies `fns` right to left."),
                ProblemCreate(title="Debounce", difficulty="hard", languages=["JavaScript"],
                              description="Implement `debounce(fn, ms)` that delays calls until `ms` milliseconds have passed without a new call."),
            ],
        ),
    ]),
    SeedSubject(name="Python", topics=[
        SeedTopic(
            name="Strings",
            recap="Strings are immutable sequences. Slicing, join and f-strings cover most formatting needs.",
            problems=[
                ProblemCreate(title="Reverse Words", difficulty="easy", languages=["Python"],
                              description="Return the words of a sentence in reverse order, separated by single spaces."),
                ProblemCreate(title="Valid Anagram", difficulty="easy", languages=["Python"],
                              description="Return True when two strings are anagrams of each other, ignoring case and spaces."),
                ProblemCreate(title="Longest Palindromic Substring", difficulty="hard", languages=["Python"],
                              description="Return the longest palindromic substring of `s`."),
            ],
        ),
        SeedTopic(
            name="Searching",
            recap="Linear search is O(n); binary search is O(log n) but needs sorted input.",
            problems=[
                ProblemCreate(title="Binary Search", difficulty="medium", languages=["Python"],
                              description="Return the index of `target` in the sorted list `nums`, or -1 if absent."),
                ProblemCreate(title="First Bad Version", difficulty="medium", languages=["Python"],
                              description="Given `is_bad(v)`, find the first bad version among 1..n with as few calls as possible."),
            ],
        ),
        SeedTopic(
            name="Dictionaries",
            recap="Dictionaries give O(1) average lookups. collections.Counter and defaultdict cover common counting patterns.",
            problems=[
                ProblemCreate(title="Two Sum", difficulty="easy", languages=["Python"],
                              description="Return indices of the two numbers in `nums` that add up to `target`."),
                ProblemCreate(title="Group Anagrams", difficulty="medium", languages=["Python"],
                              description="Group a list of words into lists of anagrams."),
                ProblemCreate(title="LRU Cache", difficulty="hard", languages=["Python"],
                              description="Implement an LRU cache class with O(1) `get` and `put`."),
            ],
        ),
    ]),
]


def seed(db, reset: bool = False):
    if reset:
        for name in ("subjects", "topics", "problems", "recaps"):
            db[name].delete_many({})
        print("Cleared subjects, topics, problems and recaps")

    counts = {"subjects": 0, "topics": 0, "problems": 0}
    now = datetime.now(timezone.utc).isoformat()

    for subject in SAMPLE_CATALOGUE:
        existing = db.subjects.find_one({"name": subject.name})
        subject_id = existing["subject_id"] if existing else f"subj_{uuid.uuid4().hex[:8]}"
        if not existing:
            db.subjects.insert_one({"subject_id": subject_id, "name": subject.name,
                                    "created_at": now, "updated_at": now})
            counts["subjects"] += 1

        for topic in subject.topics:
            existing_topic = db.topics.find_one({"name": topic.name, "subject_id": subject_id})
            topic_id = existing_topic["topic_id"] if existing_topic else f"topic_{uuid.uuid4().hex[:8]}"
            if not existing_topic:
                db.topics.insert_one({"topic_id": topic_id, "name": topic.name, "subject_id": subject_id,
                                      "recap": topic.recap, "created_at": now, "updated_at": now})
                counts["topics"] += 1

            for problem in topic.problems:
                if db.problems.find_one({"title": problem.title, "topic_id": topic_id}):
                    continue
                db.problems.insert_one({
                    "problem_id": f"prob_{uuid.uuid4().hex[:10]}",
                    **problem.model_dump(),
                    "subject_id": subject_id,
                    "topic_id": topic_id,
                    "created_at": now,
                    "updated_at": now,
                })
                counts["problems"] += 1

    return counts


def main():
    parser = argparse.ArgumentParser(description="Seed the sample problem catalogue")
    parser.add_argument("--reset", action="store_true", help="delete existing catalogue data first")
    args = parser.parse_args()

    mongo_url = os.environ.get('MONGO_URL', 'mongodb://localhost:27017')
    db_name = os.environ.get('DB_NAME', 'codeassess')

    client = MongoClient(mongo_url)
    db = client[db_name]
    print(f"Connected to database: {db_name}")

    counts = seed(db, reset=args.reset)
    print(f"Inserted {counts['subjects']} subjects, {counts['topics']} topics, {counts['problems']} problems")
    client.close()


if __name__ == "__main__":
    main()
