#!/usr/bin/env python3
"""
Print the easy/medium/hard problem count for every topic.
"""

import json
import os
from collections import defaultdict

from pymongo import MongoClient


def difficulty_distribution(db) -> dict:
    topic_names = {t["topic_id"]: t["name"] for t in db.topics.find({}, {"_id": 0, "topic_id": 1, "name": 1})}
    distribution = defaultdict(lambda: {"easy": 0, "medium": 0, "hard": 0})

    for problem in db.problems.find({}, {"_id": 0, "topic_id": 1, "difficulty": 1}):
        name = topic_names.get(problem.get("topic_id"), f"<missing topic {problem.get('topic_id')}>")
        difficulty = problem.get("difficulty", "easy")
        if difficulty in distribution[name]:
            distribution[name][difficulty] += 1

    return dict(distribution)


if __name__ == "__main__":
    client = MongoClient(os.environ.get('MONGO_URL', 'mongodb://localhost:27017'))
    db = client[os.environ.get('DB_NAME', 'codeassess')]
    print("Difficulty Distribution by Topic:")
    print(json.dumps(difficulty_distribution(db), indent=2))
    client.close()
