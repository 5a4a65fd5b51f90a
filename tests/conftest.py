import copy
import re
import uuid

import pytest
from fastapi.testclient import TestClient

from codeassess.utils.auth import create_access_token


def _matches(doc, query):
    for key, cond in query.items():
        value = doc.get(key)
        if isinstance(cond, dict):
            for op, arg in cond.items():
                if op == "$in":
                    if value not in arg:
                        return False
                elif op == "$ne":
                    if value == arg:
                        return False
                elif op == "$regex":
                    flags = re.IGNORECASE if "i" in cond.get("$options", "") else 0
                    if not isinstance(value, str) or not re.search(arg, value, flags):
                        return False
                elif op == "$options":
                    continue
                else:
                    raise NotImplementedError(op)
        elif value != cond:
            return False
    return True


def _project(doc, projection):
    doc = copy.deepcopy(doc)
    if not projection:
        return doc
    included = [k for k, v in projection.items() if v and k != "_id"]
    if included:
        doc = {k: doc[k] for k in included + ["_id"] if k in doc}
    if projection.get("_id") == 0:
        doc.pop("_id", None)
    return doc


class _Result:
    def __init__(self, **kwargs):
        self.__dict__.update(kwargs)


class FakeCursor:
    def __init__(self, docs):
        self._docs = docs

    async def to_list(self, length=None):
        return self._docs if length is None else self._docs[:length]


class FakeCollection:
    """Just enough of Motor's collection API for the routes under test."""

    def __init__(self):
        self.docs = []

    def find(self, query=None, projection=None):
        return FakeCursor([_project(d, projection) for d in self.docs if _matches(d, query or {})])

    async def find_one(self, query=None, projection=None):
        for d in self.docs:
            if _matches(d, query or {}):
                return _project(d, projection)
        return None

    async def insert_one(self, doc):
        doc["_id"] = uuid.uuid4().hex
        self.docs.append(copy.deepcopy(doc))
        return _Result(inserted_id=doc["_id"])

    async def update_one(self, query, update):
        for d in self.docs:
            if _matches(d, query):
                d.update(copy.deepcopy(update.get("$set", {})))
                return _Result(matched_count=1, modified_count=1)
        return _Result(matched_count=0, modified_count=0)

    async def delete_one(self, query):
        for i, d in enumerate(self.docs):
            if _matches(d, query):
                del self.docs[i]
                return _Result(deleted_count=1)
        return _Result(deleted_count=0)


class FakeDatabase:
    def __init__(self):
        self._collections = {}

    def __getattr__(self, name):
        if name.startswith("_"):
            raise AttributeError(name)
        return self._collections.setdefault(name, FakeCollection())

    def __getitem__(self, name):
        return getattr(self, name)


@pytest.fixture
def fake_db(monkeypatch):
    from codeassess.routes import subjects, topics, problems, recaps, assessment
    from codeassess.services import bulk_upload

    database = FakeDatabase()
    for module in (subjects, topics, problems, recaps, assessment, bulk_upload):
        monkeypatch.setattr(module, "db", database)
    return database


@pytest.fixture
def client(fake_db):
    from main import app
    return TestClient(app)


@pytest.fixture
def admin_headers():
    token = create_access_token({"sub": "admin", "role": "admin"})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture(autouse=True)
def no_rate_limit(monkeypatch):
    from codeassess.services import ai_service
    monkeypatch.setattr(ai_service.rate_limiter, "min_interval", 0)


def make_problem(problem_id, difficulty, topic_id, subject_id="subj_1", **extra):
    return {
        "problem_id": problem_id,
        "title": f"Problem {problem_id}",
        "description": f"Solve {problem_id}",
        "difficulty": difficulty,
        "topic_id": topic_id,
        "subject_id": subject_id,
        "languages": ["Python"],
        **extra,
    }
