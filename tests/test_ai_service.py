import asyncio
import json

import pytest

from codeassess.services import ai_service
from codeassess.services.ai_service import (
    AIServiceError,
    RateLimiter,
    generate_problems,
    grade_submission,
    parse_json_response,
)
from codeassess.utils.validation import validate_grading, validate_problem_structure


class _FakeChat:
    def __init__(self, reply):
        self.reply = reply
        self.messages = []

    async def send_message(self, message):
        self.messages.append(message.text)
        if isinstance(self.reply, Exception):
            raise self.reply
        return self.reply


def _use_chat(monkeypatch, reply):
    chat = _FakeChat(reply)
    monkeypatch.setattr(ai_service, "create_chat", lambda system_message="": chat)
    return chat


GRADING = {
    "score": {"correctness": 90, "code_quality": 70, "efficiency": 80, "best_practices": 75, "overall": 79},
    "feedback": {"correctness": ["Handles edge cases"], "code_quality": [], "efficiency": [],
                 "best_practices": [], "suggestions": ["Add docstrings"]},
    "analysis": {"time_complexity": "O(n)", "space_complexity": "O(1)", "improvements": []},
}

GENERATED_PROBLEM = {
    "title": "Two Sum",
    "description": "Find two numbers adding to target",
    "difficulty": "easy",
    "expected_time": 15,
    "test_cases": [{"input": "[2,7], 9", "output": "[0,1]", "explanation": ""}],
    "solution": {"approach": "hash map", "time_complexity": "O(n)", "space_complexity": "O(n)",
                 "key_concepts": ["hashing"]},
}


def test_parse_plain_json():
    assert parse_json_response('{"a": 1}') == {"a": 1}


def test_parse_fenced_json():
    text = 'Here you go:\n```json\n{"a": [1, 2]}\n```\nGood luck!'
    assert parse_json_response(text) == {"a": [1, 2]}


def test_parse_outermost_braces():
    text = 'Sure! {"score": {"overall": 5}} Let me know.'
    assert parse_json_response(text) == {"score": {"overall": 5}}


def test_parse_failure_raises():
    with pytest.raises(AIServiceError, match="Failed to parse AI response"):
        parse_json_response("no json at all")


def test_validate_problem_structure():
    assert validate_problem_structure(GENERATED_PROBLEM)
    assert not validate_problem_structure({**GENERATED_PROBLEM, "solution": None})
    missing = dict(GENERATED_PROBLEM)
    del missing["test_cases"]
    assert not validate_problem_structure(missing)


def test_validate_grading():
    assert validate_grading(GRADING)
    assert not validate_grading({**GRADING, "score": {**GRADING["score"], "overall": 101}})
    assert not validate_grading({**GRADING, "score": {**GRADING["score"], "overall": "80"}})
    assert not validate_grading({**GRADING, "score": {**GRADING["score"], "overall": True}})
    assert not validate_grading({**GRADING, "feedback": {"correctness": "fine"}})
    assert not validate_grading({"score": GRADING["score"]})
    assert not validate_grading([GRADING])


def test_generate_problems_annotates_each_problem(monkeypatch):
    chat = _use_chat(monkeypatch, "```json\n" + json.dumps({"problems": [GENERATED_PROBLEM, {"title": "Half"}]}) + "\n```")

    problems = asyncio.run(generate_problems("Python", "Dictionaries", count=2))

    assert len(problems) == 2
    assert problems[0]["status"] == "pending"
    assert problems[0]["is_valid"] is True
    assert problems[1]["is_valid"] is False
    assert problems[0]["id"].startswith("gen_")
    assert problems[0]["id"] != problems[1]["id"]
    assert "Generate 2 coding problems" in chat.messages[0]
    assert "Topic: Dictionaries" in chat.messages[0]


def test_generate_problems_rejects_wrong_shape(monkeypatch):
    _use_chat(monkeypatch, json.dumps({"items": []}))
    with pytest.raises(AIServiceError, match="Invalid problem structure"):
        asyncio.run(generate_problems("Python", "Strings"))


def test_generate_problems_wraps_model_errors(monkeypatch):
    _use_chat(monkeypatch, RuntimeError("quota exceeded"))
    with pytest.raises(AIServiceError, match="Failed to generate problems"):
        asyncio.run(generate_problems("Python", "Strings"))


def test_grade_submission_adds_metadata(monkeypatch):
    chat = _use_chat(monkeypatch, json.dumps(GRADING))

    grading = asyncio.run(grade_submission({"problem_id": "p1", "title": "Sum"}, "print(1)", "Python"))

    assert grading["score"]["overall"] == 79
    assert grading["submission_id"] == "p1"
    assert grading["validated"] is True
    assert grading["timestamp"]
    assert "print(1)" in chat.messages[0]
    assert "Language: Python" in chat.messages[0]


def test_grade_submission_flags_out_of_range_scores(monkeypatch):
    _use_chat(monkeypatch, json.dumps({**GRADING, "score": {"overall": 150}}))
    grading = asyncio.run(grade_submission({"id": "gen_1"}, "x", "Python"))
    assert grading["validated"] is False
    assert grading["submission_id"] == "gen_1"


def test_grade_submission_unparseable_reply(monkeypatch):
    _use_chat(monkeypatch, "I cannot grade this.")
    with pytest.raises(AIServiceError):
        asyncio.run(grade_submission({"problem_id": "p1"}, "x", "Python"))


def test_rate_limiter_spaces_calls():
    limiter = RateLimiter(min_interval=0.05)

    async def two_calls():
        loop = asyncio.get_running_loop()
        await limiter.wait()
        first = loop.time()
        await limiter.wait()
        return loop.time() - first

    assert asyncio.run(two_calls()) >= 0.04


def test_ai_routes(client, monkeypatch):
    _use_chat(monkeypatch, json.dumps(GRADING))

    missing = client.post("/api/ai/grade-submission", json={"code": "x", "language": "Python"})
    assert missing.status_code == 400

    graded = client.post("/api/ai/grade-submission",
                         json={"problem": {"problem_id": "p1"}, "code": "x", "language": "Python"})
    assert graded.status_code == 200
    assert graded.json()["grading"]["validated"] is True

    failed = client.post("/api/ai/generate-problems", json={"subject": "Python", "topic": "Strings"})
    assert failed.status_code == 500
    assert failed.json()["detail"].startswith("Failed to generate problems")

    assert client.post("/api/ai/generate-problems", json={"subject": "Python"}).status_code == 400
