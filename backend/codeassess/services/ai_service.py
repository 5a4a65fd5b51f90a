"""
AI problem generation and submission grading (Gemini).
"""

import asyncio
import json
import re
import time
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List

from codeassess.config import logger
from codeassess.services.llm import LlmChat, UserMessage
from codeassess.utils.validation import validate_grading, validate_problem_structure


class AIServiceError(Exception):
    """Raised when the model call fails or its response is unusable."""


class RateLimiter:
    """Spaces out model calls by at least ``min_interval`` seconds."""

    def __init__(self, min_interval: float = 1.0):
        self.min_interval = min_interval
        self._last_call = 0.0
        self._lock = asyncio.Lock()

    async def wait(self):
        async with self._lock:
            elapsed = time.monotonic() - self._last_call
            if elapsed < self.min_interval:
                await asyncio.sleep(self.min_interval - elapsed)
            self._last_call = time.monotonic()


rate_limiter = RateLimiter(min_interval=1.0)


# ============== AI CALL HELPERS ==============

def create_chat(system_message: str = "") -> LlmChat:
    return LlmChat(
        session_id=f"ai_{uuid.uuid4().hex[:8]}",
        system_message=system_message,
    ).with_params(temperature=0.2, json_output=True)


async def ai_call_with_timeout(chat_model, message, timeout_seconds=60, operation_name="AI call"):
    """Run a model call, failing after ``timeout_seconds``."""
    try:
        return await asyncio.wait_for(chat_model.send_message(message), timeout=timeout_seconds)
    except asyncio.TimeoutError:
        logger.error(f"⏱️ TIMEOUT after {timeout_seconds}s: {operation_name}")
        raise AIServiceError(f"{operation_name} exceeded {timeout_seconds}s timeout")


def parse_json_response(response_text: str) -> Any:
    """
    Parse model output as JSON.

    Tries the raw text, then the body of a fenced code block, then the
    outermost {...} span.
    """
    text = (response_text or "").strip()

    try:
        return json.loads(text)
    except json.JSONDecodeError:
        pass

    fence_match = re.search(r"```(?:json)?\s*(.*?)```", text, re.DOTALL)
    if fence_match:
        try:
            return json.loads(fence_match.group(1).strip())
        except json.JSONDecodeError:
            pass

    start, end = text.find("{"), text.rfind("}")
    if start != -1 and end > start:
        try:
            return json.loads(text[start:end + 1])
        except json.JSONDecodeError:
            pass

    logger.warning(f"Failed to parse JSON from AI response. Preview: {text[:200]}")
    raise AIServiceError("Failed to parse AI response")


# ============== PROBLEM GENERATION ==============

GENERATION_SYSTEM_MESSAGE = "You are an expert programming instructor who writes clear, self-contained coding exercises."


def build_generation_prompt(subject: str, topic: str, count: int) -> str:
    return f"""Generate {count} coding problems for:
Subject: {subject}
Topic: {topic}

For each problem, provide:
1. Title
2. Description
3. Difficulty level (easy/medium/hard)
4. Expected time (15-30 minutes)
5. Test cases
6. Solution approach
7. Key concepts tested

Respond with JSON only, using this structure:
{{
  "problems": [
    {{
      "title": "string",
      "description": "string",
      "difficulty": "easy | medium | hard",
      "expected_time": 20,
      "test_cases": [{{"input": "string", "output": "string", "explanation": "string"}}],
      "solution": {{
        "approach": "string",
        "time_complexity": "string",
        "space_complexity": "string",
        "key_concepts": ["string"]
      }}
    }}
  ]
}}"""


def normalize_generated_problems(payload: Any) -> List[Dict[str, Any]]:
    if not isinstance(payload, dict) or not isinstance(payload.get("problems"), list):
        raise AIServiceError("Invalid problem structure")

    now = datetime.now(timezone.utc).isoformat()
    problems = []
    for raw in payload["problems"]:
        if not isinstance(raw, dict):
            continue
        problems.append({
            **raw,
            "created_at": now,
            "status": "pending",
            "is_valid": validate_problem_structure(raw),
            "id": f"gen_{uuid.uuid4().hex[:12]}",
        })
    return problems


async def generate_problems(subject: str, topic: str, count: int = 5) -> List[Dict[str, Any]]:
    await rate_limiter.wait()

    chat = create_chat(GENERATION_SYSTEM_MESSAGE)
    logger.info(f"Generating {count} problems for {subject} > {topic}")
    try:
        response_text = await ai_call_with_timeout(
            chat,
            UserMessage(text=build_generation_prompt(subject, topic, count)),
            timeout_seconds=90,
            operation_name="Problem generation",
        )
    except AIServiceError:
        raise
    except Exception as e:
        logger.error(f"Error generating problems: {e}", exc_info=True)
        raise AIServiceError("Failed to generate problems") from e

    return normalize_generated_problems(parse_json_response(response_text))


# ============== GRADING ==============

GRADING_SYSTEM_MESSAGE = "You are a strict but fair code reviewer grading programming assessment submissions."


def build_grading_prompt(problem: Dict[str, Any], code: str, language: str) -> str:
    return f"""Grade this code submission.

Problem:
{json.dumps(problem, default=str)}

Submitted Code:
{code}

Language: {language}

Evaluate based on:
1. Correctness (0-100)
2. Code Quality (0-100)
3. Efficiency (0-100)
4. Best Practices (0-100)

Provide detailed feedback for each aspect.

Respond with JSON only:
{{
  "score": {{
    "correctness": 0,
    "code_quality": 0,
    "efficiency": 0,
    "best_practices": 0,
    "overall": 0
  }},
  "feedback": {{
    "correctness": ["string"],
    "code_quality": ["string"],
    "efficiency": ["string"],
    "best_practices": ["string"],
    "suggestions": ["string"]
  }},
  "analysis": {{
    "time_complexity": "string",
    "space_complexity": "string",
    "improvements": ["string"]
  }}
}}"""


async def grade_submission(problem: Dict[str, Any], code: str, language: str) -> Dict[str, Any]:
    await rate_limiter.wait()

    chat = create_chat(GRADING_SYSTEM_MESSAGE)
    try:
        response_text = await ai_call_with_timeout(
            chat,
            UserMessage(text=build_grading_prompt(problem, code, language)),
            timeout_seconds=60,
            operation_name="Submission grading",
        )
    except AIServiceError:
        raise
    except Exception as e:
        logger.error(f"Error grading submission: {e}", exc_info=True)
        raise AIServiceError("Failed to grade submission") from e

    grading = parse_json_response(response_text)
    if not isinstance(grading, dict):
        raise AIServiceError("Failed to parse AI response")

    return {
        **grading,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "submission_id": problem.get("problem_id") or problem.get("id"),
        "validated": validate_grading(grading),
    }
