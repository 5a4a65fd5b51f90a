"""
Remote code execution through Judge0.
"""

import asyncio
import base64
from typing import Optional

import httpx

from codeassess.config import logger, JUDGE0_URL, JUDGE0_HOST, JUDGE0_KEY

# Judge0 status ids that mean the submission has not finished yet
PENDING_STATUS_IDS = (1, 2)  # In Queue, Processing
MAX_POLLS = 10
POLL_INTERVAL_SECONDS = 1.5
ENCODED_FIELDS = ("stdout", "stderr", "compile_output", "message")


class CodeRunError(Exception):
    """Raised when Judge0 cannot be reached or rejects the submission."""


def _encode(text: str) -> str:
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


def _decode(value: Optional[str]) -> Optional[str]:
    if not value:
        return value
    try:
        return base64.b64decode(value).decode("utf-8", errors="replace")
    except ValueError:
        return value


def _headers() -> dict:
    return {
        "content-type": "application/json",
        "X-RapidAPI-Host": JUDGE0_HOST,
        "X-RapidAPI-Key": JUDGE0_KEY,
    }


def decode_result(result: dict) -> dict:
    decoded = dict(result)
    for field in ENCODED_FIELDS:
        if field in decoded:
            decoded[field] = _decode(decoded[field])
    return decoded


async def run_code(
    code: str,
    language_id: int,
    stdin: Optional[str] = None,
    client: Optional[httpx.AsyncClient] = None,
    poll_interval: float = POLL_INTERVAL_SECONDS,
) -> dict:
    """
    Submit code to Judge0 and poll until it leaves the queue.

    Returns the last polled result with base64 output fields decoded.
    Gives up polling after MAX_POLLS attempts and returns whatever status
    Judge0 reported last.
    """
    params = {"base64_encoded": "true", "fields": "*"}
    owns_client = client is None
    if owns_client:
        client = httpx.AsyncClient(timeout=30.0)

    try:
        submission = await client.post(
            JUDGE0_URL,
            params=params,
            headers=_headers(),
            json={
                "language_id": language_id,
                "source_code": _encode(code),
                "stdin": _encode(stdin) if stdin else "",
            },
        )
        submission.raise_for_status()
        token = submission.json().get("token")
        if not token:
            raise CodeRunError("Judge0 did not return a submission token")

        result = None
        for attempt in range(MAX_POLLS):
            status_response = await client.get(
                f"{JUDGE0_URL}/{token}",
                params=params,
                headers=_headers(),
            )
            status_response.raise_for_status()
            result = status_response.json()
            status_id = (result.get("status") or {}).get("id")
            if status_id not in PENDING_STATUS_IDS:
                break
            if attempt < MAX_POLLS - 1:
                await asyncio.sleep(poll_interval)

        return decode_result(result or {})
    except httpx.HTTPStatusError as e:
        logger.error(f"Judge0 error: {e.response.status_code} {e.response.text[:300]}")
        raise CodeRunError(f"Judge0 returned {e.response.status_code}") from e
    except httpx.HTTPError as e:
        logger.error(f"Judge0 request failed: {e}")
        raise CodeRunError("Judge0 request failed") from e
    finally:
        if owns_client:
            await client.aclose()
