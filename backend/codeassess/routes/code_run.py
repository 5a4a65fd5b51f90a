"""Code execution route (Judge0)."""

from fastapi import APIRouter, HTTPException

from codeassess.models.code_run import CodeRunRequest
from codeassess.services.code_runner import run_code, CodeRunError

router = APIRouter(tags=["run"])


@router.post("/run")
async def run_submission(request: CodeRunRequest):
    """Run code remotely and return the Judge0 result"""
    if not request.code or not request.language_id:
        raise HTTPException(status_code=400, detail="Code and language_id are required.")

    try:
        result = await run_code(request.code, request.language_id, stdin=request.input)
    except CodeRunError:
        raise HTTPException(status_code=500, detail="Failed to run code.")

    return {"result": result}
