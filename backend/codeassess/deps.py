"""
FastAPI dependencies - get_admin_user.
"""

from fastapi import Request, HTTPException

from .utils.auth import decode_token


async def get_admin_user(request: Request) -> dict:
    """Require a valid admin bearer token; returns the decoded payload"""
    auth_header = request.headers.get("Authorization", "")
    token = None
    if auth_header.startswith("Bearer "):
        token = auth_header.split(" ", 1)[1].strip()

    if not token:
        raise HTTPException(status_code=401, detail="No token provided")

    payload = decode_token(token)
    if not payload or not payload.get("sub"):
        raise HTTPException(status_code=401, detail="Invalid token")

    return payload
