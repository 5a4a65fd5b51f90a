"""Authentication routes - admin login issuing a JWT."""

import hmac

from fastapi import APIRouter, HTTPException

from codeassess.config import logger, ADMIN_USERNAME, ADMIN_PASSWORD
from codeassess.models.admin import AdminLoginRequest
from codeassess.utils.auth import create_access_token

router = APIRouter(tags=["auth"])


@router.post("/admin/login")
async def login_admin(request: AdminLoginRequest):
    """Exchange the admin credentials for a bearer token"""
    username_ok = hmac.compare_digest(request.username.encode(), ADMIN_USERNAME.encode())
    password_ok = hmac.compare_digest(request.password.encode(), ADMIN_PASSWORD.encode())
    if not (username_ok and password_ok):
        logger.warning(f"Failed admin login attempt for '{request.username}'")
        raise HTTPException(status_code=401, detail="Invalid credentials")

    token = create_access_token({"sub": request.username, "role": "admin"})
    logger.info(f"Admin '{request.username}' logged in")
    return {"token": token}
