"""
Configuration - env vars, constants, API key setup.
"""

import os
import logging
from pathlib import Path
from dotenv import load_dotenv
import google.generativeai as genai

ROOT_DIR = Path(__file__).parent.parent
load_dotenv(ROOT_DIR / '.env')

# Logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger("codeassess")

# Database
MONGO_URL = os.environ.get("MONGO_URL", "mongodb://localhost:27017")
DB_NAME = os.environ.get("DB_NAME", "codeassess")

# LLM API Key
GEMINI_API_KEY = os.environ.get("GEMINI_API_KEY")
GEMINI_MODEL = os.environ.get("GEMINI_MODEL", "gemini-2.5-flash")

if not GEMINI_API_KEY:
    logger.warning("⚠️ No GEMINI_API_KEY found - AI grading and problem generation will fail")
else:
    genai.configure(api_key=GEMINI_API_KEY)

# Judge0 code execution (RapidAPI CE by default)
JUDGE0_URL = os.environ.get("JUDGE0_URL", "https://judge0-ce.p.rapidapi.com/submissions")
JUDGE0_HOST = os.environ.get("JUDGE0_HOST", "")
JUDGE0_KEY = os.environ.get("JUDGE0_KEY", "")

# Admin credentials and JWT
ADMIN_USERNAME = os.environ.get("ADMIN_USERNAME", "admin")
ADMIN_PASSWORD = os.environ.get("ADMIN_PASSWORD", "admin123")
JWT_SECRET = os.environ.get("JWT_SECRET", "change-me-in-production")
JWT_ALGORITHM = "HS256"
JWT_EXPIRE_MINUTES = int(os.environ.get("JWT_EXPIRE_MINUTES", "60"))

if "JWT_SECRET" not in os.environ:
    logger.warning("⚠️ JWT_SECRET not set - using the development secret")

# CORS
_cors_origins_env = os.environ.get("CORS_ORIGINS")
CORS_ORIGINS = [origin.strip() for origin in _cors_origins_env.split(",")] if _cors_origins_env else [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    "http://localhost:3000",
    "http://127.0.0.1:3000"
]


def get_version_info():
    """Get deployment version information."""
    git_commit = os.environ.get("GIT_COMMIT_SHA")
    if not git_commit:
        try:
            if os.path.exists(".git_commit"):
                with open(".git_commit", "r") as f:
                    git_commit = f.read().strip()
        except OSError:
            pass

    if not git_commit:
        logger.warning("GIT_COMMIT_SHA not set and .git_commit not found. Build pipeline issue?")
        git_commit = "unknown"

    build_time = os.environ.get("BUILD_TIME", "unknown")
    env = os.environ.get("ENV", os.environ.get("ENVIRONMENT", "development"))

    return {
        "git_commit": git_commit,
        "build_time": build_time,
        "environment": env
    }
