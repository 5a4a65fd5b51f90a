"""
CodeAssess API - main entry point.
Creates FastAPI app, sets up lifespan, CORS, metrics middleware,
registers all routes.
"""

import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, APIRouter, Request
from fastapi.middleware.cors import CORSMiddleware

from codeassess.config import logger, get_version_info, CORS_ORIGINS
from codeassess.database import client
from codeassess.services.metrics import metrics
from codeassess.routes import register_all_routes


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager"""
    logger.info("🚀 FastAPI app starting up...")
    logger.info("REGISTERED ROUTES: %s", [r.path for r in app.routes])
    logger.info("=" * 60)

    yield

    logger.info("🛑 FastAPI app shutting down...")
    client.close()


# Create the main app with lifespan
app = FastAPI(title="CodeAssess API", lifespan=lifespan)

# Create a router with the /api prefix
api_router = APIRouter(prefix="/api")


@api_router.get("/version")
async def get_version():
    """Public version endpoint for deployment verification"""
    return get_version_info()


# Register all route modules on the api_router
register_all_routes(api_router)

# Include the api_router on the app
app.include_router(api_router)


# Root-level health check endpoint (for Kubernetes probes)
@app.get("/health")
async def root_health_check():
    """Health check for Kubernetes liveness/readiness probes"""
    return {"status": "healthy", "service": "CodeAssess API"}


# ============== METRICS TRACKING MIDDLEWARE ==============

@app.middleware("http")
async def metrics_tracking_middleware(request: Request, call_next):
    """Track request counts and timings for /api/metrics"""
    start_time = time.perf_counter()
    metrics.request_started()
    logger.info(f"{request.method} {request.url.path} - Started")

    try:
        response = await call_next(request)
    except Exception as e:
        metrics.record_error(e)
        logger.error(f"Error in {request.method} {request.url.path}: {e}", exc_info=True)
        raise
    finally:
        response_time_ms = (time.perf_counter() - start_time) * 1000
        metrics.request_finished(response_time_ms)

    logger.info(f"{request.method} {request.url.path} - Completed {response.status_code} in {response_time_ms:.2f}ms")
    return response


# ============== CORS ==============

app.add_middleware(
    CORSMiddleware,
    allow_credentials=True,
    allow_origins=CORS_ORIGINS,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)
