"""Admin routes - request metrics."""

from fastapi import APIRouter

from codeassess.services.metrics import metrics

router = APIRouter(tags=["admin"])


@router.get("/metrics")
async def get_metrics():
    """Current request counters for this process"""
    return metrics.snapshot()
