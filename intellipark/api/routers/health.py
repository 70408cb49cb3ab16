"""
Health check endpoints.

- /: banner used by the kiosk to check the backend is up
- /health, /health/live: liveness (always 200 while the process runs)
- /health/ready: readiness, pings the document store
"""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse, PlainTextResponse

from intellipark.api.dependencies import get_bundle

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/", response_class=PlainTextResponse)
async def root() -> str:
    return "IntelliPark backend running"


@router.get("/health")
@router.get("/health/live")
async def health_check():
    return {"status": "ok", "service": "intellipark-backend"}


@router.get("/health/ready")
async def health_check_ready(bundle=Depends(get_bundle)):
    """
    Readiness probe.

    Returns 503 while the document store cannot be reached so the
    orchestrator stops routing traffic to this instance.
    """
    try:
        await bundle["store"].ping()
    except Exception as e:
        logger.error("Document store health check failed", exc_info=e)
        return JSONResponse(
            status_code=503,
            content={
                "status": "not_ready",
                "checks": {"document_store": "unhealthy"},
            },
        )
    return {"status": "ready", "checks": {"document_store": "healthy"}}
