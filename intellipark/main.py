import logging
import uuid
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from intellipark.api.dependencies import get_bundle
from intellipark.api.routers.health import router as health_router
from intellipark.api.routers.parking import router as parking_router
from intellipark.config import get_settings
from intellipark.domain.errors import DomainError
from intellipark.infrastructure.db.tables import metadata

# Configure structured logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    engine = None
    if not settings.use_in_memory:
        engine = get_bundle(settings)["engine"]
        async with engine.begin() as conn:
            await conn.run_sync(metadata.create_all)
    logger.info(
        "IntelliPark backend starting",
        extra={"in_memory": settings.use_in_memory, "port": settings.port},
    )
    yield
    if engine is not None:
        await engine.dispose()

app = FastAPI(
    title="IntelliPark API",
    version="0.1.0",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)


@app.exception_handler(DomainError)
async def domain_exception_handler(request: Request, exc: DomainError):
    content = {"error": exc.message}
    if exc.details is not None:
        content["details"] = exc.details
    return JSONResponse(status_code=exc.status_code, content=jsonable_encoder(content))


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,
        content={"error": "Invalid request body", "details": jsonable_encoder(exc.errors())},
    )


# Global Exception Handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """
    Log unhandled exceptions under an error_id the operator can search for.
    The message is passed back to the kiosk so staff can read it on screen.
    """
    error_id = str(uuid.uuid4())

    logger.error(
        "Unhandled exception occurred",
        exc_info=exc,
        extra={
            "error_id": error_id,
            "path": request.url.path,
            "method": request.method,
            "client_host": request.client.host if request.client else None,
        }
    )

    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal server error",
            "details": str(exc),
            "error_id": error_id,
        }
    )


app.include_router(health_router, tags=["Health"])
app.include_router(parking_router, prefix="/api", tags=["Parking"])


def main() -> None:
    uvicorn.run("intellipark.main:app", host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
