"""AdPulse — FastAPI Application Entry Point.

Approvals & click-stream monitoring API.
"""

import os
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config import settings
from app.core.errors import ParameterValidationError
from app.database import init_db, test_connection
from app.scheduler.jobs import start_scheduler, stop_scheduler
from app.api.approvals_routes import router as approvals_router
from app.api.clicks_routes import router as clicks_router
from app.core.logging import get_logger

logger = get_logger("main")

IS_SERVERLESS = bool(
    os.environ.get("VERCEL") or os.environ.get("AWS_LAMBDA_FUNCTION_NAME")
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle."""
    logger.info("🚀 AdPulse starting up...")
    logger.info(f"🌍 Environment: {'SERVERLESS' if IS_SERVERLESS else 'LOCAL'}")
    db_ok = test_connection()
    if db_ok:
        try:
            init_db()
        except Exception as e:
            logger.error(f"❌ Table creation failed: {e}")
    else:
        logger.error("❌ Database NOT connected — endpoints will fail")
    if not IS_SERVERLESS:
        start_scheduler()
    yield
    if not IS_SERVERLESS:
        stop_scheduler()
    logger.info("AdPulse shut down")


app = FastAPI(
    title="AdPulse",
    description="Approvals and click-stream monitoring: paginated reporting, top-N aggregation, CSV export and retention purges.",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    max_age=86400,
    expose_headers=["X-Total-Count", "X-Total-Pages", "Content-Disposition"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log method, path, status and duration of every request."""
    start = time.perf_counter()
    response = await call_next(request)
    duration_ms = round((time.perf_counter() - start) * 1000, 2)
    logger.info(
        f"{request.method} {request.url.path} - {response.status_code} - {duration_ms}ms",
        extra={
            "method": request.method,
            "endpoint": request.url.path,
            "status_code": response.status_code,
            "duration_ms": duration_ms,
        },
    )
    return response


# ── Error handlers ──


@app.exception_handler(ParameterValidationError)
async def parameter_validation_handler(request: Request, exc: ParameterValidationError):
    logger.warning(
        f"Rejected {request.method} {request.url.path}: {exc}",
        extra={"endpoint": request.url.path, "status_code": 400},
    )
    return JSONResponse(
        status_code=400,
        content={"message": "Validation failed", "errors": exc.errors},
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError):
    logger.error(
        f"Database error on {request.method} {request.url.path}: {exc}",
        extra={"endpoint": request.url.path, "status_code": 500},
    )
    return JSONResponse(status_code=500, content={"message": "Internal server error"})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(
        f"Unhandled error on {request.method} {request.url.path}",
        extra={"endpoint": request.url.path, "status_code": 500},
    )
    return JSONResponse(status_code=500, content={"message": "Internal server error"})


# Routers
app.include_router(approvals_router, prefix="/api")
app.include_router(clicks_router, prefix="/api")


@app.get("/healthz", include_in_schema=False, response_class=PlainTextResponse)
async def healthz():
    return "OK"


@app.get("/health", tags=["System"])
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "service": "adpulse",
        "version": "1.0.0",
    }
