from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from cvscore.routers import cvs, jds, reports

from cvscore.utils.exceptions import CVScoreBaseException
from cvscore.utils.logging_config import configure_for_environment, get_logger
from cvscore.utils.utils import load_settings
from cvscore.middleware.error_handlers import (
    ExceptionHandlerMiddleware,
    RequestLoggingMiddleware,
    PerformanceMiddleware,
    cvscore_exception_handler,
)

# Configure logging first
configure_for_environment()
logger = get_logger(__name__)

VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan context manager"""
    logger.info("CV Scoring API starting up...")

    settings = load_settings()
    if settings.textkernel.account_id and settings.textkernel.service_key:
        logger.info(f"Textkernel endpoint: {settings.textkernel.base_url}")
    else:
        logger.warning("Textkernel credentials are not configured - scoring requests will fail with a configuration error")

    yield

    logger.info("CV Scoring API shut down")


app = FastAPI(title="CV Scoring API", version=VERSION, lifespan=lifespan)

app.add_exception_handler(CVScoreBaseException, cvscore_exception_handler)

# Middleware runs LIFO; the exception handler must be outermost
app.add_middleware(PerformanceMiddleware, slow_request_threshold=10.0)
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(ExceptionHandlerMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Content-Disposition", "X-Request-ID"],
)


@app.get("/")
@app.head("/")
async def root():
    """Root endpoint - handles both GET and HEAD requests for health checks"""
    logger.debug("Root endpoint accessed")
    return {"message": "Welcome to the CV Scoring API", "version": VERSION, "status": "ok"}


@app.get("/health")
@app.head("/health")
async def health_check():
    """Health check endpoint - handles both GET and HEAD requests"""
    return {"status": "healthy", "timestamp": datetime.now(timezone.utc).isoformat()}


app.include_router(cvs.router, prefix="/api/cvs", tags=["cvs"])
app.include_router(jds.router, prefix="/api/jds", tags=["jds"])
app.include_router(reports.router, prefix="/api/match", tags=["reports"])

logger.info("CV Scoring API initialized successfully")
