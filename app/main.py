"""Agency Portal — FastAPI Application Entry Point.

Backend for the agency client portal: campaign sync from Meta, campaign
and task storage, and AI campaign analysis.
"""

import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.database import init_db, test_connection
from app.scheduler.jobs import start_scheduler, stop_scheduler
from app.api.sync_routes import router as sync_router
from app.api.campaign_routes import router as campaign_router
from app.api.task_routes import router as task_router
from app.api.meta_routes import router as meta_router
from app.api.ai_routes import router as ai_router
from app.api.demo_routes import router as demo_router
from app.core.logging import get_logger

logger = get_logger("main")

IS_SERVERLESS = bool(
    os.environ.get("VERCEL") or os.environ.get("AWS_LAMBDA_FUNCTION_NAME")
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle."""
    logger.info("Agency Portal starting up...")
    if test_connection():
        try:
            init_db()
        except Exception as e:
            logger.error(f"Table creation failed: {e}")
    else:
        logger.error("Database NOT connected — endpoints will fail")
    if not IS_SERVERLESS:
        start_scheduler()
    yield
    if not IS_SERVERLESS:
        stop_scheduler()
    logger.info("Agency Portal shut down")


app = FastAPI(
    title="Agency Portal",
    description="Client portal backend — sync Meta campaigns, manage tasks, generate campaign analysis.",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routers
app.include_router(sync_router)
app.include_router(campaign_router)
app.include_router(task_router)
app.include_router(meta_router)
app.include_router(ai_router)
app.include_router(demo_router)


@app.get("/health", tags=["System"])
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "service": "agency-portal",
        "version": "1.0.0",
    }
