"""FastAPI application entry point."""
import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from worktrack.api.v1 import dashboards, employees, independent_work, meta, projects, tasks
from worktrack.config import settings
from worktrack.core.logging import configure_logging
from worktrack.database import close_db, get_db, init_db
from worktrack.middleware.metrics import setup_metrics

configure_logging(settings.LOG_LEVEL, settings.LOG_FORMAT)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup
    await init_db()
    logger.info("%s %s started", settings.APP_NAME, settings.APP_VERSION)
    yield
    # Shutdown
    await close_db()


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    debug=settings.DEBUG,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Metrics middleware and /metrics; must be registered before startup
setup_metrics(app)

# Include routers
app.include_router(tasks.router, prefix=f"{settings.API_V1_PREFIX}/tasks", tags=["tasks"])
app.include_router(
    projects.router, prefix=f"{settings.API_V1_PREFIX}/projects", tags=["projects"]
)
app.include_router(
    employees.router, prefix=f"{settings.API_V1_PREFIX}/employees", tags=["employees"]
)
app.include_router(
    independent_work.router,
    prefix=f"{settings.API_V1_PREFIX}/independent-work",
    tags=["independent-work"],
)
app.include_router(
    dashboards.router,
    prefix=f"{settings.API_V1_PREFIX}/dashboards",
    tags=["dashboards"],
)
app.include_router(meta.router, prefix=f"{settings.API_V1_PREFIX}/meta", tags=["meta"])


@app.get("/health")
async def health_check(db: AsyncSession = Depends(get_db)):
    """Health check endpoint."""
    health_status = {
        "status": "ok",
        "checks": {
            "database": "unknown",
        },
    }

    try:
        await db.execute(text("SELECT 1"))
        health_status["checks"]["database"] = "ok"
    except Exception as e:
        logger.warning("Database health check failed: %s", e)
        health_status["checks"]["database"] = f"error: {str(e)}"
        health_status["status"] = "degraded"

    return health_status
