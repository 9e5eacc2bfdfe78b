"""
FreshHarvest storefront service
Catalog, bulk orders and order tracking behind one FastAPI application
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from pathlib import Path
import subprocess

from freshharvest.core import ServiceHealth, setup_logging, RequestLoggingMiddleware, get_logger
from freshharvest.core_settings import get_settings
from freshharvest.api.auth import router as auth_router
from freshharvest.api.errors import register_exception_handlers
from freshharvest.api.orders import router as orders_router
from freshharvest.api.products import router as products_router
from freshharvest.infrastructure.db import engine, init_models

settings = get_settings()

# Service configuration
SERVICE_NAME = "freshharvest"
SERVICE_VERSION = settings.SERVICE_VERSION
SERVICE_DESCRIPTION = "Bulk produce ordering storefront"
PROJECT_ROOT = Path(__file__).resolve().parent.parent

setup_logging(service_name=SERVICE_NAME, level=settings.LOG_LEVEL)

logger = get_logger(__name__)


def run_migrations() -> None:
    logger.info("Running database migrations")
    result = subprocess.run(
        ["alembic", "upgrade", "head"],
        cwd=str(PROJECT_ROOT),
        capture_output=True,
        text=True,
        check=False
    )
    if result.returncode != 0:
        logger.warning(f"Migration output: {result.stderr}")
    else:
        logger.info("Database migrations completed")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifecycle management"""
    logger.info(f"Starting {SERVICE_NAME} version {SERVICE_VERSION}")

    if settings.RUN_MIGRATIONS:
        run_migrations()

    try:
        init_models()
        logger.info("Database models initialized")
    except Exception as e:
        logger.error(f"Failed to initialize database models: {e}")
        raise

    logger.info(f"{SERVICE_NAME} started successfully")

    yield

    logger.info(f"Shutting down {SERVICE_NAME}")


app = FastAPI(
    title=SERVICE_NAME,
    description=SERVICE_DESCRIPTION,
    version=SERVICE_VERSION,
    lifespan=lifespan,
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestLoggingMiddleware)

register_exception_handlers(app)

health_service = ServiceHealth(SERVICE_NAME, engine, SERVICE_VERSION)
app.include_router(health_service.create_health_router())

app.include_router(auth_router)
app.include_router(products_router)
app.include_router(orders_router)


@app.get("/")
async def root():
    return {
        "service": SERVICE_NAME,
        "version": SERVICE_VERSION,
        "status": "running",
        "docs": "/api/docs"
    }


@app.get("/info")
async def info():
    """Service information endpoint"""
    return {
        "service": SERVICE_NAME,
        "version": SERVICE_VERSION,
        "description": SERVICE_DESCRIPTION,
        "environment": settings.ENVIRONMENT,
        "endpoints": {
            "products": "/products",
            "orders": "/orders",
            "auth": "/auth",
            "health": "/health",
            "ready": "/health/ready",
            "live": "/health/live",
            "metrics": "/metrics",
            "docs": "/api/docs"
        }
    }
