from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.router import api_router
from app.api.routers.health import router as health_router
from app.core.logging import configure_logging
from app.core.settings import get_settings
from app.dependency_injection import build_container
from app.services.contracts import BlobStoreProtocol, DatabaseServiceProtocol, SessionStoreProtocol

settings = get_settings()
configure_logging(settings.effective_log_level)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("starting slide deck assistant backend", extra={"app_env": settings.app_env})

    container = build_container(settings)
    database_service = container.resolve(DatabaseServiceProtocol)
    await database_service.connect()
    if settings.database_ensure_schema:
        await database_service.ensure_schema()
    logger.info("database connection pool initialized")

    session_store = container.resolve(SessionStoreProtocol)
    await session_store.ping()
    logger.info("session store connection initialized")

    storage = container.resolve(BlobStoreProtocol)
    app.state.container = container

    try:
        yield
    finally:
        await storage.close()
        await session_store.close()
        await database_service.disconnect()
        logger.info("slide deck assistant backend shutdown complete")


app = FastAPI(
    title="Slide Deck Assistant Backend",
    version="0.1.0",
    docs_url="/docs" if settings.enable_swagger else None,
    redoc_url="/redoc" if settings.enable_swagger else None,
    openapi_url="/openapi.json" if settings.enable_swagger else None,
    lifespan=lifespan,
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health_router)
app.include_router(api_router, prefix="/api")
