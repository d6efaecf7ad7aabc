# keep/main.py
from contextlib import asynccontextmanager
import logging

from fastapi.middleware.cors import CORSMiddleware
from fastapi import FastAPI
from sqlmodel import Session

from keep.core.config import get_settings
from keep.core.errors import register_exception_handlers
from keep.database import create_db_and_tables, engine

# Import models so SQLModel metadata is populated before create_all()
from keep.models import profile as _profile_models  # noqa: F401
from keep.models import asset as _asset_models  # noqa: F401
from keep.models import assignment as _assignment_models  # noqa: F401
from keep.models import asset_detail as _asset_detail_models  # noqa: F401
from keep.models import theft_report as _theft_report_models  # noqa: F401

# Routers
from keep.routers.profiles import router as profiles_router
from keep.routers.categories import router as categories_router, service as category_service
from keep.routers.assets import router as assets_router
from keep.routers.assignments import router as assignments_router
from keep.routers.notes import router as notes_router
from keep.routers.insurance import router as insurance_router
from keep.routers.photos import router as photos_router
from keep.routers.documents import router as documents_router
from keep.routers.public import router as public_router
from keep.routers.theft_reports import router as theft_reports_router
from keep.routers.dashboard import router as dashboard_router

settings = get_settings()

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger("uvicorn")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Startup:
      - Verify DB connectivity and create tables.
      - Seed the shared default categories.

    Shutdown:
      - No special cleanup needed for sync engine.
    """
    logger.info("Startup: connecting to database...")
    try:
        create_db_and_tables()
        with Session(engine) as session:
            category_service.seed_default_categories(session)
        logger.info("Startup: DB connection OK, tables verified.")
    except Exception as e:
        logger.error("Startup: DB connection FAILED: %s", e)
        raise
    yield


app = FastAPI(
    title=settings.PROJECT_NAME,
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Versioned API prefix, e.g. /api/v1
for router in (
    profiles_router,
    categories_router,
    assets_router,
    assignments_router,
    notes_router,
    insurance_router,
    photos_router,
    documents_router,
    public_router,
    theft_reports_router,
    dashboard_router,
):
    app.include_router(router, prefix=settings.API_V1_STR)


@app.get("/")
def root():
    """Health check endpoint."""
    return {"status": "ok", "service": "keep-backend"}
