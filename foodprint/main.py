# foodprint/main.py
from contextlib import asynccontextmanager
import logging

from fastapi.middleware.cors import CORSMiddleware
from fastapi import FastAPI

from foodprint.core.config import get_settings
from foodprint.core.exceptions import register_exception_handlers
from foodprint.core.storage_utils import is_storage_configured
from foodprint.database import create_db_and_tables

# Import models so SQLModel metadata is populated before create_all()
from foodprint.models import user as _user_models  # noqa: F401

# Routers
from foodprint.routers.users import router as users_router
from foodprint.routers.wallet import router as wallet_router

settings = get_settings()

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("uvicorn")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Startup:
      - Verify DB connectivity and create tables.
      - Report whether object storage uploads are enabled.
    """
    logger.info("Startup: connecting to database...")
    try:
        create_db_and_tables()
        logger.info("Startup: DB connection OK, tables verified.")
    except Exception as e:
        logger.error(f"Startup: DB connection FAILED: {e}")
        raise

    if is_storage_configured():
        logger.info("DigitalOcean Spaces configured for file uploads")
    else:
        logger.warning(
            "DigitalOcean Spaces not configured - file uploads will be skipped"
        )
    yield


app = FastAPI(
    title=settings.PROJECT_NAME or "FoodPrint",
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

# Mounted under /app, e.g. /app/wallet/connect
app.include_router(wallet_router, prefix=settings.API_PREFIX)
app.include_router(users_router, prefix=settings.API_PREFIX)


@app.get("/")
def root():
    """Health check endpoint."""
    return {"status": "ok", "service": "foodprint"}
