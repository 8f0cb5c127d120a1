"""FastAPI application entry point."""

import logging
import tomllib
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from fastapi import FastAPI

# Load environment variables from .env file before settings are read
load_dotenv()

from adapter.mongodb.connection import MongoConnection
from adapter.mongodb.indexes import ensure_all_indexes
from api.config import Settings
from api.pipeline import build_pipeline
from utils.logging import setup_structured_logging

logger = logging.getLogger(__name__)

# Read version from pyproject.toml (single source of truth)
_project_root = Path(__file__).parent.parent.parent
with open(_project_root / "pyproject.toml", "rb") as f:
    VERSION = tomllib.load(f)["project"]["version"]

SERVICE_NAME = "Task Tracker API"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the store at startup, close it at shutdown."""
    connection: MongoConnection = app.state.mongo
    if await connection.connect():
        if await ensure_all_indexes(connection.database):
            logger.info("MongoDB indexes verified/created successfully")
        else:
            logger.warning("Failed to create some MongoDB indexes")
    else:
        logger.warning("MongoDB unavailable at startup, requests needing it will get 503")

    yield  # App runs here

    await connection.disconnect()


def create_app(
    settings: Optional[Settings] = None,
    connection: Optional[MongoConnection] = None,
) -> FastAPI:
    """Build the application with an explicit settings object and store handle."""
    settings = settings or Settings.from_env()
    connection = connection or MongoConnection(settings.mongo_url, settings.database_name)

    app = FastAPI(
        title=SERVICE_NAME,
        description="Task tracking API with JWT authentication",
        version=VERSION,
        lifespan=lifespan,
        redirect_slashes=False,
    )
    app.state.settings = settings
    app.state.mongo = connection

    build_pipeline(app, settings)
    return app


_settings = Settings.from_env()
setup_structured_logging(_settings.log_level)
app = create_app(_settings)


if __name__ == "__main__":
    import uvicorn
    # Disable uvicorn access logs; structured application logs remain
    uvicorn.run(
        app,
        host="0.0.0.0",
        port=_settings.port,
        access_log=False
    )
