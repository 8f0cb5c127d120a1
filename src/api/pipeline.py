"""Ordered request pipeline.

The app factory installs these stages in this exact order and records the
order on ``app.state.pipeline``:

    cors -> body_parse -> routes -> auth_gate -> error_translator

``routes`` mounts the public routers, ``auth_gate`` mounts the routers
that require a bearer token, with the gate as a router-level dependency
so it runs before any handler dependency.
"""

import logging
from typing import Callable

from fastapi import Depends, FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from api.config import Settings
from api.errors import install_error_handlers, request_validation_handler
from api.routes import auth, health, tasks
from api.security import get_current_identity

logger = logging.getLogger(__name__)


def install_cors(app: FastAPI, settings: Settings) -> None:
    # Wildcard "*" cannot be combined with credentials in browsers
    if settings.cors_origins == "*":
        cors_origins = ["*"]
        allow_credentials = False
        logger.warning(
            "CORS configured with wildcard origin ('*'). "
            "For production, set CORS_ORIGINS to specific domains (e.g., 'https://app.example.com')"
        )
    else:
        cors_origins = [origin.strip() for origin in settings.cors_origins.split(",") if origin.strip()]
        allow_credentials = True
        logger.info(f"CORS configured with specific origins: {cors_origins}")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=allow_credentials,
        allow_methods=["*"],
        allow_headers=["*"],
    )


def install_body_parser(app: FastAPI, settings: Settings) -> None:
    app.add_exception_handler(RequestValidationError, request_validation_handler)


def install_public_routes(app: FastAPI, settings: Settings) -> None:
    app.include_router(auth.router)
    app.include_router(health.router)


def install_auth_gate(app: FastAPI, settings: Settings) -> None:
    app.include_router(tasks.router, dependencies=[Depends(get_current_identity)])


def install_error_translator(app: FastAPI, settings: Settings) -> None:
    install_error_handlers(app)


PIPELINE: tuple[tuple[str, Callable[[FastAPI, Settings], None]], ...] = (
    ("cors", install_cors),
    ("body_parse", install_body_parser),
    ("routes", install_public_routes),
    ("auth_gate", install_auth_gate),
    ("error_translator", install_error_translator),
)


def build_pipeline(app: FastAPI, settings: Settings) -> tuple[str, ...]:
    """Install every stage in order and return the stage names."""
    for _, install in PIPELINE:
        install(app, settings)
    stages = tuple(name for name, _ in PIPELINE)
    app.state.pipeline = stages
    return stages
