import logging
import os
import time
from contextlib import asynccontextmanager
from typing import Optional

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

# Load env from backend/.env
backend_dir = os.path.dirname(os.path.abspath(__file__))
if "PYTEST_CURRENT_TEST" not in os.environ:
    load_dotenv(dotenv_path=os.path.join(backend_dir, ".env"))

from backend.api import admin, health, studio
from backend.core.config import StudioConfig, build_studio_config, settings, validate_config
from backend.core.database import create_all_tables, dispose_engine, init_engine
from backend.core.errors import (
    AppError,
    app_error_handler,
    http_error_handler,
    unhandled_exception_handler,
)
from backend.core.logging import configure_logging
from backend.core.middleware.request_id import RequestIdMiddleware
from backend.core.validation import validate_env
from backend.features.ai.adapter import GenerativeAdapter
from backend.features.leads.service import LeadStore
from backend.features.studio.sessions import SESSION_HEADER, SessionRegistry

configure_logging(settings.ENV)
validate_env()
validate_config(strict=getattr(settings, "CONFIG_STRICT", False))


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger = logging.getLogger("codeprompt")
    logger.info("Starting prompt studio backend...")
    app.state.startup_time = time.time()
    if app.state.leads is not None:
        create_all_tables()
    try:
        yield
    finally:
        if app.state.leads is not None:
            dispose_engine()
        logger.info("Stopping prompt studio backend...")


def create_app(
    config: Optional[StudioConfig] = None,
    adapter: Optional[GenerativeAdapter] = None,
    leads: Optional[LeadStore] = None,
) -> FastAPI:
    """Assemble the service; collaborators default to the ones described by settings."""
    config = config or build_studio_config()
    if leads is None and config.remote_enabled:
        init_engine(config.remote.database_url)
        leads = LeadStore(default_limit=config.usage.default_lead_limit)

    app = FastAPI(title="Prompt Studio - Backend", lifespan=lifespan)
    app.state.config = config
    app.state.adapter = adapter or GenerativeAdapter(config.generation)
    app.state.leads = leads if config.remote_enabled else None
    app.state.sessions = SessionRegistry(config, app.state.adapter, app.state.leads)

    app.add_middleware(RequestIdMiddleware)

    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[o.strip() for o in settings.CORS_ORIGINS.split(",") if o.strip()],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[SESSION_HEADER, "x-request-id"],
    )

    app.include_router(health.router, tags=["health"])
    app.include_router(health.root_router, tags=["health"])
    app.include_router(studio.router, tags=["studio"])
    app.include_router(admin.router, tags=["admin"])
    return app


app = create_app()
