"""
Health and diagnostics API.

Lightweight endpoints for operational monitoring without exposing secrets.
"""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Request

from backend.core.database import check_connection

logger = logging.getLogger("codeprompt")

router = APIRouter(prefix="/api/health", tags=["health"])
root_router = APIRouter(tags=["health"])


@root_router.get("/healthz")
def healthz():
    """Lightweight liveness check (no deps)."""
    return {"status": "ok"}


@router.get("/config")
def health_config(request: Request):
    """Which collaborators are configured; never echoes keys or URLs."""
    config = request.app.state.config
    adapter = request.app.state.adapter
    remote_ok = None
    if config.remote_enabled:
        remote_ok = check_connection()
    return {
        "generation_configured": adapter.configured,
        "generation_model": config.generation.model,
        "remote_store_configured": config.remote_enabled,
        "remote_store_reachable": remote_ok,
        "local_store": "file" if config.local_store_dir else "memory",
        "free_uses_per_feature": config.usage.free_uses_per_feature,
        "computed_at": datetime.now(timezone.utc).isoformat(),
    }
