"""
Admin authentication for lead management.

The admin surface is a convenience view for the person following up on
leads. A shared key is accepted from either:
- the X-Admin-Key header, or
- the `admin_key` query parameter (hidden admin mode link).

In prod (ENVIRONMENT=prod) the query parameter is refused; only the header
is accepted there so keys do not end up in access logs.
"""
import hashlib
import hmac
import os
from dataclasses import dataclass
from typing import Optional, Literal

from fastapi import Request, HTTPException

from backend.core.config import settings


@dataclass
class AdminActor:
    """Represents an authenticated admin actor."""
    actor_id: str  # "admin:<hash>"
    auth_mechanism: Literal["x_admin_key", "query_key"] = "x_admin_key"


def get_admin_api_key() -> str | None:
    """Get admin key.
    Prefer ADMIN_API_KEY env var; fall back to settings.ADMIN_KEY.
    """
    env_key = os.getenv("ADMIN_API_KEY")
    if env_key:
        return env_key
    return settings.ADMIN_KEY


def _actor_for(key: str, mechanism: Literal["x_admin_key", "query_key"]) -> AdminActor:
    key_hash = hashlib.sha256(key.encode()).hexdigest()[:16]
    return AdminActor(actor_id=f"admin:{key_hash}", auth_mechanism=mechanism)


def get_admin_actor(request: Request) -> Optional[AdminActor]:
    """
    Attempt to authenticate admin from request.
    Returns AdminActor or None (does not raise).
    """
    expected_key = get_admin_api_key()
    if not expected_key:
        return None

    header_key = request.headers.get("X-Admin-Key", "").strip()
    if header_key and hmac.compare_digest(header_key, expected_key):
        return _actor_for(header_key, "x_admin_key")

    if settings.ENVIRONMENT.lower() == "prod":
        return None

    query_key = request.query_params.get("admin_key", "").strip()
    if query_key and hmac.compare_digest(query_key, expected_key):
        return _actor_for(query_key, "query_key")

    return None


def require_admin(request: Request) -> AdminActor:
    """
    FastAPI dependency: Require admin authentication.
    Raises HTTPException if authentication fails.

    Usage:
        @router.get("/admin/endpoint")
        def admin_endpoint(actor: AdminActor = Depends(require_admin)):
            pass
    """
    actor = get_admin_actor(request)

    if not actor:
        if not get_admin_api_key():
            raise HTTPException(
                status_code=503,
                detail={
                    "error": "Admin authentication not configured",
                    "code": "admin_auth_unconfigured",
                    "hint": "Set ADMIN_KEY",
                }
            )

        raise HTTPException(
            status_code=401,
            detail={
                "error": "Unauthorized: invalid or missing admin credentials",
                "code": "admin_unauthorized",
                "hint": "Use the X-Admin-Key header.",
            }
        )

    return actor
