"""Error normalization and handlers."""

import logging
from typing import Optional
from uuid import uuid4

from fastapi import HTTPException
from fastapi.responses import JSONResponse
from starlette.requests import Request

from backend.core.logging import get_request_id


class AppError(Exception):
    code = "app_error"
    status_code = 500

    def __init__(self, message: str, *, code: Optional[str] = None, status_code: Optional[int] = None, request_id: Optional[str] = None):
        super().__init__(message)
        self.message = message
        if code:
            self.code = code
        if status_code:
            self.status_code = status_code
        self.request_id = request_id


class ValidationError(AppError, ValueError):
    code = "validation_error"
    status_code = 400


class NotFoundError(AppError, ValueError):
    code = "not_found"
    status_code = 404


class ConflictError(AppError):
    code = "conflict"
    status_code = 409


class StageOrderError(ConflictError):
    """An operation was requested before the step it depends on succeeded."""
    code = "stage_order"


class AccessDeniedError(AppError):
    """Registration missing or free usage exhausted; drives the registration prompt."""
    code = "registration_required"
    status_code = 403

    def __init__(self, message: str, *, limit_reached: bool = False, **kwargs):
        super().__init__(message, **kwargs)
        self.limit_reached = limit_reached


class RemoteStoreDisabledError(AppError):
    code = "remote_store_disabled"
    status_code = 503


class GenerationError(AppError):
    """Any failure while building, issuing or shaping a generation call."""
    code = "generation_failed"
    status_code = 502


class MissingInputError(GenerationError, ValueError):
    code = "validation_error"
    status_code = 400


class DownstreamError(GenerationError):
    code = "upstream_error"
    status_code = 502


class ResponseShapeError(GenerationError):
    code = "invalid_response"
    status_code = 502


def _extract_request_id(request: Request, fallback: Optional[str] = None) -> str:
    return (
        getattr(request.state, "request_id", None)
        or get_request_id()
        or fallback
        or str(uuid4())
    )


def _error_payload(code: str, message: str, request_id: str, **extra) -> dict:
    error = {"code": code, "message": message, "request_id": request_id}
    error.update(extra)
    return {
        "error": error,
        "detail": message,
    }


async def app_error_handler(request: Request, exc: AppError):
    rid = exc.request_id or _extract_request_id(request)
    extra = {}
    if isinstance(exc, AccessDeniedError):
        extra["limit_reached"] = exc.limit_reached
    payload = _error_payload(exc.code, exc.message, rid, **extra)
    logger = logging.getLogger("codeprompt")
    log_level = logging.ERROR if exc.status_code >= 500 else logging.WARNING
    logger.log(
        log_level,
        "app.error",
        extra={"request_id": rid, "error_code": exc.code, "error_message": exc.message, "status": exc.status_code},
    )
    response = JSONResponse(status_code=exc.status_code, content=payload)
    response.headers["x-request-id"] = rid
    return response


async def http_error_handler(request: Request, exc: HTTPException):
    rid = _extract_request_id(request)
    code = "not_found" if exc.status_code == 404 else "http_error"
    message = exc.detail if exc.detail else "HTTP error"
    payload = _error_payload(code, message, rid)
    logger = logging.getLogger("codeprompt")
    logger.warning("http.error", extra={"request_id": rid, "error_code": code, "status": exc.status_code})
    response = JSONResponse(status_code=exc.status_code, content=payload)
    response.headers["x-request-id"] = rid
    return response


async def unhandled_exception_handler(request: Request, exc: Exception):
    rid = _extract_request_id(request)
    logger = logging.getLogger("codeprompt")
    logger.error("unhandled.exception", exc_info=True, extra={"request_id": rid, "error_code": "internal_error"})
    payload = _error_payload(
        "internal_error",
        "Ops! Algo deu errado. Recarregue a página para tentar novamente.",
        rid,
        recovery="reload",
    )
    response = JSONResponse(status_code=500, content=payload)
    response.headers["x-request-id"] = rid
    return response
