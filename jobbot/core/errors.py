"""
jobbot/core/errors.py

Purpose: Error responses for the HTTP surface

- Operator routes (/health, /ready, ...) answer with an ErrorResponse body
- The Telegram webhook answers in the Bot API shape {"ok": false, ...}
- On the webhook, only rejected secrets and transient outages (503) answer
  non-2xx; Telegram redelivers those, every other failure is acknowledged
  so the same update is not pushed again
"""

from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from starlette.exceptions import HTTPException as StarletteHTTPException

from jobbot.core.config import settings
from jobbot.core.exceptions import AuthenticationError, JobBotError
from jobbot.core.logging import get_logger
from utils.constants import WEBHOOK_ROUTE

logger = get_logger(__name__)

REDELIVERED_STATUSES = {AuthenticationError().status_code, 503}


class ErrorResponse(BaseModel):
    """
    Error body for operator routes.
    """
    error: str
    code: str
    details: Optional[Any] = None


class WebhookErrorResponse(BaseModel):
    """
    Error body for the Telegram webhook, shaped like a Bot API reply.
    """
    ok: bool = False
    error_code: int
    description: str


def is_webhook_request(request: Request) -> bool:
    return request.method == "POST" and request.url.path.endswith(WEBHOOK_ROUTE)


def error_response(
    request: Request,
    status_code: int,
    message: str,
    code: str,
    details: Optional[Any] = None,
) -> JSONResponse:
    if is_webhook_request(request):
        body = WebhookErrorResponse(error_code=status_code, description=f"{code}: {message}")
        answered = status_code if status_code in REDELIVERED_STATUSES else 200
        return JSONResponse(status_code=answered, content=body.model_dump())

    body = ErrorResponse(error=message, code=code, details=details)
    return JSONResponse(status_code=status_code, content=body.model_dump())


def add_exception_handlers(app: FastAPI):
    """
    Registers exception handlers with the FastAPI app.
    """
    @app.exception_handler(JobBotError)
    async def jobbot_exception_handler(request: Request, exc: JobBotError):
        if isinstance(exc, AuthenticationError):
            client = request.client.host if request.client else "unknown"
            logger.warning(f"🔒 Rejected {request.url.path} from {client}: {exc.message}")
        else:
            logger.error(f"{exc.code} on {request.method} {request.url.path}: {exc.message}")
        return error_response(request, exc.status_code, exc.message, exc.code, exc.details)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return error_response(request, exc.status_code, str(exc.detail), "HTTP_ERROR")

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """
        Malformed bodies; on the webhook this is an update we cannot parse.
        """
        logger.warning(f"Rejected malformed body on {request.url.path}")
        return error_response(
            request, 422, "Input validation failed", "VALIDATION_ERROR", jsonable_errors(exc)
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(
            f"Unhandled exception on {request.method} {request.url.path}: {exc}",
            exc_info=True
        )
        message = "An internal error occurred" if settings.is_production else str(exc)
        return error_response(request, 500, message, "INTERNAL_ERROR")


def jsonable_errors(exc: RequestValidationError):
    """Pydantic error list with non-serializable context values stringified."""
    errors = []
    for error in exc.errors():
        error = dict(error)
        if "ctx" in error:
            error["ctx"] = {key: str(value) for key, value in error["ctx"].items()}
        errors.append(error)
    return errors
