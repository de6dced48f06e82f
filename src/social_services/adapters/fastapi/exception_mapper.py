"""FastAPI adapter – FastAPIExceptionMapper."""
from __future__ import annotations

from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from social_services.kernel.errors import BaseError
from social_services.observability.logging import get_logger

logger = get_logger(__name__)


class FastAPIExceptionMapper:
    """Register the error → HTTP status mapping on a FastAPI app.

    Every :class:`BaseError` answers with its own ``http_status``:

    ``InvalidQueryError`` / ``ValidationError`` → 400
    ``UnauthorizedError``   → 401
    ``ForbiddenError``      → 403
    ``NotFoundError``       → 404
    ``ConflictError``       → 409
    ``DomainError``         → 422
    ``StorageError`` / ``ExternalServiceError`` / ``InfrastructureError`` → 503
    ``TimeoutError``        → 504

    Error body schema::

        {"code": "invalid_query", "message": "...", "detail": {...}, "errors": [...]}

    The driver exception behind an infrastructure error is logged, never
    returned to the client.
    """

    def register(self, app: FastAPI) -> None:
        app.add_exception_handler(BaseError, self.handle)  # type: ignore[arg-type]

    async def handle(self, request: Request, exc: BaseError) -> JSONResponse:
        status = exc.http_status
        body: dict[str, Any] = exc.to_dict()
        body.pop("cause", None)
        if status >= 500:
            logger.error(
                "http.error",
                path=request.url.path,
                status=status,
                code=exc.code,
                cause=repr(exc.cause) if exc.cause is not None else None,
            )
        else:
            logger.info("http.rejected", path=request.url.path, status=status, code=exc.code)
        return JSONResponse(status_code=status, content=body)


__all__ = ["FastAPIExceptionMapper"]
