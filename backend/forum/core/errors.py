# forum/core/errors.py
"""
Application-wide exception handlers.
Every failure leaves the API as a JSON body of the form {"error": <message>}.
"""
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger("uvicorn.error")


def _validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    # loc looks like ("body", "title"); drop the source segment
    field = ".".join(str(p) for p in first.get("loc", ())[1:])
    msg = first.get("msg", "Invalid value")
    return f"{field}: {msg}" if field else msg


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": _validation_message(exc)},
    )


class UnhandledErrorMiddleware(BaseHTTPMiddleware):
    """
    Turns any exception escaping a route into a 500 {"error": "Server error"}.

    The exception is logged here once and does not reach Starlette's
    ServerErrorMiddleware.
    """

    async def dispatch(self, request: Request, call_next):
        try:
            return await call_next(request)
        except Exception:
            logger.exception("[error] %s %s failed", request.method, request.url.path)
            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content={"error": "Server error"},
            )


def register_exception_handlers(app: FastAPI) -> None:
    """
    Install the JSON error handlers. Call before adding CORS so error
    responses still pass through the CORS middleware.
    """
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_middleware(UnhandledErrorMiddleware)
