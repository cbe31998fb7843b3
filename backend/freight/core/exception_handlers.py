from typing import Any, Callable, Coroutine

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.responses import Response

from freight.core.exceptions import FreightError
from freight.core.logging_config import get_logger

logger = get_logger(__name__)

ExceptionHandler = Callable[[Request, Exception], Coroutine[Any, Any, Response]]


def failure(message: str, status_code: int) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": message})


async def freight_error_handler(request: Request, exc: Exception) -> JSONResponse:
    error = exc if isinstance(exc, FreightError) else FreightError(str(exc))
    if error.status_code >= 500:
        logger.error(f"❌ {request.method} {request.url.path}: {error.message}")
    return failure(error.message, error.status_code)


async def validation_error_handler(request: Request, exc: Exception) -> JSONResponse:
    errors = exc.errors() if isinstance(exc, RequestValidationError) else []
    parts = []
    for err in errors:
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return failure("; ".join(parts) or "Invalid request.", status.HTTP_400_BAD_REQUEST)


async def general_500_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"❌ Unhandled exception on {request.method} {request.url.path}: {exc}", exc_info=exc)
    return failure("Internal server error. Please try again.", status.HTTP_500_INTERNAL_SERVER_ERROR)


EXCEPTION_HANDLERS: dict[type[Exception], ExceptionHandler] = {
    FreightError: freight_error_handler,
    RequestValidationError: validation_error_handler,
    Exception: general_500_exception_handler,
}


def register_exception_handlers(app: FastAPI) -> None:
    for exception_class, handler in EXCEPTION_HANDLERS.items():
        app.add_exception_handler(exception_class, handler)
