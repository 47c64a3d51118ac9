from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse

from filestore.api.presigned import create_presigned_router
from filestore.logging_config import setup_logging
from filestore.schemas.common import ErrorResponse
from filestore.storage.exceptions import InvalidInputError, NotFoundError, TransportError

# Setup application logging
logger = setup_logging()


def _error(status_code: int, error: str, message: str, extra: dict | None = None) -> JSONResponse:
    content = ErrorResponse(error=error, message=message).model_dump()
    if extra:
        content.update(extra)
    return JSONResponse(status_code=status_code, content=content)


async def invalid_input_handler(request: Request, exc: InvalidInputError):
    logger.warning(f"Invalid input: {exc}")
    return _error(400, "Bad Request", str(exc))


async def not_found_handler(request: Request, exc: NotFoundError):
    return _error(404, "Not Found", str(exc))


async def transport_error_handler(request: Request, exc: TransportError):
    # Medium failures keep their status and code so callers can decide to retry
    logger.error(
        f"Storage transport failure: {exc}",
        extra={"path": request.url.path, "method": request.method},
    )
    return _error(
        502,
        "Bad Gateway",
        "Storage backend request failed",
        {"status_code": exc.status_code, "code": exc.code},
    )


async def http_exception_handler(request: Request, exc: HTTPException):
    """Unwrap the 'detail' field from HTTPException responses."""
    content = exc.detail

    if isinstance(content, dict):
        return JSONResponse(status_code=exc.status_code, content=content)

    return _error(exc.status_code, "Error", str(content))


async def generic_exception_handler(request: Request, exc: Exception):
    # Log detailed error for debugging (includes stack trace)
    logger.error(
        f"Unhandled exception: {exc.__class__.__name__}: {str(exc)}",
        exc_info=True,
        extra={
            "path": request.url.path,
            "method": request.method,
        },
    )

    # Return safe, static message to client (no internal details exposed)
    return _error(500, "Internal Server Error", "An unexpected error occurred")


def create_app(api_path: str | None = None, enable_upload: bool | None = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        api_path: Path prefix of the file routes (default from config)
        enable_upload: Whether the relay upload route is served (default from config)
    """
    app = FastAPI(title="File Storage API")

    app.add_exception_handler(InvalidInputError, invalid_input_handler)
    app.add_exception_handler(NotFoundError, not_found_handler)
    app.add_exception_handler(TransportError, transport_error_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)

    app.include_router(create_presigned_router(api_path, enable_upload))

    return app


app = create_app()
