"""
Exception handlers: translate the bookstore error taxonomy to JSON responses.
"""

from typing import Any, Dict, List

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from bookstore.utils.exceptions import (
    AuthError,
    ConflictError,
    NotFoundError,
    OwnershipError,
    ServiceError,
    StorageError,
    ValidationError,
)
from bookstore.utils.logger import get_logger

logger = get_logger(__name__)

AUTH_ERROR_TITLES = {
    AuthError.MISSING: "Access token required",
    AuthError.INVALID: "Invalid token",
    AuthError.EXPIRED: "Token expired",
    AuthError.USER_NOT_FOUND: "User not found",
    AuthError.INVALID_CREDENTIALS: "Invalid email or password",
}

AVAILABLE_ENDPOINTS = {
    "auth": [
        "POST /api/auth/register",
        "POST /api/auth/login",
        "GET /api/auth/profile",
    ],
    "books": [
        "GET /api/books",
        "GET /api/books/:id",
        "GET /api/books/search",
        "POST /api/books",
        "PUT /api/books/:id",
        "DELETE /api/books/:id",
        "GET /api/books/user/my-books",
    ],
}


def _describe_request_error(err: Dict[str, Any]) -> str:
    loc = [str(part) for part in err.get("loc", ()) if part != "body"]
    where = ".".join(loc)
    if err.get("type") == "json_invalid":
        return "Please provide valid JSON in request body"
    return f"{where}: {err.get('msg')}" if where else str(err.get("msg"))


def register_exception_handlers(app: FastAPI, show_details: bool = False) -> None:
    """Install handlers. ``show_details`` exposes error messages on 500 responses."""

    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": str(exc), "details": exc.errors},
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        details: List[str] = [_describe_request_error(e) for e in exc.errors()]
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "Validation error", "message": ", ".join(details), "details": details},
        )

    @app.exception_handler(AuthError)
    async def auth_error_handler(request: Request, exc: AuthError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content={
                "error": AUTH_ERROR_TITLES.get(exc.kind, "Authentication failed"),
                "message": str(exc),
                "kind": exc.kind,
            },
            headers={"WWW-Authenticate": "Bearer"},
        )

    @app.exception_handler(OwnershipError)
    async def ownership_error_handler(request: Request, exc: OwnershipError) -> JSONResponse:
        return JSONResponse(status_code=status.HTTP_403_FORBIDDEN, content={"error": str(exc)})

    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
        return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"error": str(exc)})

    @app.exception_handler(ConflictError)
    async def conflict_handler(request: Request, exc: ConflictError) -> JSONResponse:
        return JSONResponse(status_code=status.HTTP_409_CONFLICT, content={"error": str(exc)})

    @app.exception_handler(ServiceError)
    @app.exception_handler(StorageError)
    async def storage_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error("Storage failure", path=request.url.path, method=request.method, error=str(exc))
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": "Internal server error",
                "message": str(exc) if show_details else "Something went wrong on our end",
            },
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        if exc.status_code == status.HTTP_404_NOT_FOUND:
            return JSONResponse(
                status_code=status.HTTP_404_NOT_FOUND,
                content={
                    "error": "Endpoint not found",
                    "message": f"Cannot {request.method} {request.url.path}",
                    "availableEndpoints": AVAILABLE_ENDPOINTS,
                },
            )
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error", path=request.url.path, method=request.method)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": "Internal server error",
                "message": str(exc) if show_details else "Something went wrong on our end",
            },
        )
