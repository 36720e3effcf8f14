"""FastAPI application for the bookstore API"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from bookstore.app import BookstoreApp
from bookstore.utils.logger import get_logger
from .auth_routes import router as auth_router
from .book_routes import router as book_router
from .errors import register_exception_handlers
from .middleware import RequestLoggingMiddleware

logger = get_logger(__name__)


def create_app(bookstore: Optional[BookstoreApp] = None) -> FastAPI:
    """
    Build the API around a ``BookstoreApp``.

    Without an explicit container one is built from ``load_settings()``.
    """
    bookstore = bookstore or BookstoreApp()
    bookstore.initialize()
    settings = bookstore.settings

    app = FastAPI(
        title=settings.app.name,
        description="Book catalogue with per-user ownership, backed by JSON files",
        version=settings.app.version,
    )
    app.state.bookstore = bookstore

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.server.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestLoggingMiddleware)

    register_exception_handlers(app, show_details=settings.app.environment.lower() == "development")
    app.include_router(auth_router)
    app.include_router(book_router)

    @app.get("/health")
    def health() -> Dict[str, Any]:
        return {
            "status": "OK",
            "message": f"{settings.app.name} is running",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "version": settings.app.version,
        }

    @app.get("/")
    def root() -> Dict[str, Any]:
        return {
            "message": f"Welcome to {settings.app.name}",
            "version": settings.app.version,
            "endpoints": {
                "auth": {
                    "register": "POST /api/auth/register",
                    "login": "POST /api/auth/login",
                    "profile": "GET /api/auth/profile",
                },
                "books": {
                    "getAllBooks": "GET /api/books",
                    "getBookById": "GET /api/books/:id",
                    "searchBooks": "GET /api/books/search?genre=",
                    "myBooks": "GET /api/books/user/my-books",
                    "createBook": "POST /api/books",
                    "updateBook": "PUT /api/books/:id",
                    "deleteBook": "DELETE /api/books/:id",
                },
            },
        }

    logger.info("API application created", environment=settings.app.environment)
    return app
