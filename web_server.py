"""Web server entry point for the bookstore API"""

import uvicorn
from dotenv import load_dotenv

# Load environment variables from .env file BEFORE reading settings
load_dotenv()

from bookstore.app import BookstoreApp
from bookstore.utils.config import load_settings
from bookstore.utils.logger import setup_logger
from bookstore_web.main import create_app


def main() -> None:
    settings = load_settings()
    setup_logger(
        log_level=settings.logging.level,
        log_format=settings.logging.format,
        file_path=settings.logging.file_path,
        max_bytes=settings.logging.max_bytes,
        backup_count=settings.logging.backup_count,
    )

    app = create_app(BookstoreApp(settings))

    print(f"Starting {settings.app.name} ({settings.app.environment})...")
    print(f"Server will be available at: http://localhost:{settings.server.port}")

    # single worker: collection locks are per process
    uvicorn.run(
        app,
        host=settings.server.host,
        port=settings.server.port,
        log_level=settings.logging.level.lower(),
    )


if __name__ == "__main__":
    main()
