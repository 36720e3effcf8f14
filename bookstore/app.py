"""Application container: wires stores and services from settings"""

from datetime import timedelta
from typing import Any, Dict, Optional

from .auth.service import AuthService
from .auth.tokens import TokenService
from .services.book_service import BookService
from .services.stats_service import get_data_stats
from .services.user_service import UserService
from .stores.collection_store import CollectionStore
from .stores.snapshot import SnapshotResult, snapshot_collections
from .utils.config import Settings, load_settings
from .utils.logger import get_logger

logger = get_logger(__name__)


class BookstoreApp:
    """Owns one store per collection and the services built on them"""

    def __init__(self, settings: Optional[Settings] = None, token_service: Optional[TokenService] = None):
        self.settings = settings or load_settings()
        data_dir = self.settings.storage.data_path()
        cache = self.settings.storage.cache_enabled

        self.users_store = CollectionStore("users", data_dir / "users.json", cache_enabled=cache)
        self.books_store = CollectionStore("books", data_dir / "books.json", cache_enabled=cache)

        self.tokens = token_service or TokenService(
            secret=self.settings.security.secret_key,
            lifetime=timedelta(hours=self.settings.security.token_lifetime_hours),
        )
        self.users = UserService(self.users_store)
        self.books = BookService(self.books_store)
        self.auth = AuthService(self.users, self.tokens, bcrypt_rounds=self.settings.security.bcrypt_rounds)

    def initialize(self) -> None:
        """Create the data directory and empty collection files."""
        self.users_store.ensure_initialized()
        self.books_store.ensure_initialized()
        logger.info(
            "Bookstore initialized",
            data_dir=str(self.settings.storage.data_path()),
            environment=self.settings.app.environment,
        )

    def snapshot(self) -> SnapshotResult:
        return snapshot_collections(
            [self.users_store, self.books_store],
            self.settings.storage.backup_path(),
        )

    def stats(self) -> Dict[str, Any]:
        return get_data_stats(self.users, self.books)
