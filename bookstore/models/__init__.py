from .book import Book
from .user import User, UserPublic

__all__ = ["Book", "User", "UserPublic"]
