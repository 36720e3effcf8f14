"""Collection statistics"""

from typing import Any, Dict

from .book_service import BookService
from .user_service import UserService


def get_data_stats(users: UserService, books: BookService) -> Dict[str, Any]:
    """Counts and latest timestamps for users and books, plus books per genre."""
    user_records = users.all()
    book_records = books.all()

    by_genre: Dict[str, int] = {}
    for book in book_records:
        genre = book.get("genre")
        by_genre[genre] = by_genre.get(genre, 0) + 1

    return {
        "users": {
            "total": len(user_records),
            "lastRegistered": user_records[-1].get("createdAt") if user_records else None,
        },
        "books": {
            "total": len(book_records),
            "byGenre": by_genre,
            "lastAdded": book_records[-1].get("createdAt") if book_records else None,
        },
    }
