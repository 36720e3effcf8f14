"""
Book catalogue service.

Books are unique by (title, author), compared case-insensitively, and can
only be changed or removed by the user who added them.
"""

from typing import Any, Dict, List, Optional

from ..models.book import Book
from ..stores.collection_store import Record
from ..utils.exceptions import ValidationError
from .record_service import RecordService, filter_records, now_iso, new_id
from .validators import parse_int, validate_book, validate_search_params

SEARCH_FIELDS = ("genre", "author", "title", "year")


class BookService(RecordService):
    """CRUD, listing and search over books.json"""

    entity = "book"
    collection = "books"
    numeric_fields = ("publishedYear",)
    conflict_message = "A book with this title by this author already exists"

    def validate(self, candidate: Dict[str, Any]) -> List[str]:
        return validate_book(candidate)

    def normalize(self, candidate: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "title": candidate["title"].strip(),
            "author": candidate["author"].strip(),
            "genre": candidate["genre"].strip(),
            "publishedYear": parse_int(candidate["publishedYear"]),
        }

    def unique_key(self, record: Dict[str, Any]) -> Optional[Any]:
        title = record.get("title")
        author = record.get("author")
        if title is None or author is None:
            return None
        return (str(title).strip().lower(), str(author).strip().lower())

    def owner_of(self, record: Record) -> Optional[str]:
        return record.get("userId")

    def build_record(self, data: Dict[str, Any], owner_id: Optional[str]) -> Record:
        now = now_iso()
        book = Book(
            id=new_id(),
            user_id=owner_id,
            created_at=now,
            updated_at=now,
            published_year=data["publishedYear"],
            title=data["title"],
            author=data["author"],
            genre=data["genre"],
        )
        return book.to_record()

    def list_books(
        self,
        page: Any = 1,
        limit: Any = 10,
        genre: Optional[str] = None,
        author: Optional[str] = None,
        title: Optional[str] = None,
    ):
        return self.list({"genre": genre, "author": author, "title": title}, page, limit)

    def search(
        self,
        genre: Optional[str] = None,
        author: Optional[str] = None,
        title: Optional[str] = None,
        year: Any = None,
    ) -> List[Record]:
        """Unpaginated search; at least one criterion is required."""
        raw = {"genre": genre, "author": author, "title": title, "year": year}
        if not any(raw[k] for k in SEARCH_FIELDS):
            raise ValidationError(
                ["At least one search parameter is required (genre, author, title, or year)"]
            )
        criteria = validate_search_params(raw)
        filters: Dict[str, Any] = {k: criteria[k] for k in ("genre", "author", "title") if k in criteria}
        if year:
            # an out-of-range or unparseable year matches nothing
            filters["publishedYear"] = criteria.get("year", -1)
        return filter_records(self.all(), filters, self.numeric_fields)

    def list_for_owner(self, user_id: str) -> List[Record]:
        return [b for b in self.all() if b.get("userId") == user_id]
