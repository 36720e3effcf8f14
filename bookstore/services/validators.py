"""Input validation helpers for users, books, pagination and search"""

import re
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
MIN_PASSWORD_LENGTH = 6

MIN_PUBLISHED_YEAR = 1000
TITLE_MAX = 200
AUTHOR_MAX = 100
GENRE_MAX = 50

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 50


def current_year() -> int:
    return datetime.now(timezone.utc).year


def validate_email(email: Any) -> bool:
    return isinstance(email, str) and bool(EMAIL_RE.match(email))


def validate_password(password: Any) -> bool:
    return isinstance(password, str) and len(password) >= MIN_PASSWORD_LENGTH


def parse_int(value: Any) -> Optional[int]:
    """Leading-integer parse: 1965, "1965", " 1965 " and "1965abc" give 1965."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value == value and abs(value) != float("inf") else None
    if isinstance(value, str):
        m = re.match(r"\s*([+-]?\d+)", value)
        if m:
            return int(m.group(1))
    return None


def _check_text(errors: List[str], value: Any, label: str, max_len: int, too_long: str) -> None:
    text = value.strip() if isinstance(value, str) else ""
    if not text:
        errors.append(f"{label} is required")
    elif len(text) > max_len:
        errors.append(too_long)


def validate_book(candidate: Dict[str, Any], year: Optional[int] = None) -> List[str]:
    """
    Check a book candidate and return every violation found.

    An empty list means the candidate is valid.
    """
    errors: List[str] = []
    _check_text(errors, candidate.get("title"), "Title", TITLE_MAX,
                f"Title must be less than {TITLE_MAX} characters")
    _check_text(errors, candidate.get("author"), "Author", AUTHOR_MAX,
                f"Author name must be less than {AUTHOR_MAX} characters")
    _check_text(errors, candidate.get("genre"), "Genre", GENRE_MAX,
                f"Genre must be less than {GENRE_MAX} characters")

    raw_year = candidate.get("publishedYear")
    if raw_year is None or raw_year == "" or raw_year == 0:
        errors.append("Published year is required")
    else:
        upper = year if year is not None else current_year()
        parsed = parse_int(raw_year)
        if parsed is None:
            errors.append("Published year must be a valid number")
        elif parsed < MIN_PUBLISHED_YEAR or parsed > upper:
            errors.append(f"Published year must be between {MIN_PUBLISHED_YEAR} and {upper}")
    return errors


def sanitize_string(value: Any) -> str:
    if not isinstance(value, str):
        return ""
    return value.strip().replace("<", "").replace(">", "")


def validate_pagination(page: Any, limit: Any) -> Tuple[int, int]:
    """Clamp page to >= 1 and limit to [1, 50]; unparseable input uses the defaults."""
    page_num = parse_int(page)
    limit_num = parse_int(limit)
    if page_num is None:
        page_num = 1
    if limit_num is None:
        limit_num = DEFAULT_PAGE_SIZE
    return max(1, page_num), min(MAX_PAGE_SIZE, max(1, limit_num))


def validate_search_params(params: Dict[str, Any]) -> Dict[str, Any]:
    """Keep non-empty text criteria (sanitized) and an in-range year."""
    sanitized: Dict[str, Any] = {}
    for key in ("genre", "author", "title"):
        if params.get(key):
            sanitized[key] = sanitize_string(params[key])
    if params.get("year"):
        year = parse_int(params["year"])
        if year is not None and MIN_PUBLISHED_YEAR <= year <= current_year():
            sanitized["year"] = year
    return sanitized
