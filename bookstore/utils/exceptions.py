"""Custom exceptions for the bookstore system"""

from typing import List, Optional


class BookstoreError(Exception):
    """Base exception for the bookstore"""
    pass


class ValidationError(BookstoreError):
    """One or more field-level violations on a single candidate"""

    def __init__(self, errors: List[str], message: Optional[str] = None):
        self.errors = list(errors)
        super().__init__(message or ", ".join(self.errors))


class ConflictError(BookstoreError):
    """Duplicate key in a collection"""
    pass


class NotFoundError(BookstoreError):
    """Record does not exist"""
    pass


class OwnershipError(BookstoreError):
    """Requester is not the owner of the record"""
    pass


class AuthError(BookstoreError):
    """Authentication failure.

    ``kind`` is one of ``missing``, ``invalid``, ``expired``,
    ``user_not_found`` or ``invalid_credentials``.
    """

    MISSING = "missing"
    INVALID = "invalid"
    EXPIRED = "expired"
    USER_NOT_FOUND = "user_not_found"
    INVALID_CREDENTIALS = "invalid_credentials"

    def __init__(self, message: str, kind: str = INVALID):
        self.kind = kind
        super().__init__(message)


class StorageError(BookstoreError):
    """I/O, permission or serialization failure in a collection file"""

    def __init__(self, message: str, path: Optional[str] = None):
        self.path = path
        super().__init__(message)


class ServiceError(BookstoreError):
    """Generic failure reported by a record service (hides storage detail)"""
    pass


class ConfigError(BookstoreError):
    """Configuration error"""
    pass
