"""
FastAPI dependencies for the bookstore container and bearer authentication.
"""

from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from bookstore.app import BookstoreApp
from bookstore.auth.tokens import TokenClaims
from bookstore.utils.exceptions import AuthError

security = HTTPBearer(auto_error=False)


def get_bookstore(request: Request) -> BookstoreApp:
    return request.app.state.bookstore


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    bookstore: BookstoreApp = Depends(get_bookstore),
) -> TokenClaims:
    """Resolve the bearer token to its claims; 401 via the AuthError handler otherwise."""
    if credentials is None or not credentials.credentials:
        raise AuthError(
            "Please provide a valid authentication token in the Authorization header",
            kind=AuthError.MISSING,
        )
    return bookstore.auth.authenticate(credentials.credentials)
