"""
Authentication routes.

Prefix: /api/auth
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from bookstore.app import BookstoreApp
from bookstore.auth.tokens import TokenClaims
from .auth_deps import get_bookstore, get_current_user
from .models import LoginRequest, RegisterRequest

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/register", status_code=status.HTTP_201_CREATED)
def register(payload: RegisterRequest, bookstore: BookstoreApp = Depends(get_bookstore)) -> Any:
    """
    Register a new user.

    Response:
        {
          "message": "User registered successfully",
          "user": {"id": "...", "email": "...", "name": "...", "createdAt": "..."},
          "token": "<bearer token>",
          "expiresIn": "24h"
        }
    """
    result = bookstore.auth.register(payload.email, payload.password, payload.name)
    return JSONResponse(
        status_code=status.HTTP_201_CREATED,
        content={"message": "User registered successfully", **result.to_dict()},
    )


@router.post("/login")
def login(payload: LoginRequest, bookstore: BookstoreApp = Depends(get_bookstore)) -> Dict[str, Any]:
    """Log in an existing user. Same response shape as /register."""
    result = bookstore.auth.login(payload.email, payload.password)
    return {"message": "Login successful", **result.to_dict()}


@router.get("/profile")
def profile(
    current_user: TokenClaims = Depends(get_current_user),
    bookstore: BookstoreApp = Depends(get_bookstore),
) -> Dict[str, Any]:
    """Return the authenticated user's profile."""
    return {"user": bookstore.auth.get_profile(current_user.subject_id).to_dict()}
