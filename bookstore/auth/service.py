"""
Authentication service layer.

- Email/password users with bcrypt hashes, stored through ``UserService``
- Stateless signed bearer tokens from ``TokenService``
- Plain passwords are never stored or logged
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

from ..models.user import UserPublic
from ..services.user_service import UserService
from ..services.validators import MIN_PASSWORD_LENGTH, validate_email, validate_password
from ..utils.exceptions import AuthError, ConflictError, NotFoundError, ValidationError
from ..utils.logger import get_logger
from .passwords import DEFAULT_ROUNDS, hash_password, verify_password
from .tokens import TokenClaims, TokenService

logger = get_logger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"


@dataclass
class AuthResult:
    user: UserPublic
    token: str
    expires_in: str

    def to_dict(self) -> Dict[str, Any]:
        return {"user": self.user.to_dict(), "token": self.token, "expiresIn": self.expires_in}


class AuthService:
    """Registration, login, profile lookup and token authentication"""

    def __init__(self, users: UserService, tokens: TokenService, bcrypt_rounds: int = DEFAULT_ROUNDS):
        self.users = users
        self.tokens = tokens
        self.bcrypt_rounds = bcrypt_rounds

    def register(self, email: Optional[str], password: Optional[str], name: Optional[str] = None) -> AuthResult:
        """
        Create a user and issue a token.

        Raises:
            ValidationError: missing email/password, bad email, short password
            ConflictError: email already registered (case-insensitive)
        """
        if not email or not password:
            raise ValidationError(["Email and password are required"])
        if not validate_email(email):
            raise ValidationError(["Please provide a valid email address"])
        if not validate_password(password):
            raise ValidationError([f"Password must be at least {MIN_PASSWORD_LENGTH} characters long"])

        # UserService.create re-checks under the collection lock
        if self.users.find_by_email(email) is not None:
            raise ConflictError(self.users.conflict_message)

        record = self.users.create(
            {"email": email, "name": name, "password": hash_password(password, self.bcrypt_rounds)}
        )
        user = self.users.get_user(record["id"])
        logger.info("User registered", user_id=user.id)
        return AuthResult(
            user=user.public(),
            token=self.tokens.issue(user.id, user.email),
            expires_in=self.tokens.expires_in,
        )

    def login(self, email: Optional[str], password: Optional[str]) -> AuthResult:
        """
        Check credentials, stamp ``lastLogin`` and issue a token.

        Unknown email and wrong password fail with the same message.
        """
        if not email or not password:
            raise ValidationError(["Email and password are required"])

        user = self.users.find_by_email(email)
        if user is None or not verify_password(password, user.password_hash):
            logger.warning("Failed login attempt")
            raise AuthError(INVALID_CREDENTIALS, kind=AuthError.INVALID_CREDENTIALS)

        user = self.users.touch_login(user.id)
        logger.info("User logged in", user_id=user.id)
        return AuthResult(
            user=user.public(),
            token=self.tokens.issue(user.id, user.email),
            expires_in=self.tokens.expires_in,
        )

    def get_profile(self, user_id: str) -> UserPublic:
        return self.users.get_user(user_id).public()

    def authenticate(self, token: Optional[str]) -> TokenClaims:
        """Verify ``token`` and make sure its subject still exists."""
        claims = self.tokens.verify(token or "")
        try:
            self.users.get_by_id(claims.subject_id)
        except NotFoundError:
            raise AuthError(
                "The user associated with this token no longer exists",
                kind=AuthError.USER_NOT_FOUND,
            )
        return claims
