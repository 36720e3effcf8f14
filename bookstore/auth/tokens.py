"""
Signed, time-limited bearer tokens.

Tokens are itsdangerous URL-safe timed serializations of
``{"sub": <user id>, "email": <email>, "iat": <unix seconds>}``. They are
never stored server side; verification checks the HMAC signature and that
the token is younger than the configured lifetime.

Env vars:
- BOOKSTORE_JWT_SECRET: signing secret. When unset a random per-process
  secret is generated, so tokens stop verifying after a restart.
"""

from __future__ import annotations

import secrets
import time
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Callable, Dict, Optional

from itsdangerous import BadSignature, SignatureExpired, TimestampSigner, URLSafeTimedSerializer

from ..utils.exceptions import AuthError
from ..utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_LIFETIME = timedelta(hours=24)
TOKEN_SALT = "bookstore-auth-token"

Clock = Callable[[], float]


@dataclass(frozen=True)
class TokenClaims:
    subject_id: str
    email: str
    issued_at: int
    expires_at: int


class _ClockedSigner(TimestampSigner):
    """TimestampSigner reading "now" from an injectable clock."""

    def __init__(self, *args: Any, clock: Clock = time.time, **kwargs: Any):
        super().__init__(*args, **kwargs)
        self._clock = clock

    def get_timestamp(self) -> int:
        return int(self._clock())


class TokenService:
    """Issue and verify bearer tokens"""

    def __init__(
        self,
        secret: Optional[str] = None,
        lifetime: timedelta = DEFAULT_LIFETIME,
        clock: Clock = time.time,
    ):
        if not secret:
            logger.warning(
                "No token signing secret configured; using a random per-process secret. "
                "Set BOOKSTORE_JWT_SECRET so tokens survive restarts."
            )
            secret = secrets.token_urlsafe(48)
        self.lifetime_seconds = int(lifetime.total_seconds())
        if self.lifetime_seconds < 1:
            raise ValueError("Token lifetime must be at least one second")
        self._clock = clock
        self._serializer = URLSafeTimedSerializer(
            secret_key=secret,
            salt=TOKEN_SALT,
            signer=_ClockedSigner,
            signer_kwargs={"clock": clock},
        )

    @property
    def expires_in(self) -> str:
        hours, rem = divmod(self.lifetime_seconds, 3600)
        if rem == 0:
            return f"{hours}h"
        return f"{self.lifetime_seconds}s"

    def issue(self, subject_id: str, email: str) -> str:
        payload: Dict[str, Any] = {
            "sub": subject_id,
            "email": email,
            "iat": int(self._clock()),
        }
        return self._serializer.dumps(payload)

    def verify(self, token: str) -> TokenClaims:
        """
        Return the token's claims.

        Raises:
            AuthError: kind ``invalid`` for malformed or tampered tokens,
                kind ``expired`` once ``lifetime`` has elapsed since issuance.
        """
        if not token:
            raise AuthError("Access token required", kind=AuthError.MISSING)
        try:
            # the signer rejects age > max_age; a token is already expired at age == lifetime
            data = self._serializer.loads(token, max_age=self.lifetime_seconds - 1)
        except SignatureExpired:
            raise AuthError(
                "Your authentication token has expired. Please login again.",
                kind=AuthError.EXPIRED,
            )
        except BadSignature:
            raise AuthError("The provided token is invalid", kind=AuthError.INVALID)

        if not isinstance(data, dict) or not data.get("sub") or "iat" not in data:
            raise AuthError("The provided token is invalid", kind=AuthError.INVALID)
        try:
            issued_at = int(data["iat"])
        except (TypeError, ValueError):
            raise AuthError("The provided token is invalid", kind=AuthError.INVALID)

        return TokenClaims(
            subject_id=str(data["sub"]),
            email=str(data.get("email") or ""),
            issued_at=issued_at,
            expires_at=issued_at + self.lifetime_seconds,
        )
