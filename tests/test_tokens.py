from datetime import timedelta

import pytest

from bookstore.auth.tokens import TokenService
from bookstore.utils.exceptions import AuthError

DAY = 24 * 3600


def test_issue_and_verify_claims(clock):
    service = TokenService("secret", clock=clock)
    token = service.issue("user-1", "a@x.com")

    claims = service.verify(token)

    assert claims.subject_id == "user-1"
    assert claims.email == "a@x.com"
    assert claims.issued_at == int(clock.now)
    assert claims.expires_at == int(clock.now) + DAY


def test_token_valid_until_just_before_24_hours(clock):
    service = TokenService("secret", clock=clock)
    token = service.issue("user-1", "a@x.com")

    service.verify(token)
    clock.advance(DAY - 1)
    assert service.verify(token).subject_id == "user-1"


def test_token_expired_at_exactly_24_hours(clock):
    service = TokenService("secret", clock=clock)
    token = service.issue("user-1", "a@x.com")

    clock.advance(DAY)
    with pytest.raises(AuthError) as exc_info:
        service.verify(token)
    assert exc_info.value.kind == AuthError.EXPIRED

    clock.advance(DAY * 10)
    with pytest.raises(AuthError) as exc_info:
        service.verify(token)
    assert exc_info.value.kind == AuthError.EXPIRED


def test_custom_lifetime(clock):
    service = TokenService("secret", lifetime=timedelta(minutes=5), clock=clock)
    token = service.issue("user-1", "a@x.com")
    clock.advance(299)
    service.verify(token)
    clock.advance(1)
    with pytest.raises(AuthError, match="expired"):
        service.verify(token)


def test_tampered_token_is_invalid(clock):
    service = TokenService("secret", clock=clock)
    token = service.issue("user-1", "a@x.com")

    with pytest.raises(AuthError) as exc_info:
        service.verify("x" + token)
    assert exc_info.value.kind == AuthError.INVALID


def test_token_signed_with_other_secret_is_invalid(clock):
    token = TokenService("other-secret", clock=clock).issue("user-1", "a@x.com")
    with pytest.raises(AuthError) as exc_info:
        TokenService("secret", clock=clock).verify(token)
    assert exc_info.value.kind == AuthError.INVALID


def test_garbage_and_empty_tokens():
    service = TokenService("secret")
    with pytest.raises(AuthError) as exc_info:
        service.verify("not-a-token")
    assert exc_info.value.kind == AuthError.INVALID

    with pytest.raises(AuthError) as exc_info:
        service.verify("")
    assert exc_info.value.kind == AuthError.MISSING


def test_missing_secret_still_operates_with_per_process_secret(clock):
    first = TokenService(None, clock=clock)
    token = first.issue("user-1", "a@x.com")
    assert first.verify(token).subject_id == "user-1"

    # a second process (new service) has a different random secret
    with pytest.raises(AuthError):
        TokenService(None, clock=clock).verify(token)


def test_expires_in_label():
    assert TokenService("secret").expires_in == "24h"
    assert TokenService("secret", lifetime=timedelta(seconds=90)).expires_in == "90s"
