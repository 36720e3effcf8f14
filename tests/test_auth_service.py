import json

import pytest

from bookstore.app import BookstoreApp
from bookstore.auth.tokens import TokenService
from bookstore.utils.exceptions import AuthError, ConflictError, ValidationError


def test_register_stores_hash_and_returns_public_profile(bookstore):
    result = bookstore.auth.register("Alice@X.com", "secret1", "Alice")

    assert result.user.email == "alice@x.com"
    assert result.user.name == "Alice"
    assert result.expires_in == "24h"
    assert "password" not in result.to_dict()["user"]

    stored = json.loads(bookstore.users_store.path.read_text(encoding="utf-8"))
    assert len(stored) == 1
    assert stored[0]["password"].startswith("$2b$04$")
    assert "secret1" not in bookstore.users_store.path.read_text(encoding="utf-8")


def test_register_token_authenticates(bookstore):
    result = bookstore.auth.register("a@x.com", "secret1")
    claims = bookstore.auth.authenticate(result.token)
    assert claims.subject_id == result.user.id
    assert claims.email == "a@x.com"


@pytest.mark.parametrize(
    "email, password, message",
    [
        ("", "secret1", "Email and password are required"),
        ("a@x.com", None, "Email and password are required"),
        ("not-an-email", "secret1", "Please provide a valid email address"),
        ("a@x.com", "12345", "Password must be at least 6 characters long"),
    ],
)
def test_register_rejects_bad_input(bookstore, email, password, message):
    with pytest.raises(ValidationError, match=message):
        bookstore.auth.register(email, password)
    assert bookstore.users.all() == []


def test_register_duplicate_email(bookstore):
    bookstore.auth.register("a@x.com", "secret1")
    with pytest.raises(ConflictError, match="User with this email already exists"):
        bookstore.auth.register("A@X.COM", "another1")


def test_login_stamps_last_login(bookstore):
    registered = bookstore.auth.register("a@x.com", "secret1")
    assert registered.user.last_login is None

    result = bookstore.auth.login("A@x.com", "secret1")

    assert result.user.id == registered.user.id
    assert result.user.last_login is not None
    assert bookstore.auth.get_profile(registered.user.id).last_login == result.user.last_login


def test_login_failures_share_one_message(bookstore):
    bookstore.auth.register("a@x.com", "secret1")

    with pytest.raises(AuthError) as wrong_password:
        bookstore.auth.login("a@x.com", "wrong-password")
    with pytest.raises(AuthError) as unknown_user:
        bookstore.auth.login("nobody@x.com", "secret1")

    assert str(wrong_password.value) == str(unknown_user.value) == "Invalid email or password"
    assert wrong_password.value.kind == AuthError.INVALID_CREDENTIALS


def test_login_requires_both_fields(bookstore):
    with pytest.raises(ValidationError, match="Email and password are required"):
        bookstore.auth.login("a@x.com", "")


def test_token_for_deleted_user_is_rejected(bookstore):
    result = bookstore.auth.register("a@x.com", "secret1")
    bookstore.users.delete(result.user.id, requester_id=result.user.id)

    with pytest.raises(AuthError) as exc_info:
        bookstore.auth.authenticate(result.token)
    assert exc_info.value.kind == AuthError.USER_NOT_FOUND


def test_expired_token_is_distinguished(settings, clock):
    app = BookstoreApp(settings, token_service=TokenService("secret", clock=clock))
    app.initialize()
    token = app.auth.register("a@x.com", "secret1").token

    clock.advance(24 * 3600)

    with pytest.raises(AuthError) as exc_info:
        app.auth.authenticate(token)
    assert exc_info.value.kind == AuthError.EXPIRED


def test_register_and_login_scenario(bookstore, book_payload):
    alice = bookstore.auth.register("alice@x.com", "secret1", "Alice")
    bob = bookstore.auth.register("bob@x.com", "secret2", "Bob")

    claims = bookstore.auth.authenticate(bookstore.auth.login("alice@x.com", "secret1").token)
    book = bookstore.books.create(book_payload(), owner_id=claims.subject_id)

    assert book["userId"] == alice.user.id
    assert bookstore.books.list_for_owner(bob.user.id) == []
