import pytest
from fastapi.testclient import TestClient

from bookstore.app import BookstoreApp
from bookstore.auth.tokens import TokenService
from bookstore_web.main import create_app
from bookstore_web.middleware import redact


@pytest.fixture
def client(bookstore):
    return TestClient(create_app(bookstore))


def _register(client, email="alice@x.com", password="secret1", name=None):
    payload = {"email": email, "password": password}
    if name:
        payload["name"] = name
    response = client.post("/api/auth/register", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


def _auth(token):
    return {"Authorization": f"Bearer {token}"}


def test_health_and_root(client):
    health = client.get("/health")
    assert health.status_code == 200
    assert health.json()["status"] == "OK"

    root = client.get("/")
    assert root.json()["endpoints"]["auth"]["register"] == "POST /api/auth/register"


def test_unknown_endpoint_lists_available_ones(client):
    response = client.get("/api/nope")
    assert response.status_code == 404
    body = response.json()
    assert body["error"] == "Endpoint not found"
    assert "POST /api/books" in body["availableEndpoints"]["books"]


def test_register_login_profile(client):
    registered = _register(client, name="Alice")
    assert registered["message"] == "User registered successfully"
    assert registered["expiresIn"] == "24h"
    assert "password" not in registered["user"]

    login = client.post("/api/auth/login", json={"email": "alice@x.com", "password": "secret1"})
    assert login.status_code == 200
    assert login.json()["message"] == "Login successful"

    profile = client.get("/api/auth/profile", headers=_auth(login.json()["token"]))
    assert profile.status_code == 200
    assert profile.json()["user"]["name"] == "Alice"
    assert profile.json()["user"]["lastLogin"]


def test_register_errors(client):
    bad = client.post("/api/auth/register", json={"email": "nope", "password": "secret1"})
    assert bad.status_code == 400
    assert bad.json()["error"] == "Please provide a valid email address"

    _register(client)
    dup = client.post("/api/auth/register", json={"email": "ALICE@x.com", "password": "secret1"})
    assert dup.status_code == 409


def test_malformed_json_is_a_400(client):
    response = client.post(
        "/api/auth/register",
        content=b"{not json",
        headers={"Content-Type": "application/json"},
    )
    assert response.status_code == 400
    assert response.json()["error"] == "Validation error"


def test_bad_login_is_401(client):
    _register(client)
    response = client.post("/api/auth/login", json={"email": "alice@x.com", "password": "wrong1"})
    assert response.status_code == 401
    assert response.json()["error"] == "Invalid email or password"


def test_books_require_a_token(client):
    missing = client.get("/api/books")
    assert missing.status_code == 401
    assert missing.json()["error"] == "Access token required"
    assert missing.headers["WWW-Authenticate"] == "Bearer"

    invalid = client.get("/api/books", headers=_auth("garbage"))
    assert invalid.status_code == 401
    assert invalid.json()["error"] == "Invalid token"


def test_expired_token_is_reported_as_expired(settings, clock):
    bookstore = BookstoreApp(settings, token_service=TokenService("secret", clock=clock))
    client = TestClient(create_app(bookstore))
    token = _register(client)["token"]

    assert client.get("/api/books", headers=_auth(token)).status_code == 200
    clock.advance(24 * 3600)

    response = client.get("/api/books", headers=_auth(token))
    assert response.status_code == 401
    assert response.json()["error"] == "Token expired"
    assert response.json()["kind"] == "expired"


def test_book_lifecycle_with_ownership(client, book_payload):
    alice = _auth(_register(client)["token"])
    bob = _auth(_register(client, email="bob@x.com")["token"])

    created = client.post("/api/books", json=book_payload(), headers=alice)
    assert created.status_code == 201
    book = created.json()["data"]
    assert created.json()["message"] == "Book created successfully"

    assert client.get(f"/api/books/{book['id']}", headers=bob).json()["data"]["title"] == "Dune"

    forbidden = client.put(f"/api/books/{book['id']}", json=book_payload(genre="X"), headers=bob)
    assert forbidden.status_code == 403
    assert forbidden.json()["error"] == "You can only update books that you added"
    assert client.delete(f"/api/books/{book['id']}", headers=bob).status_code == 403

    updated = client.put(f"/api/books/{book['id']}", json=book_payload(genre="Classic"), headers=alice)
    assert updated.status_code == 200
    assert updated.json()["data"]["genre"] == "Classic"

    mine = client.get("/api/books/user/my-books", headers=alice).json()
    assert mine["count"] == 1
    assert client.get("/api/books/user/my-books", headers=bob).json()["count"] == 0

    deleted = client.delete(f"/api/books/{book['id']}", headers=alice)
    assert deleted.status_code == 200
    assert client.get(f"/api/books/{book['id']}", headers=alice).status_code == 404


def test_book_validation_and_conflict(client, book_payload):
    alice = _auth(_register(client)["token"])

    invalid = client.post("/api/books", json={"title": "", "publishedYear": "abc"}, headers=alice)
    assert invalid.status_code == 400
    assert invalid.json()["details"] == [
        "Title is required",
        "Author is required",
        "Genre is required",
        "Published year must be a valid number",
    ]

    assert client.post("/api/books", json=book_payload(), headers=alice).status_code == 201
    dup = client.post("/api/books", json=book_payload(title="dune"), headers=alice)
    assert dup.status_code == 409


def test_listing_and_search(client, book_payload):
    alice = _auth(_register(client)["token"])
    for i in range(12):
        client.post("/api/books", json=book_payload(title=f"Book {i}"), headers=alice)
    client.post(
        "/api/books",
        json=book_payload(title="Emma", author="Austen", genre="Romance", publishedYear=1815),
        headers=alice,
    )

    listing = client.get("/api/books", params={"page": 2, "limit": 5}, headers=alice).json()
    assert listing["pagination"] == {
        "currentPage": 2,
        "totalPages": 3,
        "totalBooks": 13,
        "booksPerPage": 5,
        "hasNextPage": True,
        "hasPrevPage": True,
    }
    assert [b["title"] for b in listing["data"]] == [f"Book {i}" for i in range(5, 10)]

    filtered = client.get("/api/books", params={"genre": "roman"}, headers=alice).json()
    assert filtered["pagination"]["totalBooks"] == 1
    assert filtered["filters"]["genre"] == "roman"

    search = client.get("/api/books/search", params={"year": 1815}, headers=alice).json()
    assert search["count"] == 1
    assert search["data"][0]["title"] == "Emma"

    empty = client.get("/api/books/search", headers=alice)
    assert empty.status_code == 400


def test_redact_hides_passwords_at_any_depth():
    payload = {"email": "a@x.com", "password": "secret1", "nested": [{"password": "x", "ok": 1}]}
    assert redact(payload) == {
        "email": "a@x.com",
        "password": "[REDACTED]",
        "nested": [{"password": "[REDACTED]", "ok": 1}],
    }
    assert payload["password"] == "secret1"
