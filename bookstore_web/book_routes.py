"""
Book routes. Every route requires a bearer token.

Prefix: /api/books
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from bookstore.app import BookstoreApp
from bookstore.auth.tokens import TokenClaims
from .auth_deps import get_bookstore, get_current_user
from .models import BookRequest

router = APIRouter(prefix="/api/books", tags=["books"], dependencies=[Depends(get_current_user)])


@router.get("")
def list_books(
    page: Optional[str] = "1",
    limit: Optional[str] = "10",
    genre: Optional[str] = None,
    author: Optional[str] = None,
    title: Optional[str] = None,
    bookstore: BookstoreApp = Depends(get_bookstore),
) -> Dict[str, Any]:
    """Filtered, paginated listing in insertion order. ``limit`` is capped at 50."""
    result = bookstore.books.list_books(page=page, limit=limit, genre=genre, author=author, title=title)
    return {
        "success": True,
        "data": result.items,
        "pagination": {
            "currentPage": result.page,
            "totalPages": result.total_pages,
            "totalBooks": result.total_items,
            "booksPerPage": result.page_size,
            "hasNextPage": result.has_next,
            "hasPrevPage": result.has_prev,
        },
        "filters": {
            "genre": genre or None,
            "author": author or None,
            "title": title or None,
        },
    }


@router.get("/search")
def search_books(
    genre: Optional[str] = None,
    author: Optional[str] = None,
    title: Optional[str] = None,
    year: Optional[str] = None,
    bookstore: BookstoreApp = Depends(get_bookstore),
) -> Dict[str, Any]:
    books = bookstore.books.search(genre=genre, author=author, title=title, year=year)
    return {
        "success": True,
        "data": books,
        "count": len(books),
        "searchCriteria": {"genre": genre, "author": author, "title": title, "year": year},
    }


@router.get("/user/my-books")
def my_books(
    current_user: TokenClaims = Depends(get_current_user),
    bookstore: BookstoreApp = Depends(get_bookstore),
) -> Dict[str, Any]:
    books = bookstore.books.list_for_owner(current_user.subject_id)
    return {"success": True, "data": books, "count": len(books)}


@router.get("/{book_id}")
def get_book(book_id: str, bookstore: BookstoreApp = Depends(get_bookstore)) -> Dict[str, Any]:
    return {"success": True, "data": bookstore.books.get_by_id(book_id)}


@router.post("", status_code=status.HTTP_201_CREATED)
def add_book(
    payload: BookRequest,
    current_user: TokenClaims = Depends(get_current_user),
    bookstore: BookstoreApp = Depends(get_bookstore),
) -> Any:
    book = bookstore.books.create(payload.to_candidate(), owner_id=current_user.subject_id)
    return JSONResponse(
        status_code=status.HTTP_201_CREATED,
        content={"success": True, "message": "Book created successfully", "data": book},
    )


@router.put("/{book_id}")
def update_book(
    book_id: str,
    payload: BookRequest,
    current_user: TokenClaims = Depends(get_current_user),
    bookstore: BookstoreApp = Depends(get_bookstore),
) -> Dict[str, Any]:
    book = bookstore.books.update(book_id, payload.to_candidate(), requester_id=current_user.subject_id)
    return {"success": True, "message": "Book updated successfully", "data": book}


@router.delete("/{book_id}")
def delete_book(
    book_id: str,
    current_user: TokenClaims = Depends(get_current_user),
    bookstore: BookstoreApp = Depends(get_bookstore),
) -> Dict[str, Any]:
    book = bookstore.books.delete(book_id, requester_id=current_user.subject_id)
    return {"success": True, "message": "Book deleted successfully", "data": book}
