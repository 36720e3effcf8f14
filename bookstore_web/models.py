"""API request models"""

from typing import Optional, Union

from pydantic import BaseModel, Field


class RegisterRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None
    name: Optional[str] = None


class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class BookRequest(BaseModel):
    """Book payload; field rules are checked by the book service so every violation is reported."""

    title: Optional[str] = None
    author: Optional[str] = None
    genre: Optional[str] = None
    published_year: Optional[Union[int, str]] = Field(default=None, alias="publishedYear")

    def to_candidate(self) -> dict:
        return self.model_dump(by_alias=True)
