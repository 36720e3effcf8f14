"""Book record models"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class Book(BaseModel):
    """Book record as persisted in books.json"""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str
    title: str
    author: str
    genre: str
    published_year: int = Field(alias="publishedYear")
    user_id: str = Field(alias="userId")
    created_at: str = Field(alias="createdAt")
    updated_at: Optional[str] = Field(default=None, alias="updatedAt")

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "Book":
        return cls.model_validate(record)

    def to_record(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)
