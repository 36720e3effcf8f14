"""User record models"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class User(BaseModel):
    """User record as persisted in users.json (camelCase keys on disk)"""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str
    email: str
    name: str
    password_hash: str = Field(alias="password")
    created_at: str = Field(alias="createdAt")
    updated_at: Optional[str] = Field(default=None, alias="updatedAt")
    last_login: Optional[str] = Field(default=None, alias="lastLogin")

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "User":
        return cls.model_validate(record)

    def to_record(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)

    def public(self) -> "UserPublic":
        return UserPublic(
            id=self.id,
            email=self.email,
            name=self.name,
            created_at=self.created_at,
            last_login=self.last_login,
        )


class UserPublic(BaseModel):
    """User profile without the password hash"""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    email: str
    name: str
    created_at: Optional[str] = Field(default=None, alias="createdAt")
    last_login: Optional[str] = Field(default=None, alias="lastLogin")

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)
