"""User storage service. Emails are unique case-insensitively."""

from typing import Any, Dict, List, Optional

from ..models.user import User
from ..stores.collection_store import Record
from ..utils.exceptions import NotFoundError
from .record_service import RecordService, new_id, now_iso
from .validators import validate_email


class UserService(RecordService):
    """CRUD over users.json. A user record is owned by the user itself."""

    entity = "user"
    collection = "users"
    conflict_message = "User with this email already exists"

    def validate(self, candidate: Dict[str, Any]) -> List[str]:
        errors = []
        if not validate_email(candidate.get("email")):
            errors.append("Please provide a valid email address")
        if not candidate.get("password"):
            errors.append("Password hash is required")
        return errors

    def normalize(self, candidate: Dict[str, Any]) -> Dict[str, Any]:
        email = candidate["email"].strip().lower()
        name = (candidate.get("name") or "").strip() or email.split("@")[0]
        return {"email": email, "name": name, "password": candidate["password"]}

    def unique_key(self, record: Dict[str, Any]) -> Optional[Any]:
        email = record.get("email")
        return email.strip().lower() if isinstance(email, str) else None

    def owner_of(self, record: Record) -> Optional[str]:
        return record.get("id")

    def ownership_message(self, action: str) -> str:
        return f"You can only {action} your own account"

    def build_record(self, data: Dict[str, Any], owner_id: Optional[str]) -> Record:
        now = now_iso()
        user = User(
            id=new_id(),
            email=data["email"],
            name=data["name"],
            password_hash=data["password"],
            created_at=now,
            updated_at=now,
        )
        return user.to_record()

    def find_by_email(self, email: str) -> Optional[User]:
        wanted = (email or "").strip().lower()
        for record in self.all():
            if str(record.get("email", "")).lower() == wanted:
                return User.from_record(record)
        return None

    def get_user(self, user_id: str) -> User:
        return User.from_record(self.get_by_id(user_id))

    def touch_login(self, user_id: str) -> User:
        """Stamp ``lastLogin`` on the user and persist it."""
        with self._storage_guard("save"):
            with self.store.transaction() as records:
                index = self._index_of(records, user_id)
                records[index]["lastLogin"] = now_iso()
                self.store.save(records)
                return User.from_record(records[index])

    def exists(self, user_id: str) -> bool:
        try:
            self.get_by_id(user_id)
        except NotFoundError:
            return False
        return True
