"""
Generic CRUD policy over a ``CollectionStore``.

Subclasses describe one entity: how a candidate is validated and normalized,
which key must be unique across the collection, and who owns a record.
Every mutation runs inside the store's transaction, and validation and
uniqueness are checked before anything is written.
"""

from __future__ import annotations

import math
import uuid
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Generator, Iterable, List, Optional, Sequence

from ..stores.collection_store import CollectionStore, Record
from ..utils.exceptions import (
    ConflictError,
    NotFoundError,
    OwnershipError,
    ServiceError,
    StorageError,
    ValidationError,
)
from ..utils.logger import get_logger
from .validators import parse_int, validate_pagination

logger = get_logger(__name__)


def now_iso() -> str:
    """Current UTC time as ``YYYY-MM-DDTHH:MM:SS.mmmZ``."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def new_id() -> str:
    return str(uuid.uuid4())


@dataclass
class Page:
    items: List[Record]
    page: int
    page_size: int
    total_items: int
    filters: Dict[str, Any] = field(default_factory=dict)

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_items / self.page_size) if self.page_size else 0

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    @property
    def has_prev(self) -> bool:
        return self.page > 1


def filter_records(
    records: Iterable[Record],
    filters: Dict[str, Any],
    numeric_fields: Sequence[str] = (),
) -> List[Record]:
    """
    Apply every non-empty filter conjunctively.

    Text fields match case-insensitive substrings; numeric fields match exactly.
    """
    active = {k: v for k, v in filters.items() if v is not None and v != ""}
    result = []
    for record in records:
        matched = True
        for key, wanted in active.items():
            value = record.get(key)
            if key in numeric_fields:
                if value is None or parse_int(wanted) != value:
                    matched = False
                    break
            elif str(wanted).lower() not in str(value if value is not None else "").lower():
                matched = False
                break
        if matched:
            result.append(record)
    return result


def paginate(items: List[Record], page: Any, page_size: Any) -> Page:
    """Slice ``items`` to ``[(page-1)*size, page*size)`` after clamping."""
    page_num, size = validate_pagination(page, page_size)
    start = (page_num - 1) * size
    return Page(
        items=items[start:start + size],
        page=page_num,
        page_size=size,
        total_items=len(items),
    )


class RecordService:
    """CRUD over one collection with uniqueness and ownership checks"""

    entity = "record"
    collection = "records"
    numeric_fields: Sequence[str] = ()
    conflict_message = "A record with this key already exists"

    def __init__(self, store: CollectionStore):
        self.store = store

    # -- entity hooks -----------------------------------------------------

    def validate(self, candidate: Dict[str, Any]) -> List[str]:
        return []

    def normalize(self, candidate: Dict[str, Any]) -> Dict[str, Any]:
        return dict(candidate)

    def unique_key(self, record: Dict[str, Any]) -> Optional[Any]:
        return None

    def owner_of(self, record: Record) -> Optional[str]:
        return None

    def build_record(self, data: Dict[str, Any], owner_id: Optional[str]) -> Record:
        now = now_iso()
        return {"id": new_id(), **data, "createdAt": now, "updatedAt": now}

    def ownership_message(self, action: str) -> str:
        return f"You can only {action} {self.collection} that you added"

    # -- operations --------------------------------------------------------

    def list(
        self,
        filters: Optional[Dict[str, Any]] = None,
        page: Any = 1,
        page_size: Any = 10,
    ) -> Page:
        records = self.all()
        matched = filter_records(records, filters or {}, self.numeric_fields)
        result = paginate(matched, page, page_size)
        result.filters = dict(filters or {})
        return result

    def all(self) -> List[Record]:
        with self._storage_guard("read"):
            return self.store.load()

    def get_by_id(self, record_id: str) -> Record:
        for record in self.all():
            if record.get("id") == record_id:
                return record
        raise NotFoundError(f"{self.entity.capitalize()} not found")

    def create(self, candidate: Dict[str, Any], owner_id: Optional[str] = None) -> Record:
        self._raise_if_invalid(candidate)
        data = self.normalize(candidate)
        with self._storage_guard("save"):
            with self.store.transaction() as records:
                self._raise_if_duplicate(records, data)
                record = self.build_record(data, owner_id)
                records.append(record)
                self.store.save(records)
        logger.info(f"{self.entity.capitalize()} created", id=record["id"], owner=owner_id)
        return record

    def update(self, record_id: str, candidate: Dict[str, Any], requester_id: Optional[str]) -> Record:
        with self._storage_guard("save"):
            with self.store.transaction() as records:
                index = self._index_of(records, record_id)
                existing = records[index]
                self._check_owner(existing, requester_id, "update")
                self._raise_if_invalid(candidate)
                data = self.normalize(candidate)
                self._raise_if_duplicate(records, data, exclude_id=record_id)
                updated = {**existing, **data, "updatedAt": now_iso()}
                records[index] = updated
                self.store.save(records)
        logger.info(f"{self.entity.capitalize()} updated", id=record_id)
        return updated

    def delete(self, record_id: str, requester_id: Optional[str]) -> Record:
        with self._storage_guard("save"):
            with self.store.transaction() as records:
                index = self._index_of(records, record_id)
                self._check_owner(records[index], requester_id, "delete")
                removed = records.pop(index)
                self.store.save(records)
        logger.info(f"{self.entity.capitalize()} deleted", id=record_id)
        return removed

    # -- internals ---------------------------------------------------------

    @contextmanager
    def _storage_guard(self, action: str) -> Generator[None, None, None]:
        try:
            yield
        except StorageError as e:
            logger.error(
                "Storage failure",
                collection=self.collection,
                action=action,
                error=str(e),
            )
            raise ServiceError(f"Failed to {action} {self.collection} data") from e

    def _index_of(self, records: List[Record], record_id: str) -> int:
        for i, record in enumerate(records):
            if record.get("id") == record_id:
                return i
        raise NotFoundError(f"{self.entity.capitalize()} not found")

    def _check_owner(self, record: Record, requester_id: Optional[str], action: str) -> None:
        owner = self.owner_of(record)
        if requester_id is None or owner is None or owner != requester_id:
            raise OwnershipError(self.ownership_message(action))

    def _raise_if_invalid(self, candidate: Dict[str, Any]) -> None:
        errors = self.validate(candidate)
        if errors:
            raise ValidationError(errors)

    def _raise_if_duplicate(
        self,
        records: List[Record],
        data: Dict[str, Any],
        exclude_id: Optional[str] = None,
    ) -> None:
        key = self.unique_key(data)
        if key is None:
            return
        for record in records:
            if record.get("id") == exclude_id:
                continue
            if self.unique_key(record) == key:
                raise ConflictError(self.conflict_message)
