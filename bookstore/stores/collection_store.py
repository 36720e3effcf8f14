"""
JSON-backed collection storage.

Each ``CollectionStore`` owns one file holding a JSON array of records.
Reads create the file (``[]``) on first access and degrade to an empty list
when the content is not a JSON array. Writes serialize the whole collection
up front and atomically replace the file, so a failed write leaves the last
good content in place.

All access goes through a per-file lock; ``transaction()`` holds it across a
full load/mutate/save cycle.
"""

from __future__ import annotations

import copy
import json
import os
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Generator, List, Optional, Tuple

from ..core.locks import acquire_lock, lock_key_collection
from ..utils.exceptions import StorageError
from ..utils.logger import get_logger

logger = get_logger(__name__)

Record = Dict[str, Any]


class CollectionStore:
    """Load/save an ordered sequence of records to one backing file"""

    def __init__(self, name: str, path: Path, cache_enabled: bool = True):
        self.name = name
        self.path = Path(path)
        self.cache_enabled = cache_enabled
        self._lock_key = lock_key_collection(self.path)
        self._cache: Optional[List[Record]] = None
        self._cache_signature: Optional[Tuple[int, int]] = None

    def __repr__(self) -> str:
        return f"CollectionStore(name={self.name!r}, path={str(self.path)!r})"

    @contextmanager
    def locked(self) -> Generator[None, None, None]:
        """Hold this collection's lock."""
        with acquire_lock(self._lock_key):
            yield

    @contextmanager
    def transaction(self) -> Generator[List[Record], None, None]:
        """
        Serialize a read-modify-write cycle.

        Yields the current records; call ``save`` inside the block to persist.
        Nothing is written if the block raises before saving.
        """
        with self.locked():
            yield self.load()

    def ensure_initialized(self) -> None:
        """Create the parent directory and an empty collection file if absent."""
        with self.locked():
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                if not self.path.exists():
                    self._write_text(json.dumps([], indent=2))
                    logger.info("Collection file initialized", collection=self.name, path=str(self.path))
            except OSError as e:
                raise StorageError(
                    f"Failed to initialize {self.name} data: {e.strerror or e}", path=str(self.path)
                ) from e

    def load(self) -> List[Record]:
        """Return all records in stored order."""
        with self.locked():
            self.ensure_initialized()
            signature = self._signature()
            if self.cache_enabled and self._cache is not None and signature == self._cache_signature:
                return copy.deepcopy(self._cache)

            try:
                raw = self.path.read_bytes()
            except OSError as e:
                logger.error("Failed to read collection", collection=self.name, error=str(e))
                raise StorageError(
                    f"Failed to read {self.name} data: {e.strerror or e}", path=str(self.path)
                ) from e

            try:
                text = raw.decode("utf-8")
                data = json.loads(text) if text.strip() else []
            except (UnicodeDecodeError, json.JSONDecodeError) as e:
                logger.warning(
                    "Collection file is not valid JSON, treating as empty",
                    collection=self.name,
                    path=str(self.path),
                    error=str(e),
                )
                data = []
            if not isinstance(data, list):
                logger.warning(
                    "Collection file does not hold an array, treating as empty",
                    collection=self.name,
                    path=str(self.path),
                )
                data = []

            self._remember(data, signature)
            return copy.deepcopy(data)

    def save(self, records: List[Record]) -> None:
        """Overwrite the collection with ``records``."""
        if not isinstance(records, list):
            raise StorageError(f"{self.name.capitalize()} data must be an array", path=str(self.path))
        try:
            payload = json.dumps(records, indent=2, ensure_ascii=False)
        except (TypeError, ValueError) as e:
            raise StorageError(f"Failed to serialize {self.name} data: {e}", path=str(self.path)) from e

        with self.locked():
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                self._write_text(payload)
            except OSError as e:
                logger.error("Failed to write collection", collection=self.name, error=str(e))
                raise StorageError(
                    f"Failed to save {self.name} data: {e.strerror or e}", path=str(self.path)
                ) from e
            self._remember(json.loads(payload), self._signature())
            logger.info("Collection saved", collection=self.name, count=len(records))

    def read_raw(self) -> bytes:
        """Current file bytes as stored, for snapshots."""
        with self.locked():
            return self.path.read_bytes()

    def invalidate_cache(self) -> None:
        with self.locked():
            self._cache = None
            self._cache_signature = None

    def _remember(self, data: List[Record], signature: Optional[Tuple[int, int]]) -> None:
        if self.cache_enabled:
            self._cache = data
            self._cache_signature = signature

    def _signature(self) -> Optional[Tuple[int, int]]:
        try:
            st = self.path.stat()
        except OSError:
            return None
        return (st.st_mtime_ns, st.st_size)

    def _write_text(self, text: str) -> None:
        """Write via a temp file in the same directory, then atomically replace."""
        with tempfile.NamedTemporaryFile(
            mode="w", dir=str(self.path.parent), delete=False, encoding="utf-8", suffix=".tmp"
        ) as tf:
            tf.write(text)
            temp_path = Path(tf.name)
        try:
            os.replace(str(temp_path), str(self.path))
        except OSError:
            if temp_path.exists():
                temp_path.unlink()
            raise
