"""
Collection snapshots (backups).

Copies each collection file to ``<backup_dir>/<name>-<timestamp>.json``.
A failure on one collection is logged and skipped; it never stops the rest.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from .collection_store import CollectionStore
from ..utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class SnapshotResult:
    timestamp: str
    backup_dir: Path
    written: Dict[str, Path] = field(default_factory=dict)
    failed: Dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failed


def snapshot_timestamp(now: Optional[datetime] = None) -> str:
    """ISO-8601 timestamp with ``:`` and ``.`` replaced so it is filename safe."""
    now = now or datetime.now(timezone.utc)
    iso = now.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")
    return iso.replace(":", "-").replace(".", "-")


def snapshot_collections(
    stores: Iterable[CollectionStore],
    backup_dir: Path,
    now: Optional[datetime] = None,
) -> SnapshotResult:
    """Copy every store's current file content into ``backup_dir``."""
    stores = list(stores)
    timestamp = snapshot_timestamp(now)
    result = SnapshotResult(timestamp=timestamp, backup_dir=Path(backup_dir))

    try:
        result.backup_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        logger.error("Backup failed", backup_dir=str(backup_dir), error=str(e))
        for store in stores:
            result.failed[store.name] = str(e)
        return result

    for store in stores:
        target = result.backup_dir / f"{store.name}-{timestamp}.json"
        try:
            content = store.read_raw()
            target.write_bytes(content)
        except OSError as e:
            logger.warning("No collection file to back up", collection=store.name, error=str(e))
            result.failed[store.name] = str(e)
            continue
        result.written[store.name] = target

    logger.info(
        "Data backed up",
        timestamp=timestamp,
        written=sorted(result.written),
        failed=sorted(result.failed),
    )
    return result


def list_snapshots(backup_dir: Path) -> List[Path]:
    """Snapshot files in ``backup_dir``, sorted by name."""
    backup_dir = Path(backup_dir)
    if not backup_dir.exists():
        return []
    return sorted(backup_dir.glob("*.json"))
