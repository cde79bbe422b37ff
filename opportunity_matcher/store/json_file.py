from __future__ import annotations

import json
import threading
from pathlib import Path
from typing import Any, List, Optional

from opportunity_matcher.errors import StoreError
from opportunity_matcher.store.base import Mutator, Record, RecordStore, merge_record


def atomic_write_json(path: Path, payload) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_suffix(path.suffix + ".tmp")
    tmp.write_text(json.dumps(payload, indent=2), encoding="utf-8")
    tmp.replace(path)


def _check_name(name: str, what: str) -> str:
    if not name or name in (".", "..") or "/" in name or "\\" in name:
        raise ValueError(f"Invalid {what}: {name!r}")
    return name


class JsonFileRecordStore(RecordStore):
    """
    One JSON file per record: <root>/<collection>/<key>.json

    Writes go through a temp file + replace, so readers never see a half
    written record. Read-modify-write is serialized per process.
    """

    def __init__(self, root: str | Path):
        self.root = Path(root)
        self._lock = threading.RLock()

    def _path(self, collection: str, key: str) -> Path:
        return self.root / _check_name(collection, "collection") / f"{_check_name(key, 'key')}.json"

    def _read(self, path: Path) -> Optional[Record]:
        if not path.exists():
            return None
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise StoreError(f"Unreadable record {path}: {e}") from e
        if not isinstance(data, dict):
            raise StoreError(f"Record must be a JSON object: {path}")
        return data

    def _write(self, path: Path, record: Record) -> None:
        try:
            atomic_write_json(path, record)
        except (OSError, TypeError, ValueError) as e:
            raise StoreError(f"Failed to write record {path}: {e}") from e

    def get(self, collection: str, key: str) -> Optional[Record]:
        with self._lock:
            return self._read(self._path(collection, key))

    def put(self, collection: str, key: str, record: Record, merge: bool = False) -> Record:
        path = self._path(collection, key)
        with self._lock:
            stored = merge_record(self._read(path), record, merge)
            self._write(path, stored)
            return stored

    def query_by_field(self, collection: str, field: str, value: Any) -> List[Record]:
        folder = self.root / _check_name(collection, "collection")
        if not folder.exists():
            return []
        out: List[Record] = []
        with self._lock:
            for fp in sorted(folder.glob("*.json")):
                record = self._read(fp)
                if record is not None and record.get(field) == value:
                    out.append(record)
        return out

    def update(self, collection: str, key: str, mutate: Mutator) -> Optional[Record]:
        path = self._path(collection, key)
        with self._lock:
            current = self._read(path)
            new = mutate(current)
            if new is None:
                return current
            self._write(path, new)
            return new

    def delete(self, collection: str, key: str) -> None:
        path = self._path(collection, key)
        with self._lock:
            try:
                path.unlink(missing_ok=True)
            except OSError as e:
                raise StoreError(f"Failed to delete record {path}: {e}") from e
