import copy
import threading
from typing import Any, Dict, List, Optional

from opportunity_matcher.store.base import Mutator, Record, RecordStore, merge_record


class MemoryRecordStore(RecordStore):
    """
    Process-local store. Handy for tests and for callers that snapshot
    everything up front.
    """

    def __init__(self, initial: Optional[Dict[str, Dict[str, Record]]] = None):
        self._collections: Dict[str, Dict[str, Record]] = copy.deepcopy(initial or {})
        self._lock = threading.RLock()

    def _bucket(self, collection: str) -> Dict[str, Record]:
        return self._collections.setdefault(collection, {})

    def get(self, collection: str, key: str) -> Optional[Record]:
        with self._lock:
            record = self._bucket(collection).get(key)
            return copy.deepcopy(record) if record is not None else None

    def put(self, collection: str, key: str, record: Record, merge: bool = False) -> Record:
        with self._lock:
            bucket = self._bucket(collection)
            stored = merge_record(bucket.get(key), copy.deepcopy(record), merge)
            bucket[key] = stored
            return copy.deepcopy(stored)

    def query_by_field(self, collection: str, field: str, value: Any) -> List[Record]:
        with self._lock:
            return [
                copy.deepcopy(r)
                for r in self._bucket(collection).values()
                if r.get(field) == value
            ]

    def update(self, collection: str, key: str, mutate: Mutator) -> Optional[Record]:
        with self._lock:
            bucket = self._bucket(collection)
            current = bucket.get(key)
            new = mutate(copy.deepcopy(current) if current is not None else None)
            if new is None:
                return copy.deepcopy(current) if current is not None else None
            bucket[key] = copy.deepcopy(new)
            return copy.deepcopy(new)

    def delete(self, collection: str, key: str) -> None:
        with self._lock:
            self._bucket(collection).pop(key, None)

    def keys(self, collection: str) -> List[str]:
        with self._lock:
            return list(self._bucket(collection).keys())
