from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Optional

Record = Dict[str, Any]
Mutator = Callable[[Optional[Record]], Optional[Record]]


def merge_record(existing: Optional[Record], record: Record, merge: bool) -> Record:
    if merge and existing:
        merged = dict(existing)
        merged.update(record)
        return merged
    return dict(record)


class RecordStore(ABC):
    """
    Keyed document store. Records are JSON-compatible dicts grouped in
    named collections. Implementations raise StoreError on backend failure
    and never retry.
    """

    @abstractmethod
    def get(self, collection: str, key: str) -> Optional[Record]:
        raise NotImplementedError

    @abstractmethod
    def put(self, collection: str, key: str, record: Record, merge: bool = False) -> Record:
        raise NotImplementedError

    @abstractmethod
    def query_by_field(self, collection: str, field: str, value: Any) -> List[Record]:
        raise NotImplementedError

    @abstractmethod
    def update(self, collection: str, key: str, mutate: Mutator) -> Optional[Record]:
        """
        Atomic read-modify-write of one record.

        `mutate` gets the current record (None if absent) and returns the
        record to store, or None to leave things as they are. Returns what is
        stored afterwards (None if nothing exists).
        """
        raise NotImplementedError

    @abstractmethod
    def delete(self, collection: str, key: str) -> None:
        raise NotImplementedError
