from opportunity_matcher.store.base import RecordStore
from opportunity_matcher.store.http import HttpRecordStore
from opportunity_matcher.store.json_file import JsonFileRecordStore
from opportunity_matcher.store.memory import MemoryRecordStore

__all__ = [
    "RecordStore",
    "HttpRecordStore",
    "JsonFileRecordStore",
    "MemoryRecordStore",
]
