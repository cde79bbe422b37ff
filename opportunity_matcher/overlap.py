# opportunity_matcher/overlap.py
from dataclasses import dataclass, field
from typing import Generic, Iterable, List, TypeVar

from opportunity_matcher.utils import normalize_label, unique_lower

T = TypeVar("T")


@dataclass(frozen=True)
class Overlap(Generic[T]):
    members: List[T] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.members)


def overlap_labels(source: Iterable[str], target: Iterable[str]) -> Overlap[str]:
    """
    Labels from `source` that also appear in `target`, compared trimmed and
    lower-cased. Keeps the source spelling and order; each label once.
    """
    target_set = set(unique_lower(target))
    members: List[str] = []
    seen = set()
    for item in source or []:
        k = normalize_label(item)
        if not k or k in seen:
            continue
        seen.add(k)
        if k in target_set:
            members.append(item)
    return Overlap(members)


def overlap_tags(source: Iterable[int], target: Iterable[int]) -> Overlap[int]:
    target_set = set(target or [])
    members: List[int] = []
    for item in source or []:
        if item in target_set and item not in members:
            members.append(item)
    return Overlap(members)


def distinct_count(labels: Iterable[str]) -> int:
    return len(unique_lower(labels))


def distinct_tag_count(tags: Iterable[int]) -> int:
    return len(set(tags or []))
