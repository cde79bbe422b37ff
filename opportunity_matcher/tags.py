# opportunity_matcher/tags.py
"""
Closed catalog of thematic interest tags (UN Sustainable Development Goals).

Only four goals are supported. Students pick them as interests and
organisations attach them to opportunities; anything outside the catalog is
dropped when a profile or opportunity is built.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Tuple


@dataclass(frozen=True)
class TagMeta:
    title: str
    short: str
    description: str


SUPPORTED_TAGS: Tuple[int, ...] = (4, 8, 10, 17)

TAG_META: Dict[int, TagMeta] = {
    4: TagMeta(
        title="Quality Education",
        short="Skills for Employment",
        description="Target 4.4: increase relevant skills for decent jobs and entrepreneurship.",
    ),
    8: TagMeta(
        title="Decent Work and Economic Growth",
        short="Decent Work",
        description="Promote youth access to decent and productive work opportunities.",
    ),
    10: TagMeta(
        title="Reduced Inequalities",
        short="Reduced Inequalities",
        description="Enable fair, skills-based access to opportunities.",
    ),
    17: TagMeta(
        title="Partnerships for the Goals",
        short="Partnerships",
        description="Connect students, startups, and NGOs for shared SDG impact.",
    ),
}


def is_supported_tag(value) -> bool:
    # bool is an int subclass; True must not pass as a tag
    return isinstance(value, int) and not isinstance(value, bool) and value in TAG_META


def normalize_tag_list(values: Iterable[int]) -> List[int]:
    """Keep supported tags only, first occurrence wins."""
    out: List[int] = []
    for v in values or []:
        if is_supported_tag(v) and v not in out:
            out.append(v)
    return out


def tag_label(tag: int) -> str:
    if not is_supported_tag(tag):
        return f"SDG {tag}"
    return f"SDG {tag} - {TAG_META[tag].short}"


def tag_description(tag: int) -> str:
    if not is_supported_tag(tag):
        return "Unsupported SDG"
    return TAG_META[tag].description
