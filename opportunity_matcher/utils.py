# opportunity_matcher/utils.py
import re
from datetime import datetime, timezone
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, List


_ws_re = re.compile(r"\s+")


def normalize_label(text: str) -> str:
    """Trim, lowercase and collapse inner whitespace."""
    if not text:
        return ""
    return _ws_re.sub(" ", text).strip().lower()


def unique_lower(items: Iterable[str]) -> List[str]:
    out = []
    seen = set()
    for x in items or []:
        k = normalize_label(x)
        if k and k not in seen:
            seen.add(k)
            out.append(k)
    return out


def round_half_up(value: float, places: int = 2) -> float:
    """
    Round like a human would (2.675 -> 2.68), not like float round() does.
    """
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def composite_key(first_id: str, second_id: str) -> str:
    return f"{first_id}_{second_id}"
