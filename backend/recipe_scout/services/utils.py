# recipe_scout/services/utils.py
# Query text helpers shared by ranking, the cache key and the demo fallback
# - "Chicken, Garlic\nrice" -> ["chicken", "garlic", "rice"]
# - time limit: "30" -> 30, "1 hour" -> 60, unknown -> 0

from __future__ import annotations
import re
import unicodedata
from typing import Iterable, List, Optional

from recipe_scout.services.extract import parse_total_minutes

_SPLIT = re.compile(r"[\n,]+")


def _nfkc(s: str) -> str:
    return unicodedata.normalize("NFKC", s or "")


def normalize_term(term: Optional[str]) -> str:
    # NFKC -> lowercase -> trim
    return _nfkc(term or "").lower().strip()


def split_ingredients(text: Optional[str]) -> List[str]:
    """Free-text ingredient list -> lowercased, trimmed, non-empty terms (order kept)."""
    return [t for t in (normalize_term(p) for p in _SPLIT.split(text or "")) if t]


def normalize_many(terms: Iterable[str]) -> List[str]:
    """Normalize + de-duplicate, keeping first-seen order."""
    out: List[str] = []
    for t in terms:
        n = normalize_term(t) if isinstance(t, str) else ""
        if n and n not in out:
            out.append(n)
    return out


def parse_time_limit(value: Optional[str]) -> int:
    """timeAvailable -> minutes. Bare digits are minutes; 0 means no usable limit."""
    s = (value or "").strip()
    if not s:
        return 0
    if s.isdigit():
        return int(s)
    minutes = parse_total_minutes(s)
    if minutes:
        return minutes
    # "45m", "20 mins or less"
    m = re.match(r"^(\d+)", s)
    return int(m.group(1)) if m else 0
