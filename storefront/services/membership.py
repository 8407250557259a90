"""
Membership encoding for multi-valued product columns

Product.brands stores a set of brand IDs as "[3,7]"; Product.occasion stores
a set of lower-cased tags as "party,wedding". Filtering matches one of four boundary
shapes per value (solo, first, last, middle) so that the delimiters anchor
the match: brand 3 matches "[3]" and "[3,7]" but never "[37]" or "[13]".
"""
import re
from typing import Iterable, List, Optional

LIKE_ESCAPE = "\\"

_ENCODED_IDS = re.compile(r"^\[\s*(-?\d+\s*(,\s*-?\d+\s*)*)?\]$")


def _unique(values: Iterable) -> list:
    seen = set()
    out = []
    for value in values:
        if value not in seen:
            seen.add(value)
            out.append(value)
    return out


def encode_id_set(ids: Iterable[int]) -> str:
    """Encode IDs as "[id1,id2,...]", keeping first-seen order and dropping duplicates."""
    return "[" + ",".join(str(int(i)) for i in _unique(int(i) for i in ids)) + "]"


def decode_id_set(text: Optional[str]) -> List[int]:
    """
    Parse a bracket-encoded ID set.

    Accepts None and "" as the empty set. Raises ValueError for anything
    that is not a bracketed, comma-separated list of integers.
    """
    if text is None or text.strip() == "":
        return []
    text = text.strip()
    if not _ENCODED_IDS.match(text):
        raise ValueError(f"Not a bracket-encoded ID set: {text!r}")
    inner = text[1:-1].strip()
    if not inner:
        return []
    return _unique(int(part) for part in inner.split(","))


def escape_like(value: str) -> str:
    """Escape LIKE wildcards so the value matches literally."""
    return (
        value.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )


def brand_like_patterns(brand_id: int) -> List[str]:
    """LIKE patterns matching brand_id anywhere in a bracket-encoded set."""
    value = str(int(brand_id))
    return [
        f"[{value}]",       # solo
        f"[{value},%",      # first
        f"%,{value}]",      # last
        f"%,{value},%",     # middle
    ]


def occasion_like_patterns(tag: str) -> List[str]:
    """LIKE patterns matching one exact, case-insensitive tag in a lower-cased column."""
    value = escape_like(tag.strip().lower())
    return [
        value,
        f"{value},%",
        f"%,{value}",
        f"%,{value},%",
    ]


def split_tags(text: Optional[str]) -> List[str]:
    """Split a comma-joined tag column into lower-cased, non-empty tags."""
    if not text:
        return []
    return _unique(tag.strip().lower() for tag in text.split(",") if tag.strip())


def join_tags(tags: Iterable[str]) -> str:
    """Join tags with commas. Tags are lower-cased and must not contain commas."""
    cleaned = []
    for tag in tags:
        if not isinstance(tag, str):
            raise ValueError(f"Occasion tag must be a string: {tag!r}")
        tag = tag.strip().lower()
        if not tag:
            continue
        if "," in tag:
            raise ValueError(f"Occasion tag may not contain a comma: {tag!r}")
        cleaned.append(tag)
    return ",".join(_unique(cleaned))
