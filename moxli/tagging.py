from __future__ import annotations

import re
from typing import Iterable, List

from .model import Bookmark

_NON_ALNUM_RE = re.compile(r"[^a-zA-Z0-9-]+")
_DASHES_RE = re.compile(r"-+")


def normalize_tag(raw: str) -> str:
    """Lower-kebab-case form of a tag: "DevOps" -> "dev-ops", "XMLParser" -> "xml-parser"."""
    s = (raw or "").strip()
    if not s:
        return ""
    s = _split_camel_case(s)
    s = _NON_ALNUM_RE.sub("-", s)
    s = s.lower()
    s = _DASHES_RE.sub("-", s)
    return s.strip("-")


def normalize_tags(b: Bookmark) -> None:
    b.tags = [[normalize_tag(seg) for seg in hierarchy] for hierarchy in b.tags]


def split_flat_tags(value: str, sep: str = ",") -> List[List[str]]:
    """Flat tag attribute -> one single-segment hierarchy per tag."""
    return [[t.strip()] for t in (value or "").split(sep) if t.strip()]


def distinct_tags(hierarchies: Iterable[List[str]]) -> set[str]:
    return {seg for h in hierarchies for seg in h}


def _split_camel_case(s: str) -> str:
    out: List[str] = []
    n = len(s)
    for i, ch in enumerate(s):
        if i > 0 and ch.isupper():
            prev = s[i - 1]
            if prev.islower():
                out.append("-")
            elif i < n - 1 and s[i + 1].islower():
                out.append("-")
        out.append(ch)
    return "".join(out)
