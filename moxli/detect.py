from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from functools import cached_property
from typing import Any, Callable, Optional, Tuple

from bs4 import BeautifulSoup, Comment, Doctype  # type: ignore

from .log import get_logger
from .parse_netscape import load_html

log = get_logger(__name__)

# Any of these on the first array element marks the Anybox JSON export.
ANYBOX_JSON_MARKERS = ("isStarred", "keyword", "tags")
NETSCAPE_MARKER = "netscape-bookmark-file"
_NO_JSON = object()


class Dialect(str, Enum):
    ANYBOX = "anybox"
    ANYBOX_HTML = "anybox-html"
    FIREFOX = "firefox"
    SAFARI = "safari"
    UNKNOWN = "unknown"


class UnknownFormatError(ValueError):
    pass


@dataclass
class ParsedInput:
    """One buffer, decoded lazily at most once per representation.

    Every predicate reads from the same bytes, so trying one dialect never
    consumes input another dialect needs.
    """

    data: bytes

    @cached_property
    def json_value(self) -> Any:
        try:
            return json.loads(self.data)
        except (ValueError, RecursionError):
            return _NO_JSON

    @cached_property
    def soup(self) -> BeautifulSoup:
        return load_html(self.data)


def is_anybox_json(doc: ParsedInput) -> bool:
    value = doc.json_value
    if not isinstance(value, list) or not value:
        return False
    first = value[0]
    if not isinstance(first, dict):
        return False
    return any(k in first for k in ANYBOX_JSON_MARKERS)


def is_anybox_html(doc: ParsedInput) -> bool:
    # Firefox can also write TAGS, but always inside an H3 folder tree.
    return _has_anchor_attr(doc.soup, "tags") and doc.soup.find("h3") is None


def is_firefox_html(doc: ParsedInput) -> bool:
    return _has_anchor_attr(doc.soup, "add_date")


def is_safari_html(doc: ParsedInput) -> bool:
    # Same skeleton as Firefox; only the missing ADD_DATE tells them apart.
    soup = doc.soup
    return _has_netscape_marker(soup) and not _has_anchor_attr(soup, "add_date")


DETECTORS: Tuple[Tuple[Dialect, Callable[[ParsedInput], bool]], ...] = (
    (Dialect.ANYBOX, is_anybox_json),
    (Dialect.ANYBOX_HTML, is_anybox_html),
    (Dialect.FIREFOX, is_firefox_html),
    (Dialect.SAFARI, is_safari_html),
)


def detect_format(data: bytes, *, name: Optional[str] = None) -> Dialect:
    doc = ParsedInput(data)
    for dialect, matches in DETECTORS:
        if matches(doc):
            log.debug("Detected %s format: %s", dialect.value, name or "<bytes>")
            return dialect
    log.debug("Unrecognized bookmark format: %s", name or "<bytes>")
    return Dialect.UNKNOWN


def _has_anchor_attr(soup: BeautifulSoup, attr: str) -> bool:
    return soup.find("a", attrs={attr: True}) is not None


def _has_netscape_marker(soup: BeautifulSoup) -> bool:
    for h1 in soup.find_all("h1"):
        if h1.get_text(strip=True).lower() == "bookmarks":
            return True
    markers = soup.find_all(string=lambda s: isinstance(s, (Doctype, Comment)))
    return any(NETSCAPE_MARKER in str(m).lower() for m in markers)
