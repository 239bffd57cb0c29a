from __future__ import annotations

import re
import warnings
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Dict, List, Optional, Tuple

from bs4 import BeautifulSoup, MarkupResemblesLocatorWarning  # type: ignore

from .collection import Collection
from .log import get_logger
from .model import SOURCE_ANYBOX_HTML, SOURCE_FIREFOX, SOURCE_SAFARI, Bookmark, new_id
from .tagging import normalize_tags, split_flat_tags
from .url_norm import URLNormalizationError, normalize_bookmark_url

if TYPE_CHECKING:
    from bs4.element import Tag

log = get_logger(__name__)
_WS_RE = re.compile(r"\s+")

# Which optional <A> attributes each Netscape-lineage export actually fills.
# Folders (H3) are structural only; none of these dialects maps them.
DIALECT_ATTRS: Dict[str, Tuple[str, ...]] = {
    SOURCE_ANYBOX_HTML: ("add_date", "tags"),
    SOURCE_FIREFOX: ("add_date", "last_modified"),
    SOURCE_SAFARI: (),
}


def load_html(data: bytes) -> BeautifulSoup:
    text = data.decode("utf-8", errors="replace")
    with warnings.catch_warnings():
        # Short inputs that look like a path or URL are still documents here.
        warnings.simplefilter("ignore", MarkupResemblesLocatorWarning)
        return BeautifulSoup(text, "lxml")


def parse_netscape_html(data: bytes, source: str) -> Collection:
    if source not in DIALECT_ATTRS:
        raise ValueError(f"Not a Netscape bookmark dialect: {source}")
    attrs = DIALECT_ATTRS[source]
    now = datetime.now(timezone.utc)
    soup = load_html(data)

    collection = Collection(source=source, imported_at=now)
    dropped = 0
    for a in soup.find_all("a"):
        b = _bookmark_from_anchor(a, attrs, source=source, imported_at=now)
        if b is None:
            dropped += 1
            continue
        collection.add(b)

    collection.recompute_metadata()
    if dropped:
        log.debug("Dropped %d %s anchors without a usable URL.", dropped, source)
    return collection


def _bookmark_from_anchor(
    a: "Tag",
    attrs: Tuple[str, ...],
    *,
    source: str,
    imported_at: datetime,
) -> Optional[Bookmark]:
    href = (a.get("href") or "").strip()
    if not href:
        return None

    b = Bookmark(
        id=new_id(),
        url=href,
        title=_WS_RE.sub(" ", a.get_text(strip=True)),
        source=source,
        imported_at=imported_at,
    )
    if "add_date" in attrs:
        b.date_added = _epoch_to_datetime(a.get("add_date"))
    if "last_modified" in attrs:
        b.last_modified = _epoch_to_datetime(a.get("last_modified"))
    if "tags" in attrs:
        b.tags = split_flat_tags(a.get("tags") or "")

    try:
        normalize_bookmark_url(b)
    except URLNormalizationError as e:
        log.debug("Skipping anchor: %s", e)
        return None

    normalize_tags(b)
    b.tags = _drop_blank_tags(b.tags)
    return b


def _epoch_to_datetime(v) -> Optional[datetime]:
    """ADD_DATE / LAST_MODIFIED are Unix seconds; anything unusable is unknown."""
    if v is None:
        return None
    try:
        iv = int(str(v).strip())
    except ValueError:
        return None
    if iv <= 0:
        return None
    try:
        return datetime.fromtimestamp(iv, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return None


def _drop_blank_tags(tags: List[List[str]]) -> List[List[str]]:
    return [h for h in tags if h and all(h)]
