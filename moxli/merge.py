from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Sequence

from .collection import Collection
from .log import get_logger
from .model import Bookmark

log = get_logger(__name__)


@dataclass
class MergeResult:
    collection: Collection
    enhanced: int = 0
    unmatched: int = 0


def merge_collections(base: Collection, sources: Sequence[Collection]) -> MergeResult:
    """Base-centric merge: sources may only make base timestamps older.

    The result has exactly the base's records in the base's order. A source
    record whose canonical URL is absent from the base is ignored: the user
    left it out of the base on purpose. For matches, each of date_added and
    last_modified is replaced when the source knows an earlier instant than
    the (already enhanced) base value, so after all sources the base holds
    the earliest timestamp any input knew.
    """
    if base is None:
        raise ValueError("merge requires a base collection")
    if sources is None:
        raise ValueError("merge requires a list of source collections (may be empty)")
    for i, src in enumerate(sources):
        if src is None:
            raise ValueError(f"source collection #{i} is missing")

    result = base.clone()
    enhanced_ids = set()
    unmatched = 0

    for src in sources:
        for sb in src.bookmarks:
            bb = result.find_by_canonical_url(sb.canonical_url) if sb.canonical_url else None
            if bb is None:
                unmatched += 1
                continue
            if enhance_timestamps(bb, sb):
                enhanced_ids.add(bb.id)

    result.recompute_metadata()
    if unmatched:
        log.debug("Ignored %d source bookmarks not present in base.", unmatched)
    log.info(
        "Merged %d source collection(s) into %d base bookmarks; %d enhanced.",
        len(sources),
        len(result),
        len(enhanced_ids),
    )
    return MergeResult(collection=result, enhanced=len(enhanced_ids), unmatched=unmatched)


def enhance_timestamps(base: Bookmark, source: Bookmark) -> bool:
    """Copy older known timestamps from ``source`` onto ``base``; True if any changed."""
    updated = False

    date_added = _earliest(base.date_added, source.date_added)
    if date_added is not base.date_added:
        base.date_added = date_added
        updated = True

    last_modified = _earliest(base.last_modified, source.last_modified)
    if last_modified is not base.last_modified:
        base.last_modified = last_modified
        updated = True

    return updated


def _earliest(current: Optional[datetime], candidate: Optional[datetime]) -> Optional[datetime]:
    if candidate is None:
        return current
    if current is None or candidate < current:
        return candidate
    return current
