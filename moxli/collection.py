from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timezone
from typing import Dict, Iterator, List, Optional

from .model import Bookmark, Metadata
from .tagging import distinct_tags

COLLECTION_VERSION = "1.0"


def _now() -> datetime:
    return datetime.now(timezone.utc)


class Collection:
    """Ordered bookmarks plus a first-write-wins canonical URL index.

    The record list is authoritative. The index is derived from it: ``add``
    keeps it current, anything else that mutates ``bookmarks`` must call
    ``invalidate_index`` and the next lookup rebuilds it.
    """

    def __init__(self, *, source: str = "", imported_at: Optional[datetime] = None) -> None:
        self.version = COLLECTION_VERSION
        self.updated = _now()
        self.bookmarks: List[Bookmark] = []
        self.metadata = Metadata(source=source, imported_at=imported_at)
        self._url_index: Optional[Dict[str, Bookmark]] = {}

    def __len__(self) -> int:
        return len(self.bookmarks)

    def __iter__(self) -> Iterator[Bookmark]:
        return iter(self.bookmarks)

    def add(self, b: Bookmark) -> None:
        self.bookmarks.append(b)
        self.updated = _now()
        if self._url_index is None:
            # Rebuilt lazily, including this record, on the next lookup.
            return
        if b.canonical_url and b.canonical_url not in self._url_index:
            self._url_index[b.canonical_url] = b

    def find_by_canonical_url(self, canonical_url: str) -> Optional[Bookmark]:
        index = self._url_index
        if index is None:
            index = self._build_url_index()
        return index.get(canonical_url)

    def invalidate_index(self) -> None:
        self._url_index = None

    def clone(self) -> "Collection":
        c = Collection(source=self.metadata.source, imported_at=self.metadata.imported_at)
        c.version = self.version
        c.updated = self.updated
        c.metadata = replace(self.metadata)
        c.bookmarks = [b.clone() for b in self.bookmarks]
        c._build_url_index()
        return c

    def recompute_metadata(self) -> None:
        tags: set[str] = set()
        folders: set[str] = set()
        for b in self.bookmarks:
            tags |= distinct_tags(b.tags)
            folders.update(b.folder)

        self.metadata.total_count = len(self.bookmarks)
        self.metadata.tag_count = len(tags)
        self.metadata.folder_count = len(folders)
        self.updated = _now()

    def _build_url_index(self) -> Dict[str, Bookmark]:
        index: Dict[str, Bookmark] = {}
        for b in self.bookmarks:
            if b.canonical_url and b.canonical_url not in index:
                index[b.canonical_url] = b
        self._url_index = index
        return index
