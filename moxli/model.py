from __future__ import annotations

import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import List, Optional

SOURCE_ANYBOX = "anybox"
SOURCE_ANYBOX_HTML = "anybox-html"
SOURCE_FIREFOX = "firefox"
SOURCE_SAFARI = "safari"


def new_id() -> str:
    return str(uuid.uuid4())


@dataclass
class Bookmark:
    id: str
    url: str
    # Dedup key, derived from url on import and never read back from storage.
    canonical_url: str = ""
    title: str = ""
    description: str = ""

    # [["security", "user-auth"], ["infrastructure"]]
    tags: List[List[str]] = field(default_factory=list)
    folder: List[str] = field(default_factory=list)

    comment: str = ""
    keyword: str = ""
    is_starred: bool = False

    # None means unknown, never the epoch.
    date_added: Optional[datetime] = None
    last_modified: Optional[datetime] = None

    article: str = ""

    source: str = ""
    imported_at: Optional[datetime] = None

    def clone(self) -> "Bookmark":
        return replace(
            self,
            tags=[list(h) for h in self.tags],
            folder=list(self.folder),
        )


@dataclass
class Metadata:
    source: str = ""
    imported_at: Optional[datetime] = None
    total_count: int = 0
    tag_count: int = 0
    folder_count: int = 0
