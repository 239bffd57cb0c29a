from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import IO, Any, Dict, List, Optional

from .collection import Collection
from .log import get_logger
from .model import Bookmark

log = get_logger(__name__)


def bookmark_to_dict(b: Bookmark) -> Dict[str, Any]:
    # Field names follow the Anybox export so output re-imports as that dialect.
    # canonical_url is derived on import and never written.
    out: Dict[str, Any] = {
        "id": b.id,
        "url": b.url,
        "title": b.title,
        "description": b.description,
        "tags": [list(h) for h in b.tags],
        "folder": list(b.folder),
        "comment": b.comment,
        "keyword": b.keyword,
        "isStarred": b.is_starred,
        "dateAdded": format_timestamp(b.date_added),
        "lastModified": format_timestamp(b.last_modified),
    }
    if b.article:
        out["article"] = b.article
    if b.source:
        out["source"] = b.source
    if b.imported_at is not None:
        out["importedAt"] = format_timestamp(b.imported_at)
    return out


def format_timestamp(dt: Optional[datetime]) -> Optional[str]:
    if dt is None:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def dumps_anybox_json(collection: Collection, *, indent: bool = False) -> str:
    rows: List[Dict[str, Any]] = [bookmark_to_dict(b) for b in collection.bookmarks]
    return json.dumps(rows, ensure_ascii=False, indent=2 if indent else None) + "\n"


def export_anybox_json(collection: Collection, fp: IO[str], *, indent: bool = False) -> None:
    fp.write(dumps_anybox_json(collection, indent=indent))


def write_anybox_json(out_path: Path, collection: Collection, *, indent: bool = False) -> None:
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(dumps_anybox_json(collection, indent=indent), encoding="utf-8")
    log.info("Wrote %d bookmarks as Anybox JSON: %s", len(collection), out_path)
