from __future__ import annotations

import json
import re
from datetime import datetime, timezone
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, field_validator

from .collection import Collection
from .log import get_logger
from .model import SOURCE_ANYBOX, Bookmark, new_id
from .tagging import normalize_tags
from .url_norm import URLNormalizationError, normalize_bookmark_url

log = get_logger(__name__)

_DATETIME = TypeAdapter(datetime)
# Sub-microsecond digits (Go writes nanoseconds) are truncated.
_EXTRA_FRACTION_RE = re.compile(r"(\.\d{6})\d+")


class AnyboxItem(BaseModel):
    """One element of an Anybox JSON export (also moxli's own output format)."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    url: str = ""
    title: str = ""
    description: str = ""
    tags: List[List[str]] = Field(default_factory=list)
    folder: List[str] = Field(default_factory=list)
    comment: str = ""
    keyword: str = ""
    is_starred: bool = Field(default=False, alias="isStarred")
    date_added: Optional[datetime] = Field(default=None, alias="dateAdded")
    last_modified: Optional[datetime] = Field(default=None, alias="lastModified")
    article: str = ""

    @field_validator("url", "title", "description", "comment", "keyword", "article", mode="before")
    @classmethod
    def _null_to_empty_str(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("tags", "folder", mode="before")
    @classmethod
    def _null_to_empty_list(cls, v: Any) -> Any:
        return [] if v is None else v

    @field_validator("is_starred", mode="before")
    @classmethod
    def _null_to_false(cls, v: Any) -> Any:
        return False if v is None else v

    @field_validator("date_added", "last_modified", mode="before")
    @classmethod
    def _lenient_timestamp(cls, v: Any) -> Optional[datetime]:
        return parse_iso_timestamp(v)


def parse_iso_timestamp(v: Any) -> Optional[datetime]:
    """ISO-8601 string -> aware UTC datetime; missing or unparseable is unknown.

    Naive values are read as UTC. Go's zero time (year 1), which older
    exports write for unset fields, also counts as unknown.
    """
    if isinstance(v, datetime):
        dt = v
    elif isinstance(v, str) and v.strip():
        s = _EXTRA_FRACTION_RE.sub(r"\1", v.strip(), count=1)
        try:
            dt = _DATETIME.validate_python(s)
        except ValidationError:
            log.debug("Unparseable timestamp %r treated as unknown.", v)
            return None
    else:
        return None

    if dt.year <= 1:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def parse_anybox_json(data: bytes) -> Collection:
    try:
        items = json.loads(data)
    except RecursionError as e:
        raise ValueError("Anybox JSON export is nested too deeply") from e
    if not isinstance(items, list):
        raise ValueError("Anybox JSON export must be a top-level array")

    now = datetime.now(timezone.utc)
    collection = Collection(source=SOURCE_ANYBOX, imported_at=now)
    skipped = 0
    for pos, raw in enumerate(items):
        b = _bookmark_from_item(raw, pos, imported_at=now)
        if b is None:
            skipped += 1
            continue
        collection.add(b)

    collection.recompute_metadata()
    if skipped:
        log.info("Skipped %d of %d Anybox entries (invalid entry or URL).", skipped, len(items))
    return collection


def _bookmark_from_item(raw: Any, pos: int, *, imported_at: datetime) -> Optional[Bookmark]:
    if not isinstance(raw, dict):
        log.warning("Anybox entry #%d is not an object; skipped.", pos)
        return None
    try:
        item = AnyboxItem.model_validate(raw)
    except ValidationError as e:
        log.warning("Anybox entry #%d is malformed (%d errors); skipped.", pos, e.error_count())
        return None

    b = Bookmark(
        id=new_id(),
        url=item.url,
        title=item.title,
        description=item.description,
        tags=[list(h) for h in item.tags],
        folder=list(item.folder),
        comment=item.comment,
        keyword=item.keyword,
        is_starred=item.is_starred,
        date_added=item.date_added,
        last_modified=item.last_modified,
        article=item.article,
        source=SOURCE_ANYBOX,
        imported_at=imported_at,
    )
    if not b.url.strip():
        log.debug("Anybox entry #%d has no URL; skipped.", pos)
        return None
    try:
        normalize_bookmark_url(b)
    except URLNormalizationError as e:
        log.debug("Anybox entry #%d: %s", pos, e)
        return None

    normalize_tags(b)
    return b
