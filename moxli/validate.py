from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from .collection import Collection
from .model import Bookmark


@dataclass
class ValidationError:
    field: str
    message: str
    bookmark_id: str = ""

    def __str__(self) -> str:
        if self.bookmark_id:
            return f"bookmark {self.bookmark_id}: {self.field} - {self.message}"
        return f"{self.field} - {self.message}"


@dataclass
class ValidationResult:
    valid: bool = True
    errors: List[ValidationError] = field(default_factory=list)


def validate_collection(c: Optional[Collection]) -> ValidationResult:
    """Check a collection is ready for export. Collects every problem, never raises."""
    result = ValidationResult()
    if c is None:
        result.valid = False
        result.errors.append(ValidationError(field="collection", message="collection is missing"))
        return result

    for b in c.bookmarks:
        errs = _validate_bookmark(b)
        if errs:
            result.valid = False
            result.errors.extend(errs)
    return result


def _validate_bookmark(b: Bookmark) -> List[ValidationError]:
    errors: List[ValidationError] = []

    def err(name: str, message: str) -> None:
        errors.append(ValidationError(field=name, message=message, bookmark_id=b.id))

    if not b.url:
        err("url", "URL is required")
    elif not b.url.startswith(("http://", "https://")):
        err("url", "URL must start with http:// or https://")

    if b.url and not b.canonical_url:
        err("canonical_url", "canonical URL is missing (URL normalization required)")

    for i, hierarchy in enumerate(b.tags):
        if not hierarchy:
            err(f"tags[{i}]", "tag group is empty")
        for j, tag in enumerate(hierarchy):
            if not tag.strip():
                err(f"tags[{i}][{j}]", "tag value is empty")

    for i, segment in enumerate(b.folder):
        if not segment.strip():
            err(f"folder[{i}]", "folder segment is empty")

    return errors
