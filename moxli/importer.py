from __future__ import annotations

from pathlib import Path
from typing import Tuple

from .collection import Collection
from .detect import Dialect, UnknownFormatError, detect_format
from .log import get_logger
from .parse_anybox import parse_anybox_json
from .parse_netscape import parse_netscape_html

log = get_logger(__name__)


def parse_bytes(data: bytes, dialect: Dialect) -> Collection:
    if dialect is Dialect.ANYBOX:
        return parse_anybox_json(data)
    if dialect in (Dialect.ANYBOX_HTML, Dialect.FIREFOX, Dialect.SAFARI):
        return parse_netscape_html(data, dialect.value)
    raise UnknownFormatError("Cannot parse a stream of unknown format")


def import_bytes(data: bytes, *, name: str = "<bytes>") -> Tuple[Dialect, Collection]:
    dialect = detect_format(data, name=name)
    if dialect is Dialect.UNKNOWN:
        raise UnknownFormatError(f"Unrecognized bookmark format: {name}")
    collection = parse_bytes(data, dialect)
    log.info("Imported %d bookmarks (%s) from %s", len(collection), dialect.value, name)
    return dialect, collection


def import_file(path: Path) -> Tuple[Dialect, Collection]:
    return import_bytes(Path(path).read_bytes(), name=str(path))
