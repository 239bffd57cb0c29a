from __future__ import annotations

import re
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from .model import Bookmark

DEFAULT_SCHEME = "https"

_SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*:(?P<rest>.*)$", re.DOTALL)
# "host:8080/x" is a host with a port, not a scheme.
_PORT_RE = re.compile(r"^\d+(?:[/?#]|$)")
_BAD_HOST_RE = re.compile(r"[\s\x00-\x1f\x7f]")
_HOST_REQUIRED = {"http", "https"}


class URLNormalizationError(ValueError):
    pass


def normalize_url(url: str) -> str:
    """Canonical form of ``url`` used as the deduplication key.

    Missing scheme defaults to https, scheme and host are lowercased, a
    trailing slash is dropped (the root path ``/`` is kept), query parameters
    are sorted by key and the fragment is removed.
    """
    raw = (url or "").strip()
    if not raw:
        raise URLNormalizationError("empty URL")

    if raw.startswith("//"):
        raw = f"{DEFAULT_SCHEME}:{raw}"
    elif not _has_scheme(raw):
        raw = f"{DEFAULT_SCHEME}://{raw}"

    try:
        p = urlsplit(raw)
    except ValueError as e:
        raise URLNormalizationError(f"cannot parse URL {url!r}: {e}") from e

    scheme = p.scheme.lower()
    netloc = _lower_host(p.netloc)
    if _BAD_HOST_RE.search(netloc):
        raise URLNormalizationError(f"invalid host in URL {url!r}")
    if scheme in _HOST_REQUIRED and not p.hostname:
        raise URLNormalizationError(f"missing host in URL {url!r}")

    path = p.path
    if path != "/":
        # All trailing slashes, so that normalizing twice is a no-op.
        path = path.rstrip("/")

    query_items = parse_qsl(p.query, keep_blank_values=True)
    query_items.sort(key=lambda kv: kv[0])
    query = urlencode(query_items, doseq=True)

    return urlunsplit((scheme, netloc, path, query, ""))


def normalize_bookmark_url(b: Bookmark) -> None:
    b.canonical_url = normalize_url(b.url)


def _has_scheme(raw: str) -> bool:
    m = _SCHEME_RE.match(raw)
    return m is not None and not _PORT_RE.match(m.group("rest"))


def _lower_host(netloc: str) -> str:
    # Userinfo keeps its case; only the host[:port] part is folded.
    userinfo, sep, hostport = netloc.rpartition("@")
    return f"{userinfo}{sep}{hostport.lower()}"
