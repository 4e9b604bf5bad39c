"""URL helpers for host-prefixing sitemap locations."""

from __future__ import annotations

import posixpath
from urllib.parse import urlsplit, urlunsplit


def is_absolute_url(value: str) -> bool:
    """Return True when ``value`` already carries a scheme and a host."""
    parts = urlsplit(value)
    return bool(parts.scheme and parts.netloc)


def join_url(base: str, *parts: str) -> str:
    """Append path parts to ``base`` without doubling separators.

    Path segments already present in ``base`` are kept, a trailing slash on
    the last part survives, and the query string and fragment of the last
    part are carried over.
    """
    scheme, netloc, base_path, query, fragment = urlsplit(base)
    pieces = [base_path]
    for part in parts:
        part, _, fragment = part.partition("#")
        part, _, query = part.partition("?")
        pieces.append(part)

    stripped = [piece.strip("/") for piece in pieces]
    joined = "/".join(piece for piece in stripped if piece)
    absolute = bool(netloc) or any(piece.startswith("/") for piece in pieces)

    if not joined:
        path = "/" if absolute else ""
    else:
        path = posixpath.normpath(("/" if absolute else "") + joined)
        last = next((piece for piece in reversed(pieces) if piece.strip("/")), "")
        if last.endswith("/") and path != "/":
            path += "/"
    return urlunsplit((scheme, netloc, path, query, fragment))
