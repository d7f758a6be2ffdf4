"""Percent-encoding for imgix URL paths and query strings.

Path segments keep the RFC 3986 characters that are harmless inside a path
segment (``:@!$'()*,;``) and encode everything else, including space, ``?``,
``#``, ``%``, ``&``, ``=``, ``+`` and all non-ASCII bytes (as UTF-8).  The
``/`` between segments is preserved.

Query keys and values are encoded as single components: only the RFC 3986
unreserved characters (``A-Z a-z 0-9 - . _ ~``) survive, so a space becomes
``%20`` (never ``+``), ``&`` becomes ``%26`` and ``,`` becomes ``%2C``.

When the image path is itself an absolute ``http(s)://`` URL, as with imgix
web-proxy sources, the whole path is encoded as one component so its own
``/``, ``?`` and ``&`` cannot leak into the outer URL.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from urllib.parse import quote

_PATH_SEGMENT_SAFE = ":@!$'()*,;"
_PROXY_RE = re.compile(r"https?://", re.IGNORECASE)


def is_encodable(text: str) -> bool:
    """Return True if ``text`` can be encoded as UTF-8.

    Lone surrogates (``"\\ud800"``, as produced by some JSON escapes or
    ``surrogateescape`` decoding) cannot, so they would fail inside
    :func:`~urllib.parse.quote` at render time.
    """
    try:
        text.encode("utf-8")
    except UnicodeEncodeError:
        return False
    return True


def is_proxy_path(path: str) -> bool:
    """Return True if ``path`` is an absolute http(s) URL."""
    return _PROXY_RE.match(path) is not None


def encode_path(path: str) -> str:
    """Encode an image path (without its leading slash).

    Args:
        path: Raw, unencoded path such as ``"users/my photo.png"``.

    Returns:
        The encoded path, e.g. ``"users/my%20photo.png"``.
    """
    if is_proxy_path(path):
        return quote(path, safe="")
    return "/".join(quote(segment, safe=_PATH_SEGMENT_SAFE) for segment in path.split("/"))


def encode_component(text: str) -> str:
    """Encode a single query key or value."""
    return quote(text, safe="")


def encode_query(pairs: Iterable[tuple[str, str]]) -> str:
    """Join ``(key, value)`` pairs as ``k=v&k=v`` with both sides encoded.

    The pairs are emitted in the order given; callers pass them pre-sorted.
    """
    return "&".join(f"{encode_component(key)}={encode_component(value)}" for key, value in pairs)
