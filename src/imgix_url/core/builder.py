"""Fluent builder for imgix image URLs.

An imgix URL is made of four parts::

                domain
            ┌──────┴──────┐
    https://assets.imgix.net/photos/cat.jpg?fit=crop&h=300&w=400&s=3f1c...
    └─┬─┘                   └─────┬──────┘ └────────┬─────────┘ └──┬──┘
    scheme                      path        sorted parameters  signature

:class:`UrlBuilder` owns the host, the path, a
:class:`~imgix_url.core.store.ParameterStore` and an optional signing key.
Configuration methods mutate the builder and return it so calls can be
chained; :meth:`UrlBuilder.render` is pure and may be called any number of
times.

Usage Example
-------------
    from imgix_url import UrlBuilder

    url = (
        UrlBuilder("assets.imgix.net", "photos/cat.jpg")
        .with_param("w", 400)
        .with_param("h", 300)
        .with_param("fit", "crop")
        .with_signing_key("secret")
        .render()
    )

Builders are not safe for concurrent mutation.  Concurrent renders of a
builder nobody is mutating are fine.
"""

from __future__ import annotations

import copy
import logging
import re
from collections.abc import Mapping

from .config import ImgixConfig
from .encoding import encode_path, encode_query, is_encodable
from .errors import (
    ConflictingParamsError,
    InvalidHostError,
    InvalidPathError,
    InvalidSigningKeyError,
)
from .parameters import LIBRARY_KEY, find_conflict
from .signing import append_signature, sign
from .store import ParameterStore

logger = logging.getLogger(__name__)

SCHEME = "https"

_SCHEME_RE = re.compile(r"[A-Za-z][A-Za-z0-9+.-]*:")
_HOST_RE = re.compile(r"[A-Za-z0-9._~!$&'()*+,;=-]+(:\d+)?")


def library_tag() -> str:
    """Return the ``ixlib`` value for this library, e.g. ``"python-0.1.0"``."""
    from imgix_url import __version__

    return f"python-{__version__}"


def validate_host(host: str) -> str:
    """Check that ``host`` is a bare domain (optionally with a port).

    Raises:
        InvalidHostError: With the specific reason the host was rejected.
    """
    if not host:
        raise InvalidHostError(host, "host cannot be empty")
    if host.endswith(":"):
        raise InvalidHostError(host, "host port must be one or more digits")
    if "://" in host or (_SCHEME_RE.match(host) and not _HOST_RE.fullmatch(host)):
        raise InvalidHostError(host, "host must not include a scheme")
    if any(ch.isspace() for ch in host):
        raise InvalidHostError(host, "host must not contain whitespace")
    if "/" in host:
        raise InvalidHostError(host, "host must not contain '/'")
    if not _HOST_RE.fullmatch(host):
        raise InvalidHostError(host, "host contains invalid characters")
    return host


def normalize_path(path: str) -> str:
    """Strip leading slashes from ``path`` and check it is non-empty.

    Raises:
        InvalidPathError: If nothing remains after normalisation
            or the path is not valid UTF-8 text.
    """
    if not is_encodable(path):
        raise InvalidPathError(path, "path is not valid UTF-8 text")
    normalized = path.lstrip("/")
    if not normalized:
        raise InvalidPathError(path, "path cannot be empty")
    return normalized


class UrlBuilder:
    """Builds imgix URLs from a host, a path and transformation parameters.

    Args:
        host: Source domain, e.g. ``"assets.imgix.net"``.  No scheme, no
            slashes, no whitespace.
        path: Image path relative to the host.  Leading slashes are
            normalised; the path must not be pre-encoded.
        signing_key: Optional secure URL token.  When present, rendered
            URLs carry an ``s`` signature parameter.

    Raises:
        InvalidHostError: If the host is rejected.
        InvalidPathError: If the path is empty.
        InvalidSigningKeyError: If ``signing_key`` is an empty string.
    """

    def __init__(self, host: str, path: str, *, signing_key: str | None = None) -> None:
        self._host = validate_host(host)
        self._path = normalize_path(path)
        self._store = ParameterStore()
        self._signing_key: str | None = None
        if signing_key is not None:
            self.with_signing_key(signing_key)

    @classmethod
    def from_config(
        cls,
        path: str,
        config: ImgixConfig | None = None,
        host: str | None = None,
    ) -> UrlBuilder:
        """Create a builder using configured defaults.

        Args:
            path: Image path.
            config: Settings to read; defaults to the global instance.
            host: Explicit host, overriding ``config.default_host``.

        Raises:
            InvalidHostError: If neither ``host`` nor a configured default
                host is available.
        """
        if config is None:
            from .config import config as global_config

            config = global_config

        builder = cls(host or config.default_host or "", path, signing_key=config.signing_key)
        if config.include_library_param:
            builder.with_library_param()
        return builder

    # ------------------------------------------------------------------
    # Accessors.
    # ------------------------------------------------------------------

    @property
    def host(self) -> str:
        return self._host

    @property
    def path(self) -> str:
        """The normalised path, without a leading slash."""
        return self._path

    @property
    def params(self) -> dict[str, str]:
        """A snapshot of the current parameters, sorted by key."""
        return self._store.as_dict()

    @property
    def is_signed(self) -> bool:
        return self._signing_key is not None

    def has_param(self, key: str) -> bool:
        return key in self._store

    # ------------------------------------------------------------------
    # Configuration.
    # ------------------------------------------------------------------

    def with_param(self, key: str, value: object) -> UrlBuilder:
        """Set a parameter, overwriting any previous value for ``key``.

        Raises:
            ParamError: Propagated unchanged from the parameter store; the
                builder is left as it was.
        """
        self._store.set(key, value)
        return self

    def with_params(
        self, params: Mapping[str, object] | None = None, **kwargs: object
    ) -> UrlBuilder:
        """Set several parameters; nothing is applied if any is invalid.

        Keys that are not valid Python identifiers (``fp-x``) must be passed
        through ``params``.
        """
        merged = dict(params or {})
        merged.update(kwargs)
        self._store.update(merged)
        return self

    def without_param(self, key: str) -> UrlBuilder:
        """Remove ``key`` if present.  Always succeeds."""
        self._store.remove(key)
        return self

    def with_signing_key(self, secret: str) -> UrlBuilder:
        """Enable signing with ``secret``.  The signature is computed at render."""
        if not secret:
            raise InvalidSigningKeyError()
        if not is_encodable(secret):
            raise InvalidSigningKeyError("signing key is not valid UTF-8 text")
        self._signing_key = secret
        return self

    def without_signing_key(self) -> UrlBuilder:
        """Disable signing."""
        self._signing_key = None
        return self

    def with_library_param(self) -> UrlBuilder:
        """Tag URLs with ``ixlib=python-<version>`` for imgix diagnostics."""
        self._store.set(LIBRARY_KEY, library_tag())
        return self

    def copy(self) -> UrlBuilder:
        """Return a fully independent copy of this builder."""
        return copy.deepcopy(self)

    def __deepcopy__(self, memo: dict) -> UrlBuilder:
        clone = object.__new__(type(self))
        clone._host = self._host
        clone._path = self._path
        clone._store = self._store.copy()
        clone._signing_key = self._signing_key
        return clone

    __copy__ = copy

    # ------------------------------------------------------------------
    # Rendering.
    # ------------------------------------------------------------------

    def check_conflicts(self) -> None:
        """Raise if the current parameters contain a declared conflict.

        Raises:
            ConflictingParamsError: Naming every key of the matched rule.
        """
        rule = find_conflict(self._store.as_dict())
        if rule is not None:
            raise ConflictingParamsError(rule.keys, rule.reason)

    def render(self) -> str:
        """Assemble the final URL.

        Steps:
        1. Reject conflicting parameter combinations.
        2. Percent-encode the path segment by segment.
        3. Encode the parameters sorted by key and join them with ``&``.
        4. If a signing key is set, append ``s=<md5 hex>`` after them.
        5. Join ``https://{host}/{path}`` with ``?{query}`` when the query
           is non-empty.

        Rendering never mutates the builder; the same state always yields
        the same string.

        Raises:
            ConflictingParamsError: If declared-incompatible parameters are
                present.
        """
        self.check_conflicts()

        encoded_path = encode_path(self._path)
        query = encode_query(self._store.entries())

        if self._signing_key is not None:
            signature = sign(self._signing_key, encoded_path, query)
            query = append_signature(query, signature)

        url = f"{SCHEME}://{self._host}/{encoded_path}"
        if query:
            url = f"{url}?{query}"

        logger.debug(f"Rendered URL for {self._host}/{self._path} ({len(self._store)} params)")
        return url

    def __repr__(self) -> str:
        return (
            f"UrlBuilder(host={self._host!r}, path={self._path!r}, "
            f"params={self._store.as_dict()!r}, signed={self.is_signed})"
        )


def build_url(
    host: str,
    path: str,
    params: Mapping[str, object] | None = None,
    signing_key: str | None = None,
) -> str:
    """Build and render a URL in one call.

    Args:
        host: Source domain.
        path: Image path.
        params: Optional parameters, applied all-or-nothing.
        signing_key: Optional secure URL token.

    Returns:
        The rendered URL.

    Raises:
        ImgixError: Any construction, parameter or render error.
    """
    builder = UrlBuilder(host, path, signing_key=signing_key)
    if params:
        builder.with_params(params)
    return builder.render()
