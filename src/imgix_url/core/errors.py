"""Error types raised while building imgix URLs.

Two families of errors exist:

- :class:`ParamError` is raised by the parameter store when a single
  parameter cannot be accepted (unknown key, empty value, bad value,
  reserved key).  Builder configuration methods let these propagate
  unchanged.
- :class:`BuildError` is raised by the builder itself, either at
  construction time (bad host or path) or at render time (conflicting
  parameters).

Both derive from :class:`ImgixError`, so callers that only want to report a
failure can catch a single type.  Every error carries the offending key(s)
so the message can point at exactly what to fix.
"""

from __future__ import annotations


class ImgixError(Exception):
    """Base class for all imgix URL errors."""

    pass


# ---------------------------------------------------------------------------
# Parameter errors.
# ---------------------------------------------------------------------------


class ParamError(ImgixError):
    """A parameter was rejected by the parameter store.

    Attributes:
        key: The parameter key that was rejected.
        value: The value the caller attempted to set (``None`` when not
            applicable).
        reason: Human-readable explanation.
    """

    def __init__(self, key: str, reason: str, value: object = None) -> None:
        self.key = key
        self.value = value
        self.reason = reason
        super().__init__(f"{key}: {reason}")


class UnknownKeyError(ParamError):
    """The key is not part of the known parameter table."""

    def __init__(self, key: str, value: object = None) -> None:
        super().__init__(key, "unknown parameter", value)


class EmptyValueError(ParamError):
    """The value is empty (``""``, whitespace only, ``None`` or an empty list)."""

    def __init__(self, key: str, value: object = None) -> None:
        super().__init__(key, "value cannot be empty", value)


class InvalidValueError(ParamError):
    """The value does not match the declared kind, range or enum of the key."""

    pass


class ReservedKeyError(ParamError):
    """The key is reserved for the URL signature."""

    def __init__(self, key: str, value: object = None) -> None:
        super().__init__(key, "reserved for the URL signature", value)


# ---------------------------------------------------------------------------
# Builder errors.
# ---------------------------------------------------------------------------


class BuildError(ImgixError):
    """The builder could not be constructed or rendered."""

    pass


class InvalidHostError(BuildError):
    """The host is empty, carries a scheme, or contains invalid characters."""

    def __init__(self, host: str, reason: str) -> None:
        self.host = host
        self.reason = reason
        super().__init__(f"invalid host {host!r}: {reason}")


class InvalidPathError(BuildError):
    """The image path is empty after normalisation."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"invalid path {path!r}: {reason}")


class InvalidSigningKeyError(BuildError):
    """The signing secret is empty or cannot be encoded."""

    def __init__(self, reason: str = "signing key cannot be empty") -> None:
        self.reason = reason
        super().__init__(reason)


class ConflictingParamsError(BuildError):
    """Two or more parameters cannot be combined.

    Attributes:
        keys: The conflicting keys, sorted.
        reason: Why the combination is rejected.
    """

    def __init__(self, keys: tuple[str, ...], reason: str) -> None:
        self.keys = tuple(sorted(keys))
        self.reason = reason
        super().__init__(f"conflicting parameters {', '.join(self.keys)}: {reason}")
