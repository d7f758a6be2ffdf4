"""Validated, deterministically ordered parameter storage."""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from dataclasses import dataclass

from .errors import ReservedKeyError, UnknownKeyError
from .parameters import PARAMETER_TABLE, RESERVED_KEYS, ParamSpec, normalize_value

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Parameter:
    """A validated key/value pair in canonical string form."""

    key: str
    value: str


class ParameterStore:
    """Mapping from parameter key to validated value.

    Insertion order carries no meaning: :meth:`entries` always returns the
    parameters sorted by key, so two stores holding the same parameters
    render identically.

    Setting a key that is already present overwrites it (last write wins).
    A rejected ``set`` leaves the store exactly as it was.
    """

    def __init__(self, table: Mapping[str, ParamSpec] | None = None) -> None:
        self._table = PARAMETER_TABLE if table is None else table
        self._params: dict[str, Parameter] = {}

    def _validate(self, key: str, value: object) -> Parameter:
        if key in RESERVED_KEYS:
            raise ReservedKeyError(key, value)
        spec = self._table.get(key)
        if spec is None:
            raise UnknownKeyError(key, value)
        return Parameter(key, normalize_value(spec, value))

    def set(self, key: str, value: object) -> None:
        """Validate and store a parameter.

        Args:
            key: Parameter key from the known table.
            value: Value to validate; see :mod:`imgix_url.core.parameters`.

        Raises:
            ReservedKeyError: If ``key`` is reserved for the signature.
            UnknownKeyError: If ``key`` is not in the table.
            EmptyValueError: If ``value`` is empty.
            InvalidValueError: If ``value`` fails the key's kind/range/enum.
        """
        param = self._validate(key, value)
        if key in self._params:
            logger.debug(f"Overwriting parameter {key}: {self._params[key].value} -> {param.value}")
        self._params[key] = param

    def update(self, params: Mapping[str, object]) -> None:
        """Set several parameters at once.

        Every value is validated before any is stored, so a failure leaves
        the store untouched.
        """
        validated = [self._validate(key, value) for key, value in params.items()]
        for param in validated:
            self._params[param.key] = param

    def remove(self, key: str) -> bool:
        """Remove ``key`` and return whether it was present."""
        return self._params.pop(key, None) is not None

    def get(self, key: str) -> str | None:
        """Return the canonical value for ``key``, or None."""
        param = self._params.get(key)
        return param.value if param is not None else None

    def entries(self) -> list[tuple[str, str]]:
        """Return ``(key, value)`` pairs sorted lexicographically by key."""
        return [(key, self._params[key].value) for key in sorted(self._params)]

    def as_dict(self) -> dict[str, str]:
        """Return a plain ``key -> value`` dict (sorted by key)."""
        return dict(self.entries())

    def copy(self) -> ParameterStore:
        """Return an independent copy of this store."""
        clone = ParameterStore(self._table)
        clone._params = dict(self._params)
        return clone

    def __contains__(self, key: object) -> bool:
        return key in self._params

    def __len__(self) -> int:
        return len(self._params)

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._params))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ParameterStore):
            return NotImplemented
        return self._params == other._params

    def __repr__(self) -> str:
        return f"ParameterStore({self.as_dict()!r})"
