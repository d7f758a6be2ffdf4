"""The known imgix parameter table.

Every key the builder accepts is declared here, together with the kind of
value it takes and the range or enum that value must fall into.  Cross-key
conflicts are declared in :data:`CONFLICT_RULES`.  Adding a parameter means
adding one :class:`ParamSpec` line; the store and builder never special-case
individual keys.

Value Kinds
-----------
=========  ===============================================  =================
Kind       Accepted input                                   Canonical form
=========  ===============================================  =================
integer    ``int`` or an exact decimal string               ``"100"``
float      ``int``/``float`` or an exact decimal string     ``"1.5"``, ``"2"``
enum       one of ``choices``                               as given
boolean    ``bool`` or ``"true"``/``"false"``/``"1"``/``"0"``  ``"true"``
list       comma string or sequence of strings              ``"a,b"``
string     any non-empty text                               as given
ratio      ``"W:H"`` with positive numbers                  as given
=========  ===============================================  =================

Booleans are never accepted where a number is expected, and numeric strings
must parse completely: ``"100px"``, ``" 100"``, ``"1e3"`` and ``"nan"`` are all
rejected.

The table mirrors the parameters documented by the imgix rendering API and
is a compatibility contract with it.  It is built once at import time and
exposed read-only.
"""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from decimal import Decimal
from types import MappingProxyType
from typing import Literal

from .encoding import is_encodable
from .errors import EmptyValueError, InvalidValueError

ParamKind = Literal["integer", "float", "enum", "boolean", "list", "string", "ratio"]

#: Key under which the URL signature is appended.  Never settable by callers.
SIGNATURE_KEY = "s"
RESERVED_KEYS = frozenset({SIGNATURE_KEY})

#: Key used for the opt-in library tag.
LIBRARY_KEY = "ixlib"

_INTEGER_RE = re.compile(r"[+-]?\d+")
_FLOAT_RE = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)")
_RATIO_RE = re.compile(r"(\d+(?:\.\d+)?):(\d+(?:\.\d+)?)")

_TRUE_STRINGS = frozenset({"true", "1"})
_FALSE_STRINGS = frozenset({"false", "0"})

FIT_MODES = frozenset(
    {"clamp", "clip", "crop", "facearea", "fill", "fillmax", "max", "min", "scale"}
)
CROP_MODES = frozenset(
    {"top", "bottom", "left", "right", "faces", "focalpoint", "edges", "entropy"}
)
FORMATS = frozenset(
    {
        "avif",
        "blurhash",
        "gif",
        "jp2",
        "jpg",
        "json",
        "jxr",
        "mp4",
        "pjpg",
        "png",
        "png8",
        "png32",
        "webm",
        "webp",
    }
)
AUTO_MODES = frozenset({"compress", "enhance", "format", "redeye"})


@dataclass(frozen=True)
class ParamSpec:
    """Declaration of a single known parameter.

    Attributes:
        key: Query-string key, e.g. ``"w"``.
        kind: Value kind, see the module docstring.
        description: Short human-readable description.
        minimum: Inclusive lower bound for numeric kinds.
        maximum: Inclusive upper bound for numeric kinds.
        choices: Allowed values for ``enum`` and enum ``list`` kinds.
    """

    key: str
    kind: ParamKind
    description: str
    minimum: float | None = None
    maximum: float | None = None
    choices: frozenset[str] | None = None

    def range_text(self) -> str:
        """Describe the numeric range, e.g. ``"1 to 8192"``."""
        return f"{_format_number(self.minimum)} to {_format_number(self.maximum)}"


@dataclass(frozen=True)
class ConflictRule:
    """Parameters that cannot be rendered together.

    The rule fires when every key in ``keys`` is present.  When ``triggers``
    is given, each listed key must additionally hold one of the trigger
    values (for list values, any member counts).

    Attributes:
        keys: Keys involved in the conflict.
        reason: Explanation used in the error message.
        triggers: Optional mapping of key to the values that make it conflict.
    """

    keys: tuple[str, ...]
    reason: str
    triggers: Mapping[str, frozenset[str]] | None = None

    def matches(self, values: Mapping[str, str]) -> bool:
        """Return True if this rule applies to the given canonical values."""
        if not all(key in values for key in self.keys):
            return False
        for key, trigger_values in (self.triggers or {}).items():
            members = set(values[key].split(","))
            if not members & trigger_values:
                return False
        return True


_SPECS: tuple[ParamSpec, ...] = (
    # Size
    ParamSpec("w", "integer", "Output width in pixels", minimum=1, maximum=8192),
    ParamSpec("h", "integer", "Output height in pixels", minimum=1, maximum=8192),
    ParamSpec("ar", "ratio", "Aspect ratio as W:H"),
    ParamSpec("dpr", "float", "Device pixel ratio", minimum=0.75, maximum=10),
    ParamSpec("fit", "enum", "Resize fit mode", choices=FIT_MODES),
    ParamSpec("crop", "list", "Crop anchors or modes", choices=CROP_MODES),
    ParamSpec("fp-x", "float", "Focal point horizontal position", minimum=0, maximum=1),
    ParamSpec("fp-y", "float", "Focal point vertical position", minimum=0, maximum=1),
    ParamSpec("fp-z", "float", "Focal point zoom", minimum=1, maximum=100),
    ParamSpec("pad", "integer", "Padding in pixels", minimum=0, maximum=8192),
    ParamSpec("rot", "integer", "Rotation in degrees", minimum=0, maximum=359),
    ParamSpec("flip", "enum", "Flip axis", choices=frozenset({"h", "v", "hv"})),
    ParamSpec("trim", "enum", "Trim mode", choices=frozenset({"auto", "color"})),
    # Format
    ParamSpec("fm", "enum", "Output format", choices=FORMATS),
    ParamSpec("q", "integer", "Output quality", minimum=0, maximum=100),
    ParamSpec("lossless", "boolean", "Lossless compression"),
    ParamSpec("auto", "list", "Automatic optimisations", choices=AUTO_MODES),
    # Adjustment
    ParamSpec("bri", "integer", "Brightness", minimum=-100, maximum=100),
    ParamSpec("con", "integer", "Contrast", minimum=-100, maximum=100),
    ParamSpec("sat", "integer", "Saturation", minimum=-100, maximum=100),
    ParamSpec("sharp", "integer", "Sharpen", minimum=0, maximum=100),
    ParamSpec("blur", "integer", "Gaussian blur", minimum=0, maximum=2000),
    ParamSpec("bg", "string", "Background colour"),
    # Text and watermark
    ParamSpec("txt", "string", "Text overlay"),
    ParamSpec("txt-color", "string", "Text overlay colour"),
    ParamSpec("mark", "string", "Watermark image URL"),
    # Diagnostics
    ParamSpec(LIBRARY_KEY, "string", "Library that generated the URL"),
)

PARAMETER_TABLE: Mapping[str, ParamSpec] = MappingProxyType({spec.key: spec for spec in _SPECS})

CONFLICT_RULES: tuple[ConflictRule, ...] = (
    ConflictRule(
        keys=("ar", "h", "w"),
        reason="an aspect ratio cannot be combined with both an explicit width and height",
    ),
    ConflictRule(
        keys=("crop", "fit"),
        reason="crop only applies when fit=crop",
        triggers={"fit": FIT_MODES - {"crop"}},
    ),
    ConflictRule(
        keys=("lossless", "q"),
        reason="quality has no effect on lossless output",
        triggers={"lossless": frozenset({"true"})},
    ),
    ConflictRule(
        keys=("auto", "fm"),
        reason="auto=format and an explicit fm both select the output format",
        triggers={"auto": frozenset({"format"})},
    ),
)


def conflicting_peers(key: str) -> tuple[str, ...]:
    """Return the keys that may conflict with ``key``, sorted."""
    peers: set[str] = set()
    for rule in CONFLICT_RULES:
        if key in rule.keys:
            peers.update(k for k in rule.keys if k != key)
    return tuple(sorted(peers))


def find_conflict(values: Mapping[str, str]) -> ConflictRule | None:
    """Return the first conflict rule matched by ``values``, if any."""
    for rule in CONFLICT_RULES:
        if rule.matches(values):
            return rule
    return None


# ---------------------------------------------------------------------------
# Value normalisation.
# ---------------------------------------------------------------------------


def _format_number(number: float | None) -> str:
    if number is None:
        return "?"
    if float(number).is_integer():
        return str(int(number))
    # Fixed-point: repr() switches to exponent form below 1e-4.
    return format(Decimal(repr(float(number))), "f")


def is_empty(value: object) -> bool:
    """Return True for ``None``, blank strings and empty sequences."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, Sequence):
        return len(value) == 0
    return False


def normalize_value(spec: ParamSpec, value: object) -> str:
    """Validate ``value`` against ``spec`` and return its canonical string.

    Args:
        spec: The parameter declaration.
        value: Caller-supplied value.

    Returns:
        Canonical string form used for rendering.

    Raises:
        EmptyValueError: If the value is empty.
        InvalidValueError: If the value does not match the declaration.
    """
    if is_empty(value):
        raise EmptyValueError(spec.key, value)

    if spec.kind == "integer":
        return _normalize_integer(spec, value)
    if spec.kind == "float":
        return _normalize_float(spec, value)
    if spec.kind == "enum":
        return _normalize_enum(spec, value)
    if spec.kind == "boolean":
        return _normalize_boolean(spec, value)
    if spec.kind == "list":
        return _normalize_list(spec, value)
    if spec.kind == "ratio":
        return _normalize_ratio(spec, value)
    return _normalize_string(spec, value)


def _check_range(spec: ParamSpec, number: float, value: object) -> None:
    too_low = spec.minimum is not None and number < spec.minimum
    too_high = spec.maximum is not None and number > spec.maximum
    if too_low or too_high:
        raise InvalidValueError(spec.key, f"must be in range {spec.range_text()}", value)


def _normalize_integer(spec: ParamSpec, value: object) -> str:
    if isinstance(value, bool):
        raise InvalidValueError(spec.key, "expected an integer, got a boolean", value)
    if isinstance(value, int):
        number = value
    elif isinstance(value, float) and value.is_integer():
        number = int(value)
    elif isinstance(value, str) and _INTEGER_RE.fullmatch(value):
        number = int(value)
    else:
        raise InvalidValueError(spec.key, "expected an integer", value)

    _check_range(spec, number, value)
    return str(number)


def _normalize_float(spec: ParamSpec, value: object) -> str:
    if isinstance(value, bool):
        raise InvalidValueError(spec.key, "expected a number, got a boolean", value)
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str) and _FLOAT_RE.fullmatch(value):
        number = float(value)
    else:
        raise InvalidValueError(spec.key, "expected a number", value)

    # Rejects nan and inf passed as floats; strings never parse to them.
    if number != number or number in (float("inf"), float("-inf")):
        raise InvalidValueError(spec.key, "expected a finite number", value)

    _check_range(spec, number, value)
    return _format_number(number)


def _normalize_enum(spec: ParamSpec, value: object) -> str:
    choices = spec.choices or frozenset()
    if not isinstance(value, str) or value not in choices:
        raise InvalidValueError(
            spec.key, f"must be one of {', '.join(sorted(choices))}", value
        )
    return value


def _normalize_boolean(spec: ParamSpec, value: object) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        lowered = value.lower()
        if lowered in _TRUE_STRINGS:
            return "true"
        if lowered in _FALSE_STRINGS:
            return "false"
    raise InvalidValueError(spec.key, "expected a boolean (true, false, 1 or 0)", value)


def _normalize_list(spec: ParamSpec, value: object) -> str:
    if isinstance(value, str):
        members = [member.strip() for member in value.split(",")]
    elif isinstance(value, Sequence) and all(isinstance(member, str) for member in value):
        members = [member.strip() for member in value]
    else:
        raise InvalidValueError(spec.key, "expected a comma-separated list", value)

    if any(not member for member in members):
        raise InvalidValueError(spec.key, "list members cannot be empty", value)
    if not all(is_encodable(member) for member in members):
        raise InvalidValueError(spec.key, "value is not valid UTF-8 text", value)

    if spec.choices is not None:
        unknown = [member for member in members if member not in spec.choices]
        if unknown:
            raise InvalidValueError(
                spec.key,
                f"unknown member(s) {', '.join(unknown)}; "
                f"allowed: {', '.join(sorted(spec.choices))}",
                value,
            )
    return ",".join(members)


def _normalize_ratio(spec: ParamSpec, value: object) -> str:
    match = _RATIO_RE.fullmatch(value) if isinstance(value, str) else None
    if match is None:
        raise InvalidValueError(spec.key, "expected an aspect ratio such as 16:9", value)
    if float(match.group(1)) <= 0 or float(match.group(2)) <= 0:
        raise InvalidValueError(spec.key, "aspect ratio sides must be positive", value)
    return value


def _normalize_string(spec: ParamSpec, value: object) -> str:
    if isinstance(value, bool) or not isinstance(value, (str, int, float)):
        raise InvalidValueError(spec.key, "expected text", value)
    text = str(value)
    if not is_encodable(text):
        raise InvalidValueError(spec.key, "value is not valid UTF-8 text", value)
    return text
