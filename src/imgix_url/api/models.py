"""Pydantic request and response models for the URL signing API.

Models
------
UrlRequest
    Payload for ``POST /api/url``: host, path and parameters of one URL.
SrcsetRequest
    Payload for ``POST /api/srcset``: a :class:`UrlRequest` plus srcset
    options.
UrlResponse / SrcsetResponse
    Rendered results.
ParamInfo
    One row of the known parameter table, served by ``GET /api/params``.
ErrorResponse
    Body returned with HTTP 422 when the builder rejects a request.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from imgix_url.core.srcset import SrcsetOptions

ParamValue = str | int | float | bool | list[str]


class UrlRequest(BaseModel):
    """Request body for ``POST /api/url``.

    The signing key is never part of the request: the service signs with
    its configured ``IMGIX_SIGNING_KEY`` so the secret stays server-side.

    Attributes:
        host: Source host.  ``None`` uses ``IMGIX_DEFAULT_HOST``.
        path: Image path relative to the host.
        params: Transformation parameters keyed by imgix parameter name.
        include_library_param: Add ``ixlib``.  ``None`` follows the
            ``IMGIX_INCLUDE_LIBRARY_PARAM`` setting.
    """

    host: str | None = Field(
        default=None,
        description="Source host, e.g. 'assets.imgix.net'.  Defaults to IMGIX_DEFAULT_HOST.",
    )
    path: str = Field(
        ...,
        description="Image path relative to the host (not pre-encoded).",
    )
    params: dict[str, ParamValue] = Field(
        default_factory=dict,
        description="Transformation parameters, e.g. {'w': 400, 'fit': 'crop'}.",
    )
    include_library_param: bool | None = Field(
        default=None,
        description="Add the ixlib diagnostic parameter.  None = use server setting.",
    )


class SrcsetRequest(UrlRequest):
    """Request body for ``POST /api/srcset``."""

    options: SrcsetOptions | None = Field(
        default=None,
        description="Srcset generation options.  None = server defaults.",
    )


class UrlResponse(BaseModel):
    url: str
    signed: bool


class SrcsetResponse(BaseModel):
    srcset: str
    candidates: list[str]
    signed: bool


class ParamInfo(BaseModel):
    """Description of one known parameter.

    Attributes:
        key: Query-string key.
        kind: Value kind (integer, float, enum, boolean, list, string, ratio).
        description: Human-readable description.
        minimum: Inclusive lower bound for numeric kinds.
        maximum: Inclusive upper bound for numeric kinds.
        choices: Allowed values for enum kinds, sorted.
        conflicts_with: Keys this parameter may conflict with at render time.
    """

    key: str
    kind: str
    description: str
    minimum: float | None = None
    maximum: float | None = None
    choices: list[str] | None = None
    conflicts_with: list[str] = Field(default_factory=list)


class ErrorResponse(BaseModel):
    """Error body for rejected builds.

    Attributes:
        error: Exception class name, e.g. ``"InvalidValueError"``.
        message: Human-readable message.
        keys: Offending parameter keys, when the error concerns parameters.
    """

    error: str
    message: str
    keys: list[str] = Field(default_factory=list)
