"""imgix-url signing service: FastAPI application.

Signed imgix URLs need the source's secure URL token, which must never be
shipped to a browser.  This service keeps the token server-side and hands
out rendered (and signed) URLs and srcsets to frontends.

Endpoints
---------
========  ==================  =========================================
Method    Path                Purpose
========  ==================  =========================================
GET       ``/api/health``     Liveness check and version
GET       ``/api/params``     The known parameter table
POST      ``/api/url``        Render a single URL
POST      ``/api/srcset``     Render a srcset attribute value
========  ==================  =========================================

Builder and parameter errors are returned as HTTP 422 with an
:class:`~imgix_url.api.models.ErrorResponse` body naming the offending keys.

Usage
-----
CLI (installed entry point)::

    imgix-url-server

Direct invocation::

    python -m imgix_url.api.main
"""

from __future__ import annotations

import logging

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse

from imgix_url import __version__
from imgix_url.api.models import (
    ErrorResponse,
    ParamInfo,
    SrcsetRequest,
    SrcsetResponse,
    UrlRequest,
    UrlResponse,
)
from imgix_url.core.builder import UrlBuilder
from imgix_url.core.config import ImgixConfig, config
from imgix_url.core.errors import ConflictingParamsError, ImgixError, ParamError
from imgix_url.core.parameters import PARAMETER_TABLE, conflicting_peers
from imgix_url.core.srcset import CANDIDATE_SEPARATOR, SrcsetOptions, build_srcset

logger = logging.getLogger(__name__)

app = FastAPI(
    title="imgix-url",
    description="Render and sign imgix image URLs without exposing the signing token.",
    version=__version__,
)


def get_config() -> ImgixConfig:
    """Dependency returning the active configuration."""
    return config


# ---------------------------------------------------------------------------
# Error handling.
# ---------------------------------------------------------------------------


@app.exception_handler(ImgixError)
async def imgix_error_handler(request: Request, exc: ImgixError) -> JSONResponse:
    """Translate builder errors into HTTP 422 responses."""
    if isinstance(exc, ConflictingParamsError):
        keys = list(exc.keys)
    elif isinstance(exc, ParamError):
        keys = [exc.key]
    else:
        keys = []

    logger.info(f"Rejected {request.url.path}: {exc}")
    body = ErrorResponse(error=type(exc).__name__, message=str(exc), keys=keys)
    return JSONResponse(status_code=422, content=body.model_dump())


# ---------------------------------------------------------------------------
# Helpers.
# ---------------------------------------------------------------------------


def _builder_from_request(req: UrlRequest, settings: ImgixConfig) -> UrlBuilder:
    """Create a builder for ``req`` using server-side defaults and secrets."""
    builder = UrlBuilder(req.host or settings.default_host or "", req.path)
    if settings.signing_key:
        builder.with_signing_key(settings.signing_key)

    include_library_param = req.include_library_param
    if include_library_param is None:
        include_library_param = settings.include_library_param
    if include_library_param:
        builder.with_library_param()

    builder.with_params(req.params)
    return builder


def _param_info(key: str) -> ParamInfo:
    spec = PARAMETER_TABLE[key]
    return ParamInfo(
        key=spec.key,
        kind=spec.kind,
        description=spec.description,
        minimum=spec.minimum,
        maximum=spec.maximum,
        choices=sorted(spec.choices) if spec.choices is not None else None,
        conflicts_with=list(conflicting_peers(key)),
    )


# ---------------------------------------------------------------------------
# Routes.
# ---------------------------------------------------------------------------


@app.get("/api/health")
async def health() -> dict:
    return {"status": "ok", "version": __version__}


@app.get("/api/params")
async def list_params() -> list[ParamInfo]:
    """Return the known parameter table, sorted by key."""
    return [_param_info(key) for key in sorted(PARAMETER_TABLE)]


@app.post("/api/url")
async def render_url(
    req: UrlRequest, settings: ImgixConfig = Depends(get_config)
) -> UrlResponse:
    """Render a single URL.

    Returns:
        The rendered URL and whether it was signed.
    """
    builder = _builder_from_request(req, settings)
    return UrlResponse(url=builder.render(), signed=builder.is_signed)


@app.post("/api/srcset")
async def render_srcset(
    req: SrcsetRequest, settings: ImgixConfig = Depends(get_config)
) -> SrcsetResponse:
    """Render a srcset attribute value.

    When the request carries no options, widths follow the server's
    ``IMGIX_SRCSET_*`` settings.
    """
    builder = _builder_from_request(req, settings)
    options = req.options or SrcsetOptions(
        min_width=settings.srcset_min_width,
        max_width=settings.srcset_max_width,
        tolerance=settings.srcset_width_tolerance,
    )
    srcset = build_srcset(builder, options)
    return SrcsetResponse(
        srcset=srcset,
        candidates=srcset.split(CANDIDATE_SEPARATOR),
        signed=builder.is_signed,
    )


# ---------------------------------------------------------------------------
# CLI entry point.
# ---------------------------------------------------------------------------


def main() -> None:
    """Launch the uvicorn ASGI server.

    Host and port come from ``IMGIX_SERVER_HOST`` and ``IMGIX_SERVER_PORT``
    (default ``127.0.0.1:8080``).  Registered as the ``imgix-url-server``
    console script in ``pyproject.toml``.
    """
    import uvicorn

    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    logger.info(f"Starting imgix-url server on {config.server_host}:{config.server_port}")

    uvicorn.run(
        "imgix_url.api.main:app",
        host=config.server_host,
        port=config.server_port,
        reload=False,
    )


if __name__ == "__main__":
    main()
