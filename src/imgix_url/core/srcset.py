"""Responsive ``srcset`` generation.

A `srcset`_ attribute lists candidate image URLs, each followed by a width
descriptor (``640w``) or a pixel-density descriptor (``2x``).  Which kind is
generated depends on the builder's parameters:

- **Fixed-size images** (``w`` is set, or ``h`` is set together with
  ``ar``) get one candidate per device pixel ratio, rendered with
  ``dpr=<ratio>``.  With variable quality enabled, each ratio also gets a
  lower ``q`` from :data:`DPR_QUALITIES`, unless the caller already set ``q``
  or asked for lossless output.
- **Fluid images** get one candidate per target width, rendered with
  ``w=<width>``.

Every candidate is rendered through a copy of the builder, so parameter
ordering, encoding and signing are identical to :meth:`UrlBuilder.render`
and the caller's builder is never modified.

.. _srcset: https://html.spec.whatwg.org/multipage/images.html#srcset-attributes
"""

from __future__ import annotations

import logging

from pydantic import BaseModel, Field, model_validator

from .builder import UrlBuilder

logger = logging.getLogger(__name__)

MIN_WIDTH = 100
MAX_WIDTH = 8192
WIDTH_TOLERANCE = 8.0

#: Default viewport widths: 100 growing by 16% per step, capped at 8192.
TARGET_WIDTHS: tuple[int, ...] = (
    100, 116, 135, 156, 181, 210, 244, 283, 328, 380, 441, 512, 594, 689, 799, 927,
    1075, 1247, 1446, 1678, 1946, 2257, 2619, 3038, 3524, 4087, 4741, 5500, 6380,
    7401, 8192,
)  # fmt: skip

TARGET_RATIOS: tuple[int, ...] = (1, 2, 3, 4, 5)

#: Quality used for each entry of TARGET_RATIOS when variable quality is on.
DPR_QUALITIES: tuple[int, ...] = (75, 50, 35, 23, 20)

CANDIDATE_SEPARATOR = ",\n"


def target_widths(
    start: int = MIN_WIDTH, stop: int = MAX_WIDTH, tolerance: float = WIDTH_TOLERANCE
) -> list[int]:
    """Generate viewport widths from ``start`` to ``stop``.

    Each width is ``1 + 2 * tolerance / 100`` times the previous one, so no
    rendered image is more than ``tolerance`` percent larger or smaller than
    the nearest candidate.  ``stop`` is always the final width and appears
    exactly once.

    Raises:
        ValueError: If the bounds or tolerance are not positive, or
            ``start`` exceeds ``stop``.
    """
    if start <= 0 or stop <= 0 or tolerance <= 0:
        raise ValueError("start, stop and tolerance must be positive")
    if start > stop:
        raise ValueError(f"start ({start}) must not exceed stop ({stop})")

    widths: list[int] = []
    current = float(start)
    while current < stop:
        width = int(round(current))
        # A width that rounds up to stop would duplicate the final entry.
        if width >= stop:
            break
        widths.append(width)
        current *= 1 + (tolerance / 100) * 2
    widths.append(stop)
    return widths


class SrcsetOptions(BaseModel):
    """Options controlling :func:`build_srcset`.

    Attributes:
        widths: Explicit viewport widths.  When omitted, widths are generated
            from ``min_width``, ``max_width`` and ``tolerance``.
        min_width: Smallest generated width.
        max_width: Largest generated width.
        tolerance: Width step tolerance in percent.
        ratios: Device pixel ratios for fixed-size images.
        qualities: Quality per ratio when ``variable_quality`` is on.
        variable_quality: Lower ``q`` as the pixel ratio grows.
    """

    widths: list[int] | None = Field(default=None, min_length=1)
    min_width: int = Field(default=MIN_WIDTH, ge=1, le=MAX_WIDTH)
    max_width: int = Field(default=MAX_WIDTH, ge=1, le=MAX_WIDTH)
    tolerance: float = Field(default=WIDTH_TOLERANCE, gt=0, le=100)
    ratios: list[float] = Field(default_factory=lambda: list(TARGET_RATIOS), min_length=1)
    qualities: list[int] = Field(default_factory=lambda: list(DPR_QUALITIES))
    variable_quality: bool = True

    @model_validator(mode="after")
    def _check_bounds(self) -> SrcsetOptions:
        if self.min_width > self.max_width:
            raise ValueError("min_width must not exceed max_width")
        if self.variable_quality and len(self.qualities) < len(self.ratios):
            raise ValueError("qualities must provide one entry per ratio")
        return self

    def resolved_widths(self) -> list[int]:
        if self.widths is not None:
            return list(self.widths)
        if (self.min_width, self.max_width, self.tolerance) == (
            MIN_WIDTH,
            MAX_WIDTH,
            WIDTH_TOLERANCE,
        ):
            return list(TARGET_WIDTHS)
        return target_widths(self.min_width, self.max_width, self.tolerance)


def is_fixed_size(builder: UrlBuilder) -> bool:
    """Return True if the builder pins the rendered size of the image."""
    return builder.has_param("w") or (builder.has_param("h") and builder.has_param("ar"))


def _format_ratio(ratio: float) -> str:
    return str(int(ratio)) if float(ratio).is_integer() else str(ratio)


def dpr_candidates(builder: UrlBuilder, options: SrcsetOptions) -> list[str]:
    """Render one ``<url> <ratio>x`` candidate per pixel ratio."""
    set_quality = (
        options.variable_quality
        and not builder.has_param("q")
        and builder.params.get("lossless") != "true"
    )
    candidates = []
    for index, ratio in enumerate(options.ratios):
        candidate = builder.copy().with_param("dpr", ratio)
        if set_quality:
            candidate.with_param("q", options.qualities[index])
        candidates.append(f"{candidate.render()} {_format_ratio(ratio)}x")
    return candidates


def width_candidates(builder: UrlBuilder, options: SrcsetOptions) -> list[str]:
    """Render one ``<url> <width>w`` candidate per target width."""
    candidates = []
    for width in options.resolved_widths():
        candidate = builder.copy().with_param("w", width)
        candidates.append(f"{candidate.render()} {width}w")
    return candidates


def build_srcset(builder: UrlBuilder, options: SrcsetOptions | None = None) -> str:
    """Build a ``srcset`` attribute value for ``builder``.

    Args:
        builder: Configured builder; it is copied, never modified.
        options: Generation options; defaults to :class:`SrcsetOptions`.

    Returns:
        Candidates joined by ``",\\n"``.

    Raises:
        ImgixError: If any candidate fails to validate or render.
    """
    options = options or SrcsetOptions()
    if is_fixed_size(builder):
        candidates = dpr_candidates(builder, options)
    else:
        candidates = width_candidates(builder, options)

    logger.debug(f"Built srcset with {len(candidates)} candidates for {builder.path}")
    return CANDIDATE_SEPARATOR.join(candidates)
