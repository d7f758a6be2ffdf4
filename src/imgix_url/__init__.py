"""imgix-url - typed builder for signed imgix image URLs."""

__version__ = "0.1.0"

from imgix_url.core.builder import UrlBuilder, build_url
from imgix_url.core.config import ImgixConfig, config
from imgix_url.core.errors import (
    BuildError,
    ConflictingParamsError,
    EmptyValueError,
    ImgixError,
    InvalidHostError,
    InvalidPathError,
    InvalidSigningKeyError,
    InvalidValueError,
    ParamError,
    ReservedKeyError,
    UnknownKeyError,
)
from imgix_url.core.srcset import SrcsetOptions, build_srcset

__all__ = [
    "UrlBuilder",
    "build_url",
    "build_srcset",
    "SrcsetOptions",
    "ImgixConfig",
    "config",
    "ImgixError",
    "ParamError",
    "UnknownKeyError",
    "EmptyValueError",
    "InvalidValueError",
    "ReservedKeyError",
    "BuildError",
    "InvalidHostError",
    "InvalidPathError",
    "InvalidSigningKeyError",
    "ConflictingParamsError",
]
