"""Core URL construction for imgix-url.

This package holds everything needed to turn a host, a path and a set of
transformation parameters into a final imgix URL:

- **parameters**: The known parameter table and cross-key conflict rules
- **store**: ParameterStore, the validated and sorted parameter mapping
- **encoding**: Percent-encoding for paths and query strings
- **signing**: MD5 URL signatures
- **builder**: UrlBuilder and the one-shot build_url helper
- **srcset**: Responsive srcset generation on top of UrlBuilder
- **config**: ImgixConfig, environment-driven defaults (Pydantic Settings)

Nothing in this package performs I/O while building a URL.

Usage Example
-------------
    from imgix_url.core import UrlBuilder

    url = UrlBuilder("assets.imgix.net", "cat.jpg").with_param("w", 320).render()
    # https://assets.imgix.net/cat.jpg?w=320
"""

from imgix_url.core.builder import UrlBuilder, build_url
from imgix_url.core.config import ImgixConfig, config
from imgix_url.core.parameters import CONFLICT_RULES, PARAMETER_TABLE, ParamSpec
from imgix_url.core.srcset import SrcsetOptions, build_srcset
from imgix_url.core.store import ParameterStore

__all__ = [
    "UrlBuilder",
    "build_url",
    "ParameterStore",
    "PARAMETER_TABLE",
    "CONFLICT_RULES",
    "ParamSpec",
    "SrcsetOptions",
    "build_srcset",
    "ImgixConfig",
    "config",
]
