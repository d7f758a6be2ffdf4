"""Configuration management for imgix-url.

Configuration is loaded with Pydantic Settings from environment variables
carrying the ``IMGIX_`` prefix, falling back to a ``.env`` file and then to
the defaults declared on :class:`ImgixConfig`.

Example .env file:
    IMGIX_DEFAULT_HOST=assets.imgix.net
    IMGIX_SIGNING_KEY=your-secure-url-token
    IMGIX_INCLUDE_LIBRARY_PARAM=false
    IMGIX_SERVER_PORT=8080

Usage Example
-------------
    from imgix_url.core.config import config

    builder = UrlBuilder.from_config("photos/cat.jpg", config)

The configuration only supplies defaults for the CLI, the HTTP service and
:meth:`UrlBuilder.from_config`.  Builders created directly never read it, so
rendering stays a pure function of the builder's own state.
"""

from __future__ import annotations

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ImgixConfig(BaseSettings):
    """Settings for imgix URL generation.

    Attributes
    ----------
    URL Settings:
        default_host : str | None
            Source host used when none is given explicitly
        signing_key : str | None
            Secure URL token; when set, generated URLs are signed
        include_library_param : bool
            Add the ``ixlib`` diagnostic parameter to generated URLs

    Srcset Settings:
        srcset_min_width : int
            Smallest width in a generated viewport srcset
        srcset_max_width : int
            Largest width in a generated viewport srcset
        srcset_width_tolerance : float
            Allowed size difference (percent) between adjacent widths

    Server Settings:
        server_host : str
            Bind address for the signing service
        server_port : int
            Port for the signing service (1024-65535)

    Logging:
        log_level : Literal["DEBUG", "INFO", "WARNING", "ERROR"]
            Root log level used by the CLI and the server
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="IMGIX_",
        case_sensitive=False,
        extra="ignore",
    )

    # URL settings
    default_host: str | None = Field(
        default=None,
        description="Source host used when none is given explicitly",
    )
    signing_key: str | None = Field(
        default=None,
        description="Secure URL token used to sign generated URLs",
    )
    include_library_param: bool = Field(
        default=False,
        description="Add the ixlib diagnostic parameter to generated URLs",
    )

    # Srcset settings
    srcset_min_width: int = Field(default=100, ge=1, le=8192)
    srcset_max_width: int = Field(default=8192, ge=1, le=8192)
    srcset_width_tolerance: float = Field(
        default=8.0,
        description="Maximum size difference (percent) between rendered and downloaded image",
        gt=0,
        le=100,
    )

    # Server settings
    server_host: str = Field(
        default="127.0.0.1",
        description="Bind address for the signing service",
    )
    server_port: int = Field(
        default=8080,
        description="Port for the signing service",
        ge=1024,
        le=65535,
    )

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="WARNING",
        description="Root log level for the CLI and server",
    )


# Global configuration instance, loaded once at import time.
config = ImgixConfig()
