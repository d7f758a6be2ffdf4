"""Shared pytest fixtures for imgix-url tests."""

from typing import Generator

import pytest
from fastapi.testclient import TestClient

from imgix_url.api.main import app, get_config
from imgix_url.core.builder import UrlBuilder
from imgix_url.core.config import ImgixConfig

TEST_HOST = "example.com"
TEST_PATH = "image.jpg"
TEST_SECRET = "FOO123bar"


@pytest.fixture
def clean_env(monkeypatch) -> None:
    """Remove any IMGIX_* variables from the environment."""
    for name in (
        "IMGIX_DEFAULT_HOST",
        "IMGIX_SIGNING_KEY",
        "IMGIX_INCLUDE_LIBRARY_PARAM",
        "IMGIX_SRCSET_MIN_WIDTH",
        "IMGIX_SRCSET_MAX_WIDTH",
        "IMGIX_SRCSET_WIDTH_TOLERANCE",
        "IMGIX_SERVER_HOST",
        "IMGIX_SERVER_PORT",
        "IMGIX_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def builder() -> UrlBuilder:
    """Create an unsigned builder for example.com/image.jpg.

    Returns:
        UrlBuilder with no parameters
    """
    return UrlBuilder(TEST_HOST, TEST_PATH)


@pytest.fixture
def signed_builder() -> UrlBuilder:
    """Create a signed builder for example.com/image.jpg.

    Returns:
        UrlBuilder with the test signing key
    """
    return UrlBuilder(TEST_HOST, TEST_PATH, signing_key=TEST_SECRET)


@pytest.fixture
def test_config(clean_env) -> ImgixConfig:
    """Create a configuration independent of the environment and .env.

    Returns:
        ImgixConfig with no default host and no signing key
    """
    return ImgixConfig(_env_file=None)


@pytest.fixture
def signed_config(clean_env) -> ImgixConfig:
    """Create a configuration with a default host and a signing key.

    Returns:
        ImgixConfig that signs every URL
    """
    return ImgixConfig(
        _env_file=None,
        default_host=TEST_HOST,
        signing_key=TEST_SECRET,
    )


def _client_for(settings: ImgixConfig) -> Generator[TestClient, None, None]:
    app.dependency_overrides[get_config] = lambda: settings
    try:
        with TestClient(app) as client:
            yield client
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def test_client(test_config: ImgixConfig) -> Generator[TestClient, None, None]:
    """FastAPI TestClient using the unsigned test configuration."""
    yield from _client_for(test_config)


@pytest.fixture
def signed_client(signed_config: ImgixConfig) -> Generator[TestClient, None, None]:
    """FastAPI TestClient using the signing test configuration."""
    yield from _client_for(signed_config)
