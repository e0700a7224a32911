"""
Pytest configuration and fixtures for the test suite.

This file is automatically loaded by pytest before running tests.
It removes provider settings from the environment so tests never pick up a
developer's real API key or `.env` overrides.
"""

import io

import pytest
from PIL import Image

from figma2jsx.llm.provider_config import load_config

_CONFIG_ENV_VARS = (
    "PROVIDER",
    "COMPLETION_URL",
    "OPENAI_API_KEY",
    "VISION_MODEL",
    "TEXT_MODEL",
    "VISION_MAX_TOKENS",
    "TEXT_MAX_TOKENS",
    "TEXT_TEMPERATURE",
    "REQUEST_TIMEOUT",
    "MAX_IMAGE_SIZE_MB",
    "DEBUG",
)


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch: pytest.MonkeyPatch):
    for name in _CONFIG_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    load_config.cache_clear()
    yield
    load_config.cache_clear()


@pytest.fixture
def png_bytes() -> bytes:
    """A tiny valid PNG image."""
    buffer = io.BytesIO()
    Image.new("RGB", (4, 4), color=(255, 0, 0)).save(buffer, format="PNG")
    return buffer.getvalue()
