"""Pytest configuration and fixtures for release-desk tests."""

import os
import tempfile

# Keep log files out of the user's config directory. Must be set before
# release_desk.logger is imported by any test module.
os.environ.setdefault(
    "RELEASE_DESK_LOG_DIR", tempfile.mkdtemp(prefix="release-desk-logs-")
)

import logging  # noqa: E402
from collections.abc import AsyncIterator  # noqa: E402
from typing import Any  # noqa: E402
from unittest.mock import AsyncMock, MagicMock  # noqa: E402

import orjson  # noqa: E402
import pytest  # noqa: E402


@pytest.fixture(autouse=True)
def enable_log_propagation():
    """Enable log propagation for all loggers during tests.

    This allows pytest's caplog fixture to capture logs from all loggers,
    even those created with propagate=False in production code.
    """
    original_propagation = {}
    for name in list(logging.Logger.manager.loggerDict.keys()):
        if name.startswith("release_desk"):
            logger = logging.getLogger(name)
            original_propagation[name] = logger.propagate
            logger.propagate = True

    yield

    for name, propagate_value in original_propagation.items():
        logger = logging.getLogger(name)
        logger.propagate = propagate_value


async def async_chunk_gen(chunks: list[bytes]) -> AsyncIterator[bytes]:
    """Yield ``chunks`` like ``response.content.iter_chunked``."""
    for chunk in chunks:
        yield chunk


def make_response(
    status: int = 200,
    body: Any = b"",
    chunks: list[bytes] | None = None,
) -> AsyncMock:
    """Build an aiohttp-like response usable as an async context manager.

    Non-bytes bodies are JSON encoded.
    """
    response = AsyncMock()
    response.__aenter__.return_value = response
    response.status = status
    if not isinstance(body, bytes):
        body = orjson.dumps(body)
    response.read.return_value = body
    if chunks is not None:
        response.content.iter_chunked = lambda size: async_chunk_gen(chunks)
    return response


@pytest.fixture
def mock_session() -> MagicMock:
    """aiohttp session stand-in; configure ``get``/``request`` per test."""
    return MagicMock()


class StaticSigner:
    """Signer that adds a fixed bearer token."""

    def apply_auth(self, headers: dict[str, str]) -> dict[str, str]:
        headers["Authorization"] = "Bearer test-token"
        return headers


@pytest.fixture
def signer() -> StaticSigner:
    """Request signer with a fixed token."""
    return StaticSigner()
