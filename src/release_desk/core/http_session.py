"""HTTP session utilities for release-desk.

This module provides utilities for creating configured HTTP sessions
with proper timeout and connection settings.
"""

import aiohttp

from release_desk.types import Settings


def build_session(settings: Settings) -> aiohttp.ClientSession:
    """Create a ClientSession sized for the configured concurrency.

    The caller owns the session and must close it.

    Args:
        settings: Loaded settings

    Returns:
        Configured aiohttp.ClientSession

    """
    timeout_seconds = int(settings["network"]["timeout_seconds"])
    max_concurrent = settings["max_concurrent_requests"]

    timeout = aiohttp.ClientTimeout(
        total=timeout_seconds * 60,
        sock_read=timeout_seconds * 3,
        sock_connect=timeout_seconds,
    )
    connector = aiohttp.TCPConnector(
        limit=max(10, max_concurrent * 2),
        limit_per_host=max_concurrent,
    )
    return aiohttp.ClientSession(timeout=timeout, connector=connector)

