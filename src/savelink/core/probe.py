"""
Connectivity probe for the remote sync endpoint.
"""

from __future__ import annotations

import logging

import httpx

logger = logging.getLogger(__name__)

DEFAULT_PROBE_URL = "https://github.com"
DEFAULT_PROBE_TIMEOUT = 5.0


def is_online(url: str = DEFAULT_PROBE_URL, timeout: float = DEFAULT_PROBE_TIMEOUT) -> bool:
    """
    Check whether the sync endpoint is reachable.

    Sends a single HEAD request. Any HTTP response counts as online; any
    failure (DNS, timeout, TLS, permission) counts as offline. Never raises
    and never retries.

    Args:
        url: Well-known URL to probe
        timeout: Total timeout in seconds

    Returns:
        True if a response was received
    """
    try:
        httpx.head(url, timeout=timeout, follow_redirects=False)
    except (httpx.HTTPError, OSError, ValueError) as e:
        logger.info("Connectivity probe to %s failed: %s", url, e)
        return False
    return True
