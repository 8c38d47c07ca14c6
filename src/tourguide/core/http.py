"""
HTTP helpers for the remote provider clients.

Tracking fans out to the GPS and points providers from every worker thread, so the
clients share one pooled `httpx.Client` (thread-safe) instead of opening a
connection per call. `get_json` still accepts no client for one-off requests.
"""

from __future__ import annotations

from typing import Any

import httpx


DEFAULT_USER_AGENT = "tourguide/0.1.0"


def build_client(*, timeout_seconds: float = 15, max_connections: int = 100) -> httpx.Client:
    """Create a pooled client sized for the worker pool."""
    limits = httpx.Limits(max_connections=max_connections, max_keepalive_connections=max_connections)
    return httpx.Client(timeout=timeout_seconds, limits=limits, headers={"User-Agent": DEFAULT_USER_AGENT})


def get_json(
    url: str,
    *,
    params: dict[str, Any] | None = None,
    headers: dict[str, str] | None = None,
    timeout_seconds: float = 15,
    client: httpx.Client | None = None,
) -> Any:
    """GET `url` and return the decoded JSON response.

    Raises:
        httpx.HTTPError: On transport errors or non-2xx status codes.
        ValueError: If the response body is not valid JSON.
    """
    if client is None:
        with build_client(timeout_seconds=timeout_seconds, max_connections=1) as one_off:
            return get_json(url, params=params, headers=headers, timeout_seconds=timeout_seconds, client=one_off)

    resp = client.get(url, params=params, headers=headers, timeout=timeout_seconds)
    resp.raise_for_status()
    return resp.json()
