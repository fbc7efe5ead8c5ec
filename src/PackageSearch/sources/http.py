"""Shared JSON-over-HTTP helpers for backend clients."""

from __future__ import annotations

import random
import time
from typing import Any, Mapping

import requests

from PackageSearch.core.errors import UpstreamUnavailable
from PackageSearch.utils.log import log

BASE_PAUSE = 0.5
MAX_SLEEP = 4.0
RETRYABLE_STATUS = {429, 500, 502, 503, 504}


def post_json(
    session: requests.Session,
    url: str,
    body: Mapping[str, Any],
    *,
    timeout: float,
    max_attempts: int,
    service: str,
) -> dict[str, Any]:
    """POST a JSON body and return the decoded JSON object.

    Transient failures (timeouts, connection errors, 429/5xx) are retried with
    exponential backoff and jitter, up to ``max_attempts`` attempts in total.

    Args:
        session: Reusable HTTP session.
        url: Full request URL.
        body: JSON request body.
        timeout: Per-attempt timeout in seconds.
        max_attempts: Attempts including the first one.
        service: Backend name used in log and error messages.

    Returns:
        Decoded JSON object.

    Raises:
        UpstreamUnavailable: If the backend is unreachable, keeps failing, or
            answers with an error status or a non-object payload.
    """
    try:
        response = _post_with_retry(session, url, body, timeout=timeout, max_attempts=max_attempts, service=service)
        response.raise_for_status()
        payload = response.json()
    except requests.RequestException as error:
        raise UpstreamUnavailable(f"{service} request failed: {error}") from error
    except ValueError as error:
        raise UpstreamUnavailable(f"{service} returned invalid JSON") from error
    if not isinstance(payload, dict):
        raise UpstreamUnavailable(f"{service} returned a malformed response")
    return payload


def _post_with_retry(
    session: requests.Session,
    url: str,
    body: Mapping[str, Any],
    *,
    timeout: float,
    max_attempts: int,
    service: str,
) -> requests.Response:
    """Issue POST with retries for transient failures."""
    attempts = max(1, max_attempts)
    last_error: Exception | None = None
    for attempt in range(1, attempts + 1):
        try:
            response = session.post(url, json=body, timeout=timeout)
            if response.status_code in RETRYABLE_STATUS:
                raise requests.HTTPError(f"HTTP {response.status_code}", response=response)
            return response
        except (requests.Timeout, requests.ConnectionError, requests.HTTPError) as error:
            last_error = error
            if attempt < attempts:
                delay = min(BASE_PAUSE * (2 ** (attempt - 1)) + random.uniform(0, 0.3), MAX_SLEEP)
                log.debug("%s retry attempt=%d/%d delay=%.2fs error=%s", service, attempt, attempts, delay, error)
                time.sleep(delay)

    assert last_error is not None
    raise last_error
