"""
api_manager.py

HTTP utilities for the BeatSaver API.

Responsibilities:
- Retry logic with exponential backoff
- HTTP -> domain error translation
"""

from __future__ import annotations

import time
from typing import Any, Callable, Dict, Optional, TypeVar

import requests

import config
from logger import get_logger
from providers.base import CatalogError

logger = get_logger(__name__)
T = TypeVar("T")


# ============================================================
# Exceptions
# ============================================================


class TransientAPIError(CatalogError):
    """
    A failure worth retrying (rate limit, 5xx, dropped connection).

    ``retry_after`` carries the server's requested wait, in seconds.
    """

    def __init__(self, message: str, retry_after: Optional[float] = None):
        super().__init__(message)
        self.retry_after = retry_after


# ============================================================
# Error detection helpers
# ============================================================


def is_transient_status(status_code: int) -> bool:
    return status_code in config.TRANSIENT_STATUS_CODES


def _retry_after_seconds(response: requests.Response) -> Optional[float]:
    raw = response.headers.get("Retry-After")
    if not raw:
        return None
    try:
        return max(0.0, float(raw))
    except ValueError:
        return None


# ============================================================
# Retry engine
# ============================================================


def execute_with_retry(
    operation: Callable[[], T],
    name: str = "",
    max_retries: int = config.DEFAULT_MAX_RETRIES,
    backoff_base_sec: float = config.DEFAULT_BACKOFF_BASE_SEC,
    sleep: Callable[[float], None] = time.sleep,
) -> T:
    """
    Run ``operation`` until it succeeds or the attempts run out.

    Only TransientAPIError is retried; any other CatalogError bubbles up on
    the first attempt.

    Raises:
        CatalogError: The last failure once retries are exhausted
    """
    attempts = max(1, max_retries)
    last_exception: Optional[TransientAPIError] = None

    for attempt in range(attempts):
        try:
            return operation()

        except TransientAPIError as e:
            last_exception = e

        if attempt == attempts - 1:
            break

        sleep_time = backoff_base_sec * (2**attempt)
        if last_exception.retry_after:
            sleep_time = max(sleep_time, min(last_exception.retry_after, backoff_base_sec * 8))

        logger.warning(
            f"{name} failed (attempt {attempt + 1}/{attempts}), "
            f"retrying in {sleep_time}s: {last_exception}"
        )
        sleep(sleep_time)

    if last_exception:
        raise last_exception

    raise CatalogError(f"{name} failed")


# ============================================================
# HTTP JSON
# ============================================================


def http_get_json(
    url: str,
    *,
    session: Optional[requests.Session] = None,
    headers: Optional[Dict[str, str]] = None,
    timeout: float = config.DEFAULT_REQUEST_TIMEOUT_SEC,
    max_retries: int = config.DEFAULT_MAX_RETRIES,
    backoff_base_sec: float = config.DEFAULT_BACKOFF_BASE_SEC,
) -> Optional[Dict[str, Any]]:
    """
    GET ``url`` and decode its JSON body.

    Returns:
        The decoded body, or None on 404

    Raises:
        CatalogError: On non-retryable HTTP errors, bad JSON, or when
            transient failures outlast the retries
    """
    get = session.get if session is not None else requests.get

    def make_request() -> Optional[Dict[str, Any]]:
        try:
            response = get(url, headers=headers, timeout=timeout)
        except (requests.ConnectionError, requests.Timeout) as e:
            raise TransientAPIError(f"GET {url}: {e}") from e
        except requests.RequestException as e:
            raise CatalogError(f"GET {url}: {e}") from e

        if response.status_code == 404:
            return None

        if is_transient_status(response.status_code):
            raise TransientAPIError(
                f"Transient HTTP {response.status_code} for {url}",
                retry_after=_retry_after_seconds(response),
            )

        try:
            response.raise_for_status()
        except requests.HTTPError as e:
            raise CatalogError(f"GET {url}: {e}") from e

        try:
            data = response.json()
        except ValueError as e:
            raise CatalogError(f"GET {url}: invalid JSON body") from e

        if not isinstance(data, dict):
            raise CatalogError(f"GET {url}: expected a JSON object")
        return data

    return execute_with_retry(
        make_request,
        f"GET {url}",
        max_retries=max_retries,
        backoff_base_sec=backoff_base_sec,
    )
