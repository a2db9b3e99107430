"""Shared HTTP helpers used by the repository clients.

Encapsulates common request/timeout/retry handling so modules avoid
duplicating try/except blocks. Transport failures never raise from here:
they are reported as status 0 and the caller maps them to a swizzle error.
"""
from __future__ import annotations

import json
import logging
import os
import time
from typing import Any, Callable, Dict, Optional, Tuple

import requests

from constants import Constants
from common.logging_utils import extra_context, is_debug_enabled, safe_url, Timer

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int], None]
Response = Tuple[int, Dict[str, str], str]

# GET responses keyed by url and headers, with the time they were stored.
_http_cache: Dict[str, Tuple[Response, float]] = {}


def _trace(message: str, **fields: Any) -> None:
    if is_debug_enabled(logger):
        logger.debug(message, extra=extra_context(component="http_client", **fields))


def _cache_key(url: str, headers: Optional[Dict[str, str]]) -> str:
    return f"GET:{url}:{sorted(headers.items()) if headers else ''}"


def _cached(key: str) -> Optional[Response]:
    entry = _http_cache.get(key)
    if entry is None:
        return None
    response, stored_at = entry
    if time.time() - stored_at >= Constants.HTTP_CACHE_TTL_SEC:
        del _http_cache[key]
        return None
    return response


def clear_cache() -> None:
    """Drop every cached response."""
    _http_cache.clear()


def header_value(headers: Dict[str, str], name: str) -> Optional[str]:
    """Case-insensitive lookup in a plain headers dict."""
    lowered = name.lower()
    for key, value in headers.items():
        if key.lower() == lowered:
            return value
    return None


def robust_get(
    url: str,
    *,
    headers: Optional[Dict[str, str]] = None,
    **kwargs: Any
) -> Response:
    """GET with timeout, retry with backoff and a short-lived response cache.

    Responses below 500 are cached for Constants.HTTP_CACHE_TTL_SEC.

    Returns:
        Tuple of (status_code, headers_dict, body_text). status_code is 0 when
        every attempt failed at the transport level; body_text then holds the
        last failure reason.
    """
    key = _cache_key(url, headers)
    target = safe_url(url)

    hit = _cached(key)
    if hit is not None:
        _trace("HTTP cache hit", event="cache_hit", action="GET", target=target)
        return hit

    failure = None
    for attempt in range(1, Constants.HTTP_RETRY_MAX + 1):
        if attempt > 1:
            time.sleep(Constants.HTTP_RETRY_BASE_DELAY_SEC * (2 ** (attempt - 2)))
        _trace("HTTP request", event="http_request", action="GET", target=target, attempt=attempt)
        with Timer() as t:
            try:
                response = requests.get(url, timeout=Constants.REQUEST_TIMEOUT, headers=headers, **kwargs)
            except requests.Timeout:
                failure = "timeout"
            except requests.RequestException as exc:
                failure = str(exc)
            else:
                result = (response.status_code, dict(response.headers), response.text)
                if response.status_code < 500:
                    _http_cache[key] = (result, time.time())
                _trace(
                    "HTTP response",
                    event="http_response",
                    action="GET",
                    status_code=response.status_code,
                    duration_ms=t.duration_ms(),
                    target=target
                )
                return result
        _trace("HTTP request failed", event="http_exception", action="GET", outcome=failure,
               attempt=attempt, target=target)

    logger.warning("GET %s failed after %s attempts: %s", target, Constants.HTTP_RETRY_MAX, failure)
    return 0, {}, f"Request failed after {Constants.HTTP_RETRY_MAX} attempts: {failure}"


def get_json(
    url: str,
    *,
    headers: Optional[Dict[str, str]] = None,
    **kwargs: Any
) -> Tuple[int, Dict[str, str], Optional[Any]]:
    """GET url and decode a JSON body.

    Returns:
        Tuple of (status_code, headers_dict, parsed_json_or_none); the body is
        None unless the status is 200 and the text is valid JSON
    """
    status_code, response_headers, text = robust_get(url, headers=headers, **kwargs)
    if status_code != 200 or not text:
        return status_code, response_headers, None
    try:
        parsed = json.loads(text)
    except json.JSONDecodeError:
        _trace("JSON decode error", event="parse", action="get_json", outcome="json_decode_error",
               target=safe_url(url))
        return status_code, response_headers, None
    return status_code, response_headers, parsed


def stream_download(
    url: str,
    path: str,
    *,
    headers: Optional[Dict[str, str]] = None,
    progress: Optional[ProgressCallback] = None,
) -> Tuple[int, int]:
    """Stream url to a file at path without caching.

    Args:
        url: Download URL
        path: Destination file path
        headers: Optional request headers
        progress: Optional callback receiving (bytes_done, total_bytes); total
            is 0 when the server sends no Content-Length

    Returns:
        Tuple of (status_code, bytes_written). status_code is 0 on transport
        failure and nothing is written for non-200 responses; a transfer
        interrupted mid-stream removes the partial file.
    """
    target = safe_url(url)
    written = 0
    opened = False
    with Timer() as t:
        try:
            with requests.get(url, headers=headers, stream=True, timeout=Constants.REQUEST_TIMEOUT) as response:
                if response.status_code != 200:
                    return response.status_code, 0
                total = int(response.headers.get("Content-Length") or 0)
                with open(path, "wb") as out:
                    opened = True
                    for chunk in response.iter_content(chunk_size=Constants.DOWNLOAD_CHUNK_SIZE):
                        if not chunk:
                            continue
                        out.write(chunk)
                        written += len(chunk)
                        if progress is not None:
                            progress(written, total)
        except requests.RequestException as exc:
            logger.error("Download of %s failed: %s", target, exc)
            if opened and os.path.exists(path):
                os.remove(path)
            return 0, 0
    _trace("HTTP download complete", event="http_download", action="GET", bytes=written,
           duration_ms=t.duration_ms(), target=target)
    return 200, written
