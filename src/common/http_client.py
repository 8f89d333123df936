"""Shared HTTP helpers used by the governance and comment clients.

Encapsulates common request/timeout error handling so modules avoid
duplicating try/except blocks. This module is dependency-light and can be
safely imported by both iq/* and scm/* without cycles.
"""
from __future__ import annotations

import logging
import sys
from typing import Any, Dict, Optional, Tuple

import requests

from constants import Constants, ExitCodes
from common.logging_utils import extra_context, is_debug_enabled, safe_url, Timer

logger = logging.getLogger(__name__)


def get_json(
    url: str,
    *,
    headers: Optional[Dict[str, str]] = None,
    **kwargs: Any
) -> Tuple[int, Dict[str, str], Optional[Any]]:
    """Perform a single GET request and parse the JSON response.

    Transport failures never raise; they are reported as status 0 so callers
    can treat them like any other unusable response.

    Args:
        url: Target URL
        headers: Optional request headers
        **kwargs: Additional requests.get parameters (params, auth, ...)

    Returns:
        Tuple of (status_code, headers_dict, parsed_json_or_none)
    """
    safe_target = safe_url(url)
    with Timer() as t:
        if is_debug_enabled(logger):
            logger.debug(
                "HTTP request",
                extra=extra_context(
                    event="http_request",
                    component="http_client",
                    action="GET",
                    target=safe_target
                )
            )
        try:
            response = requests.get(
                url,
                timeout=Constants.REQUEST_TIMEOUT,
                headers=headers,
                **kwargs
            )
        except requests.Timeout:
            logger.warning(
                "HTTP timeout",
                extra=extra_context(
                    event="http_exception",
                    component="http_client",
                    action="GET",
                    outcome="timeout",
                    target=safe_target
                )
            )
            return 0, {}, None
        except requests.RequestException as exc:
            logger.warning(
                "HTTP request exception: %s",
                exc,
                extra=extra_context(
                    event="http_exception",
                    component="http_client",
                    action="GET",
                    outcome="request_exception",
                    target=safe_target
                )
            )
            return 0, {}, None

    if is_debug_enabled(logger):
        logger.debug(
            "HTTP response",
            extra=extra_context(
                event="http_response",
                component="http_client",
                action="GET",
                status_code=response.status_code,
                duration_ms=t.duration_ms(),
                target=safe_target
            )
        )

    response_headers = dict(response.headers)
    if response.status_code != 200 or not response.text:
        return response.status_code, response_headers, None
    try:
        return response.status_code, response_headers, response.json()
    except ValueError:
        if is_debug_enabled(logger):
            logger.debug(
                "JSON decode error",
                extra=extra_context(
                    event="parse",
                    component="http_client",
                    action="get_json",
                    outcome="json_decode_error",
                    status_code=response.status_code,
                    target=safe_target
                )
            )
        return response.status_code, response_headers, None


def _send(method: str, url: str, *, context: str, **kwargs: Any) -> requests.Response:
    safe_target = safe_url(url)
    with Timer() as t:
        try:
            res = requests.request(method, url, timeout=Constants.REQUEST_TIMEOUT, **kwargs)
        except requests.Timeout:
            logger.error(
                "%s request timed out after %s seconds",
                context,
                Constants.REQUEST_TIMEOUT,
            )
            sys.exit(ExitCodes.CONNECTION_ERROR.value)
        except requests.RequestException as exc:  # includes ConnectionError
            logger.error("%s connection error: %s", context, exc)
            sys.exit(ExitCodes.CONNECTION_ERROR.value)
    if is_debug_enabled(logger):
        logger.debug(
            "HTTP response",
            extra=extra_context(
                event="http_response",
                component="http_client",
                action=method,
                status_code=res.status_code,
                duration_ms=t.duration_ms(),
                target=safe_target,
                context=context
            )
        )
    return res


def safe_post(url: str, *, context: str, **kwargs: Any) -> requests.Response:
    """Perform a POST request with consistent error handling and DEBUG traces.

    Args:
        url: Target URL.
        context: Human-readable source tag for logs (e.g., "github").
        **kwargs: Passed through to requests.request (json, headers, ...).

    Returns:
        requests.Response: The HTTP response object.
    """
    return _send("POST", url, context=context, **kwargs)


def safe_patch(url: str, *, context: str, **kwargs: Any) -> requests.Response:
    """Perform a PATCH request with the same handling as safe_post."""
    return _send("PATCH", url, context=context, **kwargs)
