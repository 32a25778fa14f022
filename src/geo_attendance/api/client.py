from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, Optional

import requests

from ..core.enums import AUTH_FAILURE_CODES, SESSION_EXPIRED_CODES, ServerErrorCode
from ..core.exceptions import AuthenticationError, NetworkError, ServerError, SessionExpired
from .connection import ApiConnection

logger = logging.getLogger(__name__)


def api_call(
    conn: ApiConnection,
    endpoint: str,
    method: str = "GET",
    body: Optional[Dict[str, Any]] = None,
    token: Optional[str] = None,
) -> Dict[str, Any]:
    """Perform one JSON request and return the decoded body.

    The body is decoded whatever the HTTP status, since the server reports
    business failures as `{success: false, code}` with 4xx statuses.
    Transport failures and non-JSON bodies raise NetworkError.
    """

    headers = {"Content-Type": "application/json"}
    if token:
        headers["Authorization"] = f"Bearer {token}"

    kwargs: Dict[str, Any] = {"headers": headers, "timeout": conn.timeout}
    if body is not None and method.upper() != "GET":
        kwargs["json"] = body

    url = conn.url_for(endpoint)
    try:
        response = conn.session().request(method.upper(), url, **kwargs)
    except requests.RequestException as e:
        logger.error("API call error: %s %s: %s", method, endpoint, e)
        raise NetworkError(str(e)) from e

    try:
        data = response.json()
    except ValueError as e:
        logger.error("API call error: %s %s returned non-JSON (status %s)", method, endpoint, response.status_code)
        raise NetworkError("Invalid response from server") from e

    if not isinstance(data, dict):
        raise NetworkError("Invalid response from server")
    return data


async def api_call_async(
    conn: ApiConnection,
    endpoint: str,
    method: str = "GET",
    body: Optional[Dict[str, Any]] = None,
    token: Optional[str] = None,
) -> Dict[str, Any]:
    """`api_call` off the event loop thread."""
    return await asyncio.to_thread(api_call, conn, endpoint, method, body, token)


def ensure_success(data: Dict[str, Any]) -> Dict[str, Any]:
    """Raise the matching ServerError subclass for `success: false` payloads."""

    if data.get("success"):
        return data

    raw_code = data.get("code")
    message = data.get("message")
    code = ServerErrorCode.parse(raw_code)
    if code in SESSION_EXPIRED_CODES:
        raise SessionExpired(raw_code, message, data)
    if code in AUTH_FAILURE_CODES:
        raise AuthenticationError(raw_code, message, data)
    raise ServerError(raw_code, message, data)
