# metal_client/request.py
"""Single-call HTTP helper shared by every resource method.

One call in, one value (or one ``RequestError``) out. The API wraps payloads
as ``{"data": ..., "message": ...}``; ``request`` unwraps ``data`` on success
and turns any non-2xx status into a ``RequestError``. Bodies that are empty or
not JSON are read as ``None`` so endpoints answering with no content (deletes,
signed-URL uploads) still succeed.
"""
from __future__ import annotations
import logging
from typing import Any, AsyncIterable, Mapping

import httpx

from .config import DEFAULT_TIMEOUT_S
from .exceptions import RequestError

logger = logging.getLogger("metal_client")


def _loggable(url: str) -> str:
    # signed upload URLs carry their credentials in the query string
    return str(httpx.URL(url).copy_with(query=None))


def parse_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        # empty or non-JSON body
        return None


def unwrap(body: Any) -> Any:
    if isinstance(body, dict) and body.get("data") is not None:
        return body["data"]
    return body


def error_message(status: int, server_message: str | None) -> str:
    if server_message:
        return f"Error status code: {status}. {server_message}"
    return f"Error status code: {status}."


def build_error(response: httpx.Response, body: Any, phase: str | None = None) -> RequestError:
    server_message = body.get("message") if isinstance(body, dict) else None
    if server_message is not None and not isinstance(server_message, str):
        server_message = str(server_message)
    return RequestError(
        error_message(response.status_code, server_message),
        response,
        response.status_code,
        server_message or None,
        phase=phase,
    )


async def request(
    method: str,
    url: str,
    *,
    headers: Mapping[str, str] | None = None,
    json: Any | None = None,
    content: bytes | AsyncIterable[bytes] | None = None,
    params: Mapping[str, Any] | None = None,
    timeout: float | None = DEFAULT_TIMEOUT_S,
    transport: httpx.AsyncBaseTransport | None = None,
    phase: str | None = None,
) -> Any:
    """Issue one HTTP call and return the unwrapped payload.

    ``json`` is sent JSON-encoded; ``content`` is sent as the raw body. Network
    failures surface as httpx exceptions, untouched. Nothing is retried.
    """
    if json is not None and content is not None:
        raise ValueError("pass either json or content, not both")

    async with httpx.AsyncClient(timeout=timeout, transport=transport) as client:
        logger.debug("-> %s %s", method, _loggable(url))
        response = await client.request(
            method,
            url,
            headers=dict(headers or {}),
            json=json,
            content=content,
            params=params,
        )
        body = parse_body(response)
        logger.debug("<- %s %s %d", method, _loggable(url), response.status_code)

    if not response.is_success:
        raise build_error(response, body, phase=phase)
    return unwrap(body)
