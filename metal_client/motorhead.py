# metal_client/motorhead.py
from __future__ import annotations
from typing import Any

import httpx

from .config import DEFAULT_BASE_URL, DEFAULT_TIMEOUT_S
from .exceptions import MissingParameterError
from .request import request
from . import models as M

MANAGED_BASE_URL = f"{DEFAULT_BASE_URL}/v1/motorhead"


class Motorhead:
    """Client for the conversation-memory service.

    The managed deployment needs Metal credentials. A self-hosted server
    (any other ``base_url``) may be called without them, in which case no
    credential headers are sent.
    """

    def __init__(
        self,
        api_key: str | None = None,
        client_id: str | None = None,
        base_url: str = MANAGED_BASE_URL,
        *,
        timeout_s: float = DEFAULT_TIMEOUT_S,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        base_url = base_url.rstrip("/")
        if base_url == MANAGED_BASE_URL and (not api_key or not client_id):
            raise MissingParameterError("apiKey and clientId required for managed motorhead")

        self.api_key = api_key
        self.client_id = client_id
        self.base_url = base_url
        self.timeout_s = timeout_s
        self._transport = transport

    @property
    def is_managed(self) -> bool:
        return self.base_url == MANAGED_BASE_URL

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["x-metal-api-key"] = self.api_key
        if self.client_id:
            headers["x-metal-client-id"] = self.client_id
        return headers

    async def _request(self, method: str, session_id: str, **kwargs: Any) -> Any:
        if not session_id:
            raise MissingParameterError("sessionId required")
        return await request(
            method,
            f"{self.base_url}/sessions/{session_id}/memory",
            headers=self._headers(),
            timeout=self.timeout_s,
            transport=self._transport,
            **kwargs,
        )

    @staticmethod
    def _to_memory(data: Any) -> M.Memory | Any:
        # empty bodies and bare acknowledgements are passed through as-is
        if isinstance(data, dict) and "messages" in data:
            return M.Memory.model_validate(data)
        return data

    async def add_memory(self, session_id: str, payload: M.Memory) -> M.Memory | Any:
        data = await self._request("POST", session_id, json=payload.model_dump(exclude_none=True))
        return self._to_memory(data)

    async def get_memory(self, session_id: str) -> M.Memory | Any:
        data = await self._request("GET", session_id)
        return self._to_memory(data)

    async def delete_memory(self, session_id: str) -> None:
        await self._request("DELETE", session_id)
