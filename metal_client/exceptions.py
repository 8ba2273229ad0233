# metal_client/exceptions.py
from __future__ import annotations
from typing import Sequence

import httpx

# Network failures are httpx's own exceptions, raised unwrapped.
TransportError = httpx.TransportError


class MetalError(Exception):
    """Base class for errors raised by metal_client itself."""


class ClientValidationError(MetalError, ValueError):
    """Raised before any network call when a call's input is unusable."""


class MissingParameterError(ClientValidationError):
    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class UnsupportedFileTypeError(ClientValidationError):
    def __init__(self, file_type: str, supported: Sequence[str], detail: str):
        super().__init__(detail)
        self.file_type = file_type
        self.supported = tuple(supported)
        self.detail = detail


class RequestError(MetalError):
    """Non-2xx response from the API.

    ``message`` is composed from the status code and the server's ``message``
    field; ``server_message`` keeps the server text on its own so callers can
    match on it. ``phase`` names the upload step that failed
    (``"create_resource"`` or ``"transfer"``) and is ``None`` elsewhere.
    """

    def __init__(
        self,
        message: str,
        response: httpx.Response,
        status: int,
        server_message: str | None = None,
        phase: str | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.response = response
        self.status = status
        self.server_message = server_message
        self.phase = phase

    def __repr__(self) -> str:
        return f"RequestError(status={self.status}, message={self.message!r}, phase={self.phase!r})"
