# metal_client/config.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import MissingParameterError

DEFAULT_BASE_URL = "https://api.getmetal.io"
DEFAULT_TIMEOUT_S = 20.0


class Settings(BaseSettings):
    # --- Credentials ---
    api_key: Optional[str] = None
    client_id: Optional[str] = None

    # --- Defaults for index/app scoped calls ---
    index_id: Optional[str] = None
    app_id: Optional[str] = None

    # --- Transport ---
    base_url: str = DEFAULT_BASE_URL
    timeout_s: float = DEFAULT_TIMEOUT_S

    # --- Logging (optional) ---
    log_level: str = "INFO"

    # METAL_API_KEY, METAL_CLIENT_ID, ... ; a .env in the working dir is read too
    model_config = SettingsConfigDict(
        env_prefix="METAL_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


@dataclass(frozen=True)
class ClientConfig:
    api_key: str
    client_id: str
    index_id: str | None = None       # default for index-scoped calls
    app_id: str | None = None         # default for app-scoped calls
    base_url: str = DEFAULT_BASE_URL  # e.g., a staging host
    timeout_s: float = DEFAULT_TIMEOUT_S

    @classmethod
    def from_env(cls, settings: Settings | None = None) -> "ClientConfig":
        s = settings or Settings()
        if not s.api_key or not s.client_id:
            raise MissingParameterError("METAL_API_KEY and METAL_CLIENT_ID must be set")
        return cls(
            api_key=s.api_key,
            client_id=s.client_id,
            index_id=s.index_id,
            app_id=s.app_id,
            base_url=s.base_url.rstrip("/"),
            timeout_s=s.timeout_s,
        )

    def url(self, path: str) -> str:
        return f"{self.base_url.rstrip('/')}{path}"
