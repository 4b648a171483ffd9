"""Configuration objects for the Sanbot kiosk SDK."""

from __future__ import annotations

import os
import threading
from dataclasses import dataclass, field
from typing import Dict

import httpx

DEFAULT_BASE_URL = "https://bot.tripandevent.com/api/"
DEFAULT_API_KEY = "test_sanbot_key_abc123xyz789"
DEFAULT_COUNTRY_CODE = "+971"


@dataclass(frozen=True)
class ClientConfig:
    connect_timeout: float = 30.0
    read_timeout: float = 30.0
    write_timeout: float = 30.0
    max_retries: int = 3
    initial_delay_ms: int = 1000
    country_code: str = DEFAULT_COUNTRY_CODE
    user_agent: str = "sanbot-sdk-python/0.1.0"
    headers: Dict[str, str] = field(default_factory=dict)

    def timeout(self) -> httpx.Timeout:
        return httpx.Timeout(
            connect=self.connect_timeout,
            read=self.read_timeout,
            write=self.write_timeout,
            pool=self.connect_timeout,
        )

    @classmethod
    def from_env(cls) -> "ClientConfig":
        timeout = float(os.environ.get("SANBOT_TIMEOUT_SECONDS", "30"))
        return cls(
            connect_timeout=float(os.environ.get("SANBOT_CONNECT_TIMEOUT_SECONDS", timeout)),
            read_timeout=float(os.environ.get("SANBOT_READ_TIMEOUT_SECONDS", timeout)),
            write_timeout=float(os.environ.get("SANBOT_WRITE_TIMEOUT_SECONDS", timeout)),
            max_retries=int(os.environ.get("SANBOT_MAX_RETRIES", "3")),
            initial_delay_ms=int(os.environ.get("SANBOT_INITIAL_DELAY_MS", "1000")),
            country_code=os.environ.get("SANBOT_COUNTRY_CODE", DEFAULT_COUNTRY_CODE),
        )


class PipelineConfig:
    """Base URL and API key that may change while the kiosk is running.

    Every request reads both values at call time. Assigning an empty value
    restores the compiled-in default, so neither is ever blank.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        api_key: str = DEFAULT_API_KEY,
        *,
        default_base_url: str = DEFAULT_BASE_URL,
        default_api_key: str = DEFAULT_API_KEY,
    ) -> None:
        self.default_base_url = default_base_url
        self.default_api_key = default_api_key
        self._lock = threading.Lock()
        self._base_url = self._or_default(base_url, default_base_url)
        self._api_key = self._or_default(api_key, default_api_key)

    @staticmethod
    def _or_default(value: str | None, default: str) -> str:
        if value is None or not value.strip():
            return default
        return value.strip()

    @property
    def base_url(self) -> str:
        with self._lock:
            return self._base_url

    @base_url.setter
    def base_url(self, value: str | None) -> None:
        resolved = self._or_default(value, self.default_base_url)
        with self._lock:
            self._base_url = resolved

    @property
    def api_key(self) -> str:
        with self._lock:
            return self._api_key

    @api_key.setter
    def api_key(self, value: str | None) -> None:
        resolved = self._or_default(value, self.default_api_key)
        with self._lock:
            self._api_key = resolved

    @classmethod
    def from_env(cls) -> "PipelineConfig":
        return cls(
            base_url=os.environ.get("SANBOT_API_BASE_URL", DEFAULT_BASE_URL),
            api_key=os.environ.get("SANBOT_API_KEY", DEFAULT_API_KEY),
        )

    def __repr__(self) -> str:
        return f"PipelineConfig(base_url={self.base_url!r})"


__all__ = [
    "ClientConfig",
    "PipelineConfig",
    "DEFAULT_API_KEY",
    "DEFAULT_BASE_URL",
    "DEFAULT_COUNTRY_CODE",
]
