"""Request stages applied before the transport sends anything."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Optional

import httpx

from .config import PipelineConfig
from .exchange import OutgoingRequest, RequestStage
from .metrics import URL_REWRITE_SKIPPED

logger = logging.getLogger("sanbot.stages")


def _parse_base(value: str) -> Optional[httpx.URL]:
    try:
        url = httpx.URL(value)
    except httpx.InvalidURL:
        return None
    if url.scheme not in ("http", "https") or not url.host:
        return None
    return url


class BaseUrlRewriter(RequestStage):
    """Points a relative request at the currently configured base URL.

    The base path keeps its prefix (``/api`` in production) and the request
    path is appended after it. When the configured base does not parse the
    request goes out unchanged.
    """

    def __init__(self, config: PipelineConfig) -> None:
        self._config = config

    def transform(self, request: OutgoingRequest) -> OutgoingRequest:
        base = self._config.base_url
        if _parse_base(base) is None:
            URL_REWRITE_SKIPPED.inc()
            logger.warning("Configured base URL %r is not a valid absolute URL; rewrite skipped", base)
            return request

        combined = f"{base.rstrip('/')}/{request.relative_path.lstrip('/')}"
        query = request.query
        if query:
            combined = f"{combined}?{query}"
        if _parse_base(combined) is None:
            URL_REWRITE_SKIPPED.inc()
            logger.warning("Rewritten URL %r did not parse; sending %s unchanged", combined, request.target)
            return request
        return replace(request, url=combined)


class AuthInjector(RequestStage):
    def __init__(self, config: PipelineConfig) -> None:
        self._config = config

    def transform(self, request: OutgoingRequest) -> OutgoingRequest:
        headers = dict(request.headers)
        headers["Authorization"] = f"Bearer {self._config.api_key}"
        headers["Content-Type"] = "application/json"
        headers["Accept"] = "application/json"
        return replace(request, headers=headers)


__all__ = ["AuthInjector", "BaseUrlRewriter"]
