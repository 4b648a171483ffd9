"""Ordered request pipeline in front of every API call."""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

import httpx

from .backoff import BackoffPolicy
from .config import PipelineConfig
from .exchange import OutgoingRequest, RequestStage
from .ratelimit import RateLimitTracker
from .stages import AuthInjector, BaseUrlRewriter
from .transport import RetryingTransport, Sleeper

logger = logging.getLogger("sanbot.pipeline")


class RequestPipeline:
    """Runs the request stages in order, then the retrying transport.

    The base URL is rewritten first so every retry targets the current host.
    Auth headers are attached once per logical call, before the transport,
    so every attempt carries the key that was current when the call began.
    The rate-limit tracker observes each attempt, including ones that fail.
    """

    def __init__(
        self,
        config: PipelineConfig,
        client: httpx.AsyncClient,
        *,
        policy: Optional[BackoffPolicy] = None,
        rate_limits: Optional[RateLimitTracker] = None,
        sleep: Optional[Sleeper] = None,
    ) -> None:
        self._config = config
        self._client = client
        self._rate_limits = rate_limits or RateLimitTracker()
        self._stages: List[RequestStage] = [BaseUrlRewriter(config), AuthInjector(config)]
        transport_kwargs = {"observers": [self._rate_limits]}
        if sleep is not None:
            transport_kwargs["sleep"] = sleep
        self._transport = RetryingTransport(client, policy or BackoffPolicy(), **transport_kwargs)

    @property
    def config(self) -> PipelineConfig:
        return self._config

    @property
    def rate_limits(self) -> RateLimitTracker:
        return self._rate_limits

    @property
    def stages(self) -> Sequence[RequestStage]:
        return tuple(self._stages)

    def prepare(self, request: OutgoingRequest) -> OutgoingRequest:
        for stage in self._stages:
            request = stage.transform(request)
        return request

    async def send(self, request: OutgoingRequest) -> httpx.Response:
        prepared = self.prepare(request)
        logger.debug("%s %s", prepared.method, prepared.target)
        outcome = await self._transport.execute(prepared)
        return outcome.response

    async def aclose(self) -> None:
        await self._client.aclose()


__all__ = ["RequestPipeline"]
