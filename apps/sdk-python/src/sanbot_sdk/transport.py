"""Retry loop around a single logical HTTP call."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Sequence

import httpx

from .backoff import BackoffPolicy
from .exchange import AttemptOutcome, OutgoingRequest, ResponseObserver, ResponseOutcome, TransportFailure
from .metrics import HTTP_ATTEMPTS, HTTP_RETRIES

logger = logging.getLogger("sanbot.transport")

Sleeper = Callable[[float], Awaitable[Any]]


class RetryingTransport:
    def __init__(
        self,
        client: httpx.AsyncClient,
        policy: BackoffPolicy,
        *,
        observers: Sequence[ResponseObserver] = (),
        sleep: Sleeper = asyncio.sleep,
    ) -> None:
        self._client = client
        self._policy = policy
        self._observers = list(observers)
        self._sleep = sleep

    @property
    def policy(self) -> BackoffPolicy:
        return self._policy

    async def execute(self, request: OutgoingRequest) -> ResponseOutcome:
        """Send ``request`` until the policy stops retrying.

        The last outcome is surfaced when attempts run out: a response is
        returned as-is, a transport failure re-raises its cause.
        """
        outcome: AttemptOutcome | None = None
        for attempt in range(self._policy.max_retries):
            outcome = await self._attempt(request)
            for observer in self._observers:
                observer.observe(outcome)

            decision = self._policy.decide(attempt, outcome)
            if not decision.should_retry:
                break

            reason = _retry_reason(outcome)
            HTTP_RETRIES.labels(reason=reason).inc()
            logger.warning(
                "Retrying %s %s after %s (attempt %s/%s, waiting %sms)",
                request.method,
                request.target,
                reason,
                attempt + 1,
                self._policy.max_retries,
                decision.delay_ms,
            )
            if isinstance(outcome, ResponseOutcome):
                await outcome.response.aclose()
            await self._sleep(decision.delay_ms / 1000)

        if outcome is None:  # pragma: no cover - policy guarantees one attempt
            raise RuntimeError("No attempt was made")
        if isinstance(outcome, TransportFailure):
            raise outcome.cause
        return outcome

    async def _attempt(self, request: OutgoingRequest) -> AttemptOutcome:
        http_request = self._client.build_request(
            request.method,
            request.target,
            headers=request.headers,
            content=request.encoded_body(),
        )
        try:
            response = await self._client.send(http_request)
        except httpx.TransportError as exc:
            HTTP_ATTEMPTS.labels(method=request.method, outcome="transport_error").inc()
            logger.info("Transport failure on %s %s: %s", request.method, request.target, exc)
            return TransportFailure(cause=exc)
        HTTP_ATTEMPTS.labels(method=request.method, outcome=str(response.status_code)).inc()
        return ResponseOutcome(response=response)


def _retry_reason(outcome: AttemptOutcome) -> str:
    if isinstance(outcome, TransportFailure):
        return "transport_error"
    if outcome.status == 429:
        return "rate_limited"
    return "server_error"


__all__ = ["RetryingTransport"]
