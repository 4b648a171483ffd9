"""Tracking of server-advertised rate limits.

The backend reports its quota on every response through ``X-RateLimit-Limit``,
``X-RateLimit-Remaining`` and ``X-RateLimit-Reset`` (epoch seconds). The
tracker keeps the last value seen for each header; a response without a
header, or with one that does not parse, leaves that field as it was. The
tracker never blocks a request. Callers that want to avoid a doomed call can
check ``is_throttled()`` first.
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass, replace
from typing import Callable, Mapping, Optional

from .exchange import AttemptOutcome, ResponseObserver, ResponseOutcome
from .metrics import RATE_LIMIT_REMAINING

logger = logging.getLogger("sanbot.ratelimit")

LIMIT_HEADER = "X-RateLimit-Limit"
REMAINING_HEADER = "X-RateLimit-Remaining"
RESET_HEADER = "X-RateLimit-Reset"


@dataclass(frozen=True)
class RateLimitState:
    limit: int
    remaining: int
    reset_at_epoch_ms: int


def _now_ms(clock: Callable[[], float]) -> int:
    return int(clock() * 1000)


def _parse_int(value: Optional[str]) -> Optional[int]:
    if value is None:
        return None
    try:
        return int(value.strip())
    except ValueError:
        return None


class RateLimitTracker(ResponseObserver):
    def __init__(self, *, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock
        self._lock = threading.Lock()
        self._state = RateLimitState(limit=100, remaining=100, reset_at_epoch_ms=_now_ms(clock))

    @property
    def state(self) -> RateLimitState:
        with self._lock:
            return self._state

    def observe(self, outcome: AttemptOutcome) -> None:
        if isinstance(outcome, ResponseOutcome):
            self.update_from_headers(outcome.response.headers)

    def update_from_headers(self, headers: Mapping[str, str]) -> None:
        limit = _parse_int(headers.get(LIMIT_HEADER))
        remaining = _parse_int(headers.get(REMAINING_HEADER))
        reset = _parse_int(headers.get(RESET_HEADER))
        if limit is None and remaining is None and reset is None:
            return

        with self._lock:
            state = self._state
            if limit is not None:
                state = replace(state, limit=limit)
            if remaining is not None:
                state = replace(state, remaining=remaining)
            if reset is not None:
                state = replace(state, reset_at_epoch_ms=reset * 1000)
            self._state = state

        RATE_LIMIT_REMAINING.set(state.remaining)
        if state.remaining <= 0:
            logger.warning(
                "Rate limit exhausted (limit=%s), resets at %s",
                state.limit,
                state.reset_at_epoch_ms,
            )

    def is_throttled(self) -> bool:
        state = self.state
        return state.remaining <= 0 and _now_ms(self._clock) < state.reset_at_epoch_ms

    def seconds_until_reset(self) -> int:
        remaining_ms = self.state.reset_at_epoch_ms - _now_ms(self._clock)
        return max(0, remaining_ms // 1000)


__all__ = ["RateLimitState", "RateLimitTracker"]
