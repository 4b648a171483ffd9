"""Exponential backoff with jitter for retried API calls."""

from __future__ import annotations

import random
from dataclasses import dataclass, field

from .exchange import AttemptOutcome, ResponseOutcome, TransportFailure

RATE_LIMIT_MAX_DELAY_MS = 60_000
DEFAULT_MAX_DELAY_MS = 10_000


@dataclass(frozen=True)
class BackoffDecision:
    should_retry: bool
    delay_ms: int = 0


STOP = BackoffDecision(should_retry=False, delay_ms=0)


@dataclass
class BackoffPolicy:
    """Decides whether an attempt is retried and how long to wait first.

    Transport failures, 429 and 5xx responses are retried while attempts
    remain. The delay is ``initial_delay_ms * 2**attempt`` plus a uniform
    jitter of up to half that, capped at 60s for 429 and 10s otherwise.
    """

    max_retries: int = 3
    initial_delay_ms: int = 1000
    rng: random.Random = field(default_factory=random.Random, repr=False)

    def __post_init__(self) -> None:
        if not isinstance(self.max_retries, int) or self.max_retries < 1:
            raise ValueError(f"max_retries must be a positive integer, got {self.max_retries}")
        if self.initial_delay_ms < 0:
            raise ValueError(f"initial_delay_ms must not be negative, got {self.initial_delay_ms}")

    def is_retryable(self, outcome: AttemptOutcome) -> bool:
        if isinstance(outcome, TransportFailure):
            return True
        return outcome.status == 429 or outcome.status >= 500

    def decide(self, attempt_index: int, outcome: AttemptOutcome) -> BackoffDecision:
        if attempt_index >= self.max_retries - 1 or not self.is_retryable(outcome):
            return STOP
        status = outcome.status if isinstance(outcome, ResponseOutcome) else None
        return BackoffDecision(should_retry=True, delay_ms=self.delay_for(attempt_index, status))

    def delay_for(self, attempt_index: int, status: int | None = None) -> int:
        exponential = self.initial_delay_ms * (2 ** attempt_index)
        jitter = self.rng.randint(0, exponential // 2)
        cap = RATE_LIMIT_MAX_DELAY_MS if status == 429 else DEFAULT_MAX_DELAY_MS
        return min(exponential + jitter, cap)


__all__ = [
    "BackoffDecision",
    "BackoffPolicy",
    "DEFAULT_MAX_DELAY_MS",
    "RATE_LIMIT_MAX_DELAY_MS",
]
