from __future__ import annotations

import httpx

from sanbot_sdk.exchange import ResponseOutcome, TransportFailure
from sanbot_sdk.ratelimit import RateLimitState, RateLimitTracker


class FakeClock:
    def __init__(self, now: float) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


def response(**headers: str) -> ResponseOutcome:
    return ResponseOutcome(response=httpx.Response(200, headers=headers))


def test_defaults_are_conservative() -> None:
    tracker = RateLimitTracker(clock=FakeClock(1_700_000_000))
    assert tracker.state == RateLimitState(limit=100, remaining=100, reset_at_epoch_ms=1_700_000_000_000)
    assert not tracker.is_throttled()
    assert tracker.seconds_until_reset() == 0


def test_observe_reads_headers() -> None:
    tracker = RateLimitTracker(clock=FakeClock(1_700_000_000))
    tracker.observe(
        response(**{"X-RateLimit-Limit": "60", "X-RateLimit-Remaining": "12", "X-RateLimit-Reset": "1700000030"})
    )
    assert tracker.state == RateLimitState(limit=60, remaining=12, reset_at_epoch_ms=1_700_000_030_000)


def test_missing_headers_leave_state_unchanged() -> None:
    tracker = RateLimitTracker(clock=FakeClock(1_700_000_000))
    tracker.observe(
        response(**{"X-RateLimit-Limit": "60", "X-RateLimit-Remaining": "5", "X-RateLimit-Reset": "1700000030"})
    )
    before = tracker.state

    tracker.observe(response())
    tracker.observe(TransportFailure(cause=httpx.ReadTimeout("timed out")))

    assert tracker.state == before


def test_unparsable_headers_are_ignored_individually() -> None:
    tracker = RateLimitTracker(clock=FakeClock(1_700_000_000))
    tracker.observe(
        response(**{"X-RateLimit-Limit": "abc", "X-RateLimit-Remaining": "7", "X-RateLimit-Reset": "soon"})
    )
    state = tracker.state
    assert state.limit == 100
    assert state.remaining == 7
    assert state.reset_at_epoch_ms == 1_700_000_000_000


def test_throttled_until_reset_passes() -> None:
    clock = FakeClock(1_700_000_000)
    tracker = RateLimitTracker(clock=clock)
    tracker.observe(response(**{"X-RateLimit-Remaining": "0", "X-RateLimit-Reset": "1700000045"}))

    assert tracker.is_throttled()
    assert tracker.seconds_until_reset() == 45

    clock.now = 1_700_000_045.5
    assert not tracker.is_throttled()
    assert tracker.seconds_until_reset() == 0


def test_remaining_quota_is_not_throttled() -> None:
    tracker = RateLimitTracker(clock=FakeClock(1_700_000_000))
    tracker.observe(response(**{"X-RateLimit-Remaining": "1", "X-RateLimit-Reset": "1700000045"}))
    assert not tracker.is_throttled()
