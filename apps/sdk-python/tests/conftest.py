from __future__ import annotations

import random
from typing import Callable, Iterable, List

import httpx
import pytest

from sanbot_sdk.backoff import BackoffPolicy
from sanbot_sdk.client import SanbotClient
from sanbot_sdk.config import PipelineConfig

BASE_URL = "https://api.example.com/v1/"


class RecordingSleep:
    def __init__(self) -> None:
        self.delays: List[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


class ScriptedHandler:
    """Replays a fixed list of responses (or exceptions) one per request."""

    def __init__(self, script: Iterable[object]) -> None:
        self._script = list(script)
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        step = self._script[min(len(self.requests), len(self._script)) - 1]
        if isinstance(step, Exception):
            raise step
        return step  # type: ignore[return-value]


def error_response(status: int, code: str, message: str, **headers: str) -> httpx.Response:
    return httpx.Response(
        status,
        json={"success": False, "error": {"code": code, "message": message}},
        headers=headers,
    )


@pytest.fixture()
def sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture()
def pipeline_config() -> PipelineConfig:
    return PipelineConfig(base_url=BASE_URL, api_key="test-key")


@pytest.fixture()
def make_client(pipeline_config: PipelineConfig, sleep: RecordingSleep) -> Callable[..., SanbotClient]:
    def factory(handler: Callable[[httpx.Request], httpx.Response], max_retries: int = 3) -> SanbotClient:
        return SanbotClient(
            pipeline_config,
            transport=httpx.MockTransport(handler),
            policy=BackoffPolicy(max_retries=max_retries, initial_delay_ms=1000, rng=random.Random(7)),
            sleep=sleep,
        )

    return factory
