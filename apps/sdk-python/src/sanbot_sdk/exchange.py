"""Values exchanged between pipeline stages: requests and attempt outcomes."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple, Union

import httpx


@dataclass(frozen=True)
class OutgoingRequest:
    """One logical API call as it moves through the pipeline.

    ``path`` is relative to the API root and may carry its own query string.
    ``url`` stays ``None`` until the base URL rewriter resolves an absolute
    target; an unresolved request is sent relative to the httpx client's
    ``base_url``.
    """

    method: str
    path: str
    params: Tuple[Tuple[str, str], ...] = ()
    headers: Dict[str, str] = field(default_factory=dict)
    body: Any = None
    url: Optional[str] = None

    @property
    def relative_path(self) -> str:
        return self.path.split("?", 1)[0]

    @property
    def query(self) -> str:
        inline = self.path.split("?", 1)[1] if "?" in self.path else ""
        extra = str(httpx.QueryParams(list(self.params))) if self.params else ""
        return "&".join(part for part in (inline, extra) if part)

    @property
    def relative_url(self) -> str:
        query = self.query
        return f"{self.relative_path}?{query}" if query else self.relative_path

    @property
    def target(self) -> str:
        return self.url or self.relative_url

    def encoded_body(self) -> Optional[bytes]:
        if self.body is None:
            return None
        return json.dumps(self.body, separators=(",", ":")).encode("utf-8")


@dataclass(frozen=True)
class ResponseOutcome:
    response: httpx.Response

    @property
    def status(self) -> int:
        return self.response.status_code


@dataclass(frozen=True)
class TransportFailure:
    cause: Exception


AttemptOutcome = Union[ResponseOutcome, TransportFailure]


class RequestStage:
    """Produces a new request from the previous stage's request."""

    def transform(self, request: OutgoingRequest) -> OutgoingRequest:  # pragma: no cover - interface
        raise NotImplementedError


class ResponseObserver:
    """Receives every attempt outcome, retried or not."""

    def observe(self, outcome: AttemptOutcome) -> None:  # pragma: no cover - interface
        raise NotImplementedError


__all__ = [
    "AttemptOutcome",
    "OutgoingRequest",
    "RequestStage",
    "ResponseObserver",
    "ResponseOutcome",
    "TransportFailure",
]
