"""Prometheus instruments for the request pipeline."""

from __future__ import annotations

from prometheus_client import Counter, Gauge

HTTP_ATTEMPTS = Counter(
    "sanbot_http_attempts_total",
    "HTTP attempts made by the request pipeline",
    ["method", "outcome"],
)
HTTP_RETRIES = Counter(
    "sanbot_http_retries_total",
    "Retries scheduled by the backoff policy",
    ["reason"],
)
RATE_LIMIT_REMAINING = Gauge(
    "sanbot_rate_limit_remaining",
    "Last X-RateLimit-Remaining value advertised by the backend",
)
URL_REWRITE_SKIPPED = Counter(
    "sanbot_base_url_rewrite_skipped_total",
    "Requests sent without a base URL rewrite because the configured base did not parse",
)

__all__ = ["HTTP_ATTEMPTS", "HTTP_RETRIES", "RATE_LIMIT_REMAINING", "URL_REWRITE_SKIPPED"]
