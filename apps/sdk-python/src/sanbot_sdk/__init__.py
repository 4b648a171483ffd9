"""Sanbot kiosk Python SDK."""

from .backoff import BackoffDecision, BackoffPolicy
from .client import SanbotClient
from .config import ClientConfig, PipelineConfig
from .pipeline import RequestPipeline
from .ratelimit import RateLimitState, RateLimitTracker
from .results import Error, NetworkResult, Success
from .settings import SettingsStore

__all__ = [
    "BackoffDecision",
    "BackoffPolicy",
    "ClientConfig",
    "Error",
    "NetworkResult",
    "PipelineConfig",
    "RateLimitState",
    "RateLimitTracker",
    "RequestPipeline",
    "SanbotClient",
    "SettingsStore",
    "Success",
]
