"""Async Python client for the Sanbot kiosk backend."""

from __future__ import annotations

import json
import logging
from typing import Any, Callable, Optional, Sequence, Tuple, Type, TypeVar
from urllib.parse import quote

import httpx
from pydantic import BaseModel, ValidationError

from . import errors, validation
from .backoff import BackoffPolicy
from .config import ClientConfig, PipelineConfig
from .exchange import OutgoingRequest
from .models import (
    AddNoteRequest,
    AddNoteResponse,
    ApiError,
    AppConfigResponse,
    BookNowRequest,
    BookNowResponse,
    CreateLeadRequest,
    CreateLeadResponse,
    ErrorEnvelope,
    HealthCheckResponse,
    MediaListResponse,
    PackageDetailResponse,
    PackageListResponse,
    SendEmailRequest,
    SendEmailResponse,
    SendSmsRequest,
    SendSmsResponse,
    SendWhatsAppRequest,
    SendWhatsAppResponse,
    UpdateLeadRequest,
    UpdateLeadResponse,
    VoiceConversationRequest,
    VoiceConversationResponse,
    VoiceGenerateSpeechRequest,
    VoiceGenerateSpeechResponse,
    VoiceTranscribeRequest,
    VoiceTranscribeResponse,
)
from .pipeline import RequestPipeline
from .ratelimit import RateLimitTracker
from .results import Error, NetworkResult, Success
from .transport import Sleeper

logger = logging.getLogger("sanbot.client")

M = TypeVar("M", bound=BaseModel)
LoadingCallback = Callable[[], None]


class SanbotClient:
    def __init__(
        self,
        pipeline_config: Optional[PipelineConfig] = None,
        config: Optional[ClientConfig] = None,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        rate_limits: Optional[RateLimitTracker] = None,
        policy: Optional[BackoffPolicy] = None,
        sleep: Optional[Sleeper] = None,
    ) -> None:
        self._pipeline_config = pipeline_config or PipelineConfig()
        self._config = config or ClientConfig()
        headers = {"User-Agent": self._config.user_agent}
        headers.update(self._config.headers)
        self._client = httpx.AsyncClient(
            base_url=self._pipeline_config.default_base_url,
            timeout=self._config.timeout(),
            headers=headers,
            transport=transport,
        )
        self._pipeline = RequestPipeline(
            self._pipeline_config,
            self._client,
            policy=policy
            or BackoffPolicy(
                max_retries=self._config.max_retries,
                initial_delay_ms=self._config.initial_delay_ms,
            ),
            rate_limits=rate_limits,
            sleep=sleep,
        )

    async def __aenter__(self) -> "SanbotClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    @property
    def pipeline(self) -> RequestPipeline:
        return self._pipeline

    @property
    def rate_limits(self) -> RateLimitTracker:
        return self._pipeline.rate_limits

    def normalize_phone(self, phone: str) -> str:
        return validation.format_phone_number(phone, self._config.country_code)

    # Voice

    async def transcribe_voice(
        self, request: VoiceTranscribeRequest, *, on_loading: Optional[LoadingCallback] = None
    ) -> NetworkResult[VoiceTranscribeResponse]:
        return await self._call("POST", "voice.transcribe", VoiceTranscribeResponse, body=request, on_loading=on_loading)

    async def generate_speech(
        self, request: VoiceGenerateSpeechRequest, *, on_loading: Optional[LoadingCallback] = None
    ) -> NetworkResult[VoiceGenerateSpeechResponse]:
        return await self._call(
            "POST", "voice.generateSpeech", VoiceGenerateSpeechResponse, body=request, on_loading=on_loading
        )

    async def voice_conversation(
        self, request: VoiceConversationRequest, *, on_loading: Optional[LoadingCallback] = None
    ) -> NetworkResult[VoiceConversationResponse]:
        return await self._call(
            "POST", "voice.conversation", VoiceConversationResponse, body=request, on_loading=on_loading
        )

    # Packages

    async def get_packages(
        self,
        category: Optional[str] = None,
        min_price: Optional[int] = None,
        max_price: Optional[int] = None,
        limit: Optional[int] = 20,
        *,
        on_loading: Optional[LoadingCallback] = None,
    ) -> NetworkResult[PackageListResponse]:
        params = _query(category=category, min_price=min_price, max_price=max_price, limit=limit)
        return await self._call("GET", "packages", PackageListResponse, params=params, on_loading=on_loading)

    async def get_package_detail(
        self, package_id: str, *, on_loading: Optional[LoadingCallback] = None
    ) -> NetworkResult[PackageDetailResponse]:
        if not package_id.strip():
            return _invalid("Package id is required")
        return await self._call(
            "GET", f"packages/{_segment(package_id)}", PackageDetailResponse, on_loading=on_loading
        )

    # CRM

    async def create_lead(
        self, request: CreateLeadRequest, *, on_loading: Optional[LoadingCallback] = None
    ) -> NetworkResult[CreateLeadResponse]:
        request = request.model_copy(update={"phone": self.normalize_phone(request.phone)})
        if not validation.is_valid_name(request.name):
            return _invalid("Name must be between 2 and 100 characters")
        if not validation.is_valid_phone(request.phone):
            return _invalid("Invalid phone number format. Use international format (e.g., +971501234567)")
        if request.email and not validation.is_valid_email(request.email):
            return _invalid("Invalid email format")
        if not validation.is_valid_date(request.travel_date):
            return _invalid("Travel date must use the YYYY-MM-DD format")
        return await self._call("POST", "crm/leads", CreateLeadResponse, body=request, on_loading=on_loading)

    async def update_lead(
        self, lead_id: str, request: UpdateLeadRequest, *, on_loading: Optional[LoadingCallback] = None
    ) -> NetworkResult[UpdateLeadResponse]:
        if not lead_id.strip():
            return _invalid("Lead id is required")
        return await self._call(
            "PUT", f"crm/leads/{_segment(lead_id)}", UpdateLeadResponse, body=request, on_loading=on_loading
        )

    async def add_note_to_lead(
        self, lead_id: str, request: AddNoteRequest, *, on_loading: Optional[LoadingCallback] = None
    ) -> NetworkResult[AddNoteResponse]:
        if not lead_id.strip():
            return _invalid("Lead id is required")
        return await self._call(
            "POST", f"crm/leads/{_segment(lead_id)}/notes", AddNoteResponse, body=request, on_loading=on_loading
        )

    # Actions

    async def send_sms(
        self, request: SendSmsRequest, *, on_loading: Optional[LoadingCallback] = None
    ) -> NetworkResult[SendSmsResponse]:
        request = request.model_copy(update={"phone": self.normalize_phone(request.phone)})
        if not validation.is_valid_phone(request.phone):
            return _invalid("Invalid phone number format")
        return await self._call("POST", "actions/send-sms", SendSmsResponse, body=request, on_loading=on_loading)

    async def send_whatsapp(
        self, request: SendWhatsAppRequest, *, on_loading: Optional[LoadingCallback] = None
    ) -> NetworkResult[SendWhatsAppResponse]:
        request = request.model_copy(update={"phone": self.normalize_phone(request.phone)})
        if not validation.is_valid_phone(request.phone):
            return _invalid("Invalid phone number format")
        return await self._call(
            "POST", "actions/send-whatsapp", SendWhatsAppResponse, body=request, on_loading=on_loading
        )

    async def send_email(
        self, request: SendEmailRequest, *, on_loading: Optional[LoadingCallback] = None
    ) -> NetworkResult[SendEmailResponse]:
        if not request.email.strip() or not validation.is_valid_email(request.email):
            return _invalid("Invalid email format")
        if not request.package_ids:
            return _invalid("At least one package is required")
        return await self._call("POST", "actions/send-email", SendEmailResponse, body=request, on_loading=on_loading)

    async def book_now(
        self, request: BookNowRequest, *, on_loading: Optional[LoadingCallback] = None
    ) -> NetworkResult[BookNowResponse]:
        if not validation.is_valid_date(request.travel_date) or not request.travel_date.strip():
            return _invalid("Travel date must use the YYYY-MM-DD format")
        return await self._call("POST", "actions/book-now", BookNowResponse, body=request, on_loading=on_loading)

    # Media, config, health

    async def get_media(
        self,
        type: Optional[str] = None,
        category: Optional[str] = None,
        *,
        on_loading: Optional[LoadingCallback] = None,
    ) -> NetworkResult[MediaListResponse]:
        params = _query(type=type, category=category)
        return await self._call("GET", "media", MediaListResponse, params=params, on_loading=on_loading)

    async def get_config(self, *, on_loading: Optional[LoadingCallback] = None) -> NetworkResult[AppConfigResponse]:
        return await self._call("GET", "config", AppConfigResponse, on_loading=on_loading)

    async def health_check(
        self, *, on_loading: Optional[LoadingCallback] = None
    ) -> NetworkResult[HealthCheckResponse]:
        return await self._call("GET", "health", HealthCheckResponse, on_loading=on_loading)

    async def _call(
        self,
        method: str,
        path: str,
        model: Type[M],
        *,
        body: Optional[BaseModel] = None,
        params: Sequence[Tuple[str, str]] = (),
        on_loading: Optional[LoadingCallback] = None,
    ) -> NetworkResult[M]:
        request = OutgoingRequest(
            method=method,
            path=path,
            params=tuple(params),
            body=body.model_dump(exclude_none=True) if body is not None else None,
        )
        try:
            if on_loading is not None:
                on_loading()
            response = await self._pipeline.send(request)
        except httpx.TransportError as exc:
            logger.warning("%s %s failed after retries: %s", method, path, exc)
            return Error(f"Network error: {exc}", kind=errors.NETWORK_ERROR)
        except Exception as exc:
            logger.exception("Unexpected failure calling %s %s", method, path)
            return Error(str(exc) or "Unknown error occurred")
        return self._normalize(response, model)

    def _normalize(self, response: httpx.Response, model: Type[M]) -> NetworkResult[M]:
        if response.is_success:
            if not response.content:
                return Error("Empty response body")
            try:
                return Success(model.model_validate(response.json()))
            except (json.JSONDecodeError, ValidationError) as exc:
                logger.error("Malformed %s body from %s: %s", model.__name__, response.request.url, exc)
                return Error(f"Malformed response body: {exc}")

        api_error = _parse_error(response)
        if api_error is not None:
            message = errors.describe_error(api_error)
        else:
            message = f"HTTP {response.status_code}: {response.reason_phrase}"
        logger.info("Request to %s failed status=%s message=%s", response.request.url, response.status_code, message)
        return Error(message, api_error, kind=errors.HTTP_ERROR)

    async def aclose(self) -> None:
        await self._pipeline.aclose()


def _parse_error(response: httpx.Response) -> Optional[ApiError]:
    if not response.content:
        return None
    try:
        return ErrorEnvelope.model_validate(response.json()).error
    except (json.JSONDecodeError, ValidationError):
        return None


def _invalid(message: str) -> Error:
    return Error(message, kind=errors.VALIDATION_ERROR)


def _query(**values: Any) -> Tuple[Tuple[str, str], ...]:
    return tuple((key, str(value)) for key, value in values.items() if value is not None)


def _segment(value: str) -> str:
    return quote(value, safe="")


__all__ = ["SanbotClient"]
