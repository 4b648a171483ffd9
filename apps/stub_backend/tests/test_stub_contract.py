from __future__ import annotations

import httpx
import pytest

from apps.stub_backend.app.main import RATE_LIMIT, app, reset_rate_window
from sanbot_sdk.backoff import BackoffPolicy
from sanbot_sdk.client import SanbotClient
from sanbot_sdk.config import PipelineConfig
from sanbot_sdk.models import CreateLeadRequest, SendWhatsAppRequest, VoiceConversationRequest
from sanbot_sdk.results import Error, Success

BASE_URL = "http://testserver/api/"


async def no_sleep(seconds: float) -> None:
    return None


@pytest.fixture()
async def client():
    reset_rate_window()
    sdk = SanbotClient(
        PipelineConfig(base_url=BASE_URL, api_key="stub-key", default_base_url=BASE_URL),
        transport=httpx.ASGITransport(app=app),
        policy=BackoffPolicy(max_retries=2, initial_delay_ms=1),
        sleep=no_sleep,
    )
    yield sdk
    await sdk.aclose()


@pytest.mark.asyncio
async def test_health_and_config(client: SanbotClient) -> None:
    health = await client.health_check()
    config = await client.get_config()

    assert isinstance(health, Success) and health.data.status == "healthy"
    assert isinstance(config, Success)
    assert config.data.config.features.whatsapp_enabled
    assert "ar" in config.data.config.supported_languages


@pytest.mark.asyncio
async def test_packages_filter_and_detail(client: SanbotClient) -> None:
    listing = await client.get_packages(category="adventure")
    detail = await client.get_package_detail("PKG001")
    missing = await client.get_package_detail("PKG999")

    assert isinstance(listing, Success)
    assert [p.id for p in listing.data.packages] == ["PKG001"]
    assert isinstance(detail, Success) and detail.data.package.itinerary[0].activity == "Pickup"
    assert isinstance(missing, Error)
    assert missing.code == "PACKAGE_NOT_FOUND"


@pytest.mark.asyncio
async def test_lead_flow(client: SanbotClient) -> None:
    created = await client.create_lead(
        CreateLeadRequest(name="Aisha Khan", phone="0501234567", location="Dubai Mall", interested_packages=["PKG001"])
    )
    assert isinstance(created, Success)
    assert created.data.lead_id.startswith("LEAD-")

    sent = await client.send_whatsapp(
        SendWhatsAppRequest(phone="+971501234567", package_id="PKG001", lead_id=created.data.lead_id)
    )
    assert isinstance(sent, Success) and sent.data.status == "queued"


@pytest.mark.asyncio
async def test_voice_conversation(client: SanbotClient) -> None:
    result = await client.voice_conversation(VoiceConversationRequest(audio="UklGRg==", session_id="kiosk-1"))
    assert isinstance(result, Success)
    assert result.data.session_id == "kiosk-1"
    assert result.data.response.text


@pytest.mark.asyncio
async def test_rate_limit_headers_are_tracked(client: SanbotClient) -> None:
    await client.get_media(type="video")
    state = client.rate_limits.state
    assert state.limit == RATE_LIMIT
    assert state.remaining == RATE_LIMIT - 1


@pytest.mark.asyncio
async def test_missing_token_is_rejected() -> None:
    reset_rate_window()
    async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://testserver") as raw:
        response = await raw.get("/api/packages")
    assert response.status_code == 401
    assert response.json()["error"]["code"] == "INVALID_API_KEY"
