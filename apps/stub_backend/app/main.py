"""FastAPI stub of the kiosk backend for local development and contract tests."""

from __future__ import annotations

import logging
import time
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from uuid import uuid4

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse
from prometheus_client import Counter, generate_latest

logger = logging.getLogger("stub_backend")
logging.basicConfig(level=logging.INFO)

app = FastAPI(title="Sanbot Stub Backend", version="0.1.0")

RATE_LIMIT = 100
WINDOW_SECONDS = 60
STUB_REQUESTS = Counter("stub_backend_requests_total", "Requests served by the stub backend", ["path"])

PACKAGES: Dict[str, Dict[str, Any]] = {
    "PKG001": {
        "id": "PKG001",
        "name": "Desert Safari Adventure",
        "category": "adventure",
        "price": 250,
        "currency": "AED",
        "duration": "6 hours",
        "image_url": "https://cdn.example.com/pkg001.jpg",
        "thumbnail_url": "https://cdn.example.com/pkg001_thumb.jpg",
        "highlights": ["Dune bashing", "BBQ dinner"],
        "description": "Evening desert safari with dinner.",
        "rating": 4.8,
        "reviews_count": 1250,
        "available": True,
    },
    "PKG002": {
        "id": "PKG002",
        "name": "Dubai City Tour",
        "category": "city",
        "price": 180,
        "currency": "AED",
        "duration": "4 hours",
        "image_url": None,
        "thumbnail_url": None,
        "highlights": ["Burj Khalifa", "Dubai Mall"],
        "description": "Half-day guided tour of the city.",
        "rating": 4.5,
        "reviews_count": 640,
        "available": True,
    },
}

_window = {"started": time.time(), "used": 0}


def _error(status: int, code: str, message: str, field: Optional[str] = None) -> JSONResponse:
    error: Dict[str, Any] = {"code": code, "message": message}
    if field:
        error["field"] = field
    return JSONResponse(status_code=status, content={"success": False, "error": error})


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@app.middleware("http")
async def check_auth_and_rate_limit(request: Request, call_next):
    STUB_REQUESTS.labels(path=request.url.path).inc()
    now = time.time()
    if now - _window["started"] >= WINDOW_SECONDS:
        _window["started"] = now
        _window["used"] = 0
    _window["used"] += 1
    remaining = max(RATE_LIMIT - _window["used"], 0)
    reset_at = int(_window["started"] + WINDOW_SECONDS)

    exempt = request.url.path.endswith(("/health", "/metrics"))
    auth = request.headers.get("Authorization", "")
    if not exempt and (not auth.startswith("Bearer ") or auth == "Bearer "):
        response = _error(401, "INVALID_API_KEY", "Missing or invalid API key")
    elif remaining <= 0:
        response = _error(429, "RATE_LIMIT_EXCEEDED", "Too many requests")
    else:
        response = await call_next(request)

    response.headers["X-RateLimit-Limit"] = str(RATE_LIMIT)
    response.headers["X-RateLimit-Remaining"] = str(remaining)
    response.headers["X-RateLimit-Reset"] = str(reset_at)
    return response


@app.get("/api/health")
def health() -> Dict[str, str]:
    return {"status": "healthy", "timestamp": _now(), "version": app.version}


@app.get("/metrics")
def metrics() -> PlainTextResponse:
    return PlainTextResponse(generate_latest(), media_type="text/plain; version=0.0.4")


@app.get("/api/config")
def config() -> Dict[str, Any]:
    return {
        "success": True,
        "config": {
            "app_version": "1.0.0",
            "min_supported_version": "1.0.0",
            "welcome_message": "Welcome to Trip and Event!",
            "idle_timeout_seconds": 60,
            "default_language": "en",
            "supported_languages": ["en", "ar"],
            "features": {
                "voice_enabled": True,
                "video_enabled": True,
                "whatsapp_enabled": True,
                "sms_enabled": True,
                "email_enabled": True,
            },
        },
    }


@app.get("/api/packages")
def list_packages(
    category: Optional[str] = None,
    min_price: Optional[int] = None,
    max_price: Optional[int] = None,
    limit: int = 20,
) -> Dict[str, Any]:
    packages = [
        p
        for p in PACKAGES.values()
        if (category is None or p["category"] == category)
        and (min_price is None or p["price"] >= min_price)
        and (max_price is None or p["price"] <= max_price)
    ][: max(limit, 0)]
    return {"success": True, "total_count": len(packages), "packages": packages}


@app.get("/api/packages/{package_id}")
def package_detail(package_id: str):
    package = PACKAGES.get(package_id)
    if package is None:
        return _error(404, "PACKAGE_NOT_FOUND", f"Package {package_id} does not exist")
    detail = {key: value for key, value in package.items() if key not in ("image_url", "thumbnail_url")}
    detail.update(
        {
            "images": [package["image_url"]] if package["image_url"] else [],
            "video_url": None,
            "itinerary": [{"time": "15:00", "activity": "Pickup"}],
            "inclusions": ["Transport"],
            "exclusions": ["Tips"],
        }
    )
    return {"success": True, "package": detail}


@app.post("/api/crm/leads", status_code=201)
async def create_lead(request: Request):
    payload = await request.json()
    for field in ("name", "phone", "location"):
        if not payload.get(field):
            return _error(400, "MISSING_FIELD", f"{field} is required", field=field)
    lead_id = f"LEAD-{uuid4().hex[:8].upper()}"
    logger.info("Lead created %s for %s", lead_id, payload.get("location"))
    return {"success": True, "lead_id": lead_id, "message": "Lead created", "created_at": _now()}


@app.put("/api/crm/leads/{lead_id}")
async def update_lead(lead_id: str, request: Request):
    await request.json()
    return {"success": True, "lead_id": lead_id, "message": "Lead updated", "updated_at": _now()}


@app.post("/api/crm/leads/{lead_id}/notes", status_code=201)
async def add_note(lead_id: str, request: Request):
    payload = await request.json()
    if not payload.get("note"):
        return _error(400, "MISSING_FIELD", "note is required", field="note")
    return {"success": True, "note_id": f"NOTE-{uuid4().hex[:8]}", "message": f"Note added to {lead_id}"}


@app.post("/api/actions/{action}")
async def dispatch_action(action: str, request: Request):
    payload = await request.json()
    if action in ("send-sms", "send-whatsapp"):
        return {"success": True, "message_id": f"MSG-{uuid4().hex[:8]}", "status": "queued", "message": "Sent"}
    if action == "send-email":
        return {"success": True, "email_id": f"EM-{uuid4().hex[:8]}", "status": "queued", "message": "Sent"}
    if action == "book-now":
        if payload.get("package_id") not in PACKAGES:
            return _error(404, "PACKAGE_NOT_FOUND", "Unknown package")
        return {"success": True, "booking_id": f"BK-{uuid4().hex[:8]}", "status": "pending", "message": "Booked"}
    return _error(404, "INVALID_REQUEST", f"Unknown action {action}")


@app.post("/api/voice.transcribe")
async def voice_transcribe(request: Request):
    payload = await request.json()
    if len(payload.get("audio", "")) > 5 * 1024 * 1024:
        return _error(413, "AUDIO_TOO_LARGE", "Audio exceeds 5MB")
    return {
        "success": True,
        "text": "I would like to book a desert safari",
        "confidence": 0.94,
        "language": payload.get("language", "en"),
        "duration_seconds": 2.5,
    }


@app.post("/api/voice.generateSpeech")
async def voice_generate_speech(request: Request):
    payload = await request.json()
    return {
        "success": True,
        "audio_url": f"https://cdn.example.com/tts/{uuid4().hex}.mp3",
        "duration_seconds": round(len(payload.get("text", "")) / 15, 2),
        "format": "mp3",
    }


@app.post("/api/voice.conversation")
async def voice_conversation(request: Request):
    payload = await request.json()
    return {
        "success": True,
        "session_id": payload.get("session_id"),
        "transcript": "Show me adventure packages",
        "response": {
            "text": "Here are our adventure packages.",
            "audio_url": "https://cdn.example.com/tts/reply.mp3",
            "duration_seconds": 2.0,
        },
        "intent": "browse_packages",
        "confidence": 0.9,
    }


@app.get("/api/media")
def media(type: Optional[str] = None, category: Optional[str] = None) -> Dict[str, Any]:
    items = [
        {
            "id": "MED001",
            "type": "video",
            "title": "Desert Safari Highlights",
            "url": "https://cdn.example.com/safari.mp4",
            "thumbnail": "https://cdn.example.com/safari.jpg",
            "duration_seconds": 90,
            "category": "adventure",
        },
        {
            "id": "MED002",
            "type": "image",
            "title": "Burj Khalifa",
            "url": "https://cdn.example.com/burj.jpg",
            "category": "city",
        },
    ]
    items = [
        item
        for item in items
        if (type is None or item["type"] == type) and (category is None or item["category"] == category)
    ]
    return {"success": True, "media": items}


def reset_rate_window() -> None:
    _window["started"] = time.time()
    _window["used"] = 0


if __name__ == "__main__":
    uvicorn.run("app.main:app", host="0.0.0.0", port=8000)
