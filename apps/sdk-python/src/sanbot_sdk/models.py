"""Pydantic models for the kiosk backend wire contract."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class ApiError(BaseModel):
    code: str
    message: str
    field: Optional[str] = None
    details: Optional[Dict[str, Any]] = None


class ErrorEnvelope(BaseModel):
    success: bool = False
    error: Optional[ApiError] = None


class ApiResponse(BaseModel):
    success: bool = True
    error: Optional[ApiError] = None


# Voice


class VoiceTranscribeRequest(BaseModel):
    audio: str = Field(..., min_length=1)
    format: str = "wav"
    language: str = "en"


class VoiceTranscribeResponse(ApiResponse):
    text: Optional[str] = None
    confidence: Optional[float] = None
    language: Optional[str] = None
    duration_seconds: Optional[float] = None


class VoiceGenerateSpeechRequest(BaseModel):
    text: str = Field(..., min_length=1)
    voice: str = "alloy"
    language: str = "en"


class VoiceGenerateSpeechResponse(ApiResponse):
    audio_url: Optional[str] = None
    duration_seconds: Optional[float] = None
    format: Optional[str] = None


class VoiceConversationRequest(BaseModel):
    audio: str = Field(..., min_length=1)
    format: str = "wav"
    session_id: str = Field(..., min_length=1)
    language: str = "en"
    voice: str = "alloy"


class VoiceResponse(BaseModel):
    text: str
    audio_url: str
    duration_seconds: float


class VoiceConversationResponse(ApiResponse):
    session_id: Optional[str] = None
    transcript: Optional[str] = None
    response: Optional[VoiceResponse] = None
    intent: Optional[str] = None
    confidence: Optional[float] = None


# Packages


class TourPackage(BaseModel):
    id: str
    name: str
    category: str
    price: int
    currency: str
    duration: str
    image_url: Optional[str] = None
    thumbnail_url: Optional[str] = None
    highlights: List[str] = Field(default_factory=list)
    description: str = ""
    rating: float = 0.0
    reviews_count: int = 0
    available: bool = True


class ItineraryItem(BaseModel):
    time: str
    activity: str


class TourPackageDetail(BaseModel):
    id: str
    name: str
    category: str
    price: int
    currency: str
    duration: str
    images: List[str] = Field(default_factory=list)
    video_url: Optional[str] = None
    highlights: List[str] = Field(default_factory=list)
    description: str = ""
    itinerary: List[ItineraryItem] = Field(default_factory=list)
    inclusions: List[str] = Field(default_factory=list)
    exclusions: List[str] = Field(default_factory=list)
    rating: float = 0.0
    reviews_count: int = 0
    available: bool = True


class PackageListResponse(ApiResponse):
    total_count: Optional[int] = None
    packages: Optional[List[TourPackage]] = None


class PackageDetailResponse(ApiResponse):
    package: Optional[TourPackageDetail] = None


# CRM


class CreateLeadRequest(BaseModel):
    name: str
    phone: str
    email: Optional[str] = None
    source: str = "Sanbot"
    location: str
    interested_packages: Optional[List[str]] = None
    notes: Optional[str] = None
    preferred_contact: Optional[str] = None
    destination: Optional[str] = None
    number_of_travelers: Optional[int] = None
    travel_date: Optional[str] = None


class CreateLeadResponse(ApiResponse):
    lead_id: Optional[str] = None
    message: Optional[str] = None
    created_at: Optional[str] = None


class UpdateLeadRequest(BaseModel):
    notes: Optional[str] = None
    status: Optional[str] = None
    interested_packages: Optional[List[str]] = None


class UpdateLeadResponse(ApiResponse):
    lead_id: Optional[str] = None
    message: Optional[str] = None
    updated_at: Optional[str] = None


class AddNoteRequest(BaseModel):
    note: str = Field(..., min_length=1)
    author: str = "Sanbot"


class AddNoteResponse(ApiResponse):
    note_id: Optional[str] = None
    message: Optional[str] = None


# Actions


class SendSmsRequest(BaseModel):
    phone: str
    package_id: str
    template: str = "package_details"
    lead_id: Optional[str] = None


class SendWhatsAppRequest(BaseModel):
    phone: str
    package_id: str
    template: str = "package_details"
    lead_id: Optional[str] = None


class MessageDispatchResponse(ApiResponse):
    message_id: Optional[str] = None
    status: Optional[str] = None
    message: Optional[str] = None


class SendSmsResponse(MessageDispatchResponse):
    pass


class SendWhatsAppResponse(MessageDispatchResponse):
    pass


class SendEmailRequest(BaseModel):
    email: str
    package_ids: List[str]
    template: str = "quote"
    lead_id: Optional[str] = None
    customer_name: str


class SendEmailResponse(ApiResponse):
    email_id: Optional[str] = None
    status: Optional[str] = None
    message: Optional[str] = None


class BookNowRequest(BaseModel):
    lead_id: str
    package_id: str
    travel_date: str
    number_of_people: int = Field(..., ge=1)
    special_requests: Optional[str] = None


class BookNowResponse(ApiResponse):
    booking_id: Optional[str] = None
    status: Optional[str] = None
    message: Optional[str] = None


# Media and config


class MediaItem(BaseModel):
    id: str
    type: str
    title: str
    url: str
    thumbnail: Optional[str] = None
    duration_seconds: Optional[int] = None
    category: str


class MediaListResponse(ApiResponse):
    media: Optional[List[MediaItem]] = None


class AppFeatures(BaseModel):
    voice_enabled: bool = True
    video_enabled: bool = True
    whatsapp_enabled: bool = True
    sms_enabled: bool = True
    email_enabled: bool = True


class AppConfig(BaseModel):
    app_version: str
    min_supported_version: str
    welcome_message: str
    idle_timeout_seconds: int
    default_language: str
    supported_languages: List[str] = Field(default_factory=list)
    features: AppFeatures = Field(default_factory=AppFeatures)


class AppConfigResponse(ApiResponse):
    config: Optional[AppConfig] = None


class HealthCheckResponse(BaseModel):
    status: str
    timestamp: str
    version: str


__all__ = [
    "AddNoteRequest",
    "AddNoteResponse",
    "ApiError",
    "ApiResponse",
    "AppConfig",
    "AppConfigResponse",
    "AppFeatures",
    "BookNowRequest",
    "BookNowResponse",
    "CreateLeadRequest",
    "CreateLeadResponse",
    "ErrorEnvelope",
    "HealthCheckResponse",
    "ItineraryItem",
    "MediaItem",
    "MediaListResponse",
    "PackageDetailResponse",
    "PackageListResponse",
    "SendEmailRequest",
    "SendEmailResponse",
    "SendSmsRequest",
    "SendSmsResponse",
    "SendWhatsAppRequest",
    "SendWhatsAppResponse",
    "TourPackage",
    "TourPackageDetail",
    "UpdateLeadRequest",
    "UpdateLeadResponse",
    "VoiceConversationRequest",
    "VoiceConversationResponse",
    "VoiceGenerateSpeechRequest",
    "VoiceGenerateSpeechResponse",
    "VoiceResponse",
    "VoiceTranscribeRequest",
    "VoiceTranscribeResponse",
]
