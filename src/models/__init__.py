"""src.models
API 요청/응답 및 places 레코드에 사용되는 Pydantic 스키마 정의
"""
from src.models.place import (
    PlaceStatus,
    PlaceCategory,
    SourcePlaceholder,
    ExtractedPlace,
    ResolvedPlace,
)
from src.models.webhook import DatabaseWebhookPayload, PipelineResult
from src.models.geocoding_models import GeocodingRequest, GeocodingResponse

__all__ = [
    # 레코드 모델
    "PlaceStatus",
    "PlaceCategory",
    "SourcePlaceholder",
    "ExtractedPlace",
    "ResolvedPlace",
    # 웹훅 모델
    "DatabaseWebhookPayload",
    "PipelineResult",
    # Geocoding 모델
    "GeocodingRequest",
    "GeocodingResponse",
]
