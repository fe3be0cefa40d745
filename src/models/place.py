"""src.models.place
places 테이블 레코드 및 AI 추출 결과 스키마
"""
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator


class PlaceStatus(str, Enum):
    """places.status 값"""
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


class PlaceCategory(str, Enum):
    """장소 카테고리"""
    FOOD = "Food"
    ACTIVITY = "Activity"
    STAY = "Stay"


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class SourcePlaceholder(BaseModel):
    """
    업로드 직후 생성되는 placeholder 레코드 (파이프라인 트리거 대상)

    Snippet
    {
      "id": "5b0c3f0e-2a54-4c1e-9d38-6a4c1c0f5f7e",
      "user_id": "demo-user",
      "video_url": "https://xyz.supabase.co/storage/v1/object/public/videos/demo-user/1700000000.mp4",
      "video_path": "demo-user/1700000000.mp4",
      "status": "processing"
    }
    """
    id: str = Field(..., description="레코드 UUID")
    user_id: str = Field(default="demo-user", description="업로더 ID")
    video_url: str = Field(default="", description="미디어 공개 URL")
    video_path: str = Field(default="", description="스토리지 내 미디어 경로")
    status: PlaceStatus = Field(default=PlaceStatus.PROCESSING, description="처리 상태")
    error_message: str | None = Field(default=None, description="실패 시 에러 메시지")
    created_at: str | None = Field(default=None, description="생성 시각")
    updated_at: str | None = Field(default=None, description="수정 시각")

    model_config = {"extra": "ignore"}

    @field_validator("id", mode="before")
    @classmethod
    def stringify_id(cls, value: Any) -> Any:
        return str(value) if value is not None else value


def _coerce_coordinate(value: Any, limit: float) -> float | None:
    """숫자/숫자 문자열을 float로 변환하고 범위를 벗어나면 None"""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if number != number or not -limit <= number <= limit:
        return None
    return number


class ExtractedPlace(BaseModel):
    """AI가 미디어에서 추출한 장소 (저장 전 임시 데이터)"""
    place_name: str = Field(..., min_length=1, description="장소명")
    address_search_query: str = Field(..., min_length=1, description="Geocoding용 상세 주소")
    category: PlaceCategory = Field(..., description="카테고리 (Food | Activity | Stay)")
    vibe_keywords: list[str] = Field(default_factory=list, description="분위기 키워드 (3~5개 권장)")
    latitude: float | None = Field(default=None, description="AI 추정 위도")
    longitude: float | None = Field(default=None, description="AI 추정 경도")

    @field_validator("place_name", "address_search_query", mode="before")
    @classmethod
    def strip_text(cls, value: Any) -> Any:
        return value.strip() if isinstance(value, str) else value

    @field_validator("vibe_keywords", mode="before")
    @classmethod
    def normalize_keywords(cls, value: Any) -> list[str]:
        if not isinstance(value, list):
            return []
        return [keyword.strip() for keyword in value if isinstance(keyword, str) and keyword.strip()]

    @field_validator("latitude", mode="before")
    @classmethod
    def validate_latitude(cls, value: Any) -> float | None:
        return _coerce_coordinate(value, 90.0)

    @field_validator("longitude", mode="before")
    @classmethod
    def validate_longitude(cls, value: Any) -> float | None:
        return _coerce_coordinate(value, 180.0)

    @property
    def has_coordinate_hint(self) -> bool:
        return self.latitude is not None and self.longitude is not None


class ResolvedPlace(BaseModel):
    """최종 저장되는 장소 레코드 (places 테이블 insert payload)"""
    user_id: str
    video_path: str
    video_url: str
    place_name: str
    address_search_query: str
    category: PlaceCategory
    vibe_keywords: list[str] = Field(default_factory=list)
    latitude: float | None = None
    longitude: float | None = None
    status: PlaceStatus = PlaceStatus.COMPLETED
    created_at: str = Field(default_factory=utc_now_iso)
    updated_at: str = Field(default_factory=utc_now_iso)

    @classmethod
    def from_extraction(
        cls,
        source: SourcePlaceholder,
        place: ExtractedPlace,
        latitude: float | None,
        longitude: float | None
    ) -> "ResolvedPlace":
        now = utc_now_iso()
        return cls(
            user_id=source.user_id,
            video_path=source.video_path,
            video_url=source.video_url,
            place_name=place.place_name,
            address_search_query=place.address_search_query,
            category=place.category,
            vibe_keywords=place.vibe_keywords,
            latitude=latitude,
            longitude=longitude,
            created_at=now,
            updated_at=now
        )

    def to_record(self) -> dict[str, Any]:
        return self.model_dump(mode="json")
