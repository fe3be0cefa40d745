"""src.models.geocoding_models
Geocoding API 요청/응답 스키마
"""
from pydantic import BaseModel, Field


class GeocodingRequest(BaseModel):
    """Geocoding 요청"""
    address: str = Field(..., description="변환할 주소", min_length=1)


class GeocodingResponse(BaseModel):
    """Geocoding 응답"""
    address: str = Field(..., description="입력된 주소")
    matchedQuery: str = Field(..., description="실제로 매칭된 주소 후보")
    latitude: float = Field(..., description="위도")
    longitude: float = Field(..., description="경도")
    displayName: str | None = Field(default=None, description="Nominatim 표시 이름")
    provider: str = Field(..., description="사용된 제공자")
