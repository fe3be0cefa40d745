"""src.apis.geocoding_router
Geocoding API 라우터 - 주소 → 위도/경도 변환
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, Request

from src.models.geocoding_models import GeocodingRequest, GeocodingResponse
from src.services.geocoding_service import GeocodingResolver
from src.utils.common import verify_api_key

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["Geocoding API"])


def get_resolver(request: Request) -> GeocodingResolver:
    return request.app.state.pipeline.resolver


@router.post("/geocode", response_model=GeocodingResponse, status_code=200)
async def geocode(
    request: GeocodingRequest,
    api_key: str = Depends(verify_api_key),
    resolver: GeocodingResolver = Depends(get_resolver)
):
    """
    주소를 위도/경도로 변환 (Nominatim, 주소 단순화 fallback 포함)

    - 인증: X-API-Key 헤더 필요
    - POST /api/geocode
    - Body: {"address": "Village Coffee, Castle Hill Village, Canterbury, New Zealand"}
    - 성공: 200 + GeocodingResponse
    - 실패: 404 (주소 못 찾음), 401 (인증 실패)
    """
    logger.info(f"Geocoding 요청: address='{request.address}'")

    result = await resolver.resolve(request.address)
    if result is None:
        raise HTTPException(status_code=404, detail=f"Address not found: {request.address}")

    return GeocodingResponse(
        address=request.address,
        matchedQuery=result.matched_query,
        latitude=result.latitude,
        longitude=result.longitude,
        displayName=result.display_name,
        provider=result.provider
    )
