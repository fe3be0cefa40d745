"""src.services.geocoding_service
주소 → 위도/경도 변환 (Geocoding) 서비스

Nominatim 사용 정책상 1초에 1회 이하로만 호출해야 하므로,
모든 호출은 GeocodingThrottle을 거쳐 고정 간격을 두고 순차적으로 실행됩니다.
"""
import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable

from src.core.config import settings
from src.core.exceptions import CustomError
from src.services.address_fallback import generate_address_fallbacks
from src.utils.common import http_get_json

logger = logging.getLogger(__name__)


@dataclass
class GeocodingResult:
    """Geocoding 결과"""
    latitude: float
    longitude: float
    provider: str
    matched_query: str
    display_name: str | None = None


class GeocodingThrottle:
    """
    Geocoding 호출 간격 제한기

    `async with throttle:` 블록 진입 시 슬롯을 획득하고 고정 간격만큼 대기한 뒤
    호출을 허용합니다. 블록이 끝나야 다음 호출이 슬롯을 얻을 수 있으므로,
    같은 인스턴스를 공유하는 모든 파이프라인 실행이 하나의 호출 속도 상한을 따릅니다.
    """

    def __init__(
        self,
        interval_seconds: float,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep
    ):
        self.interval_seconds = interval_seconds
        self._sleep = sleep
        self._lock = asyncio.Lock()

    async def __aenter__(self) -> "GeocodingThrottle":
        await self._lock.acquire()
        try:
            await self._sleep(self.interval_seconds)
        except BaseException:
            self._lock.release()
            raise
        return self

    async def __aexit__(self, exc_type, exc, traceback) -> None:
        self._lock.release()


async def geocode_with_nominatim(query: str) -> GeocodingResult | None:
    """
    Nominatim (OpenStreetMap) API로 Geocoding 1회 호출

    Rate limit: 1 request/second (호출 간격은 GeocodingResolver가 보장)
    https://nominatim.org/release-docs/develop/api/Search/

    Args:
        query: 검색할 주소 문자열

    Returns:
        GeocodingResult | None: 첫 번째 결과, 결과가 없으면 None

    Raises:
        CustomError: API 오류 시
    """
    params = {"q": query, "format": "json", "limit": 1}
    headers = {"User-Agent": settings.NOMINATIM_USER_AGENT}

    data = await http_get_json(settings.NOMINATIM_URL, params=params, headers=headers)

    if not data or not isinstance(data, list):
        return None

    first = data[0]
    try:
        return GeocodingResult(
            latitude=float(first["lat"]),
            longitude=float(first["lon"]),
            provider="nominatim",
            matched_query=query,
            display_name=first.get("display_name")
        )
    except (KeyError, TypeError, ValueError) as error:
        logger.warning(f"Nominatim 결과 좌표 파싱 실패: query='{query}', error={error}")
        return None


class GeocodingResolver:
    """주소 후보 리스트를 순서대로 시도하는 Geocoding 리졸버"""

    def __init__(
        self,
        throttle: GeocodingThrottle,
        lookup: Callable[[str], Awaitable[GeocodingResult | None]] = geocode_with_nominatim
    ):
        self.throttle = throttle
        self.lookup = lookup

    async def resolve(self, address: str) -> GeocodingResult | None:
        """
        주소를 좌표로 변환합니다. 실패해도 예외를 발생시키지 않고 None 반환

        Args:
            address: 변환할 상세 주소

        Returns:
            GeocodingResult | None: 처음 매칭된 후보의 결과, 모두 실패 시 None
        """
        candidates = generate_address_fallbacks(address)

        for index, candidate in enumerate(candidates, 1):
            logger.info(f"[Geocoding] 시도 {index}/{len(candidates)}: '{candidate}'")

            try:
                async with self.throttle:
                    result = await self.lookup(candidate)
            except CustomError as error:
                logger.error(f"[Geocoding] 시도 {index} API 오류: {error.message}")
                continue

            if result:
                logger.info(
                    f"[Geocoding] 성공: '{candidate}' -> ({result.latitude}, {result.longitude}), "
                    f"display_name={result.display_name}"
                )
                return result

            logger.info(f"[Geocoding] 시도 {index} 결과 없음")

        logger.warning(f"[Geocoding] 실패: '{address}' ({len(candidates)}회 시도)")
        return None
