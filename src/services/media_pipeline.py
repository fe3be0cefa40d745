"""src.services.media_pipeline
미디어 → 장소 처리 파이프라인

업로드 placeholder 1건을 받아 다음 순서로 처리합니다:
1. 스토리지에서 미디어 다운로드
2. Gemini 장소 추출
3. 장소별 Geocoding (Nominatim 우선, Gemini 좌표는 fallback)
4. placeholder 삭제 후 장소 레코드 저장
실패 시 placeholder를 failed 상태로 1회 갱신합니다.
"""

import logging
from typing import Literal, Protocol

from src.core.exceptions import CustomError
from src.models.place import (
    ExtractedPlace,
    PlaceStatus,
    ResolvedPlace,
    SourcePlaceholder,
    utc_now_iso,
)
from src.models.webhook import PipelineResult
from src.services.geocoding_service import GeocodingResolver
from src.services.media_fetcher import MediaFetcher
from src.services.place_repository import PlaceRepository
from src.services.place_writer import PlaceRecordWriter

logger = logging.getLogger(__name__)


class PlaceExtractor(Protocol):
    """미디어 → 장소 리스트 추출기 인터페이스"""

    async def extract(
        self,
        data: bytes,
        mime_type: str,
        media_kind: Literal["image", "video"]
    ) -> list[ExtractedPlace]:
        ...


class PipelineController:
    """placeholder 1건에 대한 파이프라인 실행 및 상태 전이 담당"""

    def __init__(
        self,
        repository: PlaceRepository,
        fetcher: MediaFetcher,
        extractor: PlaceExtractor,
        resolver: GeocodingResolver,
        writer: PlaceRecordWriter | None = None
    ):
        self.repository = repository
        self.fetcher = fetcher
        self.extractor = extractor
        self.resolver = resolver
        self.writer = writer or PlaceRecordWriter(repository)

    async def run(self, record: SourcePlaceholder) -> PipelineResult:
        """
        파이프라인 실행

        Args:
            record: 웹훅으로 전달된 placeholder 레코드

        Returns:
            PipelineResult: 성공/건너뜀/실패 결과
        """
        logger.info(f"[Pipeline] 시작 - id={record.id}, path={record.video_path}")

        # Step 1: 처리 대상 여부 확인 (중복 트리거 방지)
        if record.status != PlaceStatus.PROCESSING:
            logger.info(f"[Pipeline] 건너뜀 - id={record.id}, status={record.status.value}")
            return PipelineResult.skipped_result(record.id, "Skipping - not in processing status")

        try:
            stored = await self.repository.select_one(record.id)
        except CustomError as error:
            logger.error(f"[Pipeline] 레코드 조회 실패 - id={record.id}: {error.message}")
            return PipelineResult.failed_result(record.id, error.message)

        if stored is None:
            logger.info(f"[Pipeline] 건너뜀 - id={record.id} 레코드가 이미 교체됨")
            return PipelineResult.skipped_result(record.id, "Skipping - record no longer exists")

        source = SourcePlaceholder.model_validate(stored)
        if source.status != PlaceStatus.PROCESSING:
            logger.info(f"[Pipeline] 건너뜀 - id={record.id}, 저장된 status={source.status.value}")
            return PipelineResult.skipped_result(record.id, "Skipping - not in processing status")

        try:
            result = await self._process(source)
        except Exception as error:
            logger.exception(f"[Pipeline] 실패 - id={record.id}")
            error_message = str(error) or "Unknown error"
            await self._mark_failed(source, error_message)
            return PipelineResult.failed_result(source.id, error_message)

        logger.info(
            f"[Pipeline] 완료 - id={source.id}, 생성={result.placesCreated}, "
            f"좌표 보유={result.placesWithCoordinates}"
        )
        return result

    async def _process(self, source: SourcePlaceholder) -> PipelineResult:
        # Step 2: 미디어 다운로드
        logger.info("[Pipeline] Step 2/5: 미디어 다운로드")
        media = await self.fetcher.fetch(source.video_path)

        # Step 3: AI 장소 추출
        logger.info(f"[Pipeline] Step 3/5: 장소 추출 ({media.media_kind})")
        extracted = await self.extractor.extract(media.data, media.mime_type, media.media_kind)
        logger.info(f"[Pipeline] Step 3/5: {len(extracted)}개 장소 추출")

        # Step 4: 장소별 좌표 결정 (순차 실행, Geocoding 호출 간격 유지)
        logger.info("[Pipeline] Step 4/5: Geocoding")
        resolved_places: list[ResolvedPlace] = []
        for index, place in enumerate(extracted, 1):
            logger.info(f"[Pipeline] Step 4/5: ({index}/{len(extracted)}) {place.place_name}")
            latitude, longitude = await self._resolve_coordinates(place)
            resolved_places.append(ResolvedPlace.from_extraction(source, place, latitude, longitude))

        # Step 5: 저장
        logger.info(f"[Pipeline] Step 5/5: 장소 {len(resolved_places)}건 저장")
        summary = await self.writer.commit(source, resolved_places)

        return PipelineResult(
            success=True,
            originalPlaceId=source.id,
            placesCreated=summary.places_created,
            placesWithCoordinates=summary.places_with_coordinates,
            places=summary.places
        )

    async def _resolve_coordinates(self, place: ExtractedPlace) -> tuple[float | None, float | None]:
        """Nominatim 결과 우선, 없으면 Gemini 추정 좌표, 둘 다 없으면 (None, None)"""
        result = await self.resolver.resolve(place.address_search_query)
        if result:
            return result.latitude, result.longitude

        if place.has_coordinate_hint:
            logger.warning(
                f"Gemini 추정 좌표 사용: {place.place_name} ({place.latitude}, {place.longitude})"
            )
            return place.latitude, place.longitude

        logger.warning(f"좌표 없음: {place.place_name}")
        return None, None

    async def _mark_failed(self, source: SourcePlaceholder, error_message: str) -> None:
        """
        placeholder를 failed로 기록 (1회, 실패해도 재시도하지 않음)

        placeholder 삭제 후 삽입이 실패한 경우 행이 이미 없으므로
        전체 placeholder 행을 upsert하여 failed 레코드를 복원합니다.
        """
        failed_row = source.model_dump(mode="json", exclude_none=True)
        failed_row.update({
            "status": PlaceStatus.FAILED.value,
            "error_message": error_message,
            "updated_at": utc_now_iso(),
        })
        try:
            await self.repository.upsert(failed_row)
        except Exception as update_error:
            logger.error(f"[Pipeline] failed 상태 기록 실패 - id={source.id}: {update_error}")
