"""src.services.place_writer
placeholder 레코드를 최종 장소 레코드들로 교체합니다.
"""
import logging
from dataclasses import dataclass, field
from typing import Any

from src.core.exceptions import CustomError, PersistenceError
from src.models.place import ResolvedPlace, SourcePlaceholder
from src.services.place_repository import PlaceRepository

logger = logging.getLogger(__name__)


@dataclass
class CommitSummary:
    """저장 결과 요약"""
    places_created: int
    places_with_coordinates: int
    places: list[dict[str, Any]] = field(default_factory=list)


class PlaceRecordWriter:
    """placeholder 삭제 → 장소 N건 삽입"""

    def __init__(self, repository: PlaceRepository):
        self.repository = repository

    async def commit(self, source: SourcePlaceholder, places: list[ResolvedPlace]) -> CommitSummary:
        """
        placeholder를 삭제하고 장소 레코드를 삽입합니다.

        PostgREST는 여러 요청을 하나의 트랜잭션으로 묶을 수 없어
        삭제 후 삽입 완료 전까지 레코드가 보이지 않는 구간이 존재합니다.

        Raises:
            PersistenceError: 삭제 또는 삽입 실패 시
        """
        try:
            await self.repository.delete(source.id)
            logger.info(f"placeholder 삭제 완료: id={source.id}")

            inserted = await self.repository.insert_many([place.to_record() for place in places])
        except PersistenceError:
            raise
        except CustomError as error:
            raise PersistenceError(error.message) from error

        with_coordinates = sum(
            1 for row in inserted
            if row.get("latitude") is not None and row.get("longitude") is not None
        )
        logger.info(f"장소 {len(inserted)}건 저장 완료, 좌표 보유 {with_coordinates}건")

        return CommitSummary(
            places_created=len(inserted),
            places_with_coordinates=with_coordinates,
            places=inserted
        )
