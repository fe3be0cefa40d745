"""src.services.place_repository
places 테이블 접근 계층 (Supabase PostgREST)
"""
import logging
from typing import Any, Protocol

import httpx
from postgrest.exceptions import APIError
from supabase import AsyncClient

from src.core.exceptions import PersistenceError

logger = logging.getLogger(__name__)


class PlaceRepository(Protocol):
    """places 테이블 인터페이스"""

    async def select_one(self, place_id: str) -> dict[str, Any] | None:
        ...

    async def delete(self, place_id: str) -> None:
        ...

    async def insert_many(self, records: list[dict[str, Any]]) -> list[dict[str, Any]]:
        ...

    async def upsert(self, record: dict[str, Any]) -> None:
        ...


def _error_detail(error: Exception) -> str:
    if isinstance(error, APIError):
        return error.message or str(error)
    return str(error)


class SupabasePlaceRepository:
    """Supabase 비동기 클라이언트 기반 PlaceRepository 구현"""

    def __init__(self, client: AsyncClient, table: str = "places"):
        self.client = client
        self.table = table

    async def select_one(self, place_id: str) -> dict[str, Any] | None:
        try:
            response = await (
                self.client.table(self.table)
                .select("*")
                .eq("id", place_id)
                .limit(1)
                .execute()
            )
        except (APIError, httpx.HTTPError) as error:
            raise PersistenceError(f"Database select error: {_error_detail(error)}") from error
        return response.data[0] if response.data else None

    async def delete(self, place_id: str) -> None:
        # 존재하지 않는 id 삭제는 0건 삭제로 끝나므로 재호출해도 안전
        try:
            await self.client.table(self.table).delete().eq("id", place_id).execute()
        except (APIError, httpx.HTTPError) as error:
            raise PersistenceError(f"Database delete error: {_error_detail(error)}") from error

    async def insert_many(self, records: list[dict[str, Any]]) -> list[dict[str, Any]]:
        try:
            response = await self.client.table(self.table).insert(records).execute()
        except (APIError, httpx.HTTPError) as error:
            raise PersistenceError(f"Database insert error: {_error_detail(error)}") from error
        return list(response.data or [])

    async def upsert(self, record: dict[str, Any]) -> None:
        # id가 이미 삭제된 경우에도 행을 다시 만들어 상태를 남긴다
        try:
            await self.client.table(self.table).upsert(record, on_conflict="id").execute()
        except (APIError, httpx.HTTPError) as error:
            raise PersistenceError(f"Database upsert error: {_error_detail(error)}") from error
