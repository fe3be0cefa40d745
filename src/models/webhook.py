"""src.models.webhook
DB 웹훅 요청/응답 DTO
"""
from typing import Any, Optional

from pydantic import BaseModel, Field

from src.models.place import SourcePlaceholder


class DatabaseWebhookPayload(BaseModel):
    """
    places 테이블 INSERT 시 DB 웹훅이 전달하는 페이로드

    Snippet
    {
      "type": "INSERT",
      "table": "places",
      "schema": "public",
      "record": {"id": "...", "user_id": "demo-user", "video_path": "...", "status": "processing"},
      "old_record": null
    }
    """
    type: Optional[str] = Field(default="INSERT", description="이벤트 타입")
    table: Optional[str] = Field(default=None, description="테이블명")
    schema_name: Optional[str] = Field(default=None, alias="schema", description="스키마명")
    record: SourcePlaceholder = Field(..., description="트리거된 placeholder 레코드")
    old_record: Optional[dict[str, Any]] = Field(default=None, description="이전 레코드")

    model_config = {"populate_by_name": True}


class PipelineResult(BaseModel):
    """파이프라인 1회 실행 결과"""
    success: bool = Field(..., description="처리 성공 여부")
    skipped: bool = Field(default=False, description="처리 대상이 아니어서 건너뛰었는지 여부")
    message: Optional[str] = Field(default=None, description="건너뛴 사유")
    originalPlaceId: Optional[str] = Field(default=None, description="placeholder 레코드 ID")
    placesCreated: int = Field(default=0, description="생성된 장소 수")
    placesWithCoordinates: int = Field(default=0, description="좌표가 있는 장소 수")
    places: list[dict[str, Any]] = Field(default_factory=list, description="생성된 장소 레코드")
    error: Optional[str] = Field(default=None, description="실패 시 에러 메시지")

    @classmethod
    def skipped_result(cls, place_id: str, message: str) -> "PipelineResult":
        return cls(success=True, skipped=True, message=message, originalPlaceId=place_id)

    @classmethod
    def failed_result(cls, place_id: str, error: str) -> "PipelineResult":
        return cls(success=False, originalPlaceId=place_id, error=error)
