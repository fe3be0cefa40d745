"""src.apis.process_router
미디어 처리 웹훅 API 라우터
"""
import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from src.models import DatabaseWebhookPayload
from src.services.media_pipeline import PipelineController
from src.utils.common import verify_api_key

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["미디어 처리 API"])


def get_pipeline(request: Request) -> PipelineController:
    """lifespan에서 조립된 PipelineController 반환"""
    return request.app.state.pipeline


@router.post("/process-media", status_code=200)
async def process_media(
    payload: DatabaseWebhookPayload,
    api_key: str = Depends(verify_api_key),
    pipeline: PipelineController = Depends(get_pipeline)
):
    """
    인증(API Key): 필요

    기능
    places 테이블 INSERT 웹훅을 받아 미디어 → 장소 파이프라인을 실행합니다.
    처리가 끝날 때까지 응답하지 않습니다 (동기 처리).

    ------------------------------------------------------------
    요청 파라미터 (DatabaseWebhookPayload)
    - record (SourcePlaceholder): 트리거된 placeholder 레코드
      - id, user_id, video_url, video_path, status

    ------------------------------------------------------------
    반환값

    성공 시 (200):
    ```json
    {
      "success": true,
      "originalPlaceId": "UUID",
      "placesCreated": 2,
      "placesWithCoordinates": 2,
      "places": [...]
    }
    ```

    건너뜀 (200, status가 processing이 아닌 경우):
    ```json
    {"success": true, "skipped": true, "message": "Skipping - not in processing status"}
    ```

    실패 시 (500):
    ```json
    {"success": false, "error": "No places found in video"}
    ```

    ------------------------------------------------------------
    에러 코드
    - 인증 실패 시: 401 UNAUTHORIZED
    - 페이로드 형식 오류: 422
    - 파이프라인 실패: 500
    """
    logger.info(
        f"process-media 요청 수신: type={payload.type}, id={payload.record.id}, status={payload.record.status.value}"
    )

    result = await pipeline.run(payload.record)

    if result.skipped:
        return result.model_dump(include={"success", "skipped", "message", "originalPlaceId"})
    if not result.success:
        return JSONResponse(
            status_code=500,
            content=result.model_dump(include={"success", "error", "originalPlaceId"})
        )
    return result.model_dump(exclude={"skipped", "message", "error"})


@router.get("/health", status_code=200)
async def health_check():
    """서버 상태 확인"""
    return {"status": "ok"}
