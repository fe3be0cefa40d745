"""src.main
FastAPI 애플리케이션 진입점
"""
import time
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from src.core.config import settings
from src.core.logging import setup_logging
from src.apis.process_router import router as process_router
from src.apis.geocoding_router import router as geocoding_router
from src.services.geocoding_service import GeocodingThrottle
from src.services.pipeline_factory import build_pipeline, create_supabase_client
from src.utils.common import mask_sensitive_data

# 로깅 초기화
setup_logging(log_level="INFO")
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    애플리케이션 수명주기 관리

    앱 시작 시: Supabase 클라이언트 및 파이프라인 조립
    앱 종료 시: 리소스 정리 (필요 시)
    """
    # ========== 시작 단계 ==========
    logger.info("=== 애플리케이션 시작: 초기화 중 ===")

    if getattr(app.state, "pipeline", None) is None:
        logger.info(
            f"Supabase 연결: url={settings.SUPABASE_URL}, "
            f"key={mask_sensitive_data(settings.SUPABASE_SERVICE_ROLE_KEY)}"
        )
        client = await create_supabase_client(settings)
        throttle = GeocodingThrottle(settings.GEOCODING_DELAY_SECONDS)
        app.state.pipeline = build_pipeline(settings, client, throttle)

    logger.info("=== 애플리케이션 준비 완료 ===")

    yield  # 애플리케이션 실행

    # ========== 종료 단계 ==========
    logger.info("=== 애플리케이션 종료 중 ===")


# FastAPI 앱 생성 (lifespan 컨텍스트 적용)
app = FastAPI(
    title="TokTrip AI Processor",
    description="업로드된 여행 사진/영상에서 장소를 추출하고 좌표를 부여하는 파이프라인입니다.",
    version="0.1.0",
    lifespan=lifespan,
    docs_url="/docs/swagger",
    redoc_url="/docs/redoc"
)


# 라우터 등록
app.include_router(process_router)
app.include_router(geocoding_router)


@app.middleware("http")
async def add_process_time_header(request: Request, call_next):
    """요청 처리 시간 측정 미들웨어"""
    start_time = time.time()
    response = await call_next(request)
    process_time = time.time() - start_time

    # 응답 헤더에 처리 시간 추가
    response.headers["X-Process-Time"] = f"{process_time:.4f}"

    logger.info(
        f"요청 처리 완료: {request.method} {request.url.path} - {process_time:.4f}초"
    )

    return response


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8001, loop="asyncio")
