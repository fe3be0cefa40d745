"""src.services.pipeline_factory
운영 환경 협력 객체 조립 (Supabase, Gemini, Nominatim)
"""
from supabase import AsyncClient, acreate_client

from src.core.config import Settings
from src.services.geocoding_service import GeocodingResolver, GeocodingThrottle
from src.services.media_fetcher import MediaFetcher
from src.services.media_pipeline import PipelineController
from src.services.media_storage import SupabaseMediaStorage
from src.services.modules.gemini_llm import GeminiExtractionClient
from src.services.place_repository import SupabasePlaceRepository


async def create_supabase_client(settings: Settings) -> AsyncClient:
    return await acreate_client(settings.SUPABASE_URL, settings.SUPABASE_SERVICE_ROLE_KEY)


def build_pipeline(
    settings: Settings,
    client: AsyncClient,
    throttle: GeocodingThrottle
) -> PipelineController:
    """
    PipelineController 생성

    throttle은 프로세스 전체에서 공유하여 동시 실행 중인 파이프라인들도
    Nominatim 호출 간격을 지키도록 합니다.
    """
    repository = SupabasePlaceRepository(client, table=settings.PLACES_TABLE)
    storage = SupabaseMediaStorage(
        supabase_url=settings.SUPABASE_URL,
        service_key=settings.SUPABASE_SERVICE_ROLE_KEY,
        bucket=settings.MEDIA_BUCKET
    )
    return PipelineController(
        repository=repository,
        fetcher=MediaFetcher(storage, max_size_mb=settings.MAX_MEDIA_SIZE_MB),
        extractor=GeminiExtractionClient(
            api_key=settings.GEMINI_API_KEY,
            model=settings.GEMINI_MODEL,
            base_url=settings.GEMINI_API_BASE_URL
        ),
        resolver=GeocodingResolver(throttle)
    )
