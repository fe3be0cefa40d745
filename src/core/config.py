"""src.core.config.py
.env 파일에서 API키 및 외부 서비스 설정을 할당합니다.
"""
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    # 웹훅 인증용 API Key (DB 트리거 → AI 서버)
    AI_SERVER_API_KEY: str
    ENVIRONMENT: str = "dev"  # dev: 로컬, prod: 서버환경
    LOG_DIR: str = "/mnt/toktrip/ai/logs"

    # Gemini API
    GEMINI_API_KEY: str
    GEMINI_MODEL: str = "gemini-2.5-flash"
    GEMINI_API_BASE_URL: str = "https://generativelanguage.googleapis.com/v1beta/models"

    # Supabase (DB + Storage)
    SUPABASE_URL: str
    SUPABASE_SERVICE_ROLE_KEY: str
    MEDIA_BUCKET: str = "videos"
    PLACES_TABLE: str = "places"
    MAX_MEDIA_SIZE_MB: int = 50

    # Nominatim (OpenStreetMap)
    NOMINATIM_URL: str = "https://nominatim.openstreetmap.org/search"
    NOMINATIM_USER_AGENT: str = "TokTripPlanner/1.0 (contact@toktripplanner.com)"
    GEOCODING_DELAY_SECONDS: float = 1.0

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")
settings = Settings()
