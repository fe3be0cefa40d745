"""src.services.media_storage
Supabase Storage에서 업로드된 미디어를 내려받는 스토리지 어댑터
"""
import logging
from typing import Protocol
from urllib.parse import quote

from src.core.exceptions import CustomError, StorageUnavailable
from src.utils.common import http_get_bytes

logger = logging.getLogger(__name__)


class MediaStorage(Protocol):
    """미디어 스토리지 인터페이스: path → (bytes, 선언된 MIME 타입)"""

    async def fetch(self, path: str) -> tuple[bytes, str | None]:
        ...


class SupabaseMediaStorage:
    """
    Supabase Storage REST API 기반 MediaStorage 구현

    supabase-py의 download()는 Content-Type을 돌려주지 않으므로
    object 엔드포인트를 직접 호출해 응답 헤더의 Content-Type을 사용합니다.
    """

    def __init__(self, supabase_url: str, service_key: str, bucket: str):
        self.base_url = supabase_url.rstrip("/")
        self.service_key = service_key
        self.bucket = bucket

    async def fetch(self, path: str) -> tuple[bytes, str | None]:
        url = f"{self.base_url}/storage/v1/object/{self.bucket}/{quote(path.lstrip('/'))}"
        headers = {
            "Authorization": f"Bearer {self.service_key}",
            "apikey": self.service_key,
        }

        try:
            return await http_get_bytes(url, headers=headers)
        except CustomError as error:
            raise StorageUnavailable(f"Storage download error: {error.message}") from error
