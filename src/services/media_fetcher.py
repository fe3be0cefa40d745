"""src.services.media_fetcher
스토리지에서 미디어를 가져오고 MIME 타입 및 크기를 검증합니다.
"""
import logging
from dataclasses import dataclass
from typing import Literal

from src.core.exceptions import CustomError, PayloadTooLarge, StorageUnavailable
from src.services.media_storage import MediaStorage

logger = logging.getLogger(__name__)

DEFAULT_MIME_TYPE = "video/mp4"
BYTES_PER_MB = 1024 * 1024


@dataclass
class FetchedMedia:
    """다운로드된 미디어"""
    data: bytes
    mime_type: str
    size_bytes: int

    @property
    def media_kind(self) -> Literal["image", "video"]:
        return classify_media(self.mime_type)

    @property
    def size_mb(self) -> float:
        return self.size_bytes / BYTES_PER_MB


def classify_media(mime_type: str) -> Literal["image", "video"]:
    """image/* 만 이미지로 분류하고 나머지는 모두 영상으로 취급"""
    return "image" if mime_type.lower().startswith("image/") else "video"


def normalize_mime_type(declared: str | None) -> str:
    """Content-Type 파라미터(; charset=...) 제거, 없으면 video/mp4"""
    if not declared:
        return DEFAULT_MIME_TYPE
    mime_type = declared.split(";", 1)[0].strip().lower()
    return mime_type or DEFAULT_MIME_TYPE


class MediaFetcher:
    """스토리지 경로 → 미디어 바이트/MIME 타입/크기"""

    def __init__(self, storage: MediaStorage, max_size_mb: int = 50):
        self.storage = storage
        self.max_size_mb = max_size_mb

    async def fetch(self, path: str) -> FetchedMedia:
        """
        미디어를 다운로드하고 크기 제한을 검사합니다.

        Args:
            path: 스토리지 내 미디어 경로 (예: "demo-user/1700000000.mp4")

        Returns:
            FetchedMedia: 바이트, MIME 타입, 크기

        Raises:
            StorageUnavailable: 다운로드 실패 시
            PayloadTooLarge: 최대 크기 초과 시
        """
        try:
            data, declared_type = await self.storage.fetch(path)
        except StorageUnavailable:
            raise
        except CustomError as error:
            raise StorageUnavailable(f"Storage download error: {error.message}") from error

        media = FetchedMedia(
            data=data,
            mime_type=normalize_mime_type(declared_type),
            size_bytes=len(data)
        )
        logger.info(
            f"미디어 다운로드 완료: path={path}, kind={media.media_kind}, "
            f"size={media.size_mb:.2f} MB, type={media.mime_type}"
        )

        if media.size_bytes > self.max_size_mb * BYTES_PER_MB:
            raise PayloadTooLarge(
                f"File too large: {media.size_mb:.2f} MB. Maximum is {self.max_size_mb} MB."
            )

        return media
