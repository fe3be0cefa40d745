"""src.utils.common
공통 유틸리티 함수 (Spring의 CommonUtil 스타일)
"""
import logging
from typing import Any

import httpx
from fastapi import Header, HTTPException

from src.core.config import settings
from src.core.exceptions import MalformedResponse, UpstreamError

logger = logging.getLogger(__name__)


async def verify_api_key(x_api_key: str = Header(..., alias="X-API-Key")):
    """
    DB 웹훅 요청의 API Key를 검증합니다.

    Args:
        x_api_key(str): Request Header의 X-API-Key 값

    Raises:
        HTTPException: API Key가 일치하지 않을 경우 401

    Returns:
        str: 검증된 API Key
    """
    if x_api_key != settings.AI_SERVER_API_KEY:
        logger.warning(f"유효하지 않은 API Key 시도: {mask_sensitive_data(x_api_key)}")
        raise HTTPException(
            status_code=401,
            detail="Unauthorized: Invalid API Key"
        )
    return x_api_key


# ============================================================
# HTTP 클라이언트 유틸리티
# ============================================================

DEFAULT_HTTP_TIMEOUT = 10.0  # 기본 타임아웃 (초)
MEDIA_HTTP_TIMEOUT = 60.0  # 미디어 다운로드 타임아웃 (최대 50MB)
GEMINI_HTTP_TIMEOUT = 300.0  # Gemini API 타임아웃 (5분, 영상 분석)


def _raise_upstream_error(error: httpx.HTTPError, url: str, timeout: float):
    """httpx 예외를 UpstreamError로 변환합니다."""
    if isinstance(error, httpx.TimeoutException):
        logger.error(f"HTTP 요청 타임아웃: url={url}")
        raise UpstreamError(f"Request timed out after {timeout}s") from error

    if isinstance(error, httpx.HTTPStatusError):
        status_code = error.response.status_code
        logger.error(f"HTTP 응답 오류: status={status_code}, url={url}")
        raise UpstreamError(f"{status_code} - {error.response.text}", status_code=status_code) from error

    logger.error(f"HTTP 연결 실패: url={url}, error={error}")
    raise UpstreamError(f"Connection failed: {error}") from error


async def http_get_json(
    url: str,
    params: dict[str, Any] | None = None,
    headers: dict[str, str] | None = None,
    timeout: float = DEFAULT_HTTP_TIMEOUT
) -> Any:
    """
    HTTP GET 요청 후 JSON 응답 반환

    Args:
        url: 요청 URL
        params: 쿼리 파라미터
        headers: 요청 헤더
        timeout: 타임아웃 (초, 기본 10초)

    Returns:
        Any: JSON 응답 (dict 또는 list)

    Raises:
        UpstreamError: 요청 실패 또는 응답 오류 시
        MalformedResponse: 응답이 JSON이 아닐 시
    """
    try:
        async with httpx.AsyncClient(timeout=timeout) as client:
            response = await client.get(url, params=params, headers=headers)
            response.raise_for_status()
    except httpx.HTTPError as error:
        _raise_upstream_error(error, url, timeout)

    try:
        return response.json()
    except ValueError as error:
        raise MalformedResponse(f"Response is not valid JSON: {error}") from error


async def http_post_json(
    url: str,
    json_body: dict[str, Any],
    headers: dict[str, str] | None = None,
    timeout: float = GEMINI_HTTP_TIMEOUT
) -> Any:
    """
    HTTP POST 요청 후 JSON 응답 반환

    Args:
        url: 요청 URL
        json_body: 요청 바디 (JSON)
        headers: 요청 헤더
        timeout: 타임아웃 (초, 기본 300초 - Gemini용)

    Returns:
        Any: JSON 응답

    Raises:
        UpstreamError: 요청 실패 또는 응답 오류 시
        MalformedResponse: 응답이 JSON이 아닐 시
    """
    try:
        async with httpx.AsyncClient(timeout=timeout) as client:
            response = await client.post(url, json=json_body, headers=headers)
            response.raise_for_status()
    except httpx.HTTPError as error:
        _raise_upstream_error(error, url, timeout)

    try:
        return response.json()
    except ValueError as error:
        raise MalformedResponse(f"Response is not valid JSON: {error}") from error


async def http_get_bytes(
    url: str,
    headers: dict[str, str] | None = None,
    timeout: float = MEDIA_HTTP_TIMEOUT
) -> tuple[bytes, str | None]:
    """
    HTTP GET 요청 후 원본 바이트와 Content-Type 헤더 반환

    Returns:
        tuple[bytes, str | None]: (응답 바이트, 선언된 Content-Type)

    Raises:
        UpstreamError: 요청 실패 또는 응답 오류 시
    """
    try:
        async with httpx.AsyncClient(timeout=timeout) as client:
            response = await client.get(url, headers=headers)
            response.raise_for_status()
    except httpx.HTTPError as error:
        _raise_upstream_error(error, url, timeout)

    return response.content, response.headers.get("content-type")


def mask_sensitive_data(data: str, show_chars: int = 2) -> str:
    """
    민감 데이터 마스킹 (로그 출력 시 사용)

    Args:
        data: 마스킹할 문자열
        show_chars: 앞뒤로 보여줄 문자 수

    Returns:
        str: 마스킹된 문자열

    Examples:
        >>> mask_sensitive_data("my_secret_key_12345")
        'my***************45'
    """
    if not data or len(data) <= show_chars * 2:
        return "****"

    return data[:show_chars] + "*" * (len(data) - show_chars * 2) + data[-show_chars:]
