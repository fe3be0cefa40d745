"""src.services.modules.gemini_llm
Gemini 멀티모달 API를 사용하여 여행 사진/영상에서 장소 정보를 추출합니다.
"""

import base64
import json
import logging
import re
from typing import Any, Literal

from pydantic import ValidationError

from src.core.config import settings
from src.core.exceptions import (
    InvalidExtraction,
    MalformedResponse,
    NoPlacesFound,
    UpstreamError,
)
from src.models.place import ExtractedPlace, PlaceCategory
from src.utils.common import http_post_json

logger = logging.getLogger(__name__)


# =============================================
# 프롬프트 템플릿
# =============================================
PLACE_EXTRACTION_PROMPT = """You are a travel {media_desc} analyzer. Watch/view this {media_desc} carefully and extract ALL distinct places/locations shown.

For EACH place you identify, extract:
1. The name of the place/location
2. A DETAILED search query with full address (place name + street/area + city + country)
   - Be as SPECIFIC as possible to help with geocoding
   - Include street names, neighborhoods, or nearby landmarks if visible
3. The category: must be one of "Food", "Activity", or "Stay"
4. 3-5 keywords that describe the vibe/atmosphere
5. LATITUDE and LONGITUDE coordinates (if you know them, otherwise can be null)

Return ONLY a valid JSON object with this exact structure:
{{
  "places": [
    {{
      "place_name": "First Place Name",
      "address_search_query": "Place Name, City, Country",
      "category": "Food" | "Activity" | "Stay",
      "vibe_keywords": ["keyword1", "keyword2", "keyword3"],
      "latitude": -44.67,
      "longitude": 169.07
    }}
  ]
}}

CRITICAL RULES:
- address_search_query is MOST IMPORTANT - be as detailed as possible
- Include street address, neighborhood, city, region, country
- More detail = better location accuracy on map
- Examples of GOOD detailed addresses:
  "Marina Bay Sands Hotel, 10 Bayfront Avenue, Marina Bay, Singapore"
  "Roys Peak Track Car Park, Wanaka-Mount Aspiring Road, Wanaka, New Zealand"
  "Eiffel Tower, Champ de Mars, 5 Avenue Anatole France, Paris, France"
- Latitude/longitude are optional (provide if you know exact coords, otherwise null)
- Category must be exactly one of: Food, Activity, Stay
- Include 3-5 vibe keywords per place
- Return only valid JSON, no additional text"""

CODE_FENCE_PATTERN = re.compile(r"```(?:json)?\n?")
VALID_CATEGORIES = {category.value for category in PlaceCategory}


def build_prompt(media_kind: Literal["image", "video"]) -> str:
    media_desc = "travel photo" if media_kind == "image" else "travel video"
    return PLACE_EXTRACTION_PROMPT.format(media_desc=media_desc)


def strip_code_fences(text: str) -> str:
    """```json ... ``` 래핑 제거"""
    return CODE_FENCE_PATTERN.sub("", text).strip()


def parse_places_payload(text: str) -> list[ExtractedPlace]:
    """
    Gemini 응답 텍스트를 ExtractedPlace 리스트로 파싱/검증합니다.

    Raises:
        MalformedResponse: JSON이 아니거나 places 배열이 없을 시
        NoPlacesFound: places 배열이 비어있을 시
        InvalidExtraction: 장소 하나라도 스키마를 위반할 시 (전체 거부)
    """
    try:
        parsed = json.loads(strip_code_fences(text))
    except json.JSONDecodeError as error:
        raise MalformedResponse(f"Malformed response from Gemini: {error}") from error

    if not isinstance(parsed, dict) or not isinstance(parsed.get("places"), list):
        raise MalformedResponse("Malformed response from Gemini: no places array")

    raw_places = parsed["places"]
    if not raw_places:
        raise NoPlacesFound("No places found in video")

    places: list[ExtractedPlace] = []
    for index, raw_place in enumerate(raw_places):
        if not isinstance(raw_place, dict):
            raise InvalidExtraction(f"Invalid place structure at index {index}")

        category = raw_place.get("category")
        if not category:
            raise InvalidExtraction(f"Invalid place structure at index {index}")
        if not isinstance(category, str) or category not in VALID_CATEGORIES:
            raise InvalidExtraction(f"Invalid category at index {index}: {category}")

        try:
            place = ExtractedPlace.model_validate(raw_place)
        except ValidationError as error:
            logger.warning(f"장소 스키마 위반 (index={index}): {error.errors()}")
            raise InvalidExtraction(f"Invalid place structure at index {index}") from error

        for field in ("latitude", "longitude"):
            if raw_place.get(field) is not None and getattr(place, field) is None:
                logger.warning(
                    f"유효하지 않은 {field} (index={index}): {raw_place.get(field)}, Geocoding 결과를 사용합니다"
                )

        places.append(place)

    return places


class GeminiExtractionClient:
    """Gemini generateContent 호출 클라이언트"""

    def __init__(
        self,
        api_key: str = settings.GEMINI_API_KEY,
        model: str = settings.GEMINI_MODEL,
        base_url: str = settings.GEMINI_API_BASE_URL
    ):
        self.api_key = api_key
        self.model = model
        self.url = f"{base_url.rstrip('/')}/{model}:generateContent"

    async def extract(
        self,
        data: bytes,
        mime_type: str,
        media_kind: Literal["image", "video"]
    ) -> list[ExtractedPlace]:
        """
        미디어에서 장소 리스트를 추출합니다.

        Args:
            data: 미디어 원본 바이트
            mime_type: MIME 타입 (예: "video/mp4")
            media_kind: "image" 또는 "video" (프롬프트 문구 결정)

        Returns:
            list[ExtractedPlace]: 검증된 장소 리스트 (1개 이상)

        Raises:
            UpstreamError: Gemini API 비정상 응답 시
            MalformedResponse: 응답 파싱 실패 시
            InvalidExtraction: 장소 스키마 위반 시
            NoPlacesFound: 장소가 없을 시
        """
        request_body = {
            "contents": [
                {
                    "parts": [
                        {
                            "inline_data": {
                                "mime_type": mime_type,
                                "data": base64.b64encode(data).decode("ascii"),
                            }
                        },
                        {"text": build_prompt(media_kind)},
                    ]
                }
            ]
        }
        headers = {
            "Content-Type": "application/json",
            "x-goog-api-key": self.api_key,
        }

        logger.info(f"Gemini API 호출 (model={self.model}, kind={media_kind}, type={mime_type})")

        try:
            response = await http_post_json(url=self.url, json_body=request_body, headers=headers)
        except UpstreamError as error:
            raise UpstreamError(f"Gemini API error: {error.message}", status_code=error.status_code) from error
        except MalformedResponse as error:
            raise MalformedResponse(f"Malformed response from Gemini: {error.message}") from error

        text = extract_response_text(response)
        logger.info(f"Gemini 원본 응답: {text}")

        places = parse_places_payload(text)
        logger.info(f"장소 추출 성공: {[place.place_name for place in places]}")
        return places


def extract_response_text(response: Any) -> str:
    """candidates[0].content.parts[0].text 추출"""
    try:
        text = response["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError) as error:
        raise MalformedResponse("Malformed response from Gemini: missing candidate text") from error

    if not isinstance(text, str):
        raise MalformedResponse("Malformed response from Gemini: candidate text is not a string")
    return text
