import os

# Settings()는 import 시점에 생성되므로 필수 환경변수를 먼저 채워둔다.
os.environ.setdefault("AI_SERVER_API_KEY", "test-api-key")
os.environ.setdefault("GEMINI_API_KEY", "test-gemini-key")
os.environ.setdefault("SUPABASE_URL", "https://example.supabase.co")
os.environ.setdefault("SUPABASE_SERVICE_ROLE_KEY", "test-service-role-key")
os.environ.setdefault("ENVIRONMENT", "dev")

import pytest

from tests.fakes import (
    FakeExtractor,
    FakeGeocoder,
    FakePlaceRepository,
    FakeStorage,
    RecordingSleep,
)
from src.models.place import ExtractedPlace
from src.services.geocoding_service import GeocodingResolver, GeocodingThrottle
from src.services.media_fetcher import MediaFetcher
from src.services.media_pipeline import PipelineController


PLACEHOLDER_ID = "5b0c3f0e-2a54-4c1e-9d38-6a4c1c0f5f7e"


@pytest.fixture
def placeholder_row():
    return {
        "id": PLACEHOLDER_ID,
        "user_id": "demo-user",
        "video_url": "https://example.supabase.co/storage/v1/object/public/videos/demo-user/1.mp4",
        "video_path": "demo-user/1.mp4",
        "status": "processing",
        "error_message": None,
    }


@pytest.fixture
def repository(placeholder_row):
    return FakePlaceRepository([placeholder_row])


@pytest.fixture
def storage():
    return FakeStorage(b"\x00" * 1024, "video/mp4")


@pytest.fixture
def geocoder():
    return FakeGeocoder()


@pytest.fixture
def sleeper():
    return RecordingSleep()


@pytest.fixture
def extractor():
    return FakeExtractor([
        ExtractedPlace(
            place_name="Eiffel Tower",
            address_search_query="Eiffel Tower, Paris, France",
            category="Activity",
            vibe_keywords=["iconic", "romantic", "historic"],
        )
    ])


@pytest.fixture
def make_controller(repository, storage, geocoder, sleeper):
    def _make(extractor):
        resolver = GeocodingResolver(GeocodingThrottle(1.0, sleep=sleeper), lookup=geocoder)
        return PipelineController(
            repository=repository,
            fetcher=MediaFetcher(storage, max_size_mb=50),
            extractor=extractor,
            resolver=resolver,
        )
    return _make
