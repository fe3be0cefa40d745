import asyncio

import pytest

from src.core.exceptions import UpstreamError
from src.services import geocoding_service
from src.services.geocoding_service import (
    GeocodingResolver,
    GeocodingThrottle,
    geocode_with_nominatim,
)
from tests.fakes import FakeGeocoder, RecordingSleep

ADDRESS = "Village Coffee, Castle Hill Village, Canterbury, New Zealand"


async def test_first_candidate_match_stops_search():
    geocoder = FakeGeocoder({ADDRESS: (-43.2, 171.7)})
    sleeper = RecordingSleep()
    resolver = GeocodingResolver(GeocodingThrottle(1.0, sleep=sleeper), lookup=geocoder)

    result = await resolver.resolve(ADDRESS)

    assert (result.latitude, result.longitude) == (-43.2, 171.7)
    assert result.matched_query == ADDRESS
    assert geocoder.calls == [ADDRESS]
    assert sleeper.delays == [1.0]


async def test_no_match_tries_all_candidates_in_order():
    geocoder = FakeGeocoder()
    sleeper = RecordingSleep()
    resolver = GeocodingResolver(GeocodingThrottle(1.0, sleep=sleeper), lookup=geocoder)

    result = await resolver.resolve(ADDRESS)

    assert result is None
    assert geocoder.calls == [
        ADDRESS,
        "Castle Hill Village, Canterbury, New Zealand",
        "Canterbury, New Zealand",
        "New Zealand",
    ]
    # 첫 호출 포함 매 호출 전에 대기
    assert sleeper.delays == [1.0, 1.0, 1.0, 1.0]


async def test_upstream_error_moves_to_next_candidate():
    geocoder = FakeGeocoder(
        matches={"Canterbury, New Zealand": (-43.5, 171.2)},
        errors={
            ADDRESS: UpstreamError("503 - unavailable", status_code=503),
            "Castle Hill Village, Canterbury, New Zealand": UpstreamError("Connection failed"),
        },
    )
    resolver = GeocodingResolver(GeocodingThrottle(0, sleep=RecordingSleep()), lookup=geocoder)

    result = await resolver.resolve(ADDRESS)

    assert result.matched_query == "Canterbury, New Zealand"
    assert len(geocoder.calls) == 3


async def test_throttle_serializes_concurrent_callers():
    active = 0
    max_active = 0

    async def lookup(query):
        nonlocal active, max_active
        active += 1
        max_active = max(max_active, active)
        await asyncio.sleep(0)
        active -= 1
        return None

    throttle = GeocodingThrottle(0)
    resolvers = [GeocodingResolver(throttle, lookup=lookup) for _ in range(3)]

    await asyncio.gather(*(resolver.resolve("a, b, c") for resolver in resolvers))

    assert max_active == 1


async def test_nominatim_parses_first_result(monkeypatch):
    captured = {}

    async def fake_get_json(url, params=None, headers=None, timeout=None):
        captured.update(url=url, params=params, headers=headers)
        return [{"lat": "48.8582", "lon": "2.2945", "display_name": "Tour Eiffel, Paris"}]

    monkeypatch.setattr(geocoding_service, "http_get_json", fake_get_json)

    result = await geocode_with_nominatim("Eiffel Tower, Paris, France")

    assert result.latitude == pytest.approx(48.8582)
    assert result.longitude == pytest.approx(2.2945)
    assert result.display_name == "Tour Eiffel, Paris"
    assert captured["params"] == {"q": "Eiffel Tower, Paris, France", "format": "json", "limit": 1}
    assert "User-Agent" in captured["headers"]


@pytest.mark.parametrize("payload", [[], None, [{"lat": "north", "lon": "2.0"}], [{"display_name": "x"}]])
async def test_nominatim_empty_or_unusable_result(monkeypatch, payload):
    async def fake_get_json(url, params=None, headers=None, timeout=None):
        return payload

    monkeypatch.setattr(geocoding_service, "http_get_json", fake_get_json)

    assert await geocode_with_nominatim("Nowhere") is None
