import asyncio
import copy

from src.core.exceptions import PersistenceError, StorageUnavailable
from src.services.geocoding_service import GeocodingResult


class FakePlaceRepository:
    """dict 기반 places 테이블"""

    def __init__(self, rows=None):
        self.rows = {row["id"]: dict(row) for row in rows or []}
        self.calls = []
        self.inserted = []
        self.fail_on = set()
        self._next_id = 0

    def _check(self, operation):
        self.calls.append(operation)
        if operation in self.fail_on:
            raise PersistenceError(f"Database {operation} error: boom")

    async def select_one(self, place_id):
        self._check("select")
        row = self.rows.get(place_id)
        return copy.deepcopy(row) if row else None

    async def delete(self, place_id):
        self._check("delete")
        await asyncio.sleep(0)
        self.rows.pop(place_id, None)

    async def insert_many(self, records):
        self._check("insert")
        await asyncio.sleep(0)
        inserted = []
        for record in records:
            self._next_id += 1
            row = {"id": f"place-{self._next_id}", **record}
            self.rows[row["id"]] = row
            inserted.append(copy.deepcopy(row))
        self.inserted.extend(inserted)
        return inserted

    async def upsert(self, record):
        self._check("upsert")
        self.rows.setdefault(record["id"], {}).update(record)


class FakeStorage:
    def __init__(self, data=b"", mime_type="video/mp4", error=None):
        self.data = data
        self.mime_type = mime_type
        self.error = error
        self.calls = []

    async def fetch(self, path):
        self.calls.append(path)
        if self.error:
            raise StorageUnavailable(self.error)
        return self.data, self.mime_type


class FakeExtractor:
    def __init__(self, places=None, error=None):
        self.places = places or []
        self.error = error
        self.calls = []

    async def extract(self, data, mime_type, media_kind):
        self.calls.append((mime_type, media_kind))
        if self.error:
            raise self.error
        return list(self.places)


class FakeGeocoder:
    """query → (lat, lon) 매핑, 매핑에 없으면 결과 없음"""

    def __init__(self, matches=None, errors=None):
        self.matches = matches or {}
        self.errors = errors or {}
        self.calls = []

    async def __call__(self, query):
        self.calls.append(query)
        if query in self.errors:
            raise self.errors[query]
        if query in self.matches:
            latitude, longitude = self.matches[query]
            return GeocodingResult(
                latitude=latitude,
                longitude=longitude,
                provider="nominatim",
                matched_query=query,
                display_name=query,
            )
        return None


class RecordingSleep:
    def __init__(self):
        self.delays = []

    async def __call__(self, seconds):
        self.delays.append(seconds)
