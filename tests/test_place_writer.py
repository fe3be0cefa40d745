import pytest

from src.core.exceptions import PersistenceError
from src.models.place import ExtractedPlace, ResolvedPlace, SourcePlaceholder
from src.services.place_writer import PlaceRecordWriter
from tests.fakes import FakePlaceRepository


def resolved(source, name, latitude=None, longitude=None):
    extracted = ExtractedPlace(
        place_name=name,
        address_search_query=f"{name}, Paris, France",
        category="Food",
        vibe_keywords=["cozy"],
    )
    return ResolvedPlace.from_extraction(source, extracted, latitude, longitude)


async def test_commit_replaces_placeholder(placeholder_row):
    repository = FakePlaceRepository([placeholder_row])
    source = SourcePlaceholder.model_validate(placeholder_row)

    summary = await PlaceRecordWriter(repository).commit(source, [
        resolved(source, "Cafe A", 48.85, 2.35),
        resolved(source, "Cafe B"),
    ])

    assert source.id not in repository.rows
    assert summary.places_created == 2
    assert summary.places_with_coordinates == 1
    assert repository.calls == ["delete", "insert"]
    row = summary.places[0]
    assert row["status"] == "completed"
    assert row["user_id"] == "demo-user"
    assert row["video_path"] == source.video_path
    assert row["video_url"] == source.video_url
    assert row["category"] == "Food"


async def test_zero_coordinates_count_as_present(placeholder_row):
    repository = FakePlaceRepository([placeholder_row])
    source = SourcePlaceholder.model_validate(placeholder_row)

    summary = await PlaceRecordWriter(repository).commit(source, [resolved(source, "Null Island", 0.0, 0.0)])

    assert summary.places_with_coordinates == 1


async def test_delete_of_missing_placeholder_is_noop(placeholder_row):
    repository = FakePlaceRepository([])
    source = SourcePlaceholder.model_validate(placeholder_row)

    summary = await PlaceRecordWriter(repository).commit(source, [resolved(source, "Cafe A")])

    assert summary.places_created == 1


@pytest.mark.parametrize("operation", ["delete", "insert"])
async def test_persistence_failures_propagate(placeholder_row, operation):
    repository = FakePlaceRepository([placeholder_row])
    repository.fail_on.add(operation)
    source = SourcePlaceholder.model_validate(placeholder_row)

    with pytest.raises(PersistenceError):
        await PlaceRecordWriter(repository).commit(source, [resolved(source, "Cafe A")])
