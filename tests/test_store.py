import pytest
from sqlalchemy.pool import StaticPool

from page_analyzer.db import SessionLocal, engine
from page_analyzer.schemas import AnalysisResult
from page_analyzer.store import RecordInvalid, RecordNotFound, ResultStore


def _result(url: str = "https://example.com/", external: int = 2, inaccessible: int = 1) -> AnalysisResult:
    return AnalysisResult(
        url=url,
        page_title="Example",
        html_version="html5",
        heading_counts={"h1": 1, "h2": 0, "h3": 0, "h4": 0, "h5": 0, "h6": 0},
        external_link_count=external,
        internal_link_count=3,
        inaccessible_link_count=inaccessible,
        is_login=False,
    )


@pytest.fixture
def store():
    session = SessionLocal()
    try:
        yield ResultStore(session)
    finally:
        session.close()


def test_store_assigns_monotonic_ids(store):
    first_id = store.add(_result("https://a.example/")).id
    second_id = store.add(_result("https://b.example/")).id
    store.delete(second_id)
    third_id = store.add(_result("https://c.example/")).id

    assert first_id < second_id < third_id
    assert [record.url for record in store.list_records()] == ["https://a.example/", "https://c.example/"]


def test_store_round_trips_result_fields(store):
    record = store.add(_result())

    fetched = store.get(record.id)
    assert fetched.page_title == "Example"
    assert fetched.heading_counts["h1"] == 1
    assert fetched.inaccessible_link_count == 1


def test_store_update_applies_changes(store):
    record = store.add(_result())

    updated = store.update(record.id, {"page_title": "Renamed", "is_login": True, "html_version": None})

    assert updated.page_title == "Renamed"
    assert updated.is_login is True
    assert updated.html_version == "html5"


def test_store_update_rejects_url_and_invariant_breaks(store):
    record = store.add(_result())

    with pytest.raises(RecordInvalid):
        store.update(record.id, {"url": "https://other.example/"})
    with pytest.raises(RecordInvalid):
        store.update(record.id, {"inaccessible_link_count": 5})

    assert store.get(record.id).inaccessible_link_count == 1


def test_store_missing_records(store):
    with pytest.raises(RecordNotFound):
        store.get(42)
    with pytest.raises(RecordNotFound):
        store.delete(42)
    with pytest.raises(RecordNotFound):
        store.update(42, {"page_title": "x"})


def test_default_database_is_shared_in_memory():
    assert engine.url.database in (None, "", ":memory:")
    assert isinstance(engine.pool, StaticPool)


def test_store_merges_partial_heading_counts(store):
    record = store.add(_result())

    updated = store.update(record.id, {"heading_counts": {"h3": 7}})

    assert updated.heading_counts == {"h1": 1, "h2": 0, "h3": 7, "h4": 0, "h5": 0, "h6": 0}
