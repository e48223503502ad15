import pytest

from questboard.db.memory import MemoryEventStore
from questboard.errors import DatabaseError


@pytest.fixture
def store():
    return MemoryEventStore()


@pytest.mark.asyncio
async def test_create_and_get_event(store):
    event = await store.create_event("Quest", "desc", ["2024-06-01"], 18, 20)
    fetched = await store.get_event(event.id)
    assert fetched == event
    assert await store.get_event("missing") is None


@pytest.mark.asyncio
async def test_returned_events_are_copies(store):
    event = await store.create_event("Quest", "", ["2024-06-01"], 18, 20)
    fetched = await store.get_event(event.id)
    fetched.dates.append("2024-06-02")
    assert (await store.get_event(event.id)).dates == ["2024-06-01"]


@pytest.mark.asyncio
async def test_id_length_is_configurable():
    store = MemoryEventStore(id_length=16)
    event = await store.create_event("Quest", "", ["2024-06-01"], 18, 20)
    assert len(event.id) == 16


@pytest.mark.asyncio
async def test_full_replace_law(store):
    event = await store.create_event("Quest", "", ["2024-06-01"], 10, 14)
    await store.replace_availability(event.id, "Aria", {"2024-06-01-10": "", "2024-06-01-11": "late", "2024-06-01-12": ""})
    await store.replace_availability(event.id, "Bram", {"2024-06-01-11": ""})
    await store.replace_availability(event.id, "Aria", {"2024-06-01-13": "x"})

    availability = await store.get_availability(event.id)
    assert list(availability) == ["Aria", "Bram"]
    assert availability["Aria"] == {"2024-06-01-13": "x"}
    assert availability["Bram"] == {"2024-06-01-11": ""}


@pytest.mark.asyncio
async def test_get_availability_returns_snapshot(store):
    event = await store.create_event("Quest", "", ["2024-06-01"], 10, 14)
    await store.replace_availability(event.id, "Aria", {"2024-06-01-10": ""})
    snapshot = await store.get_availability(event.id)
    snapshot["Aria"]["2024-06-01-11"] = ""
    assert await store.get_availability(event.id) == {"Aria": {"2024-06-01-10": ""}}


@pytest.mark.asyncio
async def test_replace_for_unknown_event(store):
    with pytest.raises(DatabaseError):
        await store.replace_availability("missing", "Aria", {})


@pytest.mark.asyncio
async def test_close_drops_data(store):
    event = await store.create_event("Quest", "", ["2024-06-01"], 10, 14)
    await store.close()
    assert await store.get_event(event.id) is None
