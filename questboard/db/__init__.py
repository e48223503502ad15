from questboard.config import Settings
from questboard.db.memory import MemoryEventStore
from questboard.db.postgres import PostgresEventStore
from questboard.db.records import EventRecord, EventStore, ParticipantAvailability


def build_store(settings: Settings) -> EventStore:
    """Construct the configured store. The caller opens and closes it."""
    id_length = settings.events.id_length
    if settings.store.backend == "memory":
        return MemoryEventStore(id_length=id_length)
    return PostgresEventStore(settings.postgres, id_length=id_length)


__all__ = [
    "EventRecord",
    "EventStore",
    "MemoryEventStore",
    "ParticipantAvailability",
    "PostgresEventStore",
    "build_store",
]
