"""In-process event store for local development and tests.

Data lives only as long as the process. Writes are serialised with an
``asyncio.Lock`` so a replace is never observed half-done.
"""

import asyncio
import logging
from datetime import UTC, datetime

from questboard.db.core import EVENT_ID_ATTEMPTS, generate_event_id
from questboard.db.records import EventRecord, ParticipantAvailability
from questboard.errors import DatabaseError

logger = logging.getLogger(__name__)


class MemoryEventStore:
    def __init__(self, id_length: int = 10) -> None:
        self._id_length = id_length
        self._events: dict[str, EventRecord] = {}
        # event id -> participant -> {slot_key: note}; dict order is submission order
        self._availability: dict[str, ParticipantAvailability] = {}
        self._lock = asyncio.Lock()

    async def open(self) -> None:
        logger.info("Using in-memory event store")

    async def close(self) -> None:
        async with self._lock:
            self._events.clear()
            self._availability.clear()

    async def ping(self) -> bool:
        return True

    async def create_event(
        self,
        name: str,
        description: str,
        dates: list[str],
        start_hour: int,
        end_hour: int,
    ) -> EventRecord:
        async with self._lock:
            for _ in range(EVENT_ID_ATTEMPTS):
                event_id = generate_event_id(self._id_length)
                if event_id in self._events:
                    continue
                event = EventRecord(
                    id=event_id,
                    name=name,
                    description=description,
                    dates=list(dates),
                    start_hour=start_hour,
                    end_hour=end_hour,
                    created_at=datetime.now(UTC),
                )
                self._events[event_id] = event
                self._availability[event_id] = {}
                return event.model_copy(deep=True)
        raise DatabaseError(detail="Failed to generate unique event ID")

    async def get_event(self, event_id: str) -> EventRecord | None:
        event = self._events.get(event_id)
        return event.model_copy(deep=True) if event else None

    async def get_availability(self, event_id: str) -> ParticipantAvailability:
        rows = self._availability.get(event_id, {})
        return {name: dict(slots) for name, slots in rows.items()}

    async def replace_availability(
        self,
        event_id: str,
        participant_name: str,
        slots: dict[str, str],
    ) -> datetime:
        async with self._lock:
            if event_id not in self._events:
                raise DatabaseError(detail=f"Unknown event {event_id}")
            # Assigning to an existing key keeps the participant's original position.
            self._availability[event_id][participant_name] = dict(slots)
            return datetime.now(UTC)
