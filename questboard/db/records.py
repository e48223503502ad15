"""Typed records crossing the storage boundary."""

from datetime import datetime
from typing import Protocol

from pydantic import BaseModel, field_validator, model_validator

from questboard.slots import MAX_HOUR, MIN_HOUR, is_iso_date

# participant name -> {slot_key: note}, both in submission order
ParticipantAvailability = dict[str, dict[str, str]]


class EventRecord(BaseModel):
    """An event as stored. Validated on every read from the store."""

    id: str
    name: str
    description: str = ""
    dates: list[str]
    start_hour: int
    end_hour: int
    created_at: datetime

    @field_validator("dates")
    @classmethod
    def validate_dates(cls, v: list[str]) -> list[str]:
        if not v:
            raise ValueError("dates must not be empty")
        for d in v:
            if not is_iso_date(d):
                raise ValueError(f"invalid date format: {d}")
        return v

    @model_validator(mode="after")
    def validate_hours(self):
        if not (MIN_HOUR <= self.start_hour < self.end_hour <= MAX_HOUR):
            raise ValueError(
                f"invalid hour range {self.start_hour}-{self.end_hour}"
            )
        return self


class EventStore(Protocol):
    """Persistence for events and per-participant availability.

    One instance is built at start-up and shared by all requests.
    """

    async def open(self) -> None: ...

    async def close(self) -> None: ...

    async def ping(self) -> bool: ...

    async def create_event(
        self,
        name: str,
        description: str,
        dates: list[str],
        start_hour: int,
        end_hour: int,
    ) -> EventRecord: ...

    async def get_event(self, event_id: str) -> EventRecord | None: ...

    async def get_availability(self, event_id: str) -> ParticipantAvailability: ...

    async def replace_availability(
        self,
        event_id: str,
        participant_name: str,
        slots: dict[str, str],
    ) -> datetime:
        """Replace everything ``participant_name`` marked for the event with ``slots``.

        Returns the update timestamp.
        """
        ...
