from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from questboard.slots import MAX_HOUR, MIN_HOUR, is_iso_date


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CreateEventRequest(CamelModel):
    name: str
    description: str | None = None
    dates: list[str]
    start_hour: int | None = Field(default=None, ge=MIN_HOUR, le=MAX_HOUR)
    end_hour: int | None = Field(default=None, ge=MIN_HOUR, le=MAX_HOUR)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if not v or len(v) > 200:
            raise ValueError("name must be 1-200 characters")
        return v

    @field_validator("description")
    @classmethod
    def validate_description(cls, v: str | None) -> str | None:
        if v is not None and len(v) > 2000:
            raise ValueError("description must be at most 2000 characters")
        return v

    @field_validator("dates")
    @classmethod
    def validate_dates(cls, v: list[str]) -> list[str]:
        if not v:
            raise ValueError("dates must not be empty")
        for d in v:
            if not is_iso_date(d):
                raise ValueError(f"invalid date format: {d}")
        if len(set(v)) != len(v):
            raise ValueError("dates must not contain duplicates")
        return v


class SlotMark(CamelModel):
    available: bool = False
    note: str | None = ""

    @field_validator("note")
    @classmethod
    def validate_note(cls, v: str | None) -> str:
        v = (v or "").strip()
        if len(v) > 500:
            raise ValueError("note must be at most 500 characters")
        return v


class AvailabilityRequest(CamelModel):
    participant_name: str
    slots: dict[str, SlotMark]

    @field_validator("participant_name")
    @classmethod
    def validate_participant_name(cls, v: str) -> str:
        v = v.strip()
        if not v or len(v) > 100:
            raise ValueError("participantName must be 1-100 characters")
        return v


class Event(CamelModel):
    id: str
    name: str
    description: str
    dates: list[str]
    start_hour: int
    end_hour: int
    created_at: str


class CreateEventResponse(CamelModel):
    id: str
    url: str
    event: Event


class SlotAvailability(CamelModel):
    available: bool = True
    note: str = ""


class EventDetailResponse(Event):
    participants: list[str]
    # participant -> slot key -> mark; only available slots are listed
    availability: dict[str, dict[str, SlotAvailability]]
    summary: dict[str, int]


class SlotNoteOut(CamelModel):
    participant: str
    note: str


class HeatmapSlot(CamelModel):
    date: str
    hour: int
    count: int
    participants: list[str]
    notes: list[SlotNoteOut]


class HeatmapResponse(CamelModel):
    event_id: str
    participants: list[str]
    max_count: int
    best_slots: list[str]
    slots: dict[str, HeatmapSlot]


class AvailabilityResponse(CamelModel):
    success: bool = True
    participant_name: str
    slot_count: int
    updated_at: str
