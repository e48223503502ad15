import logging
from typing import Any

from fastapi import APIRouter

from questboard.aggregate import build_heatmap, slot_counts
from questboard.db import EventRecord, ParticipantAvailability
from questboard.dependencies import AppSettings, OptionalCache, Store
from questboard.errors import BadRequestError, NotFoundError
from questboard.models.events import (
    AvailabilityRequest,
    AvailabilityResponse,
    CreateEventRequest,
    CreateEventResponse,
    Event,
    EventDetailResponse,
    HeatmapResponse,
    HeatmapSlot,
    SlotAvailability,
    SlotNoteOut,
)
from questboard.slots import SlotKeyError, SlotOutsideEventError, parse_slot_key, validate_slot_key

logger = logging.getLogger("questboard.events")
router = APIRouter(prefix="/events", tags=["events"])


def _to_event(event: EventRecord) -> Event:
    return Event(
        id=event.id,
        name=event.name,
        description=event.description,
        dates=event.dates,
        start_hour=event.start_hour,
        end_hour=event.end_hour,
        created_at=event.created_at.isoformat(),
    )


def _detail_view(event: EventRecord, availability: ParticipantAvailability) -> dict[str, Any]:
    detail = EventDetailResponse(
        **_to_event(event).model_dump(),
        participants=list(availability.keys()),
        availability={
            name: {key: SlotAvailability(note=note) for key, note in slots.items()}
            for name, slots in availability.items()
        },
        summary=slot_counts(availability),
    )
    return detail.model_dump(by_alias=True)


async def _require_event(store: Store, event_id: str) -> EventRecord:
    event = await store.get_event(event_id)
    if event is None:
        logger.warning("Event not found: %s", event_id)
        raise NotFoundError(detail="Event not found", event_id=event_id)
    return event


@router.post("", status_code=201, response_model=CreateEventResponse)
async def create_event(req: CreateEventRequest, store: Store, settings: AppSettings) -> CreateEventResponse:
    defaults = settings.events
    start_hour = req.start_hour if req.start_hour is not None else defaults.default_start_hour
    end_hour = req.end_hour if req.end_hour is not None else defaults.default_end_hour
    if start_hour >= end_hour:
        raise BadRequestError(
            detail=f"startHour ({start_hour}) must be before endHour ({end_hour})",
            error_code="INVALID_HOUR_RANGE",
        )
    if len(req.dates) > defaults.max_dates:
        raise BadRequestError(
            detail=f"at most {defaults.max_dates} dates are allowed",
            error_code="TOO_MANY_DATES",
        )
    logger.info("POST /events name=%s dates=%d hours=%d-%d", req.name, len(req.dates), start_hour, end_hour)
    event = await store.create_event(
        name=req.name,
        description=req.description or "",
        dates=req.dates,
        start_hour=start_hour,
        end_hour=end_hour,
    )
    logger.info("Created event id=%s", event.id)
    return CreateEventResponse(
        id=event.id,
        url=f"{defaults.public_path.rstrip('/')}/{event.id}",
        event=_to_event(event),
    )


@router.get("/{event_id}", response_model=EventDetailResponse)
async def get_event(event_id: str, store: Store, cache: OptionalCache) -> dict[str, Any]:
    logger.info("GET /events/%s", event_id)
    # Taken before the store read so a concurrent submission retires this view.
    generation = await cache.generation(event_id) if cache is not None else None
    if generation is not None:
        cached = await cache.get(event_id, generation)
        if cached is not None:
            return cached
    event = await _require_event(store, event_id)
    availability = await store.get_availability(event_id)
    view = _detail_view(event, availability)
    if generation is not None:
        await cache.set(event_id, generation, view)
    logger.info("Returning event %s with %d participants", event_id, len(availability))
    return view


@router.get("/{event_id}/heatmap", response_model=HeatmapResponse)
async def get_heatmap(event_id: str, store: Store) -> HeatmapResponse:
    logger.info("GET /events/%s/heatmap", event_id)
    event = await _require_event(store, event_id)
    availability = await store.get_availability(event_id)
    heatmap = build_heatmap(event.dates, event.start_hour, event.end_hour, availability)
    return HeatmapResponse(
        event_id=event.id,
        participants=heatmap.participants,
        max_count=heatmap.max_count,
        best_slots=heatmap.best_slots,
        slots={
            key: HeatmapSlot(
                date=s.date,
                hour=s.hour,
                count=s.count,
                participants=s.participants,
                notes=[SlotNoteOut(participant=n.participant, note=n.note) for n in s.notes],
            )
            for key, s in heatmap.slots.items()
        },
    )


@router.post("/{event_id}/availability", response_model=AvailabilityResponse)
async def submit_availability(
    event_id: str,
    req: AvailabilityRequest,
    store: Store,
    cache: OptionalCache,
) -> AvailabilityResponse:
    logger.info("POST /events/%s/availability participant=%s slots=%d", event_id, req.participant_name, len(req.slots))
    event = await _require_event(store, event_id)

    marked: dict[str, str] = {}
    for key, mark in req.slots.items():
        try:
            parse_slot_key(key)
        except SlotKeyError as e:
            logger.warning("Invalid slot %s for event %s: %s", key, event_id, e.reason)
            raise BadRequestError(detail=str(e), error_code="INVALID_SLOT_KEY", slot_key=key) from e
        if not mark.available:
            if mark.note:
                logger.info("Dropping note on unavailable slot %s (participant=%s)", key, req.participant_name)
            continue
        try:
            validate_slot_key(key, event.dates, event.start_hour, event.end_hour)
        except SlotOutsideEventError as e:
            logger.warning("Slot %s outside event %s: %s", key, event_id, e.reason)
            raise BadRequestError(detail=str(e), error_code="SLOT_OUTSIDE_EVENT", slot_key=key) from e
        marked[key] = mark.note or ""

    updated_at = await store.replace_availability(event_id, req.participant_name, marked)
    if cache is not None:
        await cache.invalidate(event_id)
    logger.info("Replaced availability for %s on event %s (%d slots)", req.participant_name, event_id, len(marked))
    return AvailabilityResponse(
        participant_name=req.participant_name,
        slot_count=len(marked),
        updated_at=updated_at.isoformat(),
    )
