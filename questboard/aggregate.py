"""Availability aggregation for the heat map.

Everything here is a pure function over a snapshot of one event's availability:
``{participant_name: {slot_key: note}}``, both levels in submission order.
"""

import logging
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field

from questboard.slots import SlotKeyError, event_slot_keys, parse_slot_key

logger = logging.getLogger(__name__)

Availability = Mapping[str, Mapping[str, str]]


@dataclass(frozen=True)
class SlotNote:
    participant: str
    note: str


@dataclass
class SlotSummary:
    date: str
    hour: int
    count: int = 0
    participants: list[str] = field(default_factory=list)
    notes: list[SlotNote] = field(default_factory=list)

    def add(self, participant: str, note: str) -> None:
        self.count += 1
        self.participants.append(participant)
        if note:
            self.notes.append(SlotNote(participant=participant, note=note))


@dataclass
class Heatmap:
    participants: list[str]
    slots: dict[str, SlotSummary]
    max_count: int = 0
    best_slots: list[str] = field(default_factory=list)


def aggregate_by_slot(
    availability: Availability,
    grid: Sequence[str] | None = None,
) -> dict[str, SlotSummary]:
    """Group participants by the slots they marked available.

    Args:
        availability: Participant name to ``{slot_key: note}``.
        grid: Optional list of the event's slot keys. When given, every grid
            slot is present in the result (zero-filled, grid order) and keys
            outside the grid are dropped. Without it, only marked slots appear,
            in order of first appearance.

    Keys that fail to parse, or fall outside ``grid``, are excluded and logged.
    Participant order at a slot follows the iteration order of ``availability``.
    """
    summaries: dict[str, SlotSummary] = {}
    if grid is not None:
        for key in grid:
            date, hour = parse_slot_key(key)
            summaries[key] = SlotSummary(date=date, hour=hour)

    for participant, slots in availability.items():
        for key, note in slots.items():
            summary = summaries.get(key)
            if summary is None:
                if grid is not None:
                    logger.warning("Ignoring slot %s outside event grid (participant=%s)", key, participant)
                    continue
                try:
                    date, hour = parse_slot_key(key)
                except SlotKeyError as e:
                    logger.warning("Ignoring malformed slot for participant=%s: %s", participant, e)
                    continue
                summary = summaries[key] = SlotSummary(date=date, hour=hour)
            summary.add(participant, note or "")
    return summaries


def slot_counts(availability: Availability) -> dict[str, int]:
    """Count per marked slot; unmarked slots are absent."""
    return {key: s.count for key, s in aggregate_by_slot(availability).items()}


def build_heatmap(
    dates: Iterable[str],
    start_hour: int,
    end_hour: int,
    availability: Availability,
) -> Heatmap:
    """Zero-filled heat map over the full event grid."""
    grid = event_slot_keys(dates, start_hour, end_hour)
    slots = aggregate_by_slot(availability, grid)
    max_count = max((s.count for s in slots.values()), default=0)
    best = [key for key, s in slots.items() if max_count and s.count == max_count]
    return Heatmap(
        participants=list(availability.keys()),
        slots=slots,
        max_count=max_count,
        best_slots=best,
    )
