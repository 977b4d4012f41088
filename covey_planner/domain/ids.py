"""Client-side identifier generation for every synced entity."""

from datetime import date, datetime
from uuid import NAMESPACE_URL, uuid4, uuid5

_COMPLETION_NAMESPACE = uuid5(NAMESPACE_URL, "covey-planner/ritual-completions")


def new_id() -> str:
    """Return a fresh random UUID string (assigned once, never reassigned)."""
    return str(uuid4())


def completion_id(ritual_id: str, day: date | datetime) -> str:
    """Deterministic id for the completion of *ritual_id* on *day*.

    The same (ritual, calendar day) pair always yields the same id, so a
    repeated insert for that day hits the existing record instead of
    creating a duplicate.
    """
    if isinstance(day, datetime):
        day = day.date()
    return str(uuid5(_COMPLETION_NAMESPACE, f"{ritual_id}:{day.isoformat()}"))
