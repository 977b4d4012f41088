"""Unit tests for the RitualTracker service."""

import asyncio
from datetime import date, timedelta

import pytest

from covey_planner.application.schemas.tables import RITUAL_COMPLETIONS, RITUALS
from covey_planner.application.services import RitualTracker
from covey_planner.domain.entities import MutationState
from covey_planner.domain.exceptions import ValidationFailedError
from covey_planner.domain.ids import completion_id

TODAY = date(2026, 10, 15)


def ritual_row(record_id: str, title: str, days: list[str] | None = None) -> dict:
    return {
        "id": record_id,
        "user_id": "u1",
        "title": title,
        "days_of_week": days if days is not None else ["monday", "wednesday", "friday"],
        "created_at": "2026-09-01T08:00:00+00:00",
        "updated_at": "2026-09-01T08:00:00+00:00",
    }


def completion_row(record_id: str, ritual_id: str, day: date) -> dict:
    return {
        "id": record_id,
        "user_id": "u1",
        "ritual_id": ritual_id,
        "date": f"{day.isoformat()}T12:00:00",
        "created_at": "2026-10-01T08:00:00+00:00",
        "updated_at": "2026-10-01T08:00:00+00:00",
    }


@pytest.fixture
def tracker(make_collection, remote) -> RitualTracker:
    return RitualTracker(
        make_collection(RITUALS),
        make_collection(RITUAL_COMPLETIONS),
        remote,
        clock=lambda: TODAY,
    )


@pytest.mark.asyncio
async def test_load_recomputes_streaks_on_rituals(tracker: RitualTracker, remote):
    remote.seed("rituals", ritual_row("r1", "Meditate"))
    remote.seed(
        "ritual_completions",
        *[completion_row(f"c{n}", "r1", TODAY - timedelta(days=n)) for n in (0, 1, 2, 6, 7, 8, 9)],
    )

    await tracker.load("u1")

    ritual = tracker.get("r1")
    assert tracker.get_streak("r1") == 3
    assert tracker.get_longest_streak("r1") == 4
    assert ritual.streak == 3
    assert ritual.longest_streak == 4


@pytest.mark.asyncio
async def test_completions_for_unknown_rituals_are_discarded(tracker: RitualTracker, remote):
    remote.seed("rituals", ritual_row("r1", "Meditate"))
    remote.seed(
        "ritual_completions",
        completion_row("c1", "r1", TODAY),
        completion_row("c2", "deleted-ritual", TODAY),
    )

    await tracker.load("u1")

    assert [item.completion_id for item in tracker.completed_items()] == ["c1"]
    assert tracker.completions_for("deleted-ritual") == {}


@pytest.mark.asyncio
async def test_toggle_twice_leaves_no_completion(tracker: RitualTracker, remote):
    remote.seed("rituals", ritual_row("r1", "Journal"))
    await tracker.load("u1")

    first = await tracker.toggle_completion("r1", TODAY)
    assert first.synced
    assert tracker.is_completed("r1", TODAY)
    assert tracker.get_streak("r1") == 1

    second = await tracker.toggle_completion("r1", TODAY)

    assert second.synced
    assert not tracker.is_completed("r1", TODAY)
    assert tracker.completions_for("r1") == {}
    assert remote.tables["ritual_completions"] == {}
    assert tracker.get("r1").streak == 0


@pytest.mark.asyncio
async def test_toggle_defaults_to_today_and_pins_noon(tracker: RitualTracker, remote):
    remote.seed("rituals", ritual_row("r1", "Journal"))
    await tracker.load("u1")

    result = await tracker.toggle_completion("r1")

    completion = result.entity
    assert completion.id == completion_id("r1", TODAY)
    assert completion.date.hour == 12
    assert completion.day == TODAY
    assert remote.tables["ritual_completions"][completion.id]["date"] == "2026-10-15T12:00:00"


@pytest.mark.asyncio
async def test_toggle_adopts_existing_remote_completion(tracker: RitualTracker, remote):
    remote.seed("rituals", ritual_row("r1", "Journal"))
    await tracker.load("u1")
    # Recorded elsewhere after this session loaded.
    remote.seed("ritual_completions", completion_row("from-other-tab", "r1", TODAY))

    result = await tracker.toggle_completion("r1", TODAY)

    assert result.entity.id == "from-other-tab"
    assert list(remote.tables["ritual_completions"]) == ["from-other-tab"]
    assert tracker.is_completed("r1", TODAY)


@pytest.mark.asyncio
async def test_toggle_still_completes_when_duplicate_check_fails(tracker: RitualTracker, remote):
    remote.seed("rituals", ritual_row("r1", "Journal"))
    await tracker.load("u1")
    remote.fail.add("select")

    result = await tracker.toggle_completion("r1", TODAY)

    assert result.synced
    assert tracker.is_completed("r1", TODAY)


@pytest.mark.asyncio
async def test_toggle_does_not_wait_past_timeout_for_duplicate_check(make_collection, remote):
    tracker = RitualTracker(
        make_collection(RITUALS, timeout=0.05),
        make_collection(RITUAL_COMPLETIONS, timeout=0.05),
        remote,
        clock=lambda: TODAY,
    )
    remote.seed("rituals", ritual_row("r1", "Journal"))
    await tracker.load("u1")
    remote.delay["select"] = 5.0

    result = await asyncio.wait_for(tracker.toggle_completion("r1", TODAY), timeout=1)

    assert result.synced
    assert result.entity.id == completion_id("r1", TODAY)
    assert tracker.is_completed("r1", TODAY)


@pytest.mark.asyncio
async def test_toggle_for_unknown_ritual_is_not_found(tracker: RitualTracker):
    await tracker.load("u1")

    result = await tracker.toggle_completion("missing", TODAY)

    assert result.state is MutationState.NOT_FOUND


@pytest.mark.asyncio
async def test_add_ritual_requires_a_scheduled_day(tracker: RitualTracker):
    await tracker.load("u1")

    with pytest.raises(ValidationFailedError):
        await tracker.add_ritual("Stretch", days_of_week=[])

    assert tracker.rituals == []


@pytest.mark.asyncio
async def test_add_ritual_uses_weekday_default(tracker: RitualTracker):
    await tracker.load("u1")

    result = await tracker.add_ritual("Stretch")

    assert result.entity.days_of_week == ["monday", "tuesday", "wednesday", "thursday", "friday"]


@pytest.mark.asyncio
async def test_delete_ritual_removes_its_completions(tracker: RitualTracker, remote):
    remote.seed("rituals", ritual_row("r1", "Meditate"), ritual_row("r2", "Read"))
    remote.seed(
        "ritual_completions",
        completion_row("c1", "r1", TODAY),
        completion_row("c2", "r1", TODAY - timedelta(days=1)),
        completion_row("c3", "r2", TODAY),
    )
    await tracker.load("u1")

    await tracker.delete_ritual("r1")

    assert [r.id for r in tracker.rituals] == ["r2"]
    assert set(remote.tables["ritual_completions"]) == {"c3"}


@pytest.mark.asyncio
async def test_completion_rate_uses_ritual_schedule(tracker: RitualTracker, remote):
    # Mon/Wed/Fri between Oct 1 and Oct 15 2026: 2, 5, 7, 9, 12, 14.
    remote.seed("rituals", ritual_row("r1", "Run"))
    remote.seed(
        "ritual_completions",
        completion_row("c1", "r1", date(2026, 10, 2)),
        completion_row("c2", "r1", date(2026, 10, 5)),
        completion_row("c3", "r1", date(2026, 10, 6)),
    )
    await tracker.load("u1")

    stats = tracker.get_completion_rate("r1")

    assert (stats.completed, stats.total, stats.percentage) == (2, 6, 33)


@pytest.mark.asyncio
async def test_completed_items_are_newest_first_with_titles(tracker: RitualTracker, remote):
    remote.seed("rituals", ritual_row("r1", "Meditate"), ritual_row("r2", "Read"))
    remote.seed(
        "ritual_completions",
        completion_row("c1", "r1", TODAY - timedelta(days=2)),
        completion_row("c2", "r2", TODAY),
        completion_row("c3", "r1", TODAY - timedelta(days=1)),
    )
    await tracker.load("u1")

    items = tracker.completed_items(limit=2)

    assert [(i.completion_id, i.ritual_title) for i in items] == [
        ("c2", "Read"),
        ("c3", "Meditate"),
    ]
