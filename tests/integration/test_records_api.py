"""Integration tests for the owner-scoped record API over an in-memory database."""

import pytest

RECORDS = "/api/v1/records"


def task_row(record_id: str, title: str, owner: str = "u1", **fields) -> dict:
    return {
        "id": record_id,
        "user_id": owner,
        "title": title,
        "created_at": "2026-10-01T08:00:00+00:00",
        "updated_at": "2026-10-01T08:00:00+00:00",
        **fields,
    }


@pytest.mark.asyncio
async def test_create_and_list_task(api_client):
    async with api_client() as client:
        created = await client.post(f"{RECORDS}/tasks", json=task_row("t1", "Plan the quarter"))
        listed = await client.get(f"{RECORDS}/tasks", params={"owner_id": "u1"})

    assert created.status_code == 201
    assert created.json()["quadrant"] == "q2"
    assert created.json()["completed"] is False
    assert listed.status_code == 200
    assert [row["id"] for row in listed.json()] == ["t1"]


@pytest.mark.asyncio
async def test_list_is_scoped_to_owner(api_client):
    async with api_client() as client:
        await client.post(f"{RECORDS}/tasks", json=task_row("t1", "Mine"))
        await client.post(f"{RECORDS}/tasks", json=task_row("t2", "Theirs", owner="u2"))
        response = await client.get(f"{RECORDS}/tasks", params={"owner_id": "u2"})

    assert [row["title"] for row in response.json()] == ["Theirs"]


@pytest.mark.asyncio
async def test_list_without_owner_is_rejected(api_client):
    async with api_client() as client:
        response = await client.get(f"{RECORDS}/tasks")

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_unknown_table_is_404(api_client):
    async with api_client() as client:
        response = await client.get(f"{RECORDS}/habits", params={"owner_id": "u1"})

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_unknown_filter_column_is_400(api_client):
    async with api_client() as client:
        response = await client.get(f"{RECORDS}/tasks", params={"owner_id": "u1", "colour": "red"})

    assert response.status_code == 400
    assert "colour" in response.json()["detail"]


@pytest.mark.asyncio
async def test_invalid_row_is_422_with_field_errors(api_client):
    async with api_client() as client:
        response = await client.post(
            f"{RECORDS}/tasks", json={"id": "t1", "user_id": "u1", "quadrant": "q9"}
        )

    assert response.status_code == 422
    detail = response.json()["detail"]
    assert any(error.startswith("title") for error in detail)
    assert any(error.startswith("quadrant") for error in detail)


@pytest.mark.asyncio
async def test_insert_of_existing_id_overwrites(api_client):
    async with api_client() as client:
        await client.post(f"{RECORDS}/tasks", json=task_row("t1", "Draft"))
        again = await client.post(f"{RECORDS}/tasks", json=task_row("t1", "Final"))
        listed = await client.get(f"{RECORDS}/tasks", params={"owner_id": "u1"})

    assert again.status_code == 201
    assert [row["title"] for row in listed.json()] == ["Final"]


@pytest.mark.asyncio
async def test_insert_over_another_owners_id_is_409(api_client):
    async with api_client() as client:
        await client.post(f"{RECORDS}/tasks", json=task_row("t1", "Mine"))
        response = await client.post(f"{RECORDS}/tasks", json=task_row("t1", "Hijack", owner="u2"))

    assert response.status_code == 409


@pytest.mark.asyncio
async def test_patch_updates_fields_and_timestamp(api_client):
    async with api_client() as client:
        await client.post(f"{RECORDS}/tasks", json=task_row("t1", "Deep work"))
        response = await client.patch(
            f"{RECORDS}/tasks/t1",
            params={"owner_id": "u1"},
            json={"completed": True, "time_spent": 1500},
        )

    assert response.status_code == 200
    row = response.json()
    assert row["completed"] is True
    assert row["time_spent"] == 1500
    assert row["updated_at"] > row["created_at"]


@pytest.mark.asyncio
async def test_patch_by_other_owner_is_404(api_client):
    async with api_client() as client:
        await client.post(f"{RECORDS}/tasks", json=task_row("t1", "Mine"))
        response = await client.patch(
            f"{RECORDS}/tasks/t1", params={"owner_id": "u2"}, json={"title": "Stolen"}
        )

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_patch_cannot_change_owner(api_client):
    async with api_client() as client:
        await client.post(f"{RECORDS}/tasks", json=task_row("t1", "Mine"))
        response = await client.patch(
            f"{RECORDS}/tasks/t1", params={"owner_id": "u1"}, json={"user_id": "u2"}
        )

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_delete_is_idempotent(api_client):
    async with api_client() as client:
        await client.post(f"{RECORDS}/tasks", json=task_row("t1", "Obsolete"))
        first = await client.delete(f"{RECORDS}/tasks/t1", params={"owner_id": "u1"})
        second = await client.delete(f"{RECORDS}/tasks/t1", params={"owner_id": "u1"})
        listed = await client.get(f"{RECORDS}/tasks", params={"owner_id": "u1"})

    assert (first.status_code, second.status_code) == (204, 204)
    assert listed.json() == []


@pytest.mark.asyncio
async def test_boolean_and_date_filters(api_client):
    async with api_client() as client:
        await client.post(f"{RECORDS}/tasks", json=task_row("t1", "Done", completed=True))
        await client.post(
            f"{RECORDS}/tasks", json=task_row("t2", "Due", due_date="2026-10-20")
        )
        done = await client.get(f"{RECORDS}/tasks", params={"owner_id": "u1", "completed": "true"})
        due = await client.get(
            f"{RECORDS}/tasks", params={"owner_id": "u1", "due_date": "2026-10-20"}
        )
        bad = await client.get(f"{RECORDS}/tasks", params={"owner_id": "u1", "completed": "maybe"})

    assert [row["id"] for row in done.json()] == ["t1"]
    assert [row["id"] for row in due.json()] == ["t2"]
    assert bad.status_code == 422


@pytest.mark.asyncio
async def test_completion_date_filter_matches_local_noon(api_client):
    async with api_client() as client:
        await client.post(
            f"{RECORDS}/ritual_completions",
            json={"id": "c1", "user_id": "u1", "ritual_id": "r1", "date": "2026-10-15T12:00:00"},
        )
        response = await client.get(
            f"{RECORDS}/ritual_completions",
            params={"owner_id": "u1", "ritual_id": "r1", "date": "2026-10-15T12:00:00"},
        )

    assert [row["id"] for row in response.json()] == ["c1"]
    assert response.json()[0]["date"] == "2026-10-15T12:00:00"


@pytest.mark.asyncio
async def test_default_and_explicit_ordering(api_client):
    async with api_client() as client:
        for record_id, priority in (("b1", 3), ("b2", 1), ("b3", 2)):
            await client.post(
                f"{RECORDS}/big_rocks",
                json={"id": record_id, "user_id": "u1", "title": record_id, "priority": priority},
            )
        default = await client.get(f"{RECORDS}/big_rocks", params={"owner_id": "u1"})
        reversed_ = await client.get(
            f"{RECORDS}/big_rocks",
            params={"owner_id": "u1", "order_by": "priority", "descending": "true"},
        )

    assert [row["id"] for row in default.json()] == ["b2", "b3", "b1"]
    assert [row["id"] for row in reversed_.json()] == ["b1", "b3", "b2"]


@pytest.mark.asyncio
async def test_weekly_plan_must_span_monday_to_sunday(api_client):
    plan = {
        "id": "w1",
        "user_id": "u1",
        "week_start_date": "2026-10-12",
        "week_end_date": "2026-10-18",
    }
    async with api_client() as client:
        created = await client.post(f"{RECORDS}/weekly_plans", json=plan)
        skewed = await client.post(
            f"{RECORDS}/weekly_plans",
            json={**plan, "id": "w2", "week_start_date": "2026-10-13", "week_end_date": "2026-10-19"},
        )

    assert created.status_code == 201
    assert created.json()["theme"] == ""
    assert skewed.status_code == 422
    assert any("Monday" in error for error in skewed.json()["detail"])


@pytest.mark.asyncio
async def test_time_blocks_list_in_start_time_order(api_client):
    def block(record_id: str, start: str, end: str) -> dict:
        return {
            "id": record_id,
            "user_id": "u1",
            "daily_plan_id": "d1",
            "title": record_id,
            "start_time": start,
            "end_time": end,
        }

    async with api_client() as client:
        await client.post(f"{RECORDS}/time_blocks", json=block("late", "15:00", "16:00"))
        await client.post(f"{RECORDS}/time_blocks", json=block("early", "08:30", "09:00"))
        backwards = await client.post(f"{RECORDS}/time_blocks", json=block("bad", "10:00", "09:00"))
        listed = await client.get(
            f"{RECORDS}/time_blocks", params={"owner_id": "u1", "daily_plan_id": "d1"}
        )

    assert backwards.status_code == 422
    assert [row["id"] for row in listed.json()] == ["early", "late"]
