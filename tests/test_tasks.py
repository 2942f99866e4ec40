"""Tests for task CRUD, progress, toggling and history corrections."""
import pytest
from httpx import AsyncClient

from syariahos.db.models import ActivityLog, Task


async def _create(client: AsyncClient, **overrides) -> dict:
    payload = {"text": "Bayar zakat", "category": "Keuangan"}
    payload.update(overrides)
    response = await client.post("/tasks", json=payload)
    assert response.status_code == 201, response.text
    return response.json()["data"]


@pytest.mark.asyncio
async def test_tasks_require_auth(client: AsyncClient):
    response = await client.get("/tasks")
    assert response.status_code == 401
    assert response.json() == {"message": "Unauthenticated"}


@pytest.mark.asyncio
async def test_create_binary_task(authed_client: AsyncClient, db, test_auth):
    response = await authed_client.post(
        "/tasks", json={"text": "Audit akad", "category": "Kepatuhan", "resetCycle": "weekly"}
    )
    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "Task created successfully"
    task = body["data"]
    assert task["completed"] is False
    assert task["progress"] == 0
    assert task["hasLimit"] is False
    assert task["resetCycle"] == "weekly"
    assert task["history"] == []

    log = db.query(ActivityLog).filter(ActivityLog.action == "task.created").one()
    assert log.user_id == test_auth.user.id
    assert log.subject_id == task["id"]


@pytest.mark.asyncio
async def test_create_limit_task_requires_target_and_unit(authed_client: AsyncClient, db):
    response = await authed_client.post(
        "/tasks", json={"text": "Tabungan", "category": "Keuangan", "hasLimit": True}
    )
    assert response.status_code == 422
    errors = response.json()["errors"]
    assert "targetValue" in errors
    assert "unit" in errors
    assert db.query(Task).count() == 0


@pytest.mark.asyncio
async def test_create_rejects_unknown_cycle(authed_client: AsyncClient):
    response = await authed_client.post(
        "/tasks", json={"text": "X", "category": "SDM", "resetCycle": "hourly"}
    )
    assert response.status_code == 422
    assert "resetCycle" in response.json()["errors"]


@pytest.mark.asyncio
async def test_list_filters(authed_client: AsyncClient):
    await _create(authed_client, text="Rekap kas", category="Keuangan", resetCycle="daily")
    await _create(authed_client, text="Pelatihan amil", category="SDM", resetCycle="monthly")

    response = await authed_client.get("/tasks")
    assert [t["text"] for t in response.json()["data"]] == ["Pelatihan amil", "Rekap kas"]

    response = await authed_client.get("/tasks", params={"category": "SDM"})
    assert [t["text"] for t in response.json()["data"]] == ["Pelatihan amil"]

    response = await authed_client.get("/tasks", params={"search": "kas"})
    assert [t["text"] for t in response.json()["data"]] == ["Rekap kas"]

    response = await authed_client.get("/tasks", params={"search": "keuangan"})
    assert response.json()["data"] == []

    response = await authed_client.get("/tasks", params={"cycle": "daily"})
    assert [t["text"] for t in response.json()["data"]] == ["Rekap kas"]


@pytest.mark.asyncio
async def test_progress_rounds_and_completes(authed_client: AsyncClient, db):
    task = await _create(authed_client, hasLimit=True, targetValue=3, unit="kali")

    response = await authed_client.post(f"/tasks/{task['id']}/progress", json={"value": 1})
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["currentValue"] == 1
    assert data["progress"] == 33
    assert data["completed"] is False

    response = await authed_client.post(
        f"/tasks/{task['id']}/progress", json={"value": 5, "note": "lunas"}
    )
    data = response.json()["data"]
    assert data["currentValue"] == 6
    assert data["progress"] == 100
    assert data["completed"] is True
    assert [h["value"] for h in data["history"]] == [1, 5]
    assert data["history"][1]["note"] == "lunas"

    actions = [a for (a,) in db.query(ActivityLog.action).order_by(ActivityLog.id)]
    assert actions[-2:] == ["task.progressed", "task.completed"]


@pytest.mark.asyncio
async def test_progress_defaults_to_increment(authed_client: AsyncClient):
    task = await _create(
        authed_client, hasLimit=True, targetValue=10, unit="juz", incrementValue=2
    )
    response = await authed_client.post(f"/tasks/{task['id']}/progress", json={})
    data = response.json()["data"]
    assert data["currentValue"] == 2
    assert data["progress"] == 20


@pytest.mark.asyncio
async def test_progress_half_rounds_up(authed_client: AsyncClient):
    task = await _create(authed_client, hasLimit=True, targetValue=8, unit="kali")
    response = await authed_client.post(f"/tasks/{task['id']}/progress", json={"value": 1})
    # 12.5% -> 13
    assert response.json()["data"]["progress"] == 13


@pytest.mark.asyncio
async def test_progress_on_binary_task_is_rejected(authed_client: AsyncClient):
    task = await _create(authed_client)
    response = await authed_client.post(f"/tasks/{task['id']}/progress", json={"value": 1})
    assert response.status_code == 422
    assert response.json()["message"] == "Progress can only be added to tasks with a target."


@pytest.mark.asyncio
async def test_progress_rejects_non_positive_value(authed_client: AsyncClient):
    task = await _create(authed_client, hasLimit=True, targetValue=3, unit="kali")
    response = await authed_client.post(f"/tasks/{task['id']}/progress", json={"value": 0})
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_toggle_binary_task(authed_client: AsyncClient, db):
    task = await _create(authed_client)

    response = await authed_client.patch(f"/tasks/{task['id']}/toggle")
    data = response.json()["data"]
    assert data["completed"] is True
    assert data["progress"] == 100
    assert [h["value"] for h in data["history"]] == [1]

    response = await authed_client.patch(f"/tasks/{task['id']}/toggle")
    data = response.json()["data"]
    assert data["completed"] is False
    assert data["progress"] == 0
    assert [h["value"] for h in data["history"]] == [1, 0]

    actions = {a for (a,) in db.query(ActivityLog.action)}
    assert {"task.completed", "task.uncompleted"} <= actions


@pytest.mark.asyncio
async def test_toggle_limit_task_adds_increment(authed_client: AsyncClient):
    task = await _create(
        authed_client, hasLimit=True, targetValue=4, unit="kali", incrementValue=2
    )
    response = await authed_client.patch(f"/tasks/{task['id']}/toggle")
    data = response.json()["data"]
    assert data["currentValue"] == 2
    assert data["progress"] == 50


@pytest.mark.asyncio
async def test_update_recomputes_progress(authed_client: AsyncClient):
    task = await _create(authed_client, hasLimit=True, targetValue=10, unit="kali")
    await authed_client.post(f"/tasks/{task['id']}/progress", json={"value": 5})

    response = await authed_client.put(f"/tasks/{task['id']}", json={"targetValue": 5})
    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Task updated successfully"
    assert body["data"]["progress"] == 100
    assert body["data"]["completed"] is True


@pytest.mark.asyncio
async def test_update_rejects_limit_without_unit(authed_client: AsyncClient):
    task = await _create(authed_client)
    response = await authed_client.put(
        f"/tasks/{task['id']}", json={"hasLimit": True, "targetValue": 5}
    )
    assert response.status_code == 422
    assert list(response.json()["errors"]) == ["unit"]


@pytest.mark.asyncio
async def test_update_ignores_progress_fields(authed_client: AsyncClient):
    task = await _create(authed_client, hasLimit=True, targetValue=10, unit="kali")
    await authed_client.post(f"/tasks/{task['id']}/progress", json={"value": 1})

    response = await authed_client.put(
        f"/tasks/{task['id']}", json={"currentValue": 8, "completed": True, "text": "Tadarus"}
    )
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["text"] == "Tadarus"
    assert data["currentValue"] == 1
    assert data["progress"] == 10
    assert data["completed"] is False
    assert [h["value"] for h in data["history"]] == [1]


@pytest.mark.asyncio
async def test_update_binary_task_keeps_completion(authed_client: AsyncClient):
    task = await _create(authed_client)
    response = await authed_client.put(f"/tasks/{task['id']}", json={"completed": True})
    data = response.json()["data"]
    assert data["completed"] is False
    assert data["progress"] == 0


@pytest.mark.asyncio
async def test_update_dropping_limit_resets_progress(authed_client: AsyncClient):
    task = await _create(authed_client, hasLimit=True, targetValue=10, unit="kali")
    await authed_client.post(f"/tasks/{task['id']}/progress", json={"value": 6})

    response = await authed_client.put(f"/tasks/{task['id']}", json={"hasLimit": False})
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["hasLimit"] is False
    assert data["completed"] is False
    assert data["progress"] == 0


@pytest.mark.asyncio
async def test_delete_task(authed_client: AsyncClient, db):
    task = await _create(authed_client)
    await authed_client.patch(f"/tasks/{task['id']}/toggle")

    response = await authed_client.delete(f"/tasks/{task['id']}")
    assert response.status_code == 200
    assert response.json() == {"message": "Task deleted successfully"}

    response = await authed_client.get(f"/tasks/{task['id']}")
    assert response.status_code == 404
    assert response.json() == {"message": "Task not found"}


@pytest.mark.asyncio
async def test_history_update_recalculates(authed_client: AsyncClient):
    task = await _create(authed_client, hasLimit=True, targetValue=10, unit="kali")
    await authed_client.post(f"/tasks/{task['id']}/progress", json={"value": 4})
    response = await authed_client.post(f"/tasks/{task['id']}/progress", json={"value": 6})
    entries = response.json()["data"]["history"]
    assert response.json()["data"]["completed"] is True

    response = await authed_client.put(
        f"/tasks/{task['id']}/history/{entries[1]['id']}", json={"value": 1, "note": "koreksi"}
    )
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["currentValue"] == 5
    assert data["progress"] == 50
    assert data["completed"] is False
    assert data["history"][1]["note"] == "koreksi"


@pytest.mark.asyncio
async def test_history_delete_recalculates(authed_client: AsyncClient):
    task = await _create(authed_client, hasLimit=True, targetValue=10, unit="kali")
    await authed_client.post(f"/tasks/{task['id']}/progress", json={"value": 4})
    response = await authed_client.post(f"/tasks/{task['id']}/progress", json={"value": 2})
    entries = response.json()["data"]["history"]

    response = await authed_client.delete(f"/tasks/{task['id']}/history/{entries[0]['id']}")
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["currentValue"] == 2
    assert data["progress"] == 20
    assert [h["value"] for h in data["history"]] == [2]


@pytest.mark.asyncio
async def test_history_update_value_only_keeps_note(authed_client: AsyncClient):
    task = await _create(authed_client, hasLimit=True, targetValue=10, unit="kali")
    response = await authed_client.post(
        f"/tasks/{task['id']}/progress", json={"value": 4, "note": "infaq"}
    )
    entry_id = response.json()["data"]["history"][0]["id"]

    response = await authed_client.put(
        f"/tasks/{task['id']}/history/{entry_id}", json={"value": 3}
    )
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["currentValue"] == 3
    assert data["history"][0]["note"] == "infaq"


@pytest.mark.asyncio
async def test_history_update_note_only_keeps_value(authed_client: AsyncClient):
    task = await _create(authed_client, hasLimit=True, targetValue=10, unit="kali")
    response = await authed_client.post(
        f"/tasks/{task['id']}/progress", json={"value": 4, "note": "infaq"}
    )
    entry_id = response.json()["data"]["history"][0]["id"]

    response = await authed_client.put(
        f"/tasks/{task['id']}/history/{entry_id}", json={"note": "sedekah"}
    )
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["currentValue"] == 4
    assert data["progress"] == 40
    assert data["history"][0]["value"] == 4
    assert data["history"][0]["note"] == "sedekah"


@pytest.mark.asyncio
async def test_history_entry_of_other_task_is_404(authed_client: AsyncClient):
    first = await _create(authed_client, hasLimit=True, targetValue=10, unit="kali")
    second = await _create(authed_client, hasLimit=True, targetValue=10, unit="kali")
    response = await authed_client.post(f"/tasks/{first['id']}/progress", json={"value": 1})
    entry_id = response.json()["data"]["history"][0]["id"]

    response = await authed_client.delete(f"/tasks/{second['id']}/history/{entry_id}")
    assert response.status_code == 404
    assert response.json() == {"message": "History entry not found"}


@pytest.mark.asyncio
async def test_categories_are_seeded(authed_client: AsyncClient):
    response = await authed_client.get("/categories")
    assert response.status_code == 200
    names = [c["name"] for c in response.json()["data"]]
    assert names == ["SDM", "Keuangan", "Kepatuhan", "Pemasaran", "Operasional", "Teknologi"]
