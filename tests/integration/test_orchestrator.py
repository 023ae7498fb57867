"""Integration tests for orchestrator state and engine ticks."""

from unittest.mock import AsyncMock

import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.integration


def _url(deep_dive) -> str:
    return f"/api/v1/deep-dive/{deep_dive['report_id']}/orchestrator"


async def test_status_defaults_to_pending(client: AsyncClient, deep_dive, admin_headers):
    response = await client.get(_url(deep_dive), headers=admin_headers)

    assert response.status_code == 200
    assert response.json() == {
        "report_id": deep_dive["report_id"],
        "status": "PENDING",
        "metadata": None,
    }


async def test_metadata_patch_needs_existing_record(
    client: AsyncClient, deep_dive, admin_headers
):
    response = await client.patch(
        _url(deep_dive), json={"metadata": {"note": "x"}}, headers=admin_headers
    )
    assert response.status_code == 404


async def test_empty_patch_is_rejected(client: AsyncClient, deep_dive, admin_headers):
    response = await client.patch(_url(deep_dive), json={}, headers=admin_headers)
    assert response.status_code == 400


async def test_metadata_patch_merges_and_null_deletes(
    client: AsyncClient, deep_dive, admin_headers
):
    created = await client.patch(
        _url(deep_dive),
        json={"status": "processing", "metadata": {"a": 1, "b": 2}},
        headers=admin_headers,
    )
    assert created.json()["status"] == "PROCESSING"

    patched = await client.patch(
        _url(deep_dive), json={"metadata": {"a": None, "c": 3}}, headers=admin_headers
    )

    assert patched.status_code == 200
    assert patched.json()["status"] == "PROCESSING"
    assert patched.json()["metadata"] == {"b": 2, "c": 3}


async def test_tick_rejected_unless_processing(
    client: AsyncClient, deep_dive, admin_headers, engine_notifier: AsyncMock
):
    response = await client.post(f"{_url(deep_dive)}/trigger", headers=admin_headers)

    assert response.status_code == 409
    assert "PROCESSING" in response.json()["error"]
    engine_notifier.notify.assert_not_awaited()


async def test_start_then_tick(
    client: AsyncClient, deep_dive, admin_headers, engine_notifier: AsyncMock
):
    first, second = deep_dive["step_ids"]
    for step_id in (first, second):
        await client.post(
            f"/api/v1/deep-dive/{deep_dive['report_id']}/steps",
            json={"step_id": step_id},
            headers=admin_headers,
        )

    started = await client.post(
        _url(deep_dive), json={"parallel_limit": 3}, headers=admin_headers
    )
    assert started.status_code == 200
    assert started.json() == {"status": "PROCESSING", "steps": [first, second]}

    state = (await client.get(_url(deep_dive), headers=admin_headers)).json()
    assert state["metadata"]["parallel_limit"] == 3

    tick = await client.post(f"{_url(deep_dive)}/trigger", headers=admin_headers)
    assert tick.status_code == 200
    assert tick.json() == {
        "accepted": True,
        "report_id": deep_dive["report_id"],
        "channel": "engine_tick",
    }
    engine_notifier.notify.assert_awaited_once()
    assert engine_notifier.notify.await_args.args[0] == "engine_tick"


async def test_tick_to_second_instance(
    client: AsyncClient, deep_dive, admin_headers, engine_notifier: AsyncMock
):
    await client.patch(_url(deep_dive), json={"status": "PROCESSING"}, headers=admin_headers)

    response = await client.post(
        f"{_url(deep_dive)}/trigger", json={"instance": 2}, headers=admin_headers
    )

    assert response.json()["channel"] == "engine_tick_inst2"


async def test_orchestrator_requires_admin(client: AsyncClient, deep_dive, user_headers):
    response = await client.get(_url(deep_dive), headers=user_headers)
    assert response.status_code == 403


class TestUnknownReport:
    url = "/api/v1/deep-dive/999/orchestrator"

    async def test_status_update_is_not_found(self, client: AsyncClient, admin_headers):
        response = await client.patch(
            self.url, json={"status": "PROCESSING"}, headers=admin_headers
        )

        assert response.status_code == 404
        assert response.json()["error"] == "Report 999 not found"

    async def test_start_is_not_found(
        self, client: AsyncClient, admin_headers, engine_notifier: AsyncMock
    ):
        response = await client.post(self.url, json={"parallel_limit": 2}, headers=admin_headers)

        assert response.status_code == 404
        engine_notifier.notify.assert_not_awaited()
