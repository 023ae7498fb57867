"""Integration tests for report settings selection and data collection queries."""

from typing import Any

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from src.vitelis.models import DataCollectionQuery, Report, ReportDataCollectionQuery
from tests.factories import (
    DataCollectionQueryFactory,
    ReportSettingsFactory,
    ValidatorSettingsFactory,
)

pytestmark = pytest.mark.integration


def _base(deep_dive) -> str:
    return f"/api/v1/deep-dive/{deep_dive['report_id']}"


@pytest.fixture
async def settings_rows(db_session: AsyncSession, deep_dive) -> dict[str, Any]:
    """Two report settings and two validator settings; the report uses the first of each."""
    base = ReportSettingsFactory.build(
        name="Base Report", master_file_id="master-1", prefix=7, settings={"temp": 0.4}
    )
    fallback = ReportSettingsFactory.build(name="Fallback", master_file_id="master-2")
    provision = ValidatorSettingsFactory.build(name="Provision v1", settings={"min_score": 0.7})
    strict = ValidatorSettingsFactory.build(name="Strict", settings={"min_score": 0.9})
    db_session.add_all([base, fallback, provision, strict])
    await db_session.flush()

    report = await db_session.get(Report, deep_dive["report_id"])
    assert report is not None
    report.report_settings_id = base.id
    report.source_validation_settings_id = provision.id
    await db_session.commit()

    return {
        "base": base.id,
        "fallback": fallback.id,
        "provision": provision.id,
        "strict": strict.id,
    }


class TestReportSettings:
    async def test_current_settings_and_options(
        self, client: AsyncClient, deep_dive, settings_rows, admin_headers
    ):
        response = await client.get(f"{_base(deep_dive)}/settings", headers=admin_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["report"]["id"] == deep_dive["report_id"]
        assert data["current"]["report_settings"] == {
            "id": settings_rows["base"],
            "name": "Base Report",
            "master_file_id": "master-1",
            "prefix": 7,
            "settings": {"temp": 0.4},
        }
        assert data["current"]["validator_settings"]["id"] == settings_rows["provision"]
        assert [s["name"] for s in data["options"]["report_settings"]] == [
            "Base Report",
            "Fallback",
        ]
        assert [s["name"] for s in data["options"]["validator_settings"]] == [
            "Provision v1",
            "Strict",
        ]

    async def test_report_without_settings(self, client: AsyncClient, deep_dive, admin_headers):
        data = (await client.get(f"{_base(deep_dive)}/settings", headers=admin_headers)).json()

        assert data["current"] == {"report_settings": None, "validator_settings": None}
        assert data["options"] == {"report_settings": [], "validator_settings": []}

    async def test_reuse_switches_both(
        self, client: AsyncClient, deep_dive, settings_rows, admin_headers
    ):
        response = await client.patch(
            f"{_base(deep_dive)}/settings",
            json={
                "report_settings_action": {"mode": "reuse", "id": settings_rows["fallback"]},
                "validator_settings_action": {"mode": "reuse", "id": settings_rows["strict"]},
            },
            headers=admin_headers,
        )

        assert response.status_code == 200
        current = response.json()["current"]
        assert current["report_settings"]["id"] == settings_rows["fallback"]
        assert current["validator_settings"]["id"] == settings_rows["strict"]

    async def test_clone_and_blank_create_new_rows(
        self, client: AsyncClient, deep_dive, settings_rows, admin_headers
    ):
        response = await client.patch(
            f"{_base(deep_dive)}/settings",
            json={
                "report_settings_action": {
                    "mode": "create",
                    "strategy": "clone",
                    "base_id": settings_rows["base"],
                    "settings": {"temp": 0.55},
                },
                "validator_settings_action": {
                    "mode": "create",
                    "strategy": "blank",
                    "name": "New Validator",
                    "settings": {"min_score": 0.75},
                },
            },
            headers=admin_headers,
        )

        assert response.status_code == 200
        data = response.json()
        cloned = data["current"]["report_settings"]
        assert cloned["id"] not in (settings_rows["base"], settings_rows["fallback"])
        assert cloned["name"] == f"Base Report (Report #{deep_dive['report_id']} copy)"
        assert cloned["master_file_id"] == "master-1"
        assert cloned["prefix"] == 7
        assert cloned["settings"] == {"temp": 0.55}
        assert data["current"]["validator_settings"]["name"] == "New Validator"
        assert len(data["options"]["report_settings"]) == 3
        assert len(data["options"]["validator_settings"]) == 3

    async def test_blank_report_settings(
        self, client: AsyncClient, deep_dive, settings_rows, admin_headers
    ):
        response = await client.patch(
            f"{_base(deep_dive)}/settings",
            json={
                "report_settings_action": {
                    "mode": "create",
                    "strategy": "blank",
                    "name": "Fresh",
                    "master_file_id": "master-9",
                    "settings": {},
                }
            },
            headers=admin_headers,
        )

        current = response.json()["current"]
        assert current["report_settings"]["name"] == "Fresh"
        assert current["report_settings"]["prefix"] is None
        assert current["validator_settings"]["id"] == settings_rows["provision"]

    async def test_missing_base_leaves_report_unchanged(
        self, client: AsyncClient, deep_dive, settings_rows, admin_headers
    ):
        response = await client.patch(
            f"{_base(deep_dive)}/settings",
            json={
                "report_settings_action": {"mode": "reuse", "id": settings_rows["fallback"]},
                "validator_settings_action": {
                    "mode": "create",
                    "strategy": "clone",
                    "base_id": 999,
                    "settings": {},
                },
            },
            headers=admin_headers,
        )
        assert response.status_code == 404
        assert response.json()["error"] == "Validator settings 999 not found"

        current = (
            await client.get(f"{_base(deep_dive)}/settings", headers=admin_headers)
        ).json()["current"]
        assert current["report_settings"]["id"] == settings_rows["base"]

    @pytest.mark.parametrize(
        "body",
        [
            {"report_settings_action": {"mode": "create", "strategy": "clone"}},
            {"report_settings_action": {"mode": "reuse", "id": "2"}},
            {"validator_settings_action": {"mode": "create", "strategy": "copy"}},
            {
                "report_settings_action": {
                    "mode": "create",
                    "strategy": "blank",
                    "name": "No master file",
                    "settings": {},
                }
            },
        ],
    )
    async def test_invalid_action_format(
        self, client: AsyncClient, deep_dive, admin_headers, body
    ):
        response = await client.patch(
            f"{_base(deep_dive)}/settings", json=body, headers=admin_headers
        )
        assert response.status_code == 422

    async def test_empty_update_is_rejected(self, client: AsyncClient, deep_dive, admin_headers):
        response = await client.patch(
            f"{_base(deep_dive)}/settings", json={}, headers=admin_headers
        )
        assert response.status_code == 400

    async def test_unknown_report(self, client: AsyncClient, admin_headers):
        read = await client.get("/api/v1/deep-dive/999/settings", headers=admin_headers)
        write = await client.patch(
            "/api/v1/deep-dive/999/settings",
            json={"report_settings_action": {"mode": "reuse", "id": 1}},
            headers=admin_headers,
        )

        assert read.status_code == 404
        assert write.status_code == 404

    async def test_requires_admin(self, client: AsyncClient, deep_dive, user_headers):
        response = await client.get(f"{_base(deep_dive)}/settings", headers=user_headers)
        assert response.status_code == 403


@pytest.fixture
async def queries(db_session: AsyncSession, deep_dive) -> dict[str, int]:
    """One query linked to the report and one that is not."""
    linked = DataCollectionQueryFactory.build(
        query={"goal": "Pricing strategy", "search_queries": ["pricing 2025", "discounts"]}
    )
    unlinked = DataCollectionQueryFactory.build()
    db_session.add_all([linked, unlinked])
    await db_session.flush()
    db_session.add(
        ReportDataCollectionQuery(
            report_id=deep_dive["report_id"], data_collection_query_id=linked.id
        )
    )
    await db_session.commit()
    return {"linked": linked.id, "unlinked": unlinked.id}


class TestReportQueries:
    async def test_lists_only_linked_queries(
        self, client: AsyncClient, deep_dive, queries, admin_headers
    ):
        response = await client.get(f"{_base(deep_dive)}/queries", headers=admin_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["report_name"].startswith("Deep dive")
        assert data["queries"] == [
            {
                "id": queries["linked"],
                "goal": "Pricing strategy",
                "search_queries": ["pricing 2025", "discounts"],
            }
        ]

    async def test_update_trims_goal_and_drops_blank_queries(
        self,
        client: AsyncClient,
        db_session: AsyncSession,
        deep_dive,
        queries,
        admin_headers,
    ):
        response = await client.put(
            f"{_base(deep_dive)}/queries/{queries['linked']}",
            json={"goal": "  Pricing by segment  ", "search_queries": ["b2b pricing", "  ", ""]},
            headers=admin_headers,
        )

        assert response.status_code == 200
        assert response.json() == {
            "id": queries["linked"],
            "goal": "Pricing by segment",
            "search_queries": ["b2b pricing"],
        }
        stored = await db_session.get(DataCollectionQuery, queries["linked"])
        assert stored is not None
        await db_session.refresh(stored)
        assert stored.query["goal"] == "Pricing by segment"

    async def test_blank_goal_is_rejected(
        self, client: AsyncClient, deep_dive, queries, admin_headers
    ):
        response = await client.put(
            f"{_base(deep_dive)}/queries/{queries['linked']}",
            json={"goal": "   ", "search_queries": ["x"]},
            headers=admin_headers,
        )

        assert response.status_code == 400
        assert response.json()["error"] == "Goal cannot be empty"

    async def test_unlinked_query_is_not_found(
        self, client: AsyncClient, deep_dive, queries, admin_headers
    ):
        response = await client.put(
            f"{_base(deep_dive)}/queries/{queries['unlinked']}",
            json={"goal": "Anything", "search_queries": []},
            headers=admin_headers,
        )
        assert response.status_code == 404

    async def test_search_queries_must_be_a_list(
        self, client: AsyncClient, deep_dive, queries, admin_headers
    ):
        response = await client.put(
            f"{_base(deep_dive)}/queries/{queries['linked']}",
            json={"goal": "Anything", "search_queries": "pricing"},
            headers=admin_headers,
        )
        assert response.status_code == 422

    async def test_unknown_report(self, client: AsyncClient, admin_headers):
        response = await client.get("/api/v1/deep-dive/999/queries", headers=admin_headers)
        assert response.status_code == 404
