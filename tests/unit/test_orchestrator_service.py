"""Tests for orchestrator metadata merging and engine tick dispatch."""

import json
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
from sqlalchemy.exc import OperationalError

from src.vitelis.core.config import get_settings
from src.vitelis.core.exceptions import ConflictError, NotFoundError, UpstreamError, ValidationError
from src.vitelis.models import ReportOrchestrator, StepStatus
from src.vitelis.services.orchestrator_service import (
    OrchestratorService,
    engine_channel,
    merge_metadata,
)

pytestmark = pytest.mark.unit


class TestMergeMetadata:
    def test_adds_and_overwrites_keys(self):
        assert merge_metadata({"a": 1, "b": 2}, {"b": 3, "c": 4}) == {"a": 1, "b": 3, "c": 4}

    def test_null_deletes_key(self):
        assert merge_metadata({"a": 1, "b": 2}, {"a": None}) == {"b": 2}

    def test_null_for_missing_key_is_ignored(self):
        assert merge_metadata(None, {"x": None}) == {}

    def test_existing_is_not_mutated(self):
        existing = {"a": 1}
        merge_metadata(existing, {"a": None})
        assert existing == {"a": 1}


@pytest.mark.parametrize(
    ("instance", "channel"),
    [(1, "engine_tick"), (2, "engine_tick_inst2"), (7, "engine_tick_inst7")],
)
def test_engine_channel(instance, channel):
    assert engine_channel(instance) == channel


@pytest.fixture
def orchestrator_repo() -> MagicMock:
    repo = MagicMock()
    repo.get_by_report = AsyncMock(return_value=None)
    repo.add = MagicMock()
    return repo


@pytest.fixture
def report_step_repo() -> MagicMock:
    repo = MagicMock()
    repo.list_with_steps = AsyncMock(return_value=[])
    return repo


@pytest.fixture
def report_repo() -> MagicMock:
    repo = MagicMock()
    repo.get_by_id = AsyncMock(return_value=MagicMock(id=42))
    return repo


@pytest.fixture
def session() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def notifier() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def service(
    orchestrator_repo, report_step_repo, report_repo, session, notifier
) -> OrchestratorService:
    return OrchestratorService(
        orchestrator_repo, report_step_repo, report_repo, session, get_settings(), notifier
    )


class TestOrchestratorStatus:
    async def test_missing_record_reads_pending(self, service):
        result = await service.get_orchestrator_status(42)
        assert result.status == StepStatus.PENDING
        assert result.metadata is None

    async def test_update_requires_status_or_metadata(self, service):
        with pytest.raises(ValidationError):
            await service.update_orchestrator(42)

    async def test_metadata_only_patch_without_record_is_not_found(self, service, session):
        with pytest.raises(NotFoundError):
            await service.update_orchestrator(42, metadata={"parallel_limit": 2})
        session.commit.assert_not_awaited()

    async def test_status_creates_missing_record(self, service, orchestrator_repo):
        result = await service.update_orchestrator(42, status=StepStatus.DONE)

        orchestrator_repo.add.assert_called_once()
        assert result.status == StepStatus.DONE

    async def test_status_for_unknown_report_is_not_found(
        self, service, orchestrator_repo, report_repo, session
    ):
        report_repo.get_by_id.return_value = None

        with pytest.raises(NotFoundError, match="Report 42 not found"):
            await service.update_orchestrator(42, status=StepStatus.PROCESSING)

        orchestrator_repo.add.assert_not_called()
        session.commit.assert_not_awaited()

    async def test_metadata_patch_merges(self, service, orchestrator_repo):
        record = ReportOrchestrator(
            report_id=42,
            status=StepStatus.PROCESSING.value,
            meta={"parallel_limit": 2, "note": "x"},
        )
        orchestrator_repo.get_by_report.return_value = record

        result = await service.update_orchestrator(42, metadata={"note": None, "batch": 3})

        assert result.metadata == {"parallel_limit": 2, "batch": 3}
        assert result.status == StepStatus.PROCESSING


class TestEngineTick:
    @pytest.mark.parametrize("status", [StepStatus.PENDING, StepStatus.DONE, StepStatus.ERROR])
    async def test_rejected_unless_processing(
        self, service, orchestrator_repo, notifier, status
    ):
        orchestrator_repo.get_by_report.return_value = ReportOrchestrator(
            report_id=42, status=status.value
        )
        with pytest.raises(ConflictError):
            await service.trigger_engine_tick(42)
        notifier.notify.assert_not_awaited()

    async def test_rejected_without_record(self, service, notifier):
        with pytest.raises(ConflictError):
            await service.trigger_engine_tick(42)
        notifier.notify.assert_not_awaited()

    async def test_notifies_instance_channel(self, service, orchestrator_repo, notifier):
        orchestrator_repo.get_by_report.return_value = ReportOrchestrator(
            report_id=42, status=StepStatus.PROCESSING.value
        )

        result = await service.trigger_engine_tick(42, instance=3)

        notifier.notify.assert_awaited_once_with(
            "engine_tick_inst3", json.dumps({"report_id": 42})
        )
        assert result.accepted is True
        assert result.channel == "engine_tick_inst3"

    async def test_notify_failure_is_upstream_error(self, service, orchestrator_repo, notifier):
        orchestrator_repo.get_by_report.return_value = ReportOrchestrator(
            report_id=42, status=StepStatus.PROCESSING.value
        )
        notifier.notify.side_effect = OperationalError("NOTIFY", {}, Exception("down"))

        with pytest.raises(UpstreamError):
            await service.trigger_engine_tick(42)

    async def test_invalid_instance(self, service):
        with pytest.raises(ValidationError):
            await service.trigger_engine_tick(42, instance=0)


class TestStartOrchestrator:
    async def test_sets_processing_and_posts_webhook(
        self, orchestrator_repo, report_step_repo, report_repo, session, notifier, monkeypatch
    ):
        step_a, step_b = MagicMock(step_id=5), MagicMock(step_id=9)
        report_step_repo.list_with_steps.return_value = [(step_a, None), (step_b, None)]
        received: list[dict] = []

        def handler(request: httpx.Request) -> httpx.Response:
            received.append(json.loads(request.content))
            return httpx.Response(200, json={"ok": True})

        transport = httpx.MockTransport(handler)
        original_client = httpx.AsyncClient
        monkeypatch.setattr(
            "src.vitelis.services.orchestrator_service.httpx.AsyncClient",
            lambda **kwargs: original_client(transport=transport, **kwargs),
        )
        settings = get_settings().model_copy(
            update={"n8n_orchestrator_webhook": "https://n8n.example.com/webhook/orchestrate"}
        )
        service = OrchestratorService(
            orchestrator_repo, report_step_repo, report_repo, session, settings, notifier
        )

        result = await service.start_orchestrator(42, parallel_limit=3)

        assert result.status == StepStatus.PROCESSING
        assert result.steps == [5, 9]
        assert received == [{"report_id": 42, "parallel_limit": 3, "steps": [5, 9]}]
        record = orchestrator_repo.add.call_args.args[0]
        assert record.status == StepStatus.PROCESSING.value
        assert record.meta["parallel_limit"] == 3
        assert "started_at" in record.meta

    async def test_webhook_failure_keeps_processing(
        self, orchestrator_repo, report_step_repo, report_repo, session, notifier, monkeypatch
    ):
        transport = httpx.MockTransport(lambda request: httpx.Response(502))
        original_client = httpx.AsyncClient
        monkeypatch.setattr(
            "src.vitelis.services.orchestrator_service.httpx.AsyncClient",
            lambda **kwargs: original_client(transport=transport, **kwargs),
        )
        settings = get_settings().model_copy(
            update={"n8n_orchestrator_webhook": "https://n8n.example.com/webhook/orchestrate"}
        )
        service = OrchestratorService(
            orchestrator_repo, report_step_repo, report_repo, session, settings, notifier
        )

        result = await service.start_orchestrator(42)

        assert result.status == StepStatus.PROCESSING
        session.commit.assert_awaited()

    async def test_unknown_report_is_not_found(
        self, service, orchestrator_repo, report_repo, session
    ):
        report_repo.get_by_id.return_value = None

        with pytest.raises(NotFoundError):
            await service.start_orchestrator(42)

        orchestrator_repo.add.assert_not_called()
        session.commit.assert_not_awaited()
