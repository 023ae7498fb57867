"""Client for the n8n workflow engine."""

from typing import Any

import httpx

from src.vitelis.core.config import Settings
from src.vitelis.core.exceptions import UpstreamError
from src.vitelis.core.logging import get_logger
from src.vitelis.models import AnalysisKind
from src.vitelis.schemas.n8n import (
    ExecutionDetails,
    MinerWorkflowRequest,
    VitelisSalesWorkflowRequest,
    WorkflowStarted,
)

logger = get_logger(__name__)

BIZMINER_PATH_DEFAULT = "webhook/v2/bizminer/default"
BIZMINER_PATH_ALLIANZ = "webhook/v2/bizminer/allianz"
SALESMINER_PATH = "webhook/v1/salesminer"


def bizminer_path(use_case: str) -> str:
    """Allianz use cases run on a dedicated workflow."""
    return BIZMINER_PATH_ALLIANZ if "allianz" in use_case.lower() else BIZMINER_PATH_DEFAULT


class N8NService:
    def __init__(self, settings: Settings, transport: httpx.AsyncBaseTransport | None = None):
        self.settings = settings
        self.transport = transport

    def _config(self, kind: AnalysisKind | None) -> tuple[str, str]:
        """Base URL and API key for a workflow family; falls back to the shared key."""
        s = self.settings
        if kind == AnalysisKind.BIZMINER:
            url, key = s.n8n_bizminer_url, s.n8n_bizminer_api_key or s.n8n_api_key
        elif kind == AnalysisKind.SALESMINER:
            url, key = s.n8n_salesminer_url, s.n8n_salesminer_api_key or s.n8n_api_key
        elif kind == AnalysisKind.VITELIS_SALES:
            url, key = s.n8n_vitelis_sales_url, s.n8n_vitelis_sales_api_key or s.n8n_api_key
        else:
            url, key = s.n8n_api_url, s.n8n_api_key

        if not url or not key:
            label = kind.value if kind else "default"
            raise UpstreamError(f"N8N {label} configuration not found")
        return url, key

    def _client(self, api_key: str) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            headers={"X-N8N-API-KEY": api_key},
            timeout=self.settings.n8n_timeout_seconds,
            transport=self.transport,
        )

    async def _request(self, method: str, url: str, api_key: str, **kwargs: Any) -> Any:
        try:
            async with self._client(api_key) as client:
                response = await client.request(method, url, **kwargs)
                response.raise_for_status()
                return response.json()
        except httpx.HTTPStatusError as e:
            logger.error("n8n_request_failed", url=url, status_code=e.response.status_code)
            raise UpstreamError(
                f"N8N API request failed with status {e.response.status_code}"
            ) from e
        except (httpx.HTTPError, ValueError) as e:
            logger.error("n8n_request_failed", url=url, error=str(e))
            raise UpstreamError("N8N API request failed") from e

    async def _start(
        self, kind: AnalysisKind, url: str, api_key: str, body: Any
    ) -> WorkflowStarted:
        logger.info("n8n_workflow_starting", kind=kind.value, url=url)
        result = await self._request("POST", url, api_key, json=body)
        data = result if isinstance(result, dict) else {"data": result}

        execution_id = data.get("executionId")
        if not execution_id:
            logger.warning("n8n_execution_id_missing", kind=kind.value)
        else:
            logger.info("n8n_workflow_started", kind=kind.value, execution_id=str(execution_id))
        return WorkflowStarted(
            execution_id=str(execution_id) if execution_id else None, data=data
        )

    async def start_bizminer(self, request: MinerWorkflowRequest) -> WorkflowStarted:
        base, key = self._config(AnalysisKind.BIZMINER)
        url = f"{base}{bizminer_path(request.use_case)}"
        return await self._start(
            AnalysisKind.BIZMINER, url, key, request.model_dump(by_alias=True, exclude_none=True)
        )

    async def start_salesminer(self, request: MinerWorkflowRequest) -> WorkflowStarted:
        base, key = self._config(AnalysisKind.SALESMINER)
        return await self._start(
            AnalysisKind.SALESMINER,
            f"{base}{SALESMINER_PATH}",
            key,
            request.model_dump(by_alias=True, exclude_none=True),
        )

    async def start_vitelis_sales(self, request: VitelisSalesWorkflowRequest) -> WorkflowStarted:
        # The configured URL is the full webhook address
        url, key = self._config(AnalysisKind.VITELIS_SALES)
        return await self._start(
            AnalysisKind.VITELIS_SALES,
            url,
            key,
            request.model_dump(by_alias=True, exclude_none=True),
        )

    async def get_execution(
        self, execution_id: str, kind: AnalysisKind | None = None
    ) -> ExecutionDetails:
        # Vitelis sales executions live on the shared n8n instance
        if kind == AnalysisKind.VITELIS_SALES:
            kind = None
        base, key = self._config(kind)
        url = f"{base}api/v1/executions/{execution_id}"
        execution = await self._request("GET", url, key, params={"includeData": "true"})

        logger.info(
            "n8n_execution_fetched", execution_id=execution_id, status=execution.get("status")
        )
        return ExecutionDetails(
            id=str(execution.get("id", execution_id)),
            finished=bool(execution.get("finished", False)),
            mode=execution.get("mode") or "manual",
            retry_of=execution.get("retryOf"),
            retry_success_id=execution.get("retrySuccessId"),
            status=execution.get("status"),
            created_at=execution.get("createdAt") or execution.get("startedAt"),
            started_at=execution.get("startedAt"),
            stopped_at=execution.get("stoppedAt"),
            custom_data=execution.get("customData") or {},
            data=execution.get("data"),
        )
