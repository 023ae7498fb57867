from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from src.vitelis.api.middlewares import setup_middlewares
from src.vitelis.api.v1.router import api_router
from src.vitelis.core.config import get_settings
from src.vitelis.core.db import dispose_engine, get_session
from src.vitelis.core.exceptions import setup_exception_handlers
from src.vitelis.core.health import setup_health_endpoint, setup_metrics
from src.vitelis.core.logging import get_logger, setup_logging
from src.vitelis.core.rate_limit import limiter
from src.vitelis.repositories import UserRepository
from src.vitelis.services import BootstrapService

logger = get_logger(__name__)


async def run_bootstrap() -> None:
    """Idempotent startup tasks; safe on every instance and every restart."""
    settings = get_settings()
    async with get_session() as session:
        await BootstrapService(UserRepository(session), session, settings).run()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Application lifespan - startup and shutdown."""
    settings = get_settings()
    setup_logging(settings.debug)
    logger.info("app_starting", app_name=settings.app_name, env=settings.app_env)

    await run_bootstrap()

    yield

    logger.info("app_stopping")
    await dispose_engine()


OPENAPI_TAGS = [
    {"name": "auth", "description": "Login and self-registration"},
    {"name": "users", "description": "User administration and credits"},
    {"name": "analyze", "description": "BizMiner analysis records"},
    {"name": "sales-miner", "description": "SalesMiner analysis records"},
    {"name": "vitelis-sales", "description": "VitelisSales analysis records"},
    {"name": "n8n", "description": "Workflow launch and execution lookup"},
    {"name": "webhooks", "description": "Callbacks from the workflow engine"},
    {"name": "deep-dive", "description": "Report steps, status matrix and orchestrator"},
    {"name": "chats", "description": "Chat conversations"},
]


def create_app() -> FastAPI:
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Company analysis API driven by n8n workflows",
        version="0.1.0",
        openapi_tags=OPENAPI_TAGS,
        lifespan=lifespan,
    )

    setup_exception_handlers(app)

    app.state.limiter = limiter
    app.add_exception_handler(
        RateLimitExceeded, _rate_limit_exceeded_handler  # type: ignore[arg-type]
    )

    setup_middlewares(app, settings)

    app.include_router(api_router)

    setup_metrics(app)
    setup_health_endpoint(app)

    return app


app = create_app()
