from fastapi import APIRouter

from src.vitelis.api.v1 import (
    analyze,
    auth,
    chats,
    deep_dive,
    generation_steps,
    industries,
    n8n,
    sales_miner,
    storage,
    users,
    vitelis_sales,
    webhooks,
)

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(auth.router)
api_router.include_router(users.router)
api_router.include_router(analyze.router)
api_router.include_router(sales_miner.router)
api_router.include_router(vitelis_sales.router)
api_router.include_router(n8n.router)
api_router.include_router(webhooks.router)
api_router.include_router(generation_steps.router)
api_router.include_router(deep_dive.router)
api_router.include_router(industries.router)
api_router.include_router(chats.router)
api_router.include_router(chats.messages_router)
api_router.include_router(storage.router)
