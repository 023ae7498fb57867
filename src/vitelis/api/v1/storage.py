"""Authenticated access to stored result files."""

from typing import Annotated

from fastapi import APIRouter, Query, Response

from src.vitelis.api.dependencies import CurrentUser, Storage

router = APIRouter(prefix="/s3", tags=["storage"])


@router.get(
    "/proxy",
    responses={
        200: {"description": "Raw object bytes"},
        404: {"description": "No object under this key"},
    },
)
async def proxy_object(
    key: Annotated[str, Query(min_length=1)],
    current_user: CurrentUser,
    storage: Storage,
) -> Response:
    """Return a stored object by key. Records keep keys, never public URLs."""
    stored = await storage.download(key)
    filename = key.rsplit("/", 1)[-1]
    return Response(
        content=stored.body,
        media_type=stored.content_type,
        headers={"Content-Disposition": f'inline; filename="{filename}"'},
    )
