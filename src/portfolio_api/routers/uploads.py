from fastapi import (
    APIRouter,
    Depends,
    HTTPException,
    Path,
    status
)
from fastapi.responses import StreamingResponse

from portfolio_api.adapters.storage import BaseMediaStore, InvalidMediaName
from portfolio_api.dependencies import get_media_store


def build_uploads_router(static_prefix: str) -> APIRouter:
    """Serve stored media under the configured static prefix."""
    router = APIRouter()

    @router.get(f"{static_prefix}/{{filename}}", name="get_upload")
    def get_upload(
        filename: str = Path(..., description="Stored media name"),
        media_store: BaseMediaStore = Depends(get_media_store),
    ):
        """
        Download an uploaded file.

        Returns:
            StreamingResponse: The file content as a stream
        """
        try:
            media = media_store.fetch(filename)
        except (InvalidMediaName, FileNotFoundError):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"File '{filename}' not found"
            )

        headers = {}
        if media.size is not None:
            headers["Content-Length"] = str(media.size)
        return StreamingResponse(media.body, media_type=media.content_type, headers=headers)

    return router
