"""FastAPI router for emojitar.

Usage:
    from fastapi import FastAPI
    from emojitar import EmojiArchiver
    from emojitar.api import create_router

    app = FastAPI()
    archiver = EmojiArchiver()

    # Mount with default prefix /emojitar
    app.include_router(create_router(archiver))
"""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Response
from pydantic import BaseModel, Field

from emojitar.archiver import EmojiArchiver
from emojitar.errors import BuildTimedOut, FetchFailed
from emojitar.paths import directory_paths

GZIP_MEDIA_TYPE = "application/gzip"


class TextRequest(BaseModel):
    text: str = Field(..., description="Message text containing emoji tokens")


class EmojiResponse(BaseModel):
    id: str
    name: str
    animated: bool
    path: str


class ScanResponse(BaseModel):
    count: int
    emojis: list[EmojiResponse]
    directories: list[str]


def create_router(
    archiver: EmojiArchiver,
    prefix: str = "/emojitar",
    tags: list[str] | None = None,
) -> APIRouter:
    """Create a FastAPI router bound to an archiver.

    Args:
        archiver: Archiver used for every request
        prefix: URL prefix for routes (default: /emojitar)
        tags: OpenAPI tags

    Returns:
        APIRouter to include in FastAPI app
    """
    if tags is None:
        tags = ["emojitar"]

    router = APIRouter(prefix=prefix, tags=tags)

    def get_archiver() -> EmojiArchiver:
        return archiver

    @router.post("/scan", response_model=ScanResponse)
    async def scan(
        request: TextRequest,
        archiver: Annotated[EmojiArchiver, Depends(get_archiver)],
    ) -> ScanResponse:
        """List the emoji referenced by a text and their archive paths."""
        refs = archiver.scan(request.text)
        paths = archiver.file_paths(refs)
        return ScanResponse(
            count=len(refs),
            emojis=[
                EmojiResponse(id=ref.id, name=ref.name, animated=ref.animated, path=path)
                for ref, path in zip(refs, paths)
            ],
            directories=directory_paths(paths),
        )

    @router.post("/archive")
    async def archive(
        request: TextRequest,
        archiver: Annotated[EmojiArchiver, Depends(get_archiver)],
    ) -> Response:
        """Build and download the tar.gz for a text."""
        try:
            result = await archiver.build(request.text)
        except FetchFailed as e:
            raise HTTPException(status_code=502, detail=str(e))
        except BuildTimedOut as e:
            raise HTTPException(status_code=504, detail=str(e))

        if result is None:
            raise HTTPException(status_code=404, detail="No custom emoji found")

        headers = {"Content-Disposition": f'attachment; filename="{result.filename}"'}
        if result.missing:
            headers["X-Emojitar-Missing"] = ",".join(ref.id for ref in result.missing)
        return Response(content=result.data, media_type=GZIP_MEDIA_TYPE, headers=headers)

    return router
