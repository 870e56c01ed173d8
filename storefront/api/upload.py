"""Image upload endpoint."""

from typing import Annotated

from fastapi import APIRouter, File, UploadFile

from storefront.api.deps import AssetStoreDep
from storefront.api.schemas import ErrorResponse, ImageSchema, UploadResponse
from storefront.catalog.service import upload_images

router = APIRouter(tags=["Uploads"])


@router.post(
    "/upload",
    response_model=UploadResponse,
    responses={400: {"model": ErrorResponse}, 502: {"model": ErrorResponse}},
    summary="Upload images",
    description="Convert images to WebP and store them on the asset host.",
)
async def upload(
    asset_store: AssetStoreDep,
    files: Annotated[list[UploadFile] | None, File(description="One or more images")] = None,
    file: Annotated[UploadFile | None, File(description="Single image")] = None,
) -> UploadResponse:
    """Upload one or many images.

    The ``files`` field takes precedence; a single ``file`` field is
    accepted when ``files`` is absent.
    """
    parts = list(files or [])
    if not parts and file is not None:
        parts = [file]

    contents = [await part.read() for part in parts]
    assets = await upload_images(asset_store, contents)

    return UploadResponse(
        uploads=[ImageSchema(url=a.url, public_id=a.public_id) for a in assets],
    )
