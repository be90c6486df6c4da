"""Image API routes — multipart upload, listing, download, delete.

Learn: GET /images/{id} is what <img> tags hit, so it is usually
authenticated by the `token` cookie rather than a header. The response
is marked private so shared caches never hand one account's image to
another.
"""

from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Response, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from venus.auth.dependencies import CurrentIdentity, get_current_user
from venus.config import Settings, get_settings
from venus.db.engine import get_db
from venus.schemas.image import ImageRead
from venus.services.image_service import ImageService

router = APIRouter(prefix="/images")

IMAGE_NOT_FOUND = "Image not found"
CACHE_CONTROL = "private, max-age=31536000"


def _svc(
    db: AsyncSession = Depends(get_db),
    identity: CurrentIdentity = Depends(get_current_user),
    settings: Settings = Depends(get_settings),
) -> ImageService:
    return ImageService(db, owner_id=identity.user_id, upload_dir=settings.upload_dir)


@router.post("", response_model=ImageRead, status_code=201)
async def upload_image(
    image: UploadFile = File(...),
    project_id: Optional[str] = Form(None),
    svc: ImageService = Depends(_svc),
    settings: Settings = Depends(get_settings),
):
    """Upload one image (form field `image`, optional `project_id`)."""
    data = await image.read(settings.max_upload_bytes + 1)
    if len(data) > settings.max_upload_bytes:
        raise HTTPException(status_code=413, detail="Image too large")
    if not data:
        raise HTTPException(status_code=400, detail="Empty upload")

    return await svc.save_image(
        data,
        original_name=image.filename or "unknown",
        mime_type=image.content_type or "application/octet-stream",
        project_id=project_id,
    )


@router.get("", response_model=list[ImageRead])
async def list_images(svc: ImageService = Depends(_svc)):
    return await svc.list_images()


@router.get("/{image_id}")
async def get_image(image_id: str, svc: ImageService = Depends(_svc)):
    """Serve the image bytes. Owner only."""
    image = await svc.get_image(image_id)
    data = await svc.read_image(image)
    if data is None:
        raise HTTPException(status_code=404, detail=IMAGE_NOT_FOUND)
    return Response(
        content=data,
        media_type=image.mime_type,
        headers={"Cache-Control": CACHE_CONTROL},
    )


@router.delete("/{image_id}", status_code=204)
async def delete_image(image_id: str, svc: ImageService = Depends(_svc)):
    if not await svc.delete_image(image_id):
        raise HTTPException(status_code=404, detail=IMAGE_NOT_FOUND)
    return Response(status_code=204)
