"""Image service — uploads on disk, metadata in the database.

Learn: images are addressed by their own id, which is a secondary key
from the owner's point of view. Lookups by id go through ensure_owner so
that another account's image raises OwnershipError, which the API turns
into the same 404 as a missing image.

Disk I/O and Pillow decoding run in threads (asyncio.to_thread) so a
large upload never blocks the event loop.
"""

import asyncio
import io
import re
from pathlib import Path
from typing import Optional

import structlog
from PIL import Image as PILImage, UnidentifiedImageError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from venus.auth.ownership import ensure_owner
from venus.db.models import Image, Project, new_uuid

logger = structlog.get_logger()

_EXT_RE = re.compile(r"^[a-z0-9]{1,10}$")


def stored_extension(original_name: str) -> str:
    """Extension for the stored file; `bin` when missing or odd."""
    ext = Path(original_name).suffix.lstrip(".").lower()
    return ext if _EXT_RE.match(ext) else "bin"


def image_dimensions(data: bytes) -> tuple[Optional[int], Optional[int]]:
    try:
        with PILImage.open(io.BytesIO(data)) as img:
            return img.width, img.height
    except (UnidentifiedImageError, OSError, ValueError):
        return None, None


class ImageService:
    """Business logic for one account's images."""

    def __init__(self, db: AsyncSession, owner_id: int, upload_dir: str | Path):
        self.db = db
        self.owner_id = owner_id
        self.upload_dir = Path(upload_dir)

    def path_for(self, image: Image) -> Path:
        return self.upload_dir / image.filename

    async def save_image(
        self,
        data: bytes,
        original_name: str,
        mime_type: str,
        project_id: Optional[str] = None,
    ) -> Image:
        """Store an upload. project_id, if given, must belong to the caller."""
        if project_id:
            project = await self.db.get(Project, project_id)
            ensure_owner(self.owner_id, project, "Project")

        image_id = new_uuid()
        filename = f"{image_id}.{stored_extension(original_name)}"
        width, height = (None, None)
        if mime_type.startswith("image/"):
            width, height = await asyncio.to_thread(image_dimensions, data)

        path = self.upload_dir / filename
        await asyncio.to_thread(self.upload_dir.mkdir, parents=True, exist_ok=True)
        await asyncio.to_thread(path.write_bytes, data)

        image = Image(
            id=image_id,
            filename=filename,
            original_name=original_name,
            mime_type=mime_type,
            size=len(data),
            width=width,
            height=height,
            project_id=project_id or None,
            owner_id=self.owner_id,
        )
        self.db.add(image)
        try:
            await self.db.commit()
        except Exception:
            await asyncio.to_thread(path.unlink, missing_ok=True)
            raise
        await self.db.refresh(image)
        logger.info("images.uploaded", image_id=image_id, size=len(data))
        return image

    async def list_images(self) -> list[Image]:
        result = await self.db.execute(
            select(Image)
            .where(Image.owner_id == self.owner_id)
            .order_by(Image.created_at.desc(), Image.id)
        )
        return list(result.scalars().all())

    async def get_image(self, image_id: str) -> Image:
        """Load an image by id. Raises OwnershipError if missing or foreign."""
        image = await self.db.get(Image, image_id)
        return ensure_owner(self.owner_id, image, "Image")

    async def read_image(self, image: Image) -> Optional[bytes]:
        """File contents, or None if the file is gone from disk."""
        try:
            return await asyncio.to_thread(self.path_for(image).read_bytes)
        except FileNotFoundError:
            logger.warning("images.file_missing", image_id=image.id)
            return None

    async def delete_image(self, image_id: str) -> bool:
        """Delete the row, then the file. File errors are logged only."""
        result = await self.db.execute(
            select(Image).where(
                Image.id == image_id,
                Image.owner_id == self.owner_id,
            )
        )
        image = result.scalars().first()
        if image is None:
            return False

        path = self.path_for(image)
        await self.db.delete(image)
        await self.db.commit()

        try:
            await asyncio.to_thread(path.unlink)
        except OSError as e:
            logger.warning("images.file_delete_failed", path=str(path), error=str(e))
        return True
