# storefront/services/image_service.py
import logging
from typing import Iterable, List, Optional

from fastapi import HTTPException, status

from storefront.models.images import ImageSlot, PendingUpload, existing_urls

logger = logging.getLogger(__name__)


class ImageUploader:
    """Storage collaborator: turns a pending upload into a public URL."""

    async def upload(self, handle: str) -> str:
        raise HTTPException(
            status_code=status.HTTP_501_NOT_IMPLEMENTED,
            detail="Image storage is not configured",
        )

    async def delete(self, url: str) -> None:
        logger.info("No image storage configured, keeping %s", url)


def get_image_uploader() -> ImageUploader:
    return ImageUploader()


async def resolve_slot(slot: Optional[ImageSlot], uploader: ImageUploader) -> Optional[str]:
    if slot is None:
        return None
    if isinstance(slot, PendingUpload):
        return await uploader.upload(slot.handle)
    return slot.url


async def resolve_slots(slots: Iterable[ImageSlot], uploader: ImageUploader) -> List[str]:
    """Uploads pending slots and returns every URL in the original order."""
    return [await resolve_slot(slot, uploader) for slot in slots]


def removed_urls(previous: Iterable[str], slots: Iterable[ImageSlot]) -> List[str]:
    kept = set(existing_urls(list(slots)))
    return [url for url in previous if url and url not in kept]
