from typing import Annotated, List, Literal, Union

from pydantic import BaseModel, Field


class ExistingImage(BaseModel):
    """An image already stored, referenced by its public URL."""

    kind: Literal["existing"] = "existing"
    url: str


class PendingUpload(BaseModel):
    """An image picked in the admin form that has not been uploaded yet."""

    kind: Literal["pending"] = "pending"
    handle: str


ImageSlot = Annotated[Union[ExistingImage, PendingUpload], Field(discriminator="kind")]


def existing_urls(slots: List[ImageSlot]) -> List[str]:
    return [slot.url for slot in slots if isinstance(slot, ExistingImage)]
