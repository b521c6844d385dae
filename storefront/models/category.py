from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from storefront.models.common import LocalizedText


class CategoryBase(BaseModel):
    name: LocalizedText
    description: LocalizedText = LocalizedText()
    image: Optional[str] = None
    slug: Optional[str] = None


class CategoryCreate(CategoryBase):
    pass


class CategoryUpdate(BaseModel):
    name: Optional[LocalizedText] = None
    description: Optional[LocalizedText] = None
    image: Optional[str] = None
    slug: Optional[str] = None


class Category(CategoryBase):
    id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
