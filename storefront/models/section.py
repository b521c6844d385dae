from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel

from storefront.models.common import LocalizedText
from storefront.models.product import Product

SectionType = Literal["hero", "featured", "popular", "newsletter", "banner", "landing-page"]


class SectionData(BaseModel):
    title: Optional[LocalizedText] = None
    subtitle: Optional[LocalizedText] = None
    description: Optional[LocalizedText] = None
    cta_product_ids: List[str] = []
    cta_text: Optional[LocalizedText] = None
    cta_url: Optional[str] = None
    image_url: Optional[str] = None
    background_color: Optional[str] = None
    text_color: Optional[str] = None


class SectionCreate(BaseModel):
    type: SectionType
    data: SectionData = SectionData()
    is_active: bool = True
    order: int = 0


class Section(SectionCreate):
    id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class SectionWithProducts(Section):
    products: List[Product] = []
