from datetime import datetime
from enum import Enum
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

from storefront.models.category import Category
from storefront.models.common import LocalizedText
from storefront.models.images import ImageSlot


class OptionKind(str, Enum):
    COLOR = "color"
    SIZE = "size"
    WEIGHT = "weight"
    MATERIAL = "material"
    CAPACITY = "capacity"
    CUSTOM = "custom"


# 📌 Un eje de variación del producto (ej. color, talla)
class VariantOption(BaseModel):
    name: LocalizedText = LocalizedText()
    values: List[str] = []
    kind: OptionKind = OptionKind.CUSTOM

    @property
    def key(self) -> str:
        return self.name.fr

    @field_validator("values")
    @classmethod
    def values_are_unique(cls, values: List[str]) -> List[str]:
        if len(set(values)) != len(values):
            raise ValueError("option values must be unique")
        return values


# 📌 Una combinación concreta que se puede comprar
class Variant(BaseModel):
    id: str
    options: Dict[str, str]
    price: float = Field(0, ge=0)
    original_price: Optional[float] = None
    is_active: bool = True
    images: List[str] = []


class CustomSection(BaseModel):
    name: LocalizedText
    type: Literal["products", "description"] = "description"
    product_ids: List[str] = []
    description: LocalizedText = LocalizedText()


class ProductBase(BaseModel):
    name: LocalizedText
    description: LocalizedText = LocalizedText()
    slug: Optional[str] = None
    price: float = Field(0, ge=0)
    original_price: Optional[float] = None
    image: Optional[str] = None
    sub_images: List[str] = []
    category_id: Optional[str] = None
    keywords: List[str] = []
    is_new: bool = False
    variant_options: List[VariantOption] = []
    variants: List[Variant] = []
    allow_direct_purchase: bool = True
    allow_add_to_cart: bool = True
    custom_sections: List[CustomSection] = []
    certification_images: List[str] = []


class Product(ProductBase):
    id: Optional[str] = None
    category: Optional[Category] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ProductForm(BaseModel):
    """Everything the admin product editor submits in one request."""

    name: LocalizedText = LocalizedText()
    description: LocalizedText = LocalizedText()
    slug: Optional[str] = None
    price: float = 0
    original_price: Optional[float] = None
    category_id: Optional[str] = None
    keywords: List[str] = []
    is_new: bool = False
    has_variants: bool = False
    variant_options: List[VariantOption] = []
    variants: List[Variant] = []
    allow_direct_purchase: bool = True
    allow_add_to_cart: bool = True
    has_custom_sections: bool = False
    custom_sections: List[CustomSection] = []
    main_image: Optional[ImageSlot] = None
    sub_images: List[ImageSlot] = []
    certification_images: List[ImageSlot] = []


class ProductListResponse(BaseModel):
    products: List[Product]
    total: int
    page: int
    limit: int
    has_more: bool


class ProductDetail(BaseModel):
    """A product as its page first renders it: default selection resolved."""

    product: Product
    selected_options: Dict[str, str] = {}
    variant: Optional[Variant] = None
    price: float
    original_price: Optional[float] = None
    image: Optional[str] = None
    # Nombre francés de la opción -> valor -> color hex (None si no es color)
    swatches: Dict[str, Dict[str, Optional[str]]] = {}


class VariantEditAction(str, Enum):
    ADD_OPTION = "add_option"
    REMOVE_OPTION = "remove_option"
    RENAME_OPTION = "rename_option"
    CHOOSE_PREDEFINED = "choose_predefined"
    ADD_VALUE = "add_value"
    REMOVE_VALUE = "remove_value"


class VariantEditRequest(BaseModel):
    """One edit of the admin option editor, applied to its current state."""

    action: VariantEditAction
    options: List[VariantOption] = []
    variants: List[Variant] = []
    index: int = 0
    value: Optional[str] = None
    name: Optional[LocalizedText] = None


class VariantEditResponse(BaseModel):
    options: List[VariantOption]
    variants: List[Variant]
