from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from storefront.models.common import Locale
from storefront.models.order import ShippingInfo
from storefront.models.product import Product, Variant


class CartItem(BaseModel):
    cart_item_id: str
    product: Product
    quantity: int = Field(1, ge=1)
    selected: bool = True
    selected_variant: Optional[Variant] = None


class AddCartItemRequest(BaseModel):
    product_id: str
    quantity: int = Field(1, ge=1)
    # Valores elegidos por eje (clave = nombre francés de la opción)
    selected_options: Dict[str, str] = {}


class UpdateQuantityRequest(BaseModel):
    quantity: int


class SelectAllRequest(BaseModel):
    checked: bool


class CartOut(BaseModel):
    session_id: str
    items: List[CartItem]
    subtotal: float
    item_count: int


class CodCheckoutRequest(BaseModel):
    shipping_info: ShippingInfo
    locale: Locale = "ar"


class CardCheckoutRequest(BaseModel):
    payment_intent_id: str
    payment_method: str
    shipping_info: ShippingInfo
    locale: Locale = "ar"


class PaymentIntentOut(BaseModel):
    client_secret: str
    payment_intent_id: str
    amount: int
    currency: str


class CheckoutResult(BaseModel):
    message: str
    order_id: Optional[str] = None
    payment_intent_id: Optional[str] = None
