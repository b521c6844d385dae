from pydantic import BaseModel, EmailStr, Field, field_validator
from datetime import datetime
from typing import Dict, List, Literal, Optional

from storefront.models.common import Locale, LocalizedText

OrderStatus = Literal["pending", "shipped", "delivered", "cancelled"]
PaymentMethod = Literal["cod", "card"]
ORDER_STATUSES = ("pending", "shipped", "delivered", "cancelled")


# 📌 Datos de envío que captura el formulario de checkout
class ShippingInfo(BaseModel):
    full_name: str = Field(..., min_length=3)
    phone: str = Field(..., min_length=10)
    address: str = Field(..., min_length=5)
    city: Optional[str] = None
    email: Optional[EmailStr] = None

    @field_validator("email", mode="before")
    @classmethod
    def blank_email_is_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value


# 📌 Producto dentro de la orden (copia al momento de la compra)
class OrderProduct(BaseModel):
    id: str
    name: LocalizedText
    price: float
    quantity: int = Field(..., ge=1)
    image: Optional[str] = None
    variant: Optional[Dict[str, str]] = None


class OrderData(BaseModel):
    products: List[OrderProduct]
    shipping_info: ShippingInfo
    total_amount: float
    locale: Locale = "ar"
    order_date: datetime
    payment_method: PaymentMethod = "cod"
    payment_intent_id: Optional[str] = None


# 📌 Modelo de una orden
class Order(OrderData):
    id: Optional[str] = None
    status: OrderStatus = "pending"
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class OrderStatusUpdate(BaseModel):
    status: OrderStatus


class OrderPage(BaseModel):
    orders: List[Order]
    total: int
    page: int
    limit: int
    has_more: bool
