from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Query

from storefront.models.order import Order, OrderPage, OrderStatus, OrderStatusUpdate
from storefront.services.order_service import (
    OrderFilter,
    delete_order,
    get_order,
    list_orders,
    update_order_status,
)

router = APIRouter()


# ✅ Listar órdenes (filtros opcionales)
@router.get("/", response_model=OrderPage)
async def list_orders_endpoint(
    status: Optional[OrderStatus] = None,
    date_from: Optional[datetime] = None,
    date_to: Optional[datetime] = None,
    customer: Optional[str] = Query(None, description="Prefijo del nombre del cliente"),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
):
    filters = OrderFilter(
        status=status,
        date_from=date_from,
        date_to=date_to,
        customer=customer,
        page=page,
        limit=limit,
    )
    return await list_orders(filters)


# ✅ Obtener una orden por ID
@router.get("/{order_id}", response_model=Order)
async def get_order_endpoint(order_id: str):
    return await get_order(order_id)


# ✅ Cambiar el estado de una orden
@router.put("/{order_id}/status", response_model=Order)
async def update_order_status_endpoint(order_id: str, update: OrderStatusUpdate):
    return await update_order_status(order_id, update.status)


@router.delete("/{order_id}", status_code=204)
async def delete_order_endpoint(order_id: str):
    await delete_order(order_id)
