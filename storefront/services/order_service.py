import logging
import re
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi import HTTPException
from pydantic import BaseModel

from storefront.db.database import object_id, orders_collection, serialize_document
from storefront.models.order import Order, OrderData, OrderPage, OrderStatus

logger = logging.getLogger(__name__)


class OrderFilter(BaseModel):
    status: Optional[OrderStatus] = None
    date_from: Optional[datetime] = None
    date_to: Optional[datetime] = None
    customer: Optional[str] = None
    page: int = 1
    limit: int = 20


def order_serializer(document: dict) -> Order:
    return Order(**serialize_document(document))


def build_order_query(filters: OrderFilter) -> Dict[str, Any]:
    query: Dict[str, Any] = {}
    if filters.status:
        query["status"] = filters.status

    dates: Dict[str, datetime] = {}
    if filters.date_from:
        dates["$gte"] = filters.date_from
    if filters.date_to:
        dates["$lte"] = filters.date_to
    if dates:
        query["order_date"] = dates

    if filters.customer and filters.customer.strip():
        query["shipping_info.full_name"] = {
            "$regex": "^" + re.escape(filters.customer.strip()),
            "$options": "i",
        }
    return query


# ✅ Crear una nueva orden
async def create_order(order: OrderData) -> Order:
    now = datetime.now(timezone.utc)
    order_dict = {
        **order.model_dump(mode="json"),
        "order_date": order.order_date,
        "status": "pending",
        "created_at": now,
        "updated_at": now,
    }
    result = await orders_collection.insert_one(order_dict)
    logger.info(
        "Order %s created (%s, total %.2f)",
        result.inserted_id,
        order.payment_method,
        order.total_amount,
    )
    return order_serializer({**order_dict, "_id": result.inserted_id})


# ✅ Listar órdenes con filtros y paginación
async def list_orders(filters: OrderFilter) -> OrderPage:
    page = max(filters.page, 1)
    query = build_order_query(filters)
    total = await orders_collection.count_documents(query)
    cursor = (
        orders_collection.find(query)
        .sort("order_date", -1)
        .skip((page - 1) * filters.limit)
        .limit(filters.limit)
    )
    orders = [order_serializer(o) for o in await cursor.to_list(filters.limit)]
    return OrderPage(
        orders=orders,
        total=total,
        page=page,
        limit=filters.limit,
        has_more=(page - 1) * filters.limit + len(orders) < total,
    )


# ✅ Obtener una orden específica por ID
async def get_order(order_id: str) -> Order:
    order = await orders_collection.find_one({"_id": object_id(order_id)})
    if order is None:
        raise HTTPException(status_code=404, detail="Order not found")
    return order_serializer(order)


async def find_order_by_payment_intent(payment_intent_id: str) -> Optional[Order]:
    order = await orders_collection.find_one({"payment_intent_id": payment_intent_id})
    if order:
        return order_serializer(order)
    return None


async def update_order_status(order_id: str, status: OrderStatus) -> Order:
    result = await orders_collection.update_one(
        {"_id": object_id(order_id)},
        {"$set": {"status": status, "updated_at": datetime.now(timezone.utc)}},
    )
    if result.matched_count == 0:
        raise HTTPException(status_code=404, detail="Order not found")
    logger.info("Order %s moved to %s", order_id, status)
    return await get_order(order_id)


async def delete_order(order_id: str) -> None:
    result = await orders_collection.delete_one({"_id": object_id(order_id)})
    if result.deleted_count == 0:
        raise HTTPException(status_code=404, detail="Order not found")
    logger.info("Order %s deleted", order_id)
