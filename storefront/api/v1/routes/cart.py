# storefront/api/v1/routes/cart.py
from fastapi import APIRouter

from storefront.models.cart import (
    AddCartItemRequest,
    CartOut,
    SelectAllRequest,
    UpdateQuantityRequest,
)
from storefront.services import cart_service

router = APIRouter()


@router.get("/{session_id}", response_model=CartOut)
async def get_cart_endpoint(session_id: str):
    return await cart_service.get_cart(session_id)


@router.post("/{session_id}/items", response_model=CartOut)
async def add_item_endpoint(session_id: str, request: AddCartItemRequest):
    return await cart_service.add_to_cart(session_id, request)


@router.put("/{session_id}/items/{cart_item_id}", response_model=CartOut)
async def update_quantity_endpoint(
    session_id: str, cart_item_id: str, request: UpdateQuantityRequest
):
    return await cart_service.update_quantity(session_id, cart_item_id, request.quantity)


@router.delete("/{session_id}/items/{cart_item_id}", response_model=CartOut)
async def remove_item_endpoint(session_id: str, cart_item_id: str):
    return await cart_service.remove_item(session_id, cart_item_id)


@router.post("/{session_id}/items/{cart_item_id}/toggle", response_model=CartOut)
async def toggle_item_endpoint(session_id: str, cart_item_id: str):
    return await cart_service.toggle_item_selected(session_id, cart_item_id)


@router.post("/{session_id}/select-all", response_model=CartOut)
async def select_all_endpoint(session_id: str, request: SelectAllRequest):
    return await cart_service.toggle_select_all(session_id, request.checked)


@router.delete("/{session_id}/selected", response_model=CartOut)
async def remove_selected_endpoint(session_id: str):
    return await cart_service.remove_selected(session_id)


@router.delete("/{session_id}", response_model=CartOut)
async def clear_cart_endpoint(session_id: str):
    return await cart_service.clear_cart(session_id)
