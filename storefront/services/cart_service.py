import logging
from datetime import datetime, timezone

from fastapi import HTTPException

from storefront.cart.model import Cart
from storefront.db.database import carts_collection
from storefront.models.cart import AddCartItemRequest, CartItem, CartOut
from storefront.services.product_service import get_product
from storefront.variants.matcher import find_variant, resolve_default_variant

logger = logging.getLogger(__name__)


async def load_cart(session_id: str) -> Cart:
    document = await carts_collection.find_one({"session_id": session_id})
    if document is None:
        return Cart()
    return Cart(CartItem(**item) for item in document.get("items", []))


async def save_cart(session_id: str, cart: Cart) -> None:
    await carts_collection.update_one(
        {"session_id": session_id},
        {
            "$set": {
                "items": [item.model_dump(mode="json") for item in cart.items],
                "updated_at": datetime.now(timezone.utc),
            }
        },
        upsert=True,
    )


def cart_out(session_id: str, cart: Cart) -> CartOut:
    return CartOut(
        session_id=session_id,
        items=cart.items,
        subtotal=cart.subtotal(),
        item_count=cart.item_count(),
    )


async def get_cart(session_id: str) -> CartOut:
    return cart_out(session_id, await load_cart(session_id))


async def add_to_cart(session_id: str, request: AddCartItemRequest) -> CartOut:
    product = await get_product(request.product_id)
    if product is None:
        raise HTTPException(status_code=404, detail="Product not found")
    if not product.allow_add_to_cart:
        raise HTTPException(status_code=400, detail="Product cannot be added to the cart")

    variant = None
    if product.variants:
        if request.selected_options:
            variant = find_variant(product, request.selected_options)
            if variant is None:
                logger.warning(
                    "No variant of product %s matches %s, using base price",
                    product.id,
                    request.selected_options,
                )
        else:
            variant = resolve_default_variant(product)

    cart = await load_cart(session_id)
    cart.add_item(product, request.quantity, variant)
    await save_cart(session_id, cart)
    return cart_out(session_id, cart)


async def update_quantity(session_id: str, cart_item_id: str, quantity: int) -> CartOut:
    cart = await load_cart(session_id)
    cart.update_quantity(cart_item_id, quantity)
    await save_cart(session_id, cart)
    return cart_out(session_id, cart)


async def remove_item(session_id: str, cart_item_id: str) -> CartOut:
    cart = await load_cart(session_id)
    cart.remove_item(cart_item_id)
    await save_cart(session_id, cart)
    return cart_out(session_id, cart)


async def toggle_item_selected(session_id: str, cart_item_id: str) -> CartOut:
    cart = await load_cart(session_id)
    cart.toggle_item_selected(cart_item_id)
    await save_cart(session_id, cart)
    return cart_out(session_id, cart)


async def toggle_select_all(session_id: str, checked: bool) -> CartOut:
    cart = await load_cart(session_id)
    cart.toggle_select_all(checked)
    await save_cart(session_id, cart)
    return cart_out(session_id, cart)


async def remove_selected(session_id: str) -> CartOut:
    cart = await load_cart(session_id)
    cart.remove_selected()
    await save_cart(session_id, cart)
    return cart_out(session_id, cart)


async def clear_cart(session_id: str) -> CartOut:
    cart = await load_cart(session_id)
    cart.clear()
    await save_cart(session_id, cart)
    return cart_out(session_id, cart)
