# storefront/services/checkout_service.py
import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional

import stripe
from fastapi import HTTPException, status
from pymongo.errors import DuplicateKeyError

from storefront.cart.model import line_total, unit_price
from storefront.core.i18n import t
from storefront.models.cart import (
    CardCheckoutRequest,
    CartItem,
    CheckoutResult,
    CodCheckoutRequest,
    PaymentIntentOut,
)
from storefront.models.order import OrderData, OrderProduct, ShippingInfo
from storefront.models.product import Product
from storefront.services.cart_service import load_cart, save_cart
from storefront.services.order_service import create_order, find_order_by_payment_intent
from storefront.services.payment_service import (
    PaymentError,
    StripeGateway,
    compute_amount_cents,
)
from storefront.services.product_service import get_products_by_ids
from storefront.variants.matcher import resolve_image

logger = logging.getLogger(__name__)

# Stripe: valores de metadata de 500 caracteres, 50 claves por intent
METADATA_VALUE_LIMIT = 500
MAX_ITEM_CHUNKS = 45
ITEMS_KEY_PREFIX = "items_"


def line_name(item: CartItem) -> Dict[str, str]:
    """Product name per locale, suffixed with the variant values when there is one."""
    name = item.product.name.model_dump()
    variant = item.selected_variant
    if variant is not None and variant.options:
        suffix = " / ".join(variant.options.values())
        name = {locale: f"{text} - {suffix}" for locale, text in name.items()}
    return name


def order_products(items: List[CartItem]) -> List[OrderProduct]:
    return [
        OrderProduct(
            id=item.product.id,
            name=line_name(item),
            price=unit_price(item),
            quantity=item.quantity,
            image=resolve_image(item.product, item.selected_variant),
            variant=item.selected_variant.options if item.selected_variant else None,
        )
        for item in items
    ]


def metadata_items(items: List[CartItem]) -> List[Dict[str, Any]]:
    return [
        {
            "productId": item.product.id,
            "variantId": item.selected_variant.id if item.selected_variant else None,
            "quantity": item.quantity,
        }
        for item in items
    ]


def pack_items(items: List[Dict[str, Any]]) -> Dict[str, str]:
    """
    Spread the line references over ``items_0``, ``items_1``... metadata keys.

    The compact JSON of the lines is cut into pieces that each fit in one
    metadata value; ``unpack_items`` joins them back in key order.
    """
    encoded = json.dumps(items, separators=(",", ":"))
    chunks = [
        encoded[start : start + METADATA_VALUE_LIMIT]
        for start in range(0, len(encoded), METADATA_VALUE_LIMIT)
    ]
    if len(chunks) > MAX_ITEM_CHUNKS:
        raise ValueError(f"{len(items)} cart lines do not fit in the payment metadata")
    return {f"{ITEMS_KEY_PREFIX}{index}": chunk for index, chunk in enumerate(chunks)}


def unpack_items(metadata: Mapping[str, str]) -> Optional[List[Dict[str, Any]]]:
    indexes = sorted(
        int(key[len(ITEMS_KEY_PREFIX):])
        for key in metadata
        if key.startswith(ITEMS_KEY_PREFIX) and key[len(ITEMS_KEY_PREFIX):].isdigit()
    )
    if not indexes:
        # Intents creados antes del reparto en varias claves
        return json.loads(metadata["items"]) if "items" in metadata else None
    return json.loads("".join(metadata[f"{ITEMS_KEY_PREFIX}{i}"] for i in indexes))


def stored_line(ref: Mapping[str, Any], product: Product) -> CartItem:
    """A line priced from the stored product: its variant by id, else the base price."""
    variant = next((v for v in product.variants if v.id == ref.get("variantId")), None)
    return CartItem(
        cart_item_id=ref["productId"],
        product=product,
        quantity=ref["quantity"],
        selected_variant=variant,
    )


def _selected_or_400(items: List[CartItem], locale: Optional[str]) -> List[CartItem]:
    if not items:
        raise HTTPException(status_code=400, detail=t("checkout.emptySelection", locale))
    return items


async def _products_by_id(ids: List[str]) -> Dict[str, Product]:
    return {p.id: p for p in await get_products_by_ids(sorted(set(ids)))}


async def create_payment_intent_for_cart(
    session_id: str, locale: Optional[str], gateway: StripeGateway
) -> PaymentIntentOut:
    cart = await load_cart(session_id)
    selected = _selected_or_400(cart.selected_items(), locale)

    items = metadata_items(selected)
    try:
        packed = pack_items(items)
    except ValueError as e:
        logger.warning("Cart %s cannot be paid by card: %s", session_id, e)
        raise HTTPException(status_code=400, detail=t("checkout.error", locale))

    products = await _products_by_id([i["productId"] for i in items])
    try:
        amount = compute_amount_cents(items, products)
        intent = gateway.create_payment_intent(
            amount, {"sessionId": session_id, "locale": locale or "ar", **packed}
        )
    except PaymentError as e:
        logger.error("Payment intent for cart %s failed: %s", session_id, e)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY, detail=t("checkout.paymentError", locale)
        )

    return PaymentIntentOut(
        client_secret=intent["client_secret"],
        payment_intent_id=intent["payment_intent_id"],
        amount=amount,
        currency=gateway.currency,
    )


async def checkout_cod(session_id: str, request: CodCheckoutRequest) -> CheckoutResult:
    cart = await load_cart(session_id)
    selected = _selected_or_400(cart.selected_items(), request.locale)

    # Mismos precios que el pago con tarjeta: los del producto guardado
    refs = metadata_items(selected)
    products = await _products_by_id([r["productId"] for r in refs])
    missing = [r["productId"] for r in refs if r["productId"] not in products]
    if missing:
        logger.warning("Cart %s references deleted products %s", session_id, missing)
        raise HTTPException(status_code=400, detail=t("checkout.error", request.locale))
    lines = [stored_line(r, products[r["productId"]]) for r in refs]

    order_data = OrderData(
        products=order_products(lines),
        shipping_info=request.shipping_info,
        total_amount=sum((line_total(i) for i in lines), 0.0),
        locale=request.locale,
        order_date=datetime.now(timezone.utc),
        payment_method="cod",
    )
    order = await create_order(order_data)

    # Sólo se vacía el carrito cuando la orden ya existe
    cart.clear()
    await save_cart(session_id, cart)
    logger.info("Cart %s cleared after order %s", session_id, order.id)
    return CheckoutResult(message=t("checkout.success", request.locale), order_id=order.id)


async def checkout_card(
    session_id: str, request: CardCheckoutRequest, gateway: StripeGateway
) -> CheckoutResult:
    cart = await load_cart(session_id)
    _selected_or_400(cart.selected_items(), request.locale)

    try:
        gateway.update_payment_intent(request.payment_intent_id, request.shipping_info)
        result = gateway.confirm_payment(request.payment_intent_id, request.payment_method)
        if result["status"] != "succeeded":
            raise PaymentError(f"Payment ended with status {result['status']}")
    except PaymentError as e:
        logger.error("Card checkout for cart %s failed: %s", session_id, e)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=t("checkout.paymentError", request.locale),
        )

    # La orden la crea el webhook de Stripe
    cart.clear()
    await save_cart(session_id, cart)
    logger.info("Cart %s cleared after payment %s", session_id, result["payment_intent_id"])
    return CheckoutResult(
        message=t("checkout.success", request.locale),
        payment_intent_id=result["payment_intent_id"],
    )


async def order_from_intent(intent: Mapping[str, Any]) -> Optional[OrderData]:
    metadata = intent.get("metadata") or {}
    items = unpack_items(metadata)
    if "shippingInfo" not in metadata or items is None:
        logger.warning("Payment intent %s has no checkout metadata", intent.get("id"))
        return None

    products = await _products_by_id([i["productId"] for i in items])
    lines = []
    for item in items:
        product = products.get(item["productId"])
        if product is None:
            logger.warning("Product %s of intent %s no longer exists", item["productId"], intent.get("id"))
            continue
        lines.append(stored_line(item, product))

    return OrderData(
        products=order_products(lines),
        shipping_info=ShippingInfo.model_validate_json(metadata["shippingInfo"]),
        total_amount=intent.get("amount", 0) / 100,
        locale=metadata.get("locale", "ar"),
        order_date=datetime.now(timezone.utc),
        payment_method="card",
        payment_intent_id=intent.get("id"),
    )


async def handle_webhook(payload: bytes, signature: str, gateway: StripeGateway) -> Dict[str, str]:
    try:
        event = gateway.construct_event(payload, signature)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid payload")
    except stripe.SignatureVerificationError:
        raise HTTPException(status_code=400, detail="Invalid signature")

    if event["type"] == "payment_intent.succeeded":
        intent = event["data"]["object"]
        existing = await find_order_by_payment_intent(intent["id"])
        if existing is not None:
            logger.info("Order %s already exists for intent %s", existing.id, intent["id"])
        else:
            order_data = await order_from_intent(intent)
            if order_data is not None:
                try:
                    await create_order(order_data)
                except DuplicateKeyError:
                    # Otra entrega del mismo evento ganó la carrera
                    logger.info("Order for intent %s was created concurrently", intent["id"])

    return {"message": "Event received"}
