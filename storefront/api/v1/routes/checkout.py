from typing import Optional

from fastapi import APIRouter, Depends

from storefront.core.i18n import normalize_locale
from storefront.models.cart import (
    CardCheckoutRequest,
    CheckoutResult,
    CodCheckoutRequest,
    PaymentIntentOut,
)
from storefront.services.checkout_service import (
    checkout_card,
    checkout_cod,
    create_payment_intent_for_cart,
)
from storefront.services.payment_service import StripeGateway, get_payment_gateway

router = APIRouter()


@router.post("/{session_id}/payment-intent", response_model=PaymentIntentOut)
async def payment_intent_endpoint(
    session_id: str,
    locale: Optional[str] = None,
    gateway: StripeGateway = Depends(get_payment_gateway),
):
    return await create_payment_intent_for_cart(session_id, normalize_locale(locale), gateway)


@router.post("/{session_id}/cod", response_model=CheckoutResult, status_code=201)
async def cod_checkout_endpoint(session_id: str, request: CodCheckoutRequest):
    return await checkout_cod(session_id, request)


@router.post("/{session_id}/card", response_model=CheckoutResult)
async def card_checkout_endpoint(
    session_id: str,
    request: CardCheckoutRequest,
    gateway: StripeGateway = Depends(get_payment_gateway),
):
    return await checkout_card(session_id, request, gateway)
