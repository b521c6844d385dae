from fastapi import APIRouter, Depends, Request

from storefront.core.config import settings
from storefront.services.checkout_service import handle_webhook
from storefront.services.payment_service import StripeGateway, get_payment_gateway

router = APIRouter()


# ============================ #
# 🔹 Webhook de Stripe: crea la orden al confirmarse el pago
# ============================ #
@router.post("/webhook")
async def stripe_webhook(request: Request, gateway: StripeGateway = Depends(get_payment_gateway)):
    payload = await request.body()
    sig_header = request.headers.get("stripe-signature", "")
    return await handle_webhook(payload, sig_header, gateway)


# ============================ #
# 🔹 Clave pública para el frontend
# ============================ #
@router.get("/stripe-key")
async def get_stripe_key():
    return {"publicKey": settings.stripe_public_key}
