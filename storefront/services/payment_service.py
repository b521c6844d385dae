# storefront/services/payment_service.py
import logging
from typing import Any, Dict, Iterable, Mapping

import stripe

from storefront.core.config import settings
from storefront.models.order import ShippingInfo
from storefront.models.product import Product

logger = logging.getLogger(__name__)


class PaymentError(Exception):
    """The payment gateway refused or failed an operation."""


def _amount_for(item: Mapping[str, Any], products: Mapping[str, Product]) -> float:
    product = products.get(item.get("productId"))
    if product is None:
        raise PaymentError(f"Unknown product {item.get('productId')}")
    variant_id = item.get("variantId")
    price = product.price
    for variant in product.variants:
        if variant.id == variant_id:
            price = variant.price
            break
    return price * int(item.get("quantity", 1))


def compute_amount_cents(
    items: Iterable[Mapping[str, Any]], products: Mapping[str, Product]
) -> int:
    """
    Total of the given lines in the smallest currency unit.

    Prices always come from the stored products: the variant price when the
    variant id still exists on the product, otherwise the base price.
    """
    total = sum((_amount_for(item, products) for item in items), 0.0)
    return int(round(total * 100))


class StripeGateway:
    def __init__(self, api_key: str, currency: str = "mad"):
        self.api_key = api_key
        self.currency = currency

    def create_payment_intent(self, amount: int, metadata: Dict[str, str]) -> Dict[str, Any]:
        try:
            intent = stripe.PaymentIntent.create(
                amount=amount,
                currency=self.currency,
                metadata=metadata,
                automatic_payment_methods={"enabled": True, "allow_redirects": "never"},
                api_key=self.api_key,
            )
        except stripe.StripeError as e:
            logger.error("Stripe refused to create a payment intent: %s", e)
            raise PaymentError(str(e)) from e
        logger.info("Payment intent %s created for %s %s", intent.id, amount, self.currency)
        return {"client_secret": intent.client_secret, "payment_intent_id": intent.id}

    def update_payment_intent(self, payment_intent_id: str, shipping_info: ShippingInfo) -> None:
        # Stripe reemplaza la metadata por clave, se conserva la existente
        try:
            intent = stripe.PaymentIntent.retrieve(payment_intent_id, api_key=self.api_key)
            metadata = dict(intent.metadata or {})
            metadata["shippingInfo"] = shipping_info.model_dump_json()
            stripe.PaymentIntent.modify(
                payment_intent_id, metadata=metadata, api_key=self.api_key
            )
        except stripe.StripeError as e:
            logger.error("Could not update payment intent %s: %s", payment_intent_id, e)
            raise PaymentError(str(e)) from e
        logger.info("Payment intent %s updated with shipping info", payment_intent_id)

    def confirm_payment(self, payment_intent_id: str, payment_method: str) -> Dict[str, str]:
        try:
            intent = stripe.PaymentIntent.confirm(
                payment_intent_id, payment_method=payment_method, api_key=self.api_key
            )
        except stripe.StripeError as e:
            logger.error("Could not confirm payment intent %s: %s", payment_intent_id, e)
            raise PaymentError(str(e)) from e
        logger.info("Payment intent %s confirmed with status %s", intent.id, intent.status)
        return {"status": intent.status, "payment_intent_id": intent.id}

    def construct_event(self, payload: bytes, signature: str) -> Any:
        """Raises ValueError or stripe.SignatureVerificationError on bad input."""
        return stripe.Webhook.construct_event(payload, signature, settings.stripe_webhook_secret)


def get_payment_gateway() -> StripeGateway:
    return StripeGateway(settings.stripe_secret_key, settings.currency)
