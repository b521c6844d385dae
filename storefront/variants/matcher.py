import logging
from typing import Dict, Optional

from storefront.models.product import Product, Variant

logger = logging.getLogger(__name__)


def find_variant(product: Product, selected_options: Dict[str, str]) -> Optional[Variant]:
    """First variant whose options map equals the selection exactly, else None."""
    for variant in product.variants:
        if variant.options == selected_options:
            return variant
    return None


def default_selection(product: Product) -> Dict[str, str]:
    """The first value of every option axis, as a product page starts out."""
    return {
        option.key: option.values[0]
        for option in product.variant_options
        if option.values
    }


def resolve_default_variant(product: Product) -> Optional[Variant]:
    if not product.variants:
        return None
    variant = find_variant(product, default_selection(product))
    if variant is None:
        # Variantes desfasadas respecto a las opciones: se usa el precio base
        logger.warning("Product %s has no variant for its default selection", product.id)
    return variant


def resolve_price(product: Product, variant: Optional[Variant]) -> float:
    return variant.price if variant is not None else product.price


def resolve_original_price(product: Product, variant: Optional[Variant]) -> Optional[float]:
    return variant.original_price if variant is not None else product.original_price


def resolve_image(product: Product, variant: Optional[Variant]) -> Optional[str]:
    if variant is not None and variant.images:
        return variant.images[0]
    return product.image
