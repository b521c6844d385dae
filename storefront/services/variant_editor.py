import logging
from typing import Dict, Optional

from fastapi import HTTPException

from storefront.models.product import (
    Product,
    ProductDetail,
    VariantEditAction,
    VariantEditRequest,
    VariantEditResponse,
)
from storefront.variants import options as option_ops
from storefront.variants.matcher import (
    default_selection,
    find_variant,
    resolve_image,
    resolve_original_price,
    resolve_price,
)
from storefront.variants.reconciler import reconcile_variants

logger = logging.getLogger(__name__)


def apply_variant_edit(request: VariantEditRequest) -> VariantEditResponse:
    """Applies one option edit and re-derives the variant list from the result."""
    opts = option_ops.with_resolved_kinds(request.options)
    name = request.name
    try:
        if request.action == VariantEditAction.ADD_OPTION:
            opts = option_ops.add_option(opts)
        elif request.action == VariantEditAction.REMOVE_OPTION:
            opts = option_ops.remove_option(opts, request.index)
        elif request.action == VariantEditAction.RENAME_OPTION:
            opts = option_ops.rename_option(
                opts, request.index, ar=name.ar if name else None, fr=name.fr if name else None
            )
        elif request.action == VariantEditAction.CHOOSE_PREDEFINED:
            opts = option_ops.choose_predefined_option(opts, request.index, request.value or "")
        elif request.action == VariantEditAction.ADD_VALUE:
            opts = option_ops.add_value(opts, request.index, request.value or "")
        elif request.action == VariantEditAction.REMOVE_VALUE:
            opts = option_ops.remove_value(opts, request.index, request.value or "")
    except IndexError:
        raise HTTPException(status_code=400, detail=f"No option at position {request.index}")
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return VariantEditResponse(options=opts, variants=reconcile_variants(opts, request.variants))


def swatches(product: Product) -> Dict[str, Dict[str, Optional[str]]]:
    return {
        option.key: {value: option_ops.swatch_hex(option, value) for value in option.values}
        for option in option_ops.with_resolved_kinds(product.variant_options)
    }


def product_detail(product: Product, selected: Optional[Dict[str, str]] = None) -> ProductDetail:
    selection = selected or default_selection(product)
    variant = find_variant(product, selection) if product.variants else None
    if product.variants and variant is None:
        logger.warning("Product %s has no variant for %s", product.id, selection)
    return ProductDetail(
        product=product,
        selected_options=selection,
        variant=variant,
        price=resolve_price(product, variant),
        original_price=resolve_original_price(product, variant),
        image=resolve_image(product, variant),
        swatches=swatches(product),
    )
