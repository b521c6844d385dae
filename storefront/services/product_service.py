# storefront/services/product_service.py
import logging
import re
from datetime import datetime, timezone
from typing import Any, Dict, List, Literal, Optional

from fastapi import HTTPException, status
from pydantic import BaseModel

from storefront.core.config import settings
from storefront.db.database import object_id, products_collection, serialize_document
from storefront.models.product import Product, ProductForm, ProductListResponse
from storefront.services.category_service import get_category
from storefront.services.image_service import (
    ImageUploader,
    removed_urls,
    resolve_slot,
    resolve_slots,
)
from storefront.services.validation import validate_product_form
from storefront.variants.options import with_resolved_kinds
from storefront.variants.reconciler import reconcile_variants

logger = logging.getLogger(__name__)

SortOption = Literal["default", "price-asc", "price-desc", "newest"]


class ProductFilter(BaseModel):
    category_ids: List[str] = []
    search: Optional[str] = None
    min_price: Optional[float] = None
    max_price: Optional[float] = None
    sort: SortOption = "default"
    locale: str = "ar"
    page: int = 1
    limit: Optional[int] = None


def product_serializer(product: Dict[str, Any]) -> Product:
    return Product(**serialize_document(product))


def build_product_query(filters: ProductFilter) -> Dict[str, Any]:
    query: Dict[str, Any] = {}
    if filters.category_ids:
        query["category_id"] = {"$in": filters.category_ids}

    price: Dict[str, float] = {}
    if filters.min_price is not None:
        price["$gte"] = filters.min_price
    if filters.max_price is not None:
        price["$lte"] = filters.max_price
    if price:
        query["price"] = price

    if filters.search:
        pattern = {"$regex": re.escape(filters.search.strip()), "$options": "i"}
        query["$or"] = [
            {f"name.{filters.locale}": pattern},
            {f"description.{filters.locale}": pattern},
        ]
    return query


def sort_spec(sort: SortOption) -> List[tuple]:
    if sort == "price-asc":
        return [("price", 1)]
    if sort == "price-desc":
        return [("price", -1)]
    return [("created_at", -1)]


async def list_products(filters: ProductFilter) -> ProductListResponse:
    limit = filters.limit or settings.products_per_page
    page = max(filters.page, 1)
    query = build_product_query(filters)

    total = await products_collection.count_documents(query)
    cursor = (
        products_collection.find(query)
        .sort(sort_spec(filters.sort))
        .skip((page - 1) * limit)
        .limit(limit)
    )
    products = [product_serializer(p) for p in await cursor.to_list(limit)]

    return ProductListResponse(
        products=products,
        total=total,
        page=page,
        limit=limit,
        has_more=(page - 1) * limit + len(products) < total,
    )


async def get_product(product_id: str) -> Optional[Product]:
    product = await products_collection.find_one({"_id": object_id(product_id)})
    if product:
        return product_serializer(product)
    return None


async def get_product_by_slug(slug: str) -> Optional[Product]:
    """Busca por slug y, si no existe, por nombre árabe y luego francés."""
    for field in ("slug", "name.ar", "name.fr"):
        product = await products_collection.find_one({field: slug})
        if product:
            return product_serializer(product)
    return None


async def get_products_by_ids(product_ids: List[str]) -> List[Product]:
    if not product_ids:
        return []
    ids = [object_id(pid) for pid in product_ids]
    products = await products_collection.find({"_id": {"$in": ids}}).to_list(len(ids))
    return [product_serializer(p) for p in products]


async def _prepare_product(
    form: ProductForm,
    uploader: ImageUploader,
    existing: Optional[Product] = None,
) -> Dict[str, Any]:
    options = with_resolved_kinds(form.variant_options) if form.has_variants else []
    previous = form.variants or (existing.variants if existing else [])
    variants = reconcile_variants(options, previous, form.has_variants)
    form = form.model_copy(update={"variant_options": options, "variants": variants})

    errors = validate_product_form(form, is_new=existing is None)
    if errors:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=errors)

    category = await get_category(form.category_id)
    if category is None:
        raise HTTPException(status_code=400, detail="Category not found")

    image = await resolve_slot(form.main_image, uploader)
    if image is None and existing is not None:
        image = existing.image

    return {
        "name": form.name.model_dump(),
        "description": form.description.model_dump(),
        "slug": form.slug,
        "price": form.price,
        "original_price": form.original_price,
        "image": image,
        "sub_images": await resolve_slots(form.sub_images, uploader),
        "category_id": form.category_id,
        "category": category.model_dump(),
        "keywords": form.keywords,
        "is_new": form.is_new,
        "variant_options": [o.model_dump(mode="json") for o in options],
        "variants": [v.model_dump() for v in variants],
        "allow_direct_purchase": form.allow_direct_purchase,
        "allow_add_to_cart": form.allow_add_to_cart,
        "custom_sections": (
            [s.model_dump() for s in form.custom_sections] if form.has_custom_sections else []
        ),
        "certification_images": await resolve_slots(form.certification_images, uploader),
    }


async def create_product(form: ProductForm, uploader: ImageUploader) -> Product:
    product_dict = await _prepare_product(form, uploader)
    now = datetime.now(timezone.utc)
    product_dict["created_at"] = now
    product_dict["updated_at"] = now

    result = await products_collection.insert_one(product_dict)
    logger.info(
        "Product %s created with %s variants", result.inserted_id, len(product_dict["variants"])
    )
    return product_serializer({**product_dict, "_id": result.inserted_id})


async def update_product(product_id: str, form: ProductForm, uploader: ImageUploader) -> Product:
    existing = await get_product(product_id)
    if existing is None:
        raise HTTPException(status_code=404, detail="Product not found")

    product_dict = await _prepare_product(form, uploader, existing)
    product_dict["updated_at"] = datetime.now(timezone.utc)

    await products_collection.update_one(
        {"_id": object_id(product_id)}, {"$set": product_dict}
    )

    # Imágenes que el editor quitó
    stale = removed_urls(existing.sub_images, form.sub_images)
    stale += removed_urls(existing.certification_images, form.certification_images)
    kept = {url for v in product_dict["variants"] for url in v["images"]}
    for variant in existing.variants:
        stale += [url for url in variant.images if url not in kept]
    for url in stale:
        await uploader.delete(url)

    logger.info("Product %s updated", product_id)
    return product_serializer({**existing.model_dump(exclude={"id"}), **product_dict, "_id": product_id})


async def delete_product(product_id: str) -> None:
    result = await products_collection.delete_one({"_id": object_id(product_id)})
    if result.deleted_count == 0:
        raise HTTPException(status_code=404, detail="Product not found")
    logger.info("Product %s deleted", product_id)
