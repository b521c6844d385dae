# storefront/api/v1/routes/products.py
import json
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from storefront.core.i18n import normalize_locale
from storefront.models.product import (
    Product,
    ProductDetail,
    ProductForm,
    ProductListResponse,
    VariantEditRequest,
    VariantEditResponse,
)
from storefront.services.image_service import ImageUploader, get_image_uploader
from storefront.services.product_service import (
    ProductFilter,
    SortOption,
    create_product,
    delete_product,
    get_product,
    get_product_by_slug,
    list_products,
    update_product,
)
from storefront.services.variant_editor import apply_variant_edit, product_detail

router = APIRouter()


@router.get("/", response_model=ProductListResponse)
async def list_products_endpoint(
    category: List[str] = Query([]),
    search: Optional[str] = None,
    min_price: Optional[float] = None,
    max_price: Optional[float] = None,
    sort: SortOption = "default",
    locale: Optional[str] = None,
    page: int = Query(1, ge=1),
    limit: Optional[int] = Query(None, ge=1, le=100),
):
    filters = ProductFilter(
        category_ids=category,
        search=search,
        min_price=min_price,
        max_price=max_price,
        sort=sort,
        locale=normalize_locale(locale),
        page=page,
        limit=limit,
    )
    return await list_products(filters)


@router.post("/variant-editor", response_model=VariantEditResponse)
async def variant_editor_endpoint(request: VariantEditRequest):
    return apply_variant_edit(request)


@router.get("/id/{product_id}", response_model=Product)
async def get_product_by_id_endpoint(product_id: str):
    product = await get_product(product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return product


@router.get("/{slug}", response_model=ProductDetail)
async def get_product_endpoint(slug: str, options: Optional[str] = None):
    product = await get_product_by_slug(slug)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")

    selected: Dict[str, str] = {}
    if options:
        try:
            selected = json.loads(options)
        except ValueError:
            raise HTTPException(status_code=400, detail="options must be a JSON object")
        if not isinstance(selected, dict) or not all(
            isinstance(k, str) and isinstance(v, str) for k, v in selected.items()
        ):
            raise HTTPException(
                status_code=400, detail="options must be a JSON object of string values"
            )
    return product_detail(product, selected)


@router.post("/", response_model=Product, status_code=201)
async def add_product(form: ProductForm, uploader: ImageUploader = Depends(get_image_uploader)):
    return await create_product(form, uploader)


@router.put("/{product_id}", response_model=Product)
async def edit_product(
    product_id: str,
    form: ProductForm,
    uploader: ImageUploader = Depends(get_image_uploader),
):
    return await update_product(product_id, form, uploader)


@router.delete("/{product_id}", status_code=204)
async def remove_product(product_id: str):
    await delete_product(product_id)
