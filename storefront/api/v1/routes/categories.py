# storefront/api/v1/routes/categories.py
from typing import List

from fastapi import APIRouter, HTTPException

from storefront.models.category import Category, CategoryCreate, CategoryUpdate
from storefront.services.category_service import (
    create_category,
    delete_category,
    get_categories,
    get_category,
    update_category,
)

router = APIRouter()


@router.get("/", response_model=List[Category])
async def get_categories_endpoint():
    return await get_categories()


@router.get("/{category_id}", response_model=Category)
async def get_category_endpoint(category_id: str):
    category = await get_category(category_id)
    if not category:
        raise HTTPException(status_code=404, detail="Category not found")
    return category


@router.post("/", response_model=Category, status_code=201)
async def create_category_endpoint(category: CategoryCreate):
    return await create_category(category)


@router.put("/{category_id}", response_model=Category)
async def update_category_endpoint(category_id: str, update: CategoryUpdate):
    return await update_category(category_id, update)


@router.delete("/{category_id}", status_code=204)
async def delete_category_endpoint(category_id: str):
    await delete_category(category_id)
