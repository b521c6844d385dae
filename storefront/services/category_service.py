import logging
from datetime import datetime, timezone
from typing import List, Optional

from fastapi import HTTPException

from storefront.db.database import categories_collection, object_id, serialize_document
from storefront.models.category import Category, CategoryCreate, CategoryUpdate

logger = logging.getLogger(__name__)


def category_serializer(document: dict) -> Category:
    return Category(**serialize_document(document))


async def get_categories() -> List[Category]:
    categories = []
    async for category in categories_collection.find().sort("name.ar", 1):
        categories.append(category_serializer(category))
    return categories


async def get_category(category_id: str) -> Optional[Category]:
    category = await categories_collection.find_one({"_id": object_id(category_id)})
    if category:
        return category_serializer(category)
    return None


async def create_category(category: CategoryCreate) -> Category:
    now = datetime.now(timezone.utc)
    category_dict = {**category.model_dump(), "created_at": now, "updated_at": now}
    result = await categories_collection.insert_one(category_dict)
    logger.info("Category %s created", result.inserted_id)
    return category_serializer({**category_dict, "_id": result.inserted_id})


async def update_category(category_id: str, update: CategoryUpdate) -> Category:
    fields = update.model_dump(exclude_unset=True)
    fields["updated_at"] = datetime.now(timezone.utc)

    result = await categories_collection.update_one(
        {"_id": object_id(category_id)}, {"$set": fields}
    )
    if result.matched_count == 0:
        raise HTTPException(status_code=404, detail="Category not found")

    return await get_category(category_id)


async def delete_category(category_id: str) -> None:
    result = await categories_collection.delete_one({"_id": object_id(category_id)})
    if result.deleted_count == 0:
        raise HTTPException(status_code=404, detail="Category not found")
    logger.info("Category %s deleted", category_id)
