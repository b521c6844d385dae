import logging
from datetime import datetime, timezone
from typing import List, Optional

from fastapi import HTTPException, status

from storefront.db.database import object_id, sections_collection, serialize_document
from storefront.models.section import Section, SectionCreate, SectionWithProducts
from storefront.services.product_service import get_products_by_ids
from storefront.services.validation import validate_section

logger = logging.getLogger(__name__)


def section_serializer(document: dict) -> Section:
    return Section(**serialize_document(document))


def _check(section: SectionCreate, locale: Optional[str]) -> None:
    errors = validate_section(section, locale)
    if errors:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=errors)


async def list_sections(active_only: bool = False) -> List[Section]:
    query = {"is_active": True} if active_only else {}
    sections = []
    async for section in sections_collection.find(query).sort("order", 1):
        sections.append(section_serializer(section))
    return sections


async def get_section(section_id: str) -> Optional[Section]:
    section = await sections_collection.find_one({"_id": object_id(section_id)})
    if section:
        return section_serializer(section)
    return None


async def get_section_with_products(section_id: str) -> SectionWithProducts:
    section = await get_section(section_id)
    if section is None:
        raise HTTPException(status_code=404, detail="Section not found")
    products = await get_products_by_ids(section.data.cta_product_ids)
    return SectionWithProducts(**section.model_dump(), products=products)


async def create_section(section: SectionCreate, locale: Optional[str] = None) -> Section:
    _check(section, locale)
    now = datetime.now(timezone.utc)
    section_dict = {**section.model_dump(), "created_at": now, "updated_at": now}
    result = await sections_collection.insert_one(section_dict)
    logger.info("Section %s (%s) created", result.inserted_id, section.type)
    return section_serializer({**section_dict, "_id": result.inserted_id})


async def update_section(
    section_id: str, section: SectionCreate, locale: Optional[str] = None
) -> Section:
    _check(section, locale)
    fields = {**section.model_dump(), "updated_at": datetime.now(timezone.utc)}
    result = await sections_collection.update_one(
        {"_id": object_id(section_id)}, {"$set": fields}
    )
    if result.matched_count == 0:
        raise HTTPException(status_code=404, detail="Section not found")
    return await get_section(section_id)


async def delete_section(section_id: str) -> None:
    result = await sections_collection.delete_one({"_id": object_id(section_id)})
    if result.deleted_count == 0:
        raise HTTPException(status_code=404, detail="Section not found")
    logger.info("Section %s deleted", section_id)
