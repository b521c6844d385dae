from typing import List, Optional

from fastapi import APIRouter, HTTPException

from storefront.models.section import Section, SectionCreate, SectionWithProducts
from storefront.services.section_service import (
    create_section,
    delete_section,
    get_section,
    get_section_with_products,
    list_sections,
    update_section,
)

router = APIRouter()


@router.get("/", response_model=List[Section])
async def list_sections_endpoint(active_only: bool = False):
    return await list_sections(active_only)


@router.get("/{section_id}", response_model=Section)
async def get_section_endpoint(section_id: str):
    section = await get_section(section_id)
    if not section:
        raise HTTPException(status_code=404, detail="Section not found")
    return section


@router.get("/{section_id}/products", response_model=SectionWithProducts)
async def get_section_products_endpoint(section_id: str):
    return await get_section_with_products(section_id)


@router.post("/", response_model=Section, status_code=201)
async def create_section_endpoint(section: SectionCreate, locale: Optional[str] = None):
    return await create_section(section, locale)


@router.put("/{section_id}", response_model=Section)
async def update_section_endpoint(
    section_id: str, section: SectionCreate, locale: Optional[str] = None
):
    return await update_section(section_id, section, locale)


@router.delete("/{section_id}", status_code=204)
async def delete_section_endpoint(section_id: str):
    await delete_section(section_id)
