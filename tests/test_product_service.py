"""
Tests for catalog persistence: save-time reconciliation, lookups and listing.
"""

from datetime import datetime, timedelta, timezone

import pytest
from bson import ObjectId
from fastapi import HTTPException

from conftest import color_size_options, color_size_variants, insert_product

from storefront.models.common import LocalizedText
from storefront.models.images import ExistingImage, PendingUpload
from storefront.models.product import Product, ProductForm
from storefront.services.image_service import ImageUploader
from storefront.services.product_service import (
    ProductFilter,
    build_product_query,
    create_product,
    delete_product,
    get_product,
    get_product_by_slug,
    get_products_by_ids,
    list_products,
    update_product,
)


class FakeUploader(ImageUploader):
    def __init__(self):
        self.deleted = []

    async def upload(self, handle):
        return f"https://cdn.test/uploads/{handle}"

    async def delete(self, url):
        self.deleted.append(url)


@pytest.fixture
def uploader():
    return FakeUploader()


@pytest.fixture
async def category_id(fake_db):
    result = await fake_db.categories.insert_one(
        {"name": {"ar": "ملابس", "fr": "Vêtements"}, "description": {"ar": "", "fr": ""}}
    )
    return str(result.inserted_id)


@pytest.fixture
def tshirt_form(category_id):
    return ProductForm(
        name=LocalizedText(ar="قميص", fr="T-shirt"),
        description=LocalizedText(ar="قطن", fr="Coton"),
        category_id=category_id,
        has_variants=True,
        variant_options=color_size_options(),
        variants=color_size_variants(),
        main_image=PendingUpload(handle="front.jpg"),
        sub_images=[ExistingImage(url="https://cdn.test/a.jpg"), PendingUpload(handle="b.jpg")],
    )


class TestCreateProduct:

    async def test_stores_reconciled_variants_and_embedded_category(self, fake_db, tshirt_form, uploader):
        product = await create_product(tshirt_form, uploader)

        assert product.id is not None
        assert product.image == "https://cdn.test/uploads/front.jpg"
        assert product.sub_images == ["https://cdn.test/a.jpg", "https://cdn.test/uploads/b.jpg"]
        assert product.category.name.fr == "Vêtements"
        assert [v.price for v in product.variants] == [90, 95, 90, 95]

        stored = fake_db.products.documents[0]
        assert stored["variant_options"][0]["kind"] == "color"
        assert stored["created_at"] is not None

    async def test_new_axis_value_needs_a_price(self, fake_db, tshirt_form, uploader):
        """Adding Size=L creates unpriced variants, which block the save."""
        options = color_size_options()
        options[1] = options[1].model_copy(update={"values": ["S", "M", "L"]})
        form = tshirt_form.model_copy(update={"variant_options": options})

        with pytest.raises(HTTPException) as exc:
            await create_product(form, uploader)

        assert exc.value.status_code == 422
        assert "variants" in exc.value.detail
        assert fake_db.products.documents == []

    async def test_unknown_category(self, fake_db, tshirt_form, uploader):
        form = tshirt_form.model_copy(update={"category_id": str(ObjectId())})

        with pytest.raises(HTTPException) as exc:
            await create_product(form, uploader)

        assert exc.value.status_code == 400

    async def test_disabled_variants_are_not_stored(self, fake_db, tshirt_form, uploader):
        form = tshirt_form.model_copy(update={"has_variants": False, "price": 80})

        product = await create_product(form, uploader)

        assert product.variants == []
        assert product.variant_options == []
        assert product.price == 80


class TestUpdateProduct:

    async def test_keeps_stored_variants_when_form_sends_none(self, fake_db, tshirt_form, uploader):
        created = await create_product(tshirt_form, uploader)
        form = tshirt_form.model_copy(
            update={
                "variants": [],
                "main_image": None,
                "sub_images": [ExistingImage(url="https://cdn.test/a.jpg")],
            }
        )

        updated = await update_product(created.id, form, uploader)

        assert [v.price for v in updated.variants] == [90, 95, 90, 95]
        assert updated.image == "https://cdn.test/uploads/front.jpg"
        assert uploader.deleted == ["https://cdn.test/uploads/b.jpg"]

    async def test_missing_product(self, fake_db, tshirt_form, uploader):
        with pytest.raises(HTTPException) as exc:
            await update_product(str(ObjectId()), tshirt_form, uploader)
        assert exc.value.status_code == 404


class TestLookups:

    async def test_get_by_slug_falls_back_to_names(self, fake_db, mug):
        stored = await insert_product(fake_db, mug.model_copy(update={"slug": "tasse-blanche"}))

        assert (await get_product_by_slug("tasse-blanche")).id == stored.id
        assert (await get_product_by_slug("كوب")).id == stored.id
        assert (await get_product_by_slug("Tasse")).id == stored.id
        assert await get_product_by_slug("unknown") is None

    async def test_get_product_and_by_ids(self, fake_db, mug, tshirt):
        mug = await insert_product(fake_db, mug)
        tshirt = await insert_product(fake_db, tshirt)

        assert (await get_product(mug.id)).name.fr == "Tasse"
        assert {p.id for p in await get_products_by_ids([mug.id, tshirt.id])} == {mug.id, tshirt.id}
        assert await get_products_by_ids([]) == []

    async def test_invalid_id_is_a_bad_request(self, fake_db):
        with pytest.raises(HTTPException) as exc:
            await get_product("not-an-id")
        assert exc.value.status_code == 400

    async def test_delete(self, fake_db, mug):
        mug = await insert_product(fake_db, mug)
        await delete_product(mug.id)
        assert await get_product(mug.id) is None

        with pytest.raises(HTTPException) as exc:
            await delete_product(mug.id)
        assert exc.value.status_code == 404


class TestListProducts:

    @pytest.fixture
    async def catalog(self, fake_db):
        now = datetime.now(timezone.utc)
        for index, (fr, price, category) in enumerate(
            [("Tasse", 10, "c1"), ("Théière", 30, "c1"), ("Tapis", 20, "c2")]
        ):
            await insert_product(
                fake_db,
                Product(
                    name=LocalizedText(ar=fr, fr=fr),
                    price=price,
                    category_id=category,
                    created_at=now + timedelta(minutes=index),
                ),
            )

    async def test_sort_and_paginate(self, catalog):
        page = await list_products(ProductFilter(sort="price-desc", limit=2))

        assert [p.price for p in page.products] == [30, 20]
        assert page.total == 3
        assert page.has_more is True

        last = await list_products(ProductFilter(sort="price-desc", limit=2, page=2))
        assert [p.price for p in last.products] == [10]
        assert last.has_more is False

    async def test_newest_first_by_default(self, catalog):
        page = await list_products(ProductFilter())
        assert [p.name.fr for p in page.products] == ["Tapis", "Théière", "Tasse"]

    async def test_filters(self, catalog):
        page = await list_products(ProductFilter(category_ids=["c1"], min_price=15))
        assert [p.name.fr for p in page.products] == ["Théière"]

        page = await list_products(ProductFilter(search="tas", locale="fr"))
        assert [p.name.fr for p in page.products] == ["Tasse"]


def test_build_product_query():
    query = build_product_query(
        ProductFilter(category_ids=["c1"], search="a.b", min_price=5, max_price=50, locale="fr")
    )

    assert query["category_id"] == {"$in": ["c1"]}
    assert query["price"] == {"$gte": 5, "$lte": 50}
    assert query["$or"][0] == {"name.fr": {"$regex": "a\\.b", "$options": "i"}}


def test_empty_filter_matches_everything():
    assert build_product_query(ProductFilter()) == {}
