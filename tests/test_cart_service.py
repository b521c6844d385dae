"""
Tests for the session cart store.
"""

import pytest
from bson import ObjectId
from fastapi import HTTPException

from conftest import insert_product

from storefront.models.cart import AddCartItemRequest
from storefront.services import cart_service

SESSION = "device-123"


@pytest.fixture
async def stored_tshirt(fake_db, tshirt):
    return await insert_product(fake_db, tshirt)


@pytest.fixture
async def stored_mug(fake_db, mug):
    return await insert_product(fake_db, mug)


async def test_empty_session_has_empty_cart(fake_db):
    cart = await cart_service.get_cart(SESSION)
    assert cart.items == []
    assert cart.subtotal == 0
    assert cart.item_count == 0


async def test_add_resolves_selected_variant_and_persists(fake_db, stored_tshirt):
    request = AddCartItemRequest(
        product_id=stored_tshirt.id, quantity=2, selected_options={"Couleur": "blue", "Taille": "M"}
    )

    out = await cart_service.add_to_cart(SESSION, request)

    assert out.items[0].selected_variant.id == "blue-M"
    assert out.subtotal == 190

    reloaded = await cart_service.load_cart(SESSION)
    assert reloaded.items[0].selected_variant.id == "blue-M"
    assert reloaded.items[0].cart_item_id == out.items[0].cart_item_id
    assert len(fake_db.carts.documents) == 1


async def test_adding_twice_merges(fake_db, stored_tshirt):
    request = AddCartItemRequest(product_id=stored_tshirt.id, selected_options={"Couleur": "red", "Taille": "M"})
    await cart_service.add_to_cart(SESSION, request)
    out = await cart_service.add_to_cart(SESSION, request.model_copy(update={"quantity": 3}))

    assert len(out.items) == 1
    assert out.item_count == 4


async def test_no_selection_uses_default_variant(fake_db, stored_tshirt):
    out = await cart_service.add_to_cart(SESSION, AddCartItemRequest(product_id=stored_tshirt.id))
    assert out.items[0].selected_variant.id == "red-S"


async def test_unmatched_selection_uses_base_price(fake_db, stored_tshirt):
    request = AddCartItemRequest(product_id=stored_tshirt.id, selected_options={"Couleur": "green"})

    out = await cart_service.add_to_cart(SESSION, request)

    assert out.items[0].selected_variant is None
    assert out.subtotal == 80


async def test_unknown_product(fake_db):
    with pytest.raises(HTTPException) as exc:
        await cart_service.add_to_cart(SESSION, AddCartItemRequest(product_id=str(ObjectId())))
    assert exc.value.status_code == 404


async def test_product_not_sold_through_cart(fake_db, mug):
    stored = await insert_product(fake_db, mug.model_copy(update={"allow_add_to_cart": False}))

    with pytest.raises(HTTPException) as exc:
        await cart_service.add_to_cart(SESSION, AddCartItemRequest(product_id=stored.id))

    assert exc.value.status_code == 400


async def test_line_operations_are_saved(fake_db, stored_tshirt, stored_mug):
    await cart_service.add_to_cart(SESSION, AddCartItemRequest(product_id=stored_mug.id, quantity=2))
    out = await cart_service.add_to_cart(SESSION, AddCartItemRequest(product_id=stored_tshirt.id))
    mug_line, tshirt_line = (i.cart_item_id for i in out.items)

    out = await cart_service.toggle_item_selected(SESSION, tshirt_line)
    assert out.subtotal == 100

    out = await cart_service.update_quantity(SESSION, mug_line, 0)
    assert [i.cart_item_id for i in out.items] == [tshirt_line]

    out = await cart_service.toggle_select_all(SESSION, True)
    assert out.subtotal == 90

    out = await cart_service.remove_selected(SESSION)
    assert out.items == []


async def test_sessions_are_isolated(fake_db, stored_mug):
    await cart_service.add_to_cart(SESSION, AddCartItemRequest(product_id=stored_mug.id))

    assert (await cart_service.get_cart("other-device")).items == []
