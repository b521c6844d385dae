"""
Tests for resolving a concrete variant from the customer's selection.
"""

from storefront.cart.model import Cart
from storefront.variants.matcher import (
    default_selection,
    find_variant,
    resolve_default_variant,
    resolve_image,
    resolve_original_price,
    resolve_price,
)


class TestFindVariant:

    def test_exact_match(self, tshirt):
        variant = find_variant(tshirt, {"Couleur": "blue", "Taille": "M"})
        assert variant.id == "blue-M"
        assert variant.price == 95

    def test_key_order_does_not_matter(self, tshirt):
        assert find_variant(tshirt, {"Taille": "S", "Couleur": "red"}).id == "red-S"

    def test_partial_selection_does_not_match(self, tshirt):
        assert find_variant(tshirt, {"Couleur": "blue"}) is None

    def test_extra_keys_do_not_match(self, tshirt):
        assert find_variant(tshirt, {"Couleur": "blue", "Taille": "M", "Poids": "1kg"}) is None

    def test_product_without_variants(self, mug):
        assert find_variant(mug, {}) is None


def test_default_selection_takes_first_value_of_each_axis(tshirt):
    assert default_selection(tshirt) == {"Couleur": "red", "Taille": "S"}
    assert resolve_default_variant(tshirt).id == "red-S"


def test_stale_variants_fall_back_to_base_product(tshirt, caplog):
    stale = tshirt.model_copy(update={"variants": tshirt.variants[1:]})

    variant = resolve_default_variant(stale)

    assert variant is None
    assert resolve_price(stale, variant) == 80
    assert resolve_image(stale, variant) == "https://cdn.test/tshirt.jpg"
    assert "no variant for its default selection" in caplog.text


def test_display_values_prefer_the_variant(tshirt, mug):
    variant = find_variant(tshirt, {"Couleur": "blue", "Taille": "S"})
    assert resolve_price(tshirt, variant) == 90
    assert resolve_image(tshirt, variant) == "https://cdn.test/blue-S.jpg"
    assert resolve_original_price(mug, None) == 60


def test_selection_to_cart_scenario(tshirt):
    """Select blue/M, add two, then deselect the only line."""
    variant = find_variant(tshirt, {"Couleur": "blue", "Taille": "M"})
    assert variant.price == 95

    cart = Cart()
    item = cart.add_item(tshirt, 2, variant)
    assert cart.subtotal() == 190

    cart.toggle_item_selected(item.cart_item_id)
    assert cart.subtotal() == 0
