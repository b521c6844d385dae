import uuid
from typing import Iterable, List, Optional, Tuple

from storefront.models.cart import CartItem
from storefront.models.product import Product, Variant

LineKey = Tuple[Optional[str], Optional[str]]


def line_key(product: Product, variant: Optional[Variant]) -> LineKey:
    return product.id, variant.id if variant is not None else None


def unit_price(item: CartItem) -> float:
    if item.selected_variant is not None:
        return item.selected_variant.price
    return item.product.price


def line_total(item: CartItem) -> float:
    return unit_price(item) * item.quantity


class Cart:
    """
    Ordered cart lines with merge-on-add semantics.

    A line is identified by its product id and resolved variant id; adding the
    same pair again grows the existing line. Operations on an unknown
    cart_item_id do nothing.
    """

    def __init__(self, items: Optional[Iterable[CartItem]] = None):
        self.items: List[CartItem] = list(items or [])

    def _find(self, cart_item_id: str) -> Optional[CartItem]:
        return next((i for i in self.items if i.cart_item_id == cart_item_id), None)

    def add_item(
        self, product: Product, quantity: int = 1, variant: Optional[Variant] = None
    ) -> CartItem:
        if quantity < 1:
            raise ValueError("quantity must be at least 1")

        key = line_key(product, variant)
        for item in self.items:
            if line_key(item.product, item.selected_variant) == key:
                item.quantity += quantity
                return item

        item = CartItem(
            cart_item_id=uuid.uuid4().hex,
            product=product,
            quantity=quantity,
            selected=True,
            selected_variant=variant,
        )
        self.items.append(item)
        return item

    def update_quantity(self, cart_item_id: str, quantity: int) -> None:
        if quantity < 1:
            self.remove_item(cart_item_id)
            return
        item = self._find(cart_item_id)
        if item is not None:
            item.quantity = quantity

    def remove_item(self, cart_item_id: str) -> None:
        self.items = [i for i in self.items if i.cart_item_id != cart_item_id]

    def toggle_item_selected(self, cart_item_id: str) -> None:
        item = self._find(cart_item_id)
        if item is not None:
            item.selected = not item.selected

    def toggle_select_all(self, checked: bool) -> None:
        for item in self.items:
            item.selected = checked

    def remove_selected(self) -> None:
        self.items = [i for i in self.items if not i.selected]

    def clear(self) -> None:
        self.items = []

    def selected_items(self) -> List[CartItem]:
        return [i for i in self.items if i.selected]

    def subtotal(self) -> float:
        return sum((line_total(i) for i in self.selected_items()), 0.0)

    def item_count(self) -> int:
        return sum(i.quantity for i in self.items)
