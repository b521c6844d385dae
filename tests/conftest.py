"""
Shared fixtures: an in-memory stand-in for Motor collections, sample
products and a scripted payment gateway.
"""

import copy
import json
import re
from types import SimpleNamespace

import pytest
import stripe
from bson import ObjectId

from storefront.models.common import LocalizedText
from storefront.models.product import OptionKind, Product, Variant, VariantOption
from storefront.services import (
    cart_service,
    category_service,
    order_service,
    product_service,
    section_service,
)
from storefront.services.payment_service import PaymentError

_MISSING = object()


def _get(document, path):
    value = document
    for part in path.split("."):
        if not isinstance(value, dict) or part not in value:
            return _MISSING
        value = value[part]
    return value


def _matches_value(value, condition):
    if isinstance(condition, dict) and any(k.startswith("$") for k in condition):
        for op, arg in condition.items():
            if op == "$options":
                continue
            if op == "$in":
                ok = value in arg
            elif op == "$gte":
                ok = value not in (_MISSING, None) and value >= arg
            elif op == "$lte":
                ok = value not in (_MISSING, None) and value <= arg
            elif op == "$regex":
                flags = re.IGNORECASE if "i" in condition.get("$options", "") else 0
                ok = isinstance(value, str) and re.search(arg, value, flags) is not None
            else:
                raise NotImplementedError(op)
            if not ok:
                return False
        return True
    return value == condition


def matches(document, query):
    for key, condition in query.items():
        if key == "$or":
            if not any(matches(document, q) for q in condition):
                return False
        elif not _matches_value(_get(document, key), condition):
            return False
    return True


def _sort_key(document, field):
    # Documentos sin el campo van al final
    value = _get(document, field)
    if value is _MISSING or value is None:
        return (1, 0)
    return (0, value)


class FakeCursor:
    def __init__(self, documents):
        self._documents = documents
        self._skip = 0
        self._limit = 0

    def sort(self, key, direction=1):
        keys = key if isinstance(key, list) else [(key, direction)]
        for field, order in reversed(keys):
            self._documents.sort(key=lambda d: _sort_key(d, field), reverse=order < 0)
        return self

    def skip(self, count):
        self._skip = count
        return self

    def limit(self, count):
        self._limit = count
        return self

    def _window(self):
        documents = self._documents[self._skip:]
        return documents[: self._limit] if self._limit else documents

    async def to_list(self, length=None):
        documents = self._window()
        if length:
            documents = documents[:length]
        return [copy.deepcopy(d) for d in documents]

    def __aiter__(self):
        self._iter = iter(self._window())
        return self

    async def __anext__(self):
        try:
            return copy.deepcopy(next(self._iter))
        except StopIteration:
            raise StopAsyncIteration


class FakeCollection:
    """The subset of AsyncIOMotorCollection the services use."""

    def __init__(self):
        self.documents = []

    async def find_one(self, query):
        for document in self.documents:
            if matches(document, query):
                return copy.deepcopy(document)
        return None

    def find(self, query=None):
        return FakeCursor([d for d in self.documents if matches(d, query or {})])

    async def count_documents(self, query):
        return sum(1 for d in self.documents if matches(d, query))

    async def insert_one(self, document):
        stored = copy.deepcopy(document)
        stored.setdefault("_id", ObjectId())
        document["_id"] = stored["_id"]
        self.documents.append(stored)
        return SimpleNamespace(inserted_id=stored["_id"])

    async def update_one(self, query, update, upsert=False):
        for document in self.documents:
            if matches(document, query):
                document.update(copy.deepcopy(update.get("$set", {})))
                return SimpleNamespace(matched_count=1, modified_count=1, upserted_id=None)
        if upsert:
            document = {k: v for k, v in query.items() if not k.startswith("$")}
            document.update(copy.deepcopy(update.get("$set", {})))
            result = await self.insert_one(document)
            return SimpleNamespace(matched_count=0, modified_count=0, upserted_id=result.inserted_id)
        return SimpleNamespace(matched_count=0, modified_count=0, upserted_id=None)

    async def delete_one(self, query):
        for index, document in enumerate(self.documents):
            if matches(document, query):
                del self.documents[index]
                return SimpleNamespace(deleted_count=1)
        return SimpleNamespace(deleted_count=0)


@pytest.fixture
def fake_db(monkeypatch):
    """Replaces every collection the services touch with an in-memory one."""
    db = SimpleNamespace(
        products=FakeCollection(),
        categories=FakeCollection(),
        sections=FakeCollection(),
        orders=FakeCollection(),
        carts=FakeCollection(),
    )
    monkeypatch.setattr(product_service, "products_collection", db.products)
    monkeypatch.setattr(category_service, "categories_collection", db.categories)
    monkeypatch.setattr(section_service, "sections_collection", db.sections)
    monkeypatch.setattr(order_service, "orders_collection", db.orders)
    monkeypatch.setattr(cart_service, "carts_collection", db.carts)
    return db


def color_size_options():
    return [
        VariantOption(name=LocalizedText(ar="اللون", fr="Couleur"), values=["red", "blue"], kind=OptionKind.COLOR),
        VariantOption(name=LocalizedText(ar="الحجم", fr="Taille"), values=["S", "M"], kind=OptionKind.SIZE),
    ]


def color_size_variants():
    prices = {("red", "S"): 90, ("red", "M"): 95, ("blue", "S"): 90, ("blue", "M"): 95}
    return [
        Variant(
            id=f"{color}-{size}",
            options={"Couleur": color, "Taille": size},
            price=price,
            images=[f"https://cdn.test/{color}-{size}.jpg"],
        )
        for (color, size), price in prices.items()
    ]


@pytest.fixture
def tshirt():
    """A product with Color x Size variants priced 90 (S) and 95 (M)."""
    return Product(
        id="p-tshirt",
        name=LocalizedText(ar="قميص", fr="T-shirt"),
        description=LocalizedText(ar="قطن", fr="Coton"),
        price=80,
        image="https://cdn.test/tshirt.jpg",
        category_id="c1",
        variant_options=color_size_options(),
        variants=color_size_variants(),
    )


@pytest.fixture
def mug():
    """A simple product without variants."""
    return Product(
        id="p-mug",
        name=LocalizedText(ar="كوب", fr="Tasse"),
        description=LocalizedText(ar="خزف", fr="Céramique"),
        price=50,
        original_price=60,
        image="https://cdn.test/mug.jpg",
        category_id="c1",
    )


async def insert_product(db, product: Product) -> Product:
    """Stores a product document and returns it with its new id."""
    document = product.model_dump(exclude={"id"})
    result = await db.products.insert_one(document)
    return product.model_copy(update={"id": str(result.inserted_id)})


class FakeGateway:
    """Scripted payment gateway recording every call."""

    currency = "mad"

    def __init__(self, status="succeeded", fail_on=None):
        self.status = status
        self.fail_on = fail_on
        self.calls = []

    def _maybe_fail(self, step):
        if self.fail_on == step:
            raise PaymentError(f"{step} failed")

    def create_payment_intent(self, amount, metadata):
        self.calls.append(("create", amount, metadata))
        self._maybe_fail("create")
        return {"client_secret": "pi_test_secret", "payment_intent_id": "pi_test"}

    def update_payment_intent(self, payment_intent_id, shipping_info):
        self.calls.append(("update", payment_intent_id, shipping_info))
        self._maybe_fail("update")

    def confirm_payment(self, payment_intent_id, payment_method):
        self.calls.append(("confirm", payment_intent_id, payment_method))
        self._maybe_fail("confirm")
        return {"status": self.status, "payment_intent_id": payment_intent_id}

    def construct_event(self, payload, signature):
        if signature != "valid":
            raise stripe.SignatureVerificationError("bad signature", signature)
        return json.loads(payload)


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def shipping():
    return {
        "full_name": "Salma Idrissi",
        "phone": "0612345678",
        "address": "12 Rue Atlas",
        "city": "Rabat",
        "email": "",
    }
