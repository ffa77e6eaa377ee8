import json
from datetime import date
from decimal import Decimal

import pytest
from django.test import Client

from core.models import Branch, Item, ItemType

DAY = date(2024, 1, 1)


@pytest.fixture
def day():
    return DAY


@pytest.fixture
def branch_x(db):
    return Branch.objects.create(name="BranchX", address="Main St 1", manager="Ana")


@pytest.fixture
def branch_y(db):
    return Branch.objects.create(name="BranchY", address="Side St 2", manager="Luis")


def _item(name, item_type, price, **extra):
    return Item.objects.create(
        code=Item.generate_code(),
        name=name,
        item_type=item_type,
        category=extra.pop("category", "Bakery"),
        price=Decimal(price),
        **extra,
    )


@pytest.fixture
def bread(db):
    return _item("Bread", ItemType.NORMAL, "100")


@pytest.fixture
def croissant(db):
    return _item("Croissant", ItemType.NORMAL, "50")


@pytest.fixture
def milk(db):
    return _item("Milk", ItemType.GROCERY, "2.50", category="Dairy", notify_expiry=True)


@pytest.fixture
def coffee_machine(db):
    return _item("Espresso", ItemType.MACHINE, "3", category=Item.MACHINE_CATEGORY,
                 subcategory=Item.MACHINE_SUBCATEGORY)


class ApiClient:
    """Client de Django que manda/lee JSON."""

    def __init__(self):
        self.client = Client()

    def _send(self, method, url, data=None, **kw):
        body = json.dumps(data) if data is not None else ""
        return getattr(self.client, method)(url, body, content_type="application/json", **kw)

    def get(self, url, params=None):
        return self.client.get(url, params or {})

    def post(self, url, data=None):
        return self._send("post", url, data)

    def put(self, url, data=None):
        return self._send("put", url, data)

    def patch(self, url, data=None):
        return self._send("patch", url, data)

    def delete(self, url):
        return self.client.delete(url)


@pytest.fixture
def api(db):
    return ApiClient()
