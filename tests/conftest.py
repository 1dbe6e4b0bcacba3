import pytest
from fastapi.testclient import TestClient

from database import ProductStore, get_store
from main import app


class FakeProductStore(ProductStore):
    """In-memory store that records every call it receives."""

    def __init__(self, products=None):
        self.products = list(products or [])
        self.calls = []

    def list_all(self):
        self.calls.append(("list_all",))
        return self.products

    def insert(self, product):
        self.calls.append(("insert", product))
        self.products.append(product.model_dump())
        return product

    def update_by_id(self, product_id, fields):
        self.calls.append(("update_by_id", product_id, fields))

    def delete_by_id(self, product_id):
        self.calls.append(("delete_by_id", product_id))


@pytest.fixture()
def store():
    return FakeProductStore([{"id": 347, "name": "Papasorn"}])


@pytest.fixture()
def client(store):
    app.dependency_overrides[get_store] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()
