from typing import Dict, List, Optional

import pytest
from fastapi.testclient import TestClient

from app.main import create_app
from app.repository.product_repository import ProductStore
from app.schemas import ProductCreate, ProductResponse


class FakeProductStore(ProductStore):
    """
    Canned ProductStore: returns whatever a test primed it with and records
    the calls it received. Stands in for the real store where a test only
    cares about the HTTP mapping.
    """

    def __init__(self):
        self.products: List[ProductResponse] = []
        self.create_result: Optional[ProductResponse] = None
        self.update_result: Optional[ProductResponse] = None
        self.errors: Dict[str, Exception] = {}
        self.calls: List[tuple] = []
        self.available = True

    def _raise_if_primed(self, operation: str):
        if operation in self.errors:
            raise self.errors[operation]

    def list(self):
        self.calls.append(("list",))
        return self.products

    def get_by_id(self, product_id):
        self.calls.append(("get_by_id", product_id))
        return next((p for p in self.products if p.id == product_id), None)

    def get_by_sku(self, sku):
        self.calls.append(("get_by_sku", sku))
        return next((p for p in self.products if p.sku == sku), None)

    def create(self, candidate: ProductCreate):
        self.calls.append(("create", candidate))
        self._raise_if_primed("create")
        return self.create_result

    def update(self, product_id, candidate: ProductCreate):
        self.calls.append(("update", product_id, candidate))
        self._raise_if_primed("update")
        return self.update_result

    def delete(self, product_id):
        self.calls.append(("delete", product_id))
        self._raise_if_primed("delete")

    def is_available(self):
        return self.available


@pytest.fixture
def fake_store():
    return FakeProductStore()


@pytest.fixture
def fake_client(fake_store):
    with TestClient(create_app(fake_store)) as client:
        yield client


@pytest.fixture
def client(memory_store):
    """
    Provides a TestClient instance backed by a fresh in-memory store.
    """
    with TestClient(create_app(memory_store)) as test_client:
        yield test_client


@pytest.fixture
def sql_client(sql_store):
    """
    Provides a TestClient instance backed by an in-memory SQLite store.
    """
    with TestClient(create_app(sql_store)) as test_client:
        yield test_client


@pytest.fixture(params=["memory", "sqlite"])
def any_client(request, memory_store, sql_store):
    store = memory_store if request.param == "memory" else sql_store
    with TestClient(create_app(store)) as test_client:
        yield test_client

