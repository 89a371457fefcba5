import sys
from decimal import Decimal
from pathlib import Path

import pytest

# Set project root so that app modules are found
project_root = str(Path(__file__).parent.parent)
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from app.repository.product_repository import (  # noqa: E402
    InMemoryProductStore,
    SqlProductStore,
)
from app.schemas import ProductCreate  # noqa: E402


# Shared: Improve test names from docstrings.
def pytest_collection_modifyitems(items):
    for item in items:
        doc = item.function.__doc__
        if doc:
            summary = next(
                (line.strip() for line in doc.splitlines() if line.strip()), None
            )
            if summary:
                if hasattr(item, "callspec"):
                    start = item.nodeid.find("[")
                    param_part = item.nodeid[start:] if start != -1 else ""
                    item._nodeid = summary + param_part
                else:
                    item._nodeid = summary


def sqlite_store() -> SqlProductStore:
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    return SqlProductStore(engine)


@pytest.fixture
def make_product():
    """Factory for transient product payloads with sensible defaults."""

    def _make(
        sku="TEST-001",
        name="Test Product",
        description="Test Description",
        price=Decimal("29.99"),
    ) -> ProductCreate:
        return ProductCreate(name=name, description=description, sku=sku, price=price)

    return _make


@pytest.fixture
def memory_store():
    # Fresh store per test to avoid shared state.
    return InMemoryProductStore()


@pytest.fixture(params=["memory", "sqlite"])
def store(request):
    """Every ProductStore implementation, one at a time."""
    if request.param == "memory":
        return InMemoryProductStore()
    return sqlite_store()


@pytest.fixture
def sql_store():
    return sqlite_store()
