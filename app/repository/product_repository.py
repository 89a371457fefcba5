import itertools
import logging
import threading
from abc import ABC, abstractmethod
from typing import Dict, List, Optional

from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from app.exceptions import DuplicateSkuError, ProductNotFoundError
from app.models import Base, Product
from app.schemas import ProductCreate, ProductResponse

MUTABLE_FIELDS = {"name", "description", "sku", "price"}

logger = logging.getLogger(__name__)


def get_by_id(db: Session, product_id: int) -> Optional[Product]:
    return db.query(Product).filter(Product.id == product_id).first()


def get_by_sku(db: Session, sku: str) -> Optional[Product]:
    return db.query(Product).filter(Product.sku == sku).first()


def sku_taken(db: Session, sku: str, exclude_id: Optional[int] = None) -> bool:
    query = db.query(Product).filter(Product.sku == sku)
    if exclude_id is not None:
        query = query.filter(Product.id != exclude_id)
    return query.first() is not None


def create_product(db: Session, product_data: dict) -> Product:
    # No duplicate check here; callers must call sku_taken beforehand.
    product = Product(**product_data)
    db.add(product)
    db.commit()
    db.refresh(product)
    return product


def update_product(db: Session, existing_product: Product, update_data: dict) -> Product:
    for key, value in update_data.items():
        setattr(existing_product, key, value)
    db.commit()
    db.refresh(existing_product)
    return existing_product


def delete_product(db: Session, product: Product) -> None:
    db.delete(product)
    db.commit()


def list_products(db: Session):
    return db.query(Product).order_by(Product.id).all()


class ProductStore(ABC):
    """
    Authoritative collection of products.

    Lookups return None on a miss. Mutations raise ProductNotFoundError or
    DuplicateSkuError and leave the store untouched when they do. Returned
    products are copies; changing them does not change the store.
    """

    @abstractmethod
    def list(self) -> List[ProductResponse]:
        """All stored products in insertion order."""

    @abstractmethod
    def get_by_id(self, product_id: int) -> Optional[ProductResponse]:
        pass

    @abstractmethod
    def get_by_sku(self, sku: str) -> Optional[ProductResponse]:
        """Exact, case-sensitive SKU match."""

    @abstractmethod
    def create(self, candidate: ProductCreate) -> ProductResponse:
        """Assign a fresh id and store the candidate."""

    @abstractmethod
    def update(self, product_id: int, candidate: ProductCreate) -> ProductResponse:
        """Replace every mutable field of an existing product; the id is kept."""

    @abstractmethod
    def delete(self, product_id: int) -> None:
        pass

    def is_available(self) -> bool:
        return True


class InMemoryProductStore(ProductStore):
    def __init__(self):
        self._products: Dict[int, ProductResponse] = {}
        self._ids = itertools.count(1)
        # serializes the sku check and the write that follows it
        self._lock = threading.Lock()

    def _sku_holder(self, sku: str, exclude_id: Optional[int] = None):
        # snapshot: lookups run unlocked while mutations change the dict
        for product in tuple(self._products.values()):
            if product.sku == sku and product.id != exclude_id:
                return product
        return None

    def list(self) -> List[ProductResponse]:
        return [product.model_copy() for product in tuple(self._products.values())]

    def get_by_id(self, product_id: int) -> Optional[ProductResponse]:
        product = self._products.get(product_id)
        return product.model_copy() if product else None

    def get_by_sku(self, sku: str) -> Optional[ProductResponse]:
        product = self._sku_holder(sku)
        return product.model_copy() if product else None

    def create(self, candidate: ProductCreate) -> ProductResponse:
        with self._lock:
            if self._sku_holder(candidate.sku):
                raise DuplicateSkuError(candidate.sku)
            product = ProductResponse(
                id=next(self._ids), **candidate.model_dump(include=MUTABLE_FIELDS)
            )
            self._products[product.id] = product
            return product.model_copy()

    def update(self, product_id: int, candidate: ProductCreate) -> ProductResponse:
        with self._lock:
            if product_id not in self._products:
                raise ProductNotFoundError(product_id)
            if self._sku_holder(candidate.sku, exclude_id=product_id):
                raise DuplicateSkuError(candidate.sku)
            product = ProductResponse(
                id=product_id, **candidate.model_dump(include=MUTABLE_FIELDS)
            )
            self._products[product_id] = product
            return product.model_copy()

    def delete(self, product_id: int) -> None:
        with self._lock:
            if self._products.pop(product_id, None) is None:
                raise ProductNotFoundError(product_id)


class SqlProductStore(ProductStore):
    """
    Store backed by the products table.

    One session is opened per operation. The table's unique constraint on sku
    backs up the explicit check; a violation is reported as DuplicateSkuError.
    """

    def __init__(self, engine: Engine):
        self._engine = engine
        self._session_factory = sessionmaker(
            autocommit=False, autoflush=False, expire_on_commit=False, bind=engine
        )
        self._lock = threading.Lock()
        Base.metadata.create_all(bind=engine)

    def list(self) -> List[ProductResponse]:
        with self._session_factory() as db:
            return [ProductResponse.model_validate(p) for p in list_products(db)]

    def get_by_id(self, product_id: int) -> Optional[ProductResponse]:
        with self._session_factory() as db:
            product = get_by_id(db, product_id)
            return ProductResponse.model_validate(product) if product else None

    def get_by_sku(self, sku: str) -> Optional[ProductResponse]:
        with self._session_factory() as db:
            product = get_by_sku(db, sku)
            return ProductResponse.model_validate(product) if product else None

    def create(self, candidate: ProductCreate) -> ProductResponse:
        with self._lock, self._session_factory() as db:
            if sku_taken(db, candidate.sku):
                raise DuplicateSkuError(candidate.sku)
            try:
                product = create_product(
                    db, candidate.model_dump(include=MUTABLE_FIELDS)
                )
            except IntegrityError:
                db.rollback()
                raise DuplicateSkuError(candidate.sku)
            return ProductResponse.model_validate(product)

    def update(self, product_id: int, candidate: ProductCreate) -> ProductResponse:
        with self._lock, self._session_factory() as db:
            existing = get_by_id(db, product_id)
            if existing is None:
                raise ProductNotFoundError(product_id)
            if sku_taken(db, candidate.sku, exclude_id=product_id):
                raise DuplicateSkuError(candidate.sku)
            try:
                product = update_product(
                    db, existing, candidate.model_dump(include=MUTABLE_FIELDS)
                )
            except IntegrityError:
                db.rollback()
                raise DuplicateSkuError(candidate.sku)
            return ProductResponse.model_validate(product)

    def delete(self, product_id: int) -> None:
        with self._lock, self._session_factory() as db:
            existing = get_by_id(db, product_id)
            if existing is None:
                raise ProductNotFoundError(product_id)
            delete_product(db, existing)

    def is_available(self) -> bool:
        try:
            with self._session_factory() as db:
                db.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError as e:
            logger.error(f"store-unavailable: Database connectivity check failed: {e}")
            return False
