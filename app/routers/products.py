import logging
from decimal import Decimal
from typing import List

from fastapi import APIRouter, Depends, Response, status
from fastapi.responses import JSONResponse

from app.database import get_product_store
from app.exceptions import DuplicateSkuError, ProductNotFoundError
from app.repository.product_repository import ProductStore
from app.schemas import ProductCreate, ProductResponse
from app.utils import create_error_response
from app.validation import ValidationResult, validate_product

router = APIRouter()
logger = logging.getLogger(__name__)

# Define Pydantic example instances
example_product_obj = ProductResponse(
    id=42,
    name="Super LED Panel 60W",
    description="A high-end LED panel for industrial use",
    sku="EL-9999-01X",
    price=Decimal("129.99"),
)

example_product_obj_alt = ProductResponse(
    id=43,
    name="Eco LED Panel 40W",
    description="Energy efficient 40W LED panel",
    sku="EL-1234-XY9",
    price=Decimal("49.50"),
)


def validation_failed_response(result: ValidationResult) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=create_error_response(
            detail="; ".join(result.errors),
            criticality="critical",
            recovery_suggestion="Provide a non-empty name and SKU and a price of zero or more",
            errors=result.errors,
        ),
    )


@router.get(
    "",
    response_model=List[ProductResponse],
    responses={
        200: {
            "content": {
                "application/json": {
                    "examples": {
                        "multiple_products": {
                            "value": [
                                example_product_obj.model_dump(mode="json"),
                                example_product_obj_alt.model_dump(mode="json"),
                            ]
                        }
                    }
                }
            }
        }
    },
)
def list_products_endpoint(store: ProductStore = Depends(get_product_store)):
    return store.list()


@router.get(
    "/sku/{sku:path}",
    response_model=ProductResponse,
    responses={404: {"description": "No product holds this SKU"}},
)
def get_product_by_sku_endpoint(
    sku: str, store: ProductStore = Depends(get_product_store)
):
    product = store.get_by_sku(sku)
    if product is None:
        return Response(status_code=status.HTTP_404_NOT_FOUND)
    return product


@router.get(
    "/{product_id}",
    response_model=ProductResponse,
    responses={404: {"description": "Product not found"}},
)
def get_product_endpoint(
    product_id: int, store: ProductStore = Depends(get_product_store)
):
    product = store.get_by_id(product_id)
    if product is None:
        return Response(status_code=status.HTTP_404_NOT_FOUND)
    return product


@router.post("", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
def create_product_endpoint(
    product: ProductCreate, store: ProductStore = Depends(get_product_store)
):
    result = validate_product(product)
    if not result.ok:
        logger.warning(f"product-invalid: create rejected: {result.errors}")
        return validation_failed_response(result)
    try:
        created = store.create(product)
    except DuplicateSkuError as e:
        logger.warning(f"product-duplicate-sku: {e}")
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=create_error_response(
                detail=str(e),
                criticality="critical",
                recovery_suggestion="Use a different SKU or update the existing product",
            ),
        )
    logger.info(f"product-created: id={created.id} sku={created.sku}")
    return created


@router.put("/{product_id}", response_model=ProductResponse)
def update_product_endpoint(
    product_id: int,
    product: ProductCreate,
    store: ProductStore = Depends(get_product_store),
):
    result = validate_product(product)
    if not result.ok:
        logger.warning(f"product-invalid: update of {product_id} rejected: {result.errors}")
        return validation_failed_response(result)
    try:
        updated = store.update(product_id, product)
    except (ProductNotFoundError, DuplicateSkuError) as e:
        # a SKU clash on update maps to 404, unlike create
        logger.warning(f"product-update-failed: {e}")
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content=create_error_response(
                detail=str(e),
                criticality="critical",
                recovery_suggestion="Verify the product ID and that the SKU is not used by another product",
            ),
        )
    logger.info(f"product-updated: id={updated.id} sku={updated.sku}")
    return updated


@router.delete(
    "/{product_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
)
def delete_product_endpoint(
    product_id: int, store: ProductStore = Depends(get_product_store)
):
    try:
        store.delete(product_id)
    except ProductNotFoundError as e:
        logger.warning(f"product-delete-failed: {e}")
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content=create_error_response(
                detail=str(e),
                criticality="critical",
                recovery_suggestion="Check if the product ID exists",
            ),
        )
    logger.info(f"product-deleted: id={product_id}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
