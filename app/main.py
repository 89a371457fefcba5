import logging
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import SQLAlchemyError

from app.database import build_product_store
from app.repository.product_repository import ProductStore
from app.routers import health, products
from app.utils import create_error_response

logger = logging.getLogger(__name__)


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle unparseable requests with common error format"""
    recovery = "Please check the request format and ensure all fields have the correct types."

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=create_error_response(
            detail="Request validation failed",
            criticality="critical",
            recovery_suggestion=recovery,
            errors=[
                {"loc": list(error["loc"]), "msg": error["msg"]}
                for error in exc.errors()
            ],
        ),
    )


async def sql_exception_handler(request: Request, exc: SQLAlchemyError):
    """Handle database errors with common error format"""
    logger.error(f"database-error: {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=create_error_response(
            detail="Database operation failed", criticality="critical"
        ),
    )


async def general_exception_handler(request: Request, exc: Exception):
    """Handle all other exceptions with common error format"""
    logger.exception(f"unhandled-error: {request.method} {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=create_error_response(
            detail="Internal server error", criticality="critical"
        ),
    )


def create_app(product_store: Optional[ProductStore] = None) -> FastAPI:
    """
    Build the application around the given product store.

    Without a store, one is built from the environment: SQL when DATABASE_URL
    is set, in-memory otherwise.
    """
    app = FastAPI(
        title="Product Inventory Service",
        description="Service for managing the product catalog of an inventory",
        version="1.0.0",
    )
    app.state.product_store = (
        product_store if product_store is not None else build_product_store()
    )

    app.add_middleware(GZipMiddleware, minimum_size=1000)

    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(SQLAlchemyError, sql_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    app.include_router(products.router, prefix="/api/products", tags=["Products"])
    app.include_router(health.router, prefix="/health")

    @app.get("/")
    async def root():
        return {"message": "Product Inventory Service"}

    return app


app = create_app()
