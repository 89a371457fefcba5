from fastapi import APIRouter, Depends, HTTPException, status
from typing import Dict, Any, Optional, Tuple
import logging
from datetime import datetime

from app.database import get_product_store
from app.repository.product_repository import ProductStore
from app.schemas import HealthResponse

router = APIRouter(tags=["Health"])
logger = logging.getLogger(__name__)


def check_store_connectivity(store: ProductStore) -> Dict[str, Any]:
    """Check if the product store is available and return its status"""
    try:
        start_time = datetime.now()
        available = store.is_available()
        query_time = (
            datetime.now() - start_time
        ).total_seconds() * 1000  # Time in milliseconds
    except Exception as e:
        logger.error(f"Unexpected error during store check: {str(e)}")
        return {
            "status": "DOWN",
            "details": {"error": str(e), "errorType": e.__class__.__name__},
        }

    if not available:
        logger.error("Product store reported itself unavailable")
        return {"status": "DOWN", "details": {"store": type(store).__name__}}
    return {
        "status": "UP",
        "details": {
            "store": type(store).__name__,
            "responseTime": f"{query_time:.2f}ms",
        },
    }


def create_health_response(
    components: Optional[Dict[str, Dict[str, Any]]] = None
) -> Tuple[Dict[str, Any], bool]:
    """
    Create a standardized health response with the given components.
    Returns a tuple of (response_dict, is_healthy)
    """
    if components is None:
        components = {"application": {"status": "UP"}}

    overall_status = "UP"
    for status_info in components.values():
        if status_info["status"] != "UP":
            overall_status = "DOWN"
            break

    response = {
        "status": overall_status,
        "timestamp": datetime.now().isoformat(),
        "components": components,
    }

    return response, overall_status == "UP"


def component_health(store: ProductStore) -> Dict[str, Any]:
    components = {
        "application": {"status": "UP"},
        "store": check_store_connectivity(store),
    }

    response, is_healthy = create_health_response(components)

    if not is_healthy:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=response
        )

    return response


@router.get("/liveness", response_model=HealthResponse)
async def liveness_check():
    """
    Liveness probe endpoint.
    Determines if the application is running.
    """
    return {
        "status": "UP",
        "timestamp": datetime.now().isoformat(),
    }


@router.get("/readiness", response_model=HealthResponse)
def readiness_check(store: ProductStore = Depends(get_product_store)):
    """
    Readiness probe endpoint.
    Determines if the service is ready to receive traffic, including store availability.
    """
    return component_health(store)


@router.get("", response_model=HealthResponse)
def health_check(store: ProductStore = Depends(get_product_store)):
    """
    Overall health check endpoint.
    Returns comprehensive health status of the service, including all components.
    """
    return component_health(store)
