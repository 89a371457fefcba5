from decimal import Decimal
from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer

# Prices travel as JSON numbers but are held as Decimal internally; at most
# 12 digits with 2 decimals, so the float written to JSON is always exact
Price = Annotated[
    Decimal,
    Field(max_digits=12, decimal_places=2),
    PlainSerializer(float, return_type=float, when_used="json"),
]


class StrictBaseModel(BaseModel):
    model_config = ConfigDict(extra="forbid")


# PRODUCT MODELS
class ProductCreate(BaseModel):
    """
    Transient product payload used for both create and update requests.

    Fields are optional at the parsing level so that missing values reach the
    guard functions in app.validation and are reported as validation failures.
    Unknown keys (including a client supplied id) are ignored.
    """

    model_config = ConfigDict(extra="ignore")

    name: Optional[str] = Field(None, json_schema_extra={"example": "LED Panel 40W"})
    description: Optional[str] = Field(
        None, json_schema_extra={"example": "40W LED Panel, 600x600mm, 4000K, IP20"}
    )
    sku: Optional[str] = Field(None, json_schema_extra={"example": "EL-2745-89B"})
    price: Optional[Price] = Field(None, json_schema_extra={"example": 29.99})


class ProductResponse(StrictBaseModel):
    id: int = Field(..., json_schema_extra={"example": 1})
    name: str = Field(..., json_schema_extra={"example": "LED Panel 40W"})
    description: Optional[str] = Field(
        None, json_schema_extra={"example": "40W LED Panel, 600x600mm, 4000K, IP20"}
    )
    sku: str = Field(..., json_schema_extra={"example": "EL-2745-89B"})
    price: Price = Field(..., json_schema_extra={"example": 29.99})

    model_config = ConfigDict(extra="forbid", from_attributes=True)


# HEALTH MODELS
class HealthResponse(BaseModel):
    status: str
    timestamp: str
    components: Optional[dict] = None
