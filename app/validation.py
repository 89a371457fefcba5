"""Guard functions applied to product payloads before they reach a store."""
from dataclasses import dataclass, field
from typing import List

from app.schemas import ProductCreate


@dataclass
class ValidationResult:
    errors: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


def is_blank(value) -> bool:
    return value is None or not value.strip()


def validate_product(candidate: ProductCreate) -> ValidationResult:
    """
    Check a create/update payload and collect every problem found.

    name and sku must be non-blank, price must be present and not negative.
    description is unconstrained.
    """
    result = ValidationResult()
    if is_blank(candidate.name):
        result.errors.append("Product name cannot be empty")
    if is_blank(candidate.sku):
        result.errors.append("SKU cannot be empty")
    if candidate.price is None:
        result.errors.append("Price is required")
    elif candidate.price < 0:
        result.errors.append("Price must be greater than or equal to zero")
    return result
