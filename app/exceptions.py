class ProductError(Exception):
    """Base class for product store failures."""


class ProductNotFoundError(ProductError):
    def __init__(self, product_id: int):
        self.product_id = product_id
        super().__init__(f"Product not found with id: {product_id}")


class DuplicateSkuError(ProductError):
    def __init__(self, sku: str):
        self.sku = sku
        super().__init__(f"Product with SKU {sku} already exists")
