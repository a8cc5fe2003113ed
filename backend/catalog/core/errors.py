"""Domain errors raised by the catalog service and rendered by the API."""

from __future__ import annotations

from fastapi import status


class CatalogError(Exception):
    """Base error carrying the HTTP status and the client-facing message."""

    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ProductNotFoundError(CatalogError):
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, product_id: int) -> None:
        super().__init__(f"Product with ID {product_id} not found")
        self.product_id = product_id


class DuplicateSkuError(CatalogError):
    status_code = status.HTTP_409_CONFLICT

    def __init__(self, sku: str) -> None:
        super().__init__(f"Product with SKU {sku} already exists")
        self.sku = sku
