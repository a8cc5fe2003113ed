"""CRUD + filtering endpoints for the product catalog."""

from __future__ import annotations

from decimal import Decimal
import logging
from typing import NoReturn

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from catalog.api.dependencies.auth import require_admin, require_editor
from catalog.api.dependencies.db import get_session
from catalog.api.schemas.product import (
    ProductCreate,
    ProductFilters,
    ProductRead,
    ProductUpdate,
)
from catalog.services import product_catalog

logger = logging.getLogger(__name__)

router = APIRouter()

MESSAGE_RESPONSES = {
    status.HTTP_404_NOT_FOUND: {"description": "Product not found"},
    status.HTTP_409_CONFLICT: {"description": "SKU already exists"},
}


def _database_failure(db: Session, action: str, e: SQLAlchemyError) -> NoReturn:
    db.rollback()
    logger.error(f"Database error while trying to {action}: {e}", exc_info=True)
    raise HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=f"Failed to {action}",
    ) from e


@router.get(
    "/",
    summary="List products with optional filters",
    response_model=list[ProductRead],
)
def list_products(
    category: str | None = Query(None, description="Filter by category (partial match)"),
    name: str | None = Query(None, description="Filter by name (partial match)"),
    min_price: Decimal | None = Query(None, alias="minPrice"),
    max_price: Decimal | None = Query(None, alias="maxPrice"),
    page: int | None = Query(None, ge=1, description="Page number (1-indexed)"),
    page_size: int = Query(50, alias="pageSize", ge=1, le=500),
    db: Session = Depends(get_session),
) -> list[ProductRead]:
    """Return every product matching all supplied filters.

    Results are unbounded unless ``page`` is given.
    """
    filters = ProductFilters(
        category=category,
        name=name,
        min_price=min_price,
        max_price=max_price,
        page=page,
        page_size=page_size,
    )
    try:
        return product_catalog.list_products(db, filters)
    except SQLAlchemyError as e:
        _database_failure(db, "retrieve products", e)


@router.get(
    "/by-category/{category}",
    summary="List products in a category",
    response_model=list[ProductRead],
)
def list_products_by_category(
    category: str,
    db: Session = Depends(get_session),
) -> list[ProductRead]:
    try:
        return product_catalog.list_products_by_category(db, category)
    except SQLAlchemyError as e:
        _database_failure(db, "retrieve products", e)


@router.get(
    "/{product_id:int}",
    summary="Get a product by ID",
    response_model=ProductRead,
    responses=MESSAGE_RESPONSES,
)
def get_product(
    product_id: int,
    db: Session = Depends(get_session),
) -> ProductRead:
    try:
        return product_catalog.get_product(db, product_id)
    except SQLAlchemyError as e:
        _database_failure(db, "retrieve product", e)


@router.post(
    "/",
    summary="Create a product",
    status_code=status.HTTP_201_CREATED,
    response_model=ProductRead,
    responses=MESSAGE_RESPONSES,
    dependencies=[Depends(require_editor)],
)
def create_product(
    payload: ProductCreate,
    request: Request,
    response: Response,
    db: Session = Depends(get_session),
) -> ProductRead:
    """Persist a new product. The SKU must not be used by any other product."""
    try:
        product = product_catalog.create_product(db, payload)
    except SQLAlchemyError as e:
        _database_failure(db, "create product", e)

    response.headers["Location"] = str(
        request.url_for("get_product", product_id=product.id)
    )
    return product


@router.put(
    "/{product_id:int}",
    summary="Update an existing product",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses=MESSAGE_RESPONSES,
    dependencies=[Depends(require_editor)],
)
def update_product(
    product_id: int,
    payload: ProductUpdate,
    db: Session = Depends(get_session),
) -> Response:
    """Replace the editable fields of a product.

    sku, isActive and isAvailable are only changed when sent.
    """
    try:
        product_catalog.update_product(db, product_id, payload)
    except SQLAlchemyError as e:
        _database_failure(db, "update product", e)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete(
    "/{product_id:int}",
    summary="Delete a product",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses=MESSAGE_RESPONSES,
    dependencies=[Depends(require_admin)],
)
def delete_product(
    product_id: int,
    db: Session = Depends(get_session),
) -> Response:
    try:
        product_catalog.delete_product(db, product_id)
    except SQLAlchemyError as e:
        _database_failure(db, "delete product", e)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
