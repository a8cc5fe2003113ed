"""Catalog operations: filtered reads and SKU-validated writes.

Every function takes the request-scoped ``Session`` as its store handle; the
module holds no session of its own.
"""

from __future__ import annotations

from datetime import datetime, timezone
import logging

from sqlalchemy import Select, exists, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from catalog.api.schemas.product import (
    ProductCreate,
    ProductFilters,
    ProductRead,
    ProductUpdate,
)
from catalog.core.errors import DuplicateSkuError, ProductNotFoundError
from catalog.db.models.product import Product

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _to_view(product: Product) -> ProductRead:
    return ProductRead.model_validate(product)


def _category_contains(query: Select, category: str) -> Select:
    return query.where(Product.category.contains(category, autoescape=True))


def sku_taken(db: Session, sku: str, exclude_id: int | None = None) -> bool:
    """Return True when another product already holds ``sku``."""
    condition = Product.sku == sku
    if exclude_id is not None:
        condition = condition & (Product.id != exclude_id)
    return bool(db.scalar(select(exists().where(condition))))


def _get_or_raise(db: Session, product_id: int) -> Product:
    product = db.get(Product, product_id)
    if product is None:
        logger.warning(f"Product with ID {product_id} not found")
        raise ProductNotFoundError(product_id)
    return product


def _commit_or_conflict(db: Session, sku: str) -> None:
    """Commit, translating a unique-index violation on SKU into a conflict."""
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.warning(f"Store rejected duplicate SKU {sku}: {e.orig}")
        raise DuplicateSkuError(sku) from e


def list_products(db: Session, filters: ProductFilters) -> list[ProductRead]:
    """Return products matching all supplied filters, ordered by id."""
    logger.info(
        f"Listing products with filters - category: {filters.category}, "
        f"name: {filters.name}, min_price: {filters.min_price}, "
        f"max_price: {filters.max_price}, page: {filters.page}"
    )
    query = select(Product)

    if filters.category and filters.category.strip():
        query = _category_contains(query, filters.category)
    if filters.name and filters.name.strip():
        query = query.where(Product.name.contains(filters.name, autoescape=True))
    if filters.min_price is not None:
        query = query.where(Product.price >= filters.min_price)
    if filters.max_price is not None:
        query = query.where(Product.price <= filters.max_price)

    query = query.order_by(Product.id)
    if filters.page is not None:
        offset = (filters.page - 1) * filters.page_size
        query = query.offset(offset).limit(filters.page_size)

    return [_to_view(p) for p in db.scalars(query).all()]


def get_product(db: Session, product_id: int) -> ProductRead:
    logger.info(f"Getting product with ID: {product_id}")
    return _to_view(_get_or_raise(db, product_id))


def create_product(db: Session, payload: ProductCreate) -> ProductRead:
    """Insert a new product after checking that its SKU is free.

    ``is_available`` always starts true and ``is_active`` defaults to true.
    """
    logger.info(f"Creating new product: {payload.name}")

    if sku_taken(db, payload.sku):
        logger.warning(f"Rejected product {payload.name}: SKU {payload.sku} exists")
        raise DuplicateSkuError(payload.sku)

    product = Product(
        name=payload.name,
        description=payload.description,
        price=payload.price,
        category=payload.category,
        stock_quantity=payload.stock_quantity,
        sku=payload.sku,
        is_active=True if payload.is_active is None else payload.is_active,
        is_available=True,
        created_at=_utcnow(),
    )
    db.add(product)
    _commit_or_conflict(db, payload.sku)
    db.refresh(product)

    logger.info(f"Created product {product.id} with SKU {product.sku}")
    return _to_view(product)


def update_product(db: Session, product_id: int, payload: ProductUpdate) -> ProductRead:
    """Merge ``payload`` into the stored product and stamp ``updated_at``."""
    logger.info(f"Updating product with ID: {product_id}")

    product = _get_or_raise(db, product_id)

    new_sku = payload.sku or None
    if new_sku is not None and new_sku != product.sku:
        if sku_taken(db, new_sku, exclude_id=product_id):
            logger.warning(f"Rejected update of {product_id}: SKU {new_sku} exists")
            raise DuplicateSkuError(new_sku)

    product.name = payload.name
    product.description = payload.description
    product.price = payload.price
    product.category = payload.category
    product.stock_quantity = payload.stock_quantity

    if new_sku is not None:
        product.sku = new_sku
    if payload.is_active is not None:
        product.is_active = payload.is_active
    if payload.is_available is not None:
        product.is_available = payload.is_available

    product.updated_at = _utcnow()

    _commit_or_conflict(db, product.sku)
    db.refresh(product)

    logger.info(f"Updated product {product_id}")
    return _to_view(product)


def delete_product(db: Session, product_id: int) -> None:
    logger.info(f"Deleting product with ID: {product_id}")

    product = _get_or_raise(db, product_id)
    db.delete(product)
    db.commit()

    logger.info(f"Deleted product {product_id}")


def list_products_by_category(db: Session, category: str) -> list[ProductRead]:
    """Substring match on category; an empty string matches every product."""
    logger.info(f"Listing products in category: {category}")
    query = _category_contains(select(Product), category).order_by(Product.id)
    return [_to_view(p) for p in db.scalars(query).all()]
