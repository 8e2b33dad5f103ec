import logging
from decimal import Decimal

from sqlalchemy import func, update
from sqlalchemy.orm import Session

from retail_orders.core.errors import RecordNotFound, UniquenessViolation
from retail_orders.models.inventory import Product
from retail_orders.schemas.inventory import ProductCreate, ProductUpdate, StockAdjustment
from retail_orders.services.persistence import (
    commit_or_raise,
    execute_or_raise,
    require,
    validate,
)

logger = logging.getLogger(__name__)


def create_product(
    db: Session,
    product_id: int,
    description: str | None,
    price: Decimal | str | float,
    stock_amount: int = 0,
) -> Product:
    payload = validate(
        ProductCreate,
        product_id=product_id,
        description=description,
        price=price,
        stock_amount=stock_amount,
    )
    if db.get(Product, payload.product_id) is not None:
        raise UniquenessViolation(f"product {payload.product_id} already exists")

    product = Product(**payload.model_dump())
    db.add(product)
    commit_or_raise(db, f"product {payload.product_id} insert")
    return product


def get_product(db: Session, product_id: int) -> Product | None:
    return db.get(Product, product_id)


def update_product(db: Session, product_id: int, **changes) -> Product:
    payload = validate(ProductUpdate, **changes)
    product = require(db, Product, product_id, "Product")
    for field, value in payload.model_dump(exclude_unset=True).items():
        setattr(product, field, value)
    commit_or_raise(db, f"product {product_id} update")
    return product


def adjust_stock(db: Session, product_id: int, delta: int) -> Product:
    """Restock (positive delta) or sell (negative delta) in one UPDATE.

    The stock check constraint rejects a result below zero, so concurrent
    sales cannot oversell.
    """
    delta = validate(StockAdjustment, delta=delta).delta
    action = f"product {product_id} stock adjustment by {delta}"
    result = execute_or_raise(
        db,
        update(Product)
        .where(Product.product_id == product_id)
        .values({Product.stock_amount: func.coalesce(Product.stock_amount, 0) + delta})
        .execution_options(synchronize_session=False),
        action,
    )
    if not result.rowcount:
        db.rollback()
        raise RecordNotFound("Product", product_id)
    commit_or_raise(db, action)

    product = db.get(Product, product_id)
    db.refresh(product)
    logger.debug(
        "Stock for product %s is now %s",
        product_id,
        product.stock_amount,
        extra={"product_id": product_id},
    )
    return product


def delete_product(db: Session, product_id: int) -> None:
    product = require(db, Product, product_id, "Product")
    # Reload the line collection so the cascade sees rows added elsewhere.
    db.expire(product)
    db.delete(product)
    commit_or_raise(db, f"product {product_id} delete")
    logger.info("Deleted product %s", product_id, extra={"product_id": product_id})


__all__ = [
    "adjust_stock",
    "create_product",
    "delete_product",
    "get_product",
    "update_product",
]
