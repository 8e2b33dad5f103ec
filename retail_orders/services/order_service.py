import logging
from datetime import date

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from retail_orders.core.constants import ORDER_SEQUENCE_NAME
from retail_orders.core.errors import (
    CascadeIntegrityError,
    SequenceExhaustedError,
    UniquenessViolation,
    translate_integrity_error,
)
from retail_orders.models.fulfilment import Collection, Delivery
from retail_orders.models.order_products import OrderProduct
from retail_orders.models.orders import Order
from retail_orders.models.staff import StaffOrder
from retail_orders.schemas.orders import OrderCreate, OrderLineCreate, OrderUpdate
from retail_orders.services.fulfilment_service import check_order_type_change
from retail_orders.services.persistence import (
    commit_or_raise,
    flush_or_raise,
    reject,
    require,
    validate,
)
from retail_orders.services.sequence_service import next_value

logger = logging.getLogger(__name__)

# Every table whose rows hang off an order and must go with it.
ORDER_DEPENDENTS = (OrderProduct, Delivery, Collection, StaffOrder)


def _as_flag(value):
    if isinstance(value, bool):
        return int(value)
    return value


def _allocate_order_id(db: Session) -> int:
    """Commit the next free value from ``ORDERS_seq`` before handing it out.

    Values already taken by explicitly numbered orders are skipped. A value
    that is handed out stays used even if the insert that follows fails.
    """
    while True:
        try:
            value = next_value(db, ORDER_SEQUENCE_NAME)
            db.commit()
        except IntegrityError as exc:
            raise reject(db, translate_integrity_error(exc), "order id allocation") from exc
        except (SQLAlchemyError, SequenceExhaustedError):
            db.rollback()
            raise

        taken = db.execute(select(Order.order_id).where(Order.order_id == value)).first()
        if taken is None:
            return value
        logger.warning(
            "Skipping order id %s from %s: already in use",
            value,
            ORDER_SEQUENCE_NAME,
            extra={"order_id": value, "sequence": ORDER_SEQUENCE_NAME},
        )


def create_order(
    db: Session,
    order_type: str,
    *,
    completed=0,
    placed_on: date | None = None,
    order_id: int | None = None,
) -> Order:
    """Insert an order, drawing its id from ``ORDERS_seq`` unless one is given."""
    payload = validate(
        OrderCreate,
        order_type=order_type,
        completed=_as_flag(completed),
        placed_on=placed_on,
        order_id=order_id,
    )
    if payload.order_id is not None and db.get(Order, payload.order_id) is not None:
        raise UniquenessViolation(f"order {payload.order_id} already exists")

    new_id = payload.order_id
    if new_id is None:
        new_id = _allocate_order_id(db)

    order = Order(
        order_id=new_id,
        order_type=payload.order_type,
        completed=payload.completed,
        placed_on=payload.placed_on or date.today(),
    )
    db.add(order)
    commit_or_raise(db, f"order {new_id} insert")
    logger.info("Created %s order %s", order.order_type, new_id, extra={"order_id": new_id})
    return order


def get_order(db: Session, order_id: int) -> Order | None:
    return db.get(Order, order_id)


def update_order(db: Session, order_id: int, **changes) -> Order:
    changes = {key: _as_flag(value) for key, value in changes.items()}
    payload = validate(OrderUpdate, **changes)
    order = require(db, Order, order_id, "Order")
    values = payload.model_dump(exclude_unset=True)
    if values.get("order_type") is not None:
        check_order_type_change(db, order, values["order_type"])
    for field, value in values.items():
        setattr(order, field, value)
    commit_or_raise(db, f"order {order_id} update")
    return order


def mark_completed(db: Session, order_id: int, completed: bool = True) -> Order:
    return update_order(db, order_id, completed=int(bool(completed)))


def remaining_dependents(db: Session, order_id: int) -> dict[str, int]:
    counts = {}
    for model in ORDER_DEPENDENTS:
        count = db.execute(
            select(func.count()).select_from(model).where(model.order_id == order_id)
        ).scalar_one()
        if count:
            counts[model.__tablename__] = count
    return counts


def delete_order(db: Session, order_id: int) -> None:
    """Delete an order together with its lines, fulfilment record and staff credit.

    Dependents are removed by the ORM cascade and by ``ON DELETE CASCADE`` in
    the same transaction. The transaction only commits once no dependent row
    is left.
    """
    order = require(db, Order, order_id, "Order")
    # Reload collections so the cascade sees rows added through other sessions.
    db.expire(order)
    db.delete(order)
    flush_or_raise(db, f"order {order_id} delete")

    leftovers = remaining_dependents(db, order_id)
    if leftovers:
        raise reject(
            db,
            CascadeIntegrityError(f"order {order_id} delete left dependent rows: {leftovers}"),
            f"order {order_id} delete",
        )
    commit_or_raise(db, f"order {order_id} delete")
    logger.info("Deleted order %s and its dependent rows", order_id, extra={"order_id": order_id})


def add_line(db: Session, order_id: int, product_id: int, quantity: int) -> OrderProduct:
    """Add a product to an order.

    A product appears at most once per order; use :func:`set_line_quantity`
    to change how many are on an existing line.
    """
    payload = validate(
        OrderLineCreate,
        order_id=order_id,
        product_id=product_id,
        quantity=quantity,
    )
    if db.get(OrderProduct, (payload.order_id, payload.product_id)) is not None:
        raise UniquenessViolation(
            f"product {payload.product_id} is already on order {payload.order_id}"
        )

    line = OrderProduct(**payload.model_dump())
    db.add(line)
    commit_or_raise(db, f"line ({payload.order_id}, {payload.product_id}) insert")
    return line


def set_line_quantity(db: Session, order_id: int, product_id: int, quantity: int) -> OrderProduct:
    payload = validate(
        OrderLineCreate,
        order_id=order_id,
        product_id=product_id,
        quantity=quantity,
    )
    line = require(db, OrderProduct, (payload.order_id, payload.product_id), "OrderProduct")
    line.quantity = payload.quantity
    commit_or_raise(db, f"line ({order_id}, {product_id}) update")
    return line


def remove_line(db: Session, order_id: int, product_id: int) -> None:
    line = require(db, OrderProduct, (order_id, product_id), "OrderProduct")
    db.delete(line)
    commit_or_raise(db, f"line ({order_id}, {product_id}) delete")


def list_lines(db: Session, order_id: int) -> list[OrderProduct]:
    return list(
        db.execute(
            select(OrderProduct)
            .where(OrderProduct.order_id == order_id)
            .order_by(OrderProduct.product_id)
        )
        .scalars()
        .all()
    )


__all__ = [
    "ORDER_DEPENDENTS",
    "add_line",
    "create_order",
    "delete_order",
    "get_order",
    "list_lines",
    "mark_completed",
    "remaining_dependents",
    "remove_line",
    "set_line_quantity",
    "update_order",
]
