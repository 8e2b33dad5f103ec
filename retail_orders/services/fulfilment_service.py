"""Delivery and collection records, one per order.

The schema only ties a record to an existing order. Matching the record to
the order's type is checked here, switchable with
``ENFORCE_FULFILMENT_ORDER_TYPE``.
"""

import logging

from sqlalchemy.orm import Session

from retail_orders.config import get_settings
from retail_orders.core.constants import ORDER_TYPE_COLLECTION, ORDER_TYPE_DELIVERY
from retail_orders.core.errors import DomainViolation, UniquenessViolation
from retail_orders.models.fulfilment import Collection, Delivery
from retail_orders.models.orders import Order
from retail_orders.schemas.fulfilment import (
    CollectionCreate,
    CollectionUpdate,
    DeliveryCreate,
    DeliveryUpdate,
)
from retail_orders.services.persistence import commit_or_raise, require, validate

logger = logging.getLogger(__name__)

_RECORD_ORDER_TYPES = {
    Delivery: ORDER_TYPE_DELIVERY,
    Collection: ORDER_TYPE_COLLECTION,
}


def _enforce_order_type(enforce: bool | None) -> bool:
    if enforce is None:
        return get_settings().ENFORCE_FULFILMENT_ORDER_TYPE
    return enforce


def _check_order_type(db: Session, model, order_id: int) -> None:
    order = db.get(Order, order_id)
    if order is None:
        # Missing parents are reported by the foreign key on insert.
        return
    expected = _RECORD_ORDER_TYPES[model]
    if order.order_type != expected:
        raise DomainViolation(
            f"order {order_id} is a {order.order_type} order; "
            f"{model.__tablename__} records need a {expected} order"
        )


def check_order_type_change(
    db: Session,
    order: Order,
    new_type: str,
    *,
    enforce: bool | None = None,
) -> None:
    """Refuse a type change that would orphan an existing fulfilment record."""
    if not _enforce_order_type(enforce) or new_type == order.order_type:
        return
    for model, expected in _RECORD_ORDER_TYPES.items():
        if new_type != expected and db.get(model, order.order_id) is not None:
            raise DomainViolation(
                f"order {order.order_id} has a {model.__tablename__} record "
                f"and must stay a {expected} order"
            )


def _insert(db: Session, model, payload, *, enforce: bool | None):
    order_id = payload.order_id
    if _enforce_order_type(enforce):
        _check_order_type(db, model, order_id)
    if db.get(model, order_id) is not None:
        raise UniquenessViolation(
            f"order {order_id} already has a {model.__tablename__} record"
        )

    record = model(**payload.model_dump())
    db.add(record)
    commit_or_raise(db, f"{model.__tablename__} insert for order {order_id}")
    logger.info(
        "Recorded %s for order %s",
        model.__tablename__,
        order_id,
        extra={"order_id": order_id},
    )
    return record


def _update(db: Session, model, update_schema, order_id: int, changes: dict):
    payload = validate(update_schema, **changes)
    record = require(db, model, order_id, model.__name__)
    for field, value in payload.model_dump(exclude_unset=True).items():
        setattr(record, field, value)
    commit_or_raise(db, f"{model.__tablename__} update for order {order_id}")
    return record


def _delete(db: Session, model, order_id: int) -> None:
    record = require(db, model, order_id, model.__name__)
    db.delete(record)
    commit_or_raise(db, f"{model.__tablename__} delete for order {order_id}")


def record_delivery(
    db: Session,
    order_id: int,
    first_name: str | None = None,
    last_name: str | None = None,
    house: str | None = None,
    street: str | None = None,
    city: str | None = None,
    delivery_date=None,
    *,
    enforce_order_type: bool | None = None,
) -> Delivery:
    payload = validate(
        DeliveryCreate,
        order_id=order_id,
        first_name=first_name,
        last_name=last_name,
        house=house,
        street=street,
        city=city,
        delivery_date=delivery_date,
    )
    return _insert(db, Delivery, payload, enforce=enforce_order_type)


def record_collection(
    db: Session,
    order_id: int,
    first_name: str | None = None,
    last_name: str | None = None,
    collection_date=None,
    *,
    enforce_order_type: bool | None = None,
) -> Collection:
    payload = validate(
        CollectionCreate,
        order_id=order_id,
        first_name=first_name,
        last_name=last_name,
        collection_date=collection_date,
    )
    return _insert(db, Collection, payload, enforce=enforce_order_type)


def get_delivery(db: Session, order_id: int) -> Delivery | None:
    return db.get(Delivery, order_id)


def get_collection(db: Session, order_id: int) -> Collection | None:
    return db.get(Collection, order_id)


def update_delivery(db: Session, order_id: int, **changes) -> Delivery:
    return _update(db, Delivery, DeliveryUpdate, order_id, changes)


def update_collection(db: Session, order_id: int, **changes) -> Collection:
    return _update(db, Collection, CollectionUpdate, order_id, changes)


def delete_delivery(db: Session, order_id: int) -> None:
    _delete(db, Delivery, order_id)


def delete_collection(db: Session, order_id: int) -> None:
    _delete(db, Collection, order_id)


__all__ = [
    "check_order_type_change",
    "delete_collection",
    "delete_delivery",
    "get_collection",
    "get_delivery",
    "record_collection",
    "record_delivery",
    "update_collection",
    "update_delivery",
]
