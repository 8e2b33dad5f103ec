import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from retail_orders.config import get_settings
from retail_orders.core.errors import UniquenessViolation
from retail_orders.models.orders import Order
from retail_orders.models.staff import Staff, StaffOrder
from retail_orders.schemas.staff import StaffCreate, StaffOrderCreate, StaffUpdate
from retail_orders.services.persistence import commit_or_raise, require, validate

logger = logging.getLogger(__name__)


def create_staff(
    db: Session,
    staff_id: int,
    first_name: str | None = None,
    last_name: str | None = None,
) -> Staff:
    payload = validate(StaffCreate, staff_id=staff_id, first_name=first_name, last_name=last_name)
    if db.get(Staff, payload.staff_id) is not None:
        raise UniquenessViolation(f"staff {payload.staff_id} already exists")

    staff = Staff(**payload.model_dump())
    db.add(staff)
    commit_or_raise(db, f"staff {payload.staff_id} insert")
    return staff


def get_staff(db: Session, staff_id: int) -> Staff | None:
    return db.get(Staff, staff_id)


def update_staff(db: Session, staff_id: int, **changes) -> Staff:
    payload = validate(StaffUpdate, **changes)
    staff = require(db, Staff, staff_id, "Staff")
    for field, value in payload.model_dump(exclude_unset=True).items():
        setattr(staff, field, value)
    commit_or_raise(db, f"staff {staff_id} update")
    return staff


def delete_staff(db: Session, staff_id: int) -> None:
    staff = require(db, Staff, staff_id, "Staff")
    db.expire(staff)
    db.delete(staff)
    commit_or_raise(db, f"staff {staff_id} delete")
    logger.info("Deleted staff %s", staff_id, extra={"staff_id": staff_id})


def attribute_order(
    db: Session,
    staff_id: int,
    order_id: int,
    *,
    single_staff: bool | None = None,
) -> StaffOrder:
    """Credit an order to a member of staff.

    The key is (staff, order), so the table would accept several staff per
    order. With ``SINGLE_STAFF_PER_ORDER`` on, a second staff member is
    refused.
    """
    payload = validate(StaffOrderCreate, staff_id=staff_id, order_id=order_id)
    if single_staff is None:
        single_staff = get_settings().SINGLE_STAFF_PER_ORDER

    if db.get(StaffOrder, (payload.staff_id, payload.order_id)) is not None:
        raise UniquenessViolation(
            f"order {payload.order_id} is already credited to staff {payload.staff_id}"
        )
    if single_staff:
        credited = db.execute(
            select(StaffOrder.staff_id).where(StaffOrder.order_id == payload.order_id)
        ).scalars().first()
        if credited is not None:
            raise UniquenessViolation(
                f"order {payload.order_id} is already credited to staff {credited}"
            )

    link = StaffOrder(**payload.model_dump())
    db.add(link)
    commit_or_raise(db, f"staff order ({payload.staff_id}, {payload.order_id}) insert")
    return link


def unattribute_order(db: Session, staff_id: int, order_id: int) -> None:
    link = require(db, StaffOrder, (staff_id, order_id), "StaffOrder")
    db.delete(link)
    commit_or_raise(db, f"staff order ({staff_id}, {order_id}) delete")


def staff_for_order(db: Session, order_id: int) -> list[Staff]:
    return list(
        db.execute(
            select(Staff)
            .join(StaffOrder, StaffOrder.staff_id == Staff.staff_id)
            .where(StaffOrder.order_id == order_id)
            .order_by(Staff.staff_id)
        )
        .scalars()
        .all()
    )


def orders_for_staff(db: Session, staff_id: int) -> list[Order]:
    return list(
        db.execute(
            select(Order)
            .join(StaffOrder, StaffOrder.order_id == Order.order_id)
            .where(StaffOrder.staff_id == staff_id)
            .order_by(Order.order_id)
        )
        .scalars()
        .all()
    )


__all__ = [
    "attribute_order",
    "create_staff",
    "delete_staff",
    "get_staff",
    "orders_for_staff",
    "staff_for_order",
    "unattribute_order",
    "update_staff",
]
