from sqlalchemy import CheckConstraint, Column, Date, Integer, String
from sqlalchemy.orm import relationship

from retail_orders.core.constants import ORDER_TYPES
from retail_orders.database.base import Base

_ORDER_TYPE_SQL = ", ".join(f"'{order_type}'" for order_type in ORDER_TYPES)


class Order(Base):
    __tablename__ = "ORDERS"

    order_id = Column("OrderID", Integer, primary_key=True, autoincrement=False)
    order_type = Column("OrderType", String(30), nullable=False)
    completed = Column("OrderCompleted", Integer, nullable=False, default=0)
    placed_on = Column("OrderPlaced", Date)

    lines = relationship(
        "OrderProduct",
        back_populates="order",
        cascade="all, delete",
        order_by="OrderProduct.product_id",
    )
    delivery = relationship(
        "Delivery",
        back_populates="order",
        cascade="all, delete",
        uselist=False,
    )
    collection = relationship(
        "Collection",
        back_populates="order",
        cascade="all, delete",
        uselist=False,
    )
    staff_links = relationship(
        "StaffOrder",
        back_populates="order",
        cascade="all, delete",
    )

    __table_args__ = (
        CheckConstraint('"OrderID" > 0', name="order_id_positive"),
        CheckConstraint(f'"OrderType" IN ({_ORDER_TYPE_SQL})', name="order_type_valid"),
        CheckConstraint('"OrderCompleted" IN (0, 1)', name="completed_flag"),
    )

    @property
    def is_completed(self) -> bool:
        return self.completed == 1

    def __repr__(self) -> str:
        return f"<Order {self.order_id} {self.order_type}>"


__all__ = ["Order"]
