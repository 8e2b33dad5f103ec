from sqlalchemy import CheckConstraint, Column, Date, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from retail_orders.core.constants import NAME_MAX_LENGTH
from retail_orders.database.base import Base


class Delivery(Base):
    __tablename__ = "DELIVERIES"

    order_id = Column(
        "OrderID",
        Integer,
        ForeignKey("ORDERS.OrderID", ondelete="CASCADE"),
        primary_key=True,
        autoincrement=False,
    )
    first_name = Column("FName", String(NAME_MAX_LENGTH))
    last_name = Column("LName", String(NAME_MAX_LENGTH))
    house = Column("House", String(NAME_MAX_LENGTH))
    street = Column("Street", String(NAME_MAX_LENGTH))
    city = Column("City", String(NAME_MAX_LENGTH))
    delivery_date = Column("DeliveryDate", Date)

    order = relationship("Order", back_populates="delivery")

    __table_args__ = (
        CheckConstraint('"OrderID" > 0', name="order_id_positive"),
    )


class Collection(Base):
    __tablename__ = "COLLECTIONS"

    order_id = Column(
        "OrderID",
        Integer,
        ForeignKey("ORDERS.OrderID", ondelete="CASCADE"),
        primary_key=True,
        autoincrement=False,
    )
    first_name = Column("FName", String(NAME_MAX_LENGTH))
    last_name = Column("LName", String(NAME_MAX_LENGTH))
    collection_date = Column("CollectionDate", Date)

    order = relationship("Order", back_populates="collection")

    __table_args__ = (
        CheckConstraint('"OrderID" > 0', name="order_id_positive"),
    )


__all__ = ["Collection", "Delivery"]
