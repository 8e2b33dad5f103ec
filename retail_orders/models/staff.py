from sqlalchemy import CheckConstraint, Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from retail_orders.core.constants import NAME_MAX_LENGTH
from retail_orders.database.base import Base


class Staff(Base):
    __tablename__ = "STAFF"

    staff_id = Column("StaffID", Integer, primary_key=True, autoincrement=False)
    first_name = Column("FName", String(NAME_MAX_LENGTH))
    last_name = Column("LName", String(NAME_MAX_LENGTH))

    order_links = relationship(
        "StaffOrder",
        back_populates="staff",
        cascade="all, delete",
    )

    __table_args__ = (
        CheckConstraint('"StaffID" > 0', name="staff_id_positive"),
    )

    def __repr__(self) -> str:
        return f"<Staff {self.staff_id} {self.first_name} {self.last_name}>"


class StaffOrder(Base):
    # Composite key: the table itself allows several staff per order.
    __tablename__ = "STAFF_ORDERS"

    staff_id = Column(
        "StaffID",
        Integer,
        ForeignKey("STAFF.StaffID", ondelete="CASCADE"),
        primary_key=True,
        autoincrement=False,
    )
    order_id = Column(
        "OrderID",
        Integer,
        ForeignKey("ORDERS.OrderID", ondelete="CASCADE"),
        primary_key=True,
        autoincrement=False,
    )

    staff = relationship("Staff", back_populates="order_links")
    order = relationship("Order", back_populates="staff_links")


__all__ = ["Staff", "StaffOrder"]
