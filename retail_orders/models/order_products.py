from sqlalchemy import CheckConstraint, Column, ForeignKey, Integer
from sqlalchemy.orm import relationship

from retail_orders.database.base import Base


class OrderProduct(Base):
    """Quantity of one product within one order."""

    __tablename__ = "ORDER_PRODUCTS"

    order_id = Column(
        "OrderID",
        Integer,
        ForeignKey("ORDERS.OrderID", ondelete="CASCADE"),
        primary_key=True,
        autoincrement=False,
    )
    product_id = Column(
        "ProductID",
        Integer,
        ForeignKey("INVENTORY.ProductID", ondelete="CASCADE"),
        primary_key=True,
        autoincrement=False,
    )
    quantity = Column("ProductQuantity", Integer, nullable=False)

    order = relationship("Order", back_populates="lines")
    product = relationship("Product", back_populates="order_lines")

    __table_args__ = (
        CheckConstraint('"OrderID" > 0', name="order_id_positive"),
        CheckConstraint('"ProductID" > 0', name="product_id_positive"),
        CheckConstraint('"ProductQuantity" > 0', name="quantity_positive"),
    )


__all__ = ["OrderProduct"]
