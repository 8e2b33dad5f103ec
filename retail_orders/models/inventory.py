from sqlalchemy import CheckConstraint, Column, Integer, Numeric, String
from sqlalchemy.orm import relationship

from retail_orders.core.constants import NAME_MAX_LENGTH, PRICE_PRECISION, PRICE_SCALE
from retail_orders.database.base import Base


class Product(Base):
    __tablename__ = "INVENTORY"

    product_id = Column("ProductID", Integer, primary_key=True, autoincrement=False)
    description = Column("ProductDesc", String(NAME_MAX_LENGTH))
    price = Column("ProductPrice", Numeric(PRICE_PRECISION, PRICE_SCALE))
    stock_amount = Column("ProductStockAmount", Integer)

    order_lines = relationship(
        "OrderProduct",
        back_populates="product",
        cascade="all, delete",
    )

    __table_args__ = (
        CheckConstraint('"ProductID" > 0', name="product_id_positive"),
        CheckConstraint('"ProductPrice" > 0', name="price_positive"),
        CheckConstraint('"ProductStockAmount" >= 0', name="stock_non_negative"),
    )

    def __repr__(self) -> str:
        return f"<Product {self.product_id} {self.description!r}>"


__all__ = ["Product"]
