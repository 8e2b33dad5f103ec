from datetime import date
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

# Kept in step with retail_orders.core.constants.ORDER_TYPES.
OrderType = Literal["InStore", "Collection", "Delivery"]
CompletedFlag = Literal[0, 1]


class OrderBase(BaseModel):
    order_type: OrderType
    completed: CompletedFlag = 0
    placed_on: Optional[date] = None


class OrderCreate(OrderBase):
    order_id: Optional[int] = Field(None, gt=0)


class OrderUpdate(BaseModel):
    order_type: Optional[OrderType] = None
    completed: Optional[CompletedFlag] = None
    placed_on: Optional[date] = None

    model_config = ConfigDict(extra="forbid")


class OrderLineCreate(BaseModel):
    order_id: int = Field(gt=0)
    product_id: int = Field(gt=0)
    quantity: int = Field(gt=0)
