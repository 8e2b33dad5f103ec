from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from retail_orders.core.constants import NAME_MAX_LENGTH


def _name_field():
    return Field(None, max_length=NAME_MAX_LENGTH)


class CustomerName(BaseModel):
    first_name: Optional[str] = _name_field()
    last_name: Optional[str] = _name_field()


class DeliveryCreate(CustomerName):
    order_id: int = Field(gt=0)
    house: Optional[str] = _name_field()
    street: Optional[str] = _name_field()
    city: Optional[str] = _name_field()
    delivery_date: Optional[date] = None


class DeliveryUpdate(CustomerName):
    house: Optional[str] = _name_field()
    street: Optional[str] = _name_field()
    city: Optional[str] = _name_field()
    delivery_date: Optional[date] = None

    model_config = ConfigDict(extra="forbid")


class CollectionCreate(CustomerName):
    order_id: int = Field(gt=0)
    collection_date: Optional[date] = None


class CollectionUpdate(CustomerName):
    collection_date: Optional[date] = None

    model_config = ConfigDict(extra="forbid")
