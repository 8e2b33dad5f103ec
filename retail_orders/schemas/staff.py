from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from retail_orders.core.constants import NAME_MAX_LENGTH


class StaffBase(BaseModel):
    first_name: Optional[str] = Field(None, max_length=NAME_MAX_LENGTH)
    last_name: Optional[str] = Field(None, max_length=NAME_MAX_LENGTH)


class StaffCreate(StaffBase):
    staff_id: int = Field(gt=0)


class StaffUpdate(StaffBase):
    model_config = ConfigDict(extra="forbid")


class StaffOrderCreate(BaseModel):
    # STAFF_ORDERS has no range checks; an id that matches no row is a
    # foreign key failure.
    staff_id: int
    order_id: int
