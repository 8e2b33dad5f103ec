from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from retail_orders.core.constants import NAME_MAX_LENGTH, PRICE_PRECISION, PRICE_SCALE


class ProductBase(BaseModel):
    description: Optional[str] = Field(None, max_length=NAME_MAX_LENGTH)
    price: Decimal = Field(gt=0, max_digits=PRICE_PRECISION, decimal_places=PRICE_SCALE)
    stock_amount: int = Field(0, ge=0)


class ProductCreate(ProductBase):
    product_id: int = Field(gt=0)


class ProductUpdate(BaseModel):
    description: Optional[str] = Field(None, max_length=NAME_MAX_LENGTH)
    price: Optional[Decimal] = Field(
        None, gt=0, max_digits=PRICE_PRECISION, decimal_places=PRICE_SCALE
    )
    stock_amount: Optional[int] = Field(None, ge=0)

    model_config = ConfigDict(extra="forbid")

    @field_validator("price", "stock_amount")
    @classmethod
    def not_cleared(cls, v):
        # The defaults mean "unchanged"; an explicit None would store NULL.
        if v is None:
            raise ValueError("cannot be cleared")
        return v


class StockAdjustment(BaseModel):
    # Whole units only; 1.7 is rejected rather than truncated.
    delta: int
