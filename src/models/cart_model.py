from pydantic import Field

from src.models.base import ApiModel


class CartItemIn(ApiModel):
    courseId: str = Field(..., min_length=1)
    quantity: int = Field(1, ge=1)


class CartItemUpdate(ApiModel):
    # <= 0 removes the line
    quantity: int
