from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class OrderLineItem(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: Optional[int] = None
    title: Optional[str] = None
    quantity: int = 0
    price: Optional[str] = None
    variant_id: Optional[int] = None
    product_id: Optional[int] = None
    sku: Optional[str] = None


class Order(BaseModel):
    """Read-only projection of a past order."""

    model_config = ConfigDict(extra="allow", frozen=True)

    id: int = Field(..., description="Order ID")
    name: Optional[str] = Field(None, description="Display name, e.g. #1001")
    order_number: Optional[int] = None
    email: Optional[str] = None
    created_at: Optional[datetime] = None
    processed_at: Optional[datetime] = None
    currency: Optional[str] = None
    total_price: Optional[str] = None
    subtotal_price: Optional[str] = None
    total_tax: Optional[str] = None
    financial_status: Optional[str] = None
    fulfillment_status: Optional[str] = None
    status_url: Optional[str] = None
    line_items: List[OrderLineItem] = Field(default_factory=list)
