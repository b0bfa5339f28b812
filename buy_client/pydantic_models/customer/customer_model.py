from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class CustomerAddress(BaseModel):
    """A postal address saved on a customer account."""

    model_config = ConfigDict(extra="allow")

    id: Optional[int] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    company: Optional[str] = None
    address1: Optional[str] = None
    address2: Optional[str] = None
    city: Optional[str] = None
    province: Optional[str] = None
    province_code: Optional[str] = None
    country: Optional[str] = None
    country_code: Optional[str] = None
    zip: Optional[str] = None
    phone: Optional[str] = None
    default: bool = False


class Customer(BaseModel):
    """Customer account as returned by the shop. Unknown fields are preserved."""

    model_config = ConfigDict(extra="allow")

    id: int = Field(..., description="Customer ID")
    email: Optional[str] = Field(None, description="Login email")
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    accepts_marketing: bool = False
    state: Optional[str] = Field(None, description="disabled, invited, enabled or declined")
    verified_email: bool = False
    orders_count: int = 0
    total_spent: Optional[str] = None
    note: Optional[str] = None
    tags: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    default_address: Optional[CustomerAddress] = None
    addresses: List[CustomerAddress] = Field(default_factory=list)

    @property
    def full_name(self) -> str:
        return " ".join(part for part in (self.first_name, self.last_name) if part)

    def to_dict(self) -> Dict[str, Any]:
        """JSON-compatible representation, for callers persisting the customer."""
        return self.model_dump(mode="json", exclude_none=True)
