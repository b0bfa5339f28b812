from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class CustomerToken(BaseModel):
    """The ``customer_access_token`` object minted by login and renewal."""

    model_config = ConfigDict(extra="ignore")

    access_token: str = Field(..., min_length=1, description="Opaque bearer token")
    customer_id: Optional[int] = Field(None, description="Customer the token belongs to")
    expires_at: Optional[datetime] = Field(None, description="Informational only, never enforced")
