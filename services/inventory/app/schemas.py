"""
Pydantic schemas for request/response validation in the Inventory service.

These schemas define the structure of data for API requests and responses.
"""
from datetime import datetime
from typing import Optional, List
from pydantic import BaseModel, Field, field_validator

from .config import DEFAULT_UNIT


def _not_in_future(value: Optional[datetime]) -> Optional[datetime]:
    if value is None:
        return value
    now = datetime.now(value.tzinfo) if value.tzinfo else datetime.utcnow()
    # Allow anything up to the end of the current day
    if value.date() > now.date():
        raise ValueError("Purchase date cannot be in the future")
    return value


class InventoryItemBase(BaseModel):
    """Base schema with common inventory record attributes."""
    rack_id: str = Field(..., min_length=1)
    display_name: str = Field(..., min_length=1)
    category: Optional[str] = None
    unit: str = DEFAULT_UNIT
    quantity: float = Field(..., ge=0, allow_inf_nan=False)
    purchase_date: Optional[datetime] = None
    item_photo: Optional[str] = None
    bill_photo: Optional[str] = None

    @field_validator("rack_id", "display_name")
    @classmethod
    def strip_text(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value

    @field_validator("purchase_date")
    @classmethod
    def check_purchase_date(cls, value: Optional[datetime]) -> Optional[datetime]:
        return _not_in_future(value)


class InventoryItemCreate(InventoryItemBase):
    """Schema for adding a new record. New stock must have a positive quantity."""
    quantity: float = Field(..., gt=0, allow_inf_nan=False)


class InventoryItemUpdate(BaseModel):
    """
    Schema for updating an existing record. All fields are optional.

    Setting ``rack_id`` to a different value renames the record.
    """
    rack_id: Optional[str] = Field(default=None, min_length=1)
    display_name: Optional[str] = Field(default=None, min_length=1)
    category: Optional[str] = None
    unit: Optional[str] = None
    quantity: Optional[float] = Field(default=None, ge=0, allow_inf_nan=False)
    purchase_date: Optional[datetime] = None
    item_photo: Optional[str] = None
    bill_photo: Optional[str] = None

    @field_validator("rack_id", "display_name")
    @classmethod
    def strip_text(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value

    @field_validator("purchase_date")
    @classmethod
    def check_purchase_date(cls, value: Optional[datetime]) -> Optional[datetime]:
        return _not_in_future(value)

    @field_validator("rack_id", "display_name", "unit", "quantity")
    @classmethod
    def reject_null(cls, value):
        # These columns are NOT NULL; leave a field out to keep its value
        if value is None:
            raise ValueError("must not be null")
        return value


class InventoryItem(InventoryItemBase):
    """
    Schema for inventory record responses, includes all database fields.

    Attributes:
        id (int): Internal identifier, also the insertion order
        created_at (datetime): When the record was created
        updated_at (datetime): When the record last changed
    """
    id: int
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class AuditLogEntry(BaseModel):
    """Schema for audit log responses."""
    id: int
    action: str
    rack_id: str
    display_name: str
    quantity: float
    user_id: Optional[int] = None
    timestamp: datetime

    class Config:
        from_attributes = True


class LowStockItem(BaseModel):
    rack_id: str
    display_name: str
    quantity: float
    unit: str


class InventoryAnalytics(BaseModel):
    """Stock summary shown on the dashboard."""
    total_items: int
    out_of_stock: int
    low_stock: int
    low_stock_items: List[LowStockItem]


class PhotoReference(BaseModel):
    """Returned by a photo upload; ``id`` goes into ``item_photo``/``bill_photo``."""
    id: str
    url: str
