"""
Pydantic schemas for the Scanner service.

``InventoryRecord`` mirrors the record returned by the Inventory service; the
result schemas carry the typed outcomes of scan resolution and quantity
adjustment.
"""
from datetime import datetime
from enum import Enum
from typing import Optional, Union
from pydantic import BaseModel, Field

from .config import DEFAULT_UNIT


class InventoryRecord(BaseModel):
    """One stocked item as held by the inventory store."""
    rack_id: str
    display_name: str
    category: Optional[str] = None
    unit: Optional[str] = DEFAULT_UNIT
    quantity: float = Field(..., ge=0)
    purchase_date: Optional[datetime] = None
    item_photo: Optional[str] = None
    bill_photo: Optional[str] = None


class ScanStatus(str, Enum):
    FOUND = "found"
    NOT_FOUND = "not_found"
    EMPTY = "empty"


class ScanResult(BaseModel):
    """
    Outcome of resolving a scanned code.

    ``rack_id`` and ``record`` are set only when ``status`` is ``found``.
    """
    status: ScanStatus
    code: str
    rack_id: Optional[str] = None
    record: Optional[InventoryRecord] = None
    message: str


class Direction(str, Enum):
    INCREASE = "increase"
    DECREASE = "decrease"


class RejectionReason(str, Enum):
    INVALID_AMOUNT = "invalid_amount"
    INSUFFICIENT_STOCK = "insufficient_stock"


class AdjustmentResult(BaseModel):
    """
    Outcome of a quantity adjustment.

    Either ``ok`` with ``new_quantity`` set, or rejected with ``reason`` and a
    message suitable for showing to the person scanning.
    """
    ok: bool
    new_quantity: Optional[float] = None
    reason: Optional[RejectionReason] = None
    message: str


class ResolveRequest(BaseModel):
    code: str


class AdjustRequest(BaseModel):
    rack_id: str
    direction: Direction
    # Raw form input is accepted and validated by the adjustment itself
    amount: Union[float, str, None] = None
