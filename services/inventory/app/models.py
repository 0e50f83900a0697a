"""
SQLAlchemy ORM models for the Inventory service.

Defines the database schema for inventory-related tables.
"""
import uuid
from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, Float, LargeBinary
from .database import Base

class InventoryItem(Base):
    """
    Inventory record for one stocked item on a rack.

    Attributes:
        id (int): Primary key, also the insertion order of records
        rack_id (str): Physical rack location printed as a barcode (unique)
        display_name (str): Human readable item or fabric name
        category (str): Optional classification such as "Fabric" or "Thread"
        unit (str): Unit label for the quantity, "meters" by default
        quantity (float): Current stock level in ``unit``, never negative
        purchase_date (datetime): When the stock was bought, if known
        item_photo (str): Reference to a stored photo of the item
        bill_photo (str): Reference to a stored photo of the purchase receipt
        created_at (datetime): Timestamp when the record was created
        updated_at (datetime): Timestamp of the last change
    """
    __tablename__ = "inventory"

    id = Column(Integer, primary_key=True, index=True)
    rack_id = Column(String, unique=True, index=True, nullable=False)
    display_name = Column(String, nullable=False)
    category = Column(String, nullable=True)
    unit = Column(String, nullable=False, default="meters")
    quantity = Column(Float, nullable=False, default=0.0)
    purchase_date = Column(DateTime, nullable=True)
    item_photo = Column(String, nullable=True)
    bill_photo = Column(String, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

class AuditLogEntry(Base):
    """
    One change to the inventory, written in the same transaction as the change.

    ``rack_id`` and ``display_name`` are copied rather than referenced so the
    history survives deletes and renames.
    """
    __tablename__ = "inventory_audit_log"

    id = Column(Integer, primary_key=True, index=True)
    action = Column(String, nullable=False)
    rack_id = Column(String, index=True, nullable=False)
    display_name = Column(String, nullable=False)
    quantity = Column(Float, nullable=False)
    user_id = Column(Integer, nullable=True)
    timestamp = Column(DateTime, default=datetime.utcnow)

class Photo(Base):
    """Binary photo content for item and receipt attachments."""
    __tablename__ = "photos"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    data = Column(LargeBinary, nullable=False)
    content_type = Column(String, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
