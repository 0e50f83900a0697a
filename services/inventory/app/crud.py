"""
CRUD (Create, Read, Update, Delete) operations for the Inventory service.

This module contains all database operations for inventory records. Every
write records an audit log entry in the same commit.
"""
from typing import List, Optional
from sqlalchemy import or_
from sqlalchemy.orm import Session
from . import models, schemas

def _audit(db: Session, action: str, item: models.InventoryItem, user_id: Optional[int]) -> None:
    db.add(models.AuditLogEntry(
        action=action,
        rack_id=item.rack_id,
        display_name=item.display_name,
        quantity=item.quantity,
        user_id=user_id,
    ))

def get_inventory_item(db: Session, rack_id: str) -> Optional[models.InventoryItem]:
    """
    Retrieve a single inventory record by rack ID.

    Args:
        db: Database session
        rack_id: Rack identifier of the record

    Returns:
        InventoryItem object or None if not found
    """
    return db.query(models.InventoryItem).filter(models.InventoryItem.rack_id == rack_id).first()

def get_inventory_items(db: Session, skip: int = 0, limit: Optional[int] = None) -> List[models.InventoryItem]:
    """
    Retrieve inventory records in insertion order, optionally paginated.

    Args:
        db: Database session
        skip: Number of records to skip (offset)
        limit: Maximum number of records to return, or None for every record

    Returns:
        List of InventoryItem objects
    """
    query = db.query(models.InventoryItem).order_by(models.InventoryItem.id).offset(skip)
    if limit is not None:
        query = query.limit(limit)
    return query.all()

def search_inventory_items(db: Session, term: str) -> List[models.InventoryItem]:
    """
    Case-insensitive substring search over name, rack ID and category.

    A blank term returns every record.
    """
    query = db.query(models.InventoryItem)
    term = term.strip()
    if term:
        pattern = f"%{term}%"
        query = query.filter(or_(
            models.InventoryItem.display_name.ilike(pattern),
            models.InventoryItem.rack_id.ilike(pattern),
            models.InventoryItem.category.ilike(pattern),
        ))
    return query.order_by(models.InventoryItem.id).all()

def create_inventory_item(db: Session, item: schemas.InventoryItemCreate, user_id: Optional[int] = None) -> models.InventoryItem:
    """
    Create a new inventory record in the database.

    Args:
        db: Database session
        item: Record data to create
        user_id: ID of the acting user, stored in the audit log

    Returns:
        Created InventoryItem object
    """
    db_item = models.InventoryItem(**item.model_dump())
    db.add(db_item)
    _audit(db, "created", db_item, user_id)
    db.commit()
    db.refresh(db_item)
    return db_item

def update_inventory_item(
    db: Session,
    rack_id: str,
    item: schemas.InventoryItemUpdate,
    user_id: Optional[int] = None
) -> Optional[models.InventoryItem]:
    """
    Update an existing inventory record.

    A new ``rack_id`` in the update moves the record under the new key within
    the same commit, so callers never observe both keys or neither.

    Args:
        db: Database session
        rack_id: Current rack identifier of the record
        item: Updated record data (only provided fields will be updated)
        user_id: ID of the acting user, stored in the audit log

    Returns:
        Updated InventoryItem object or None if not found
    """
    db_item = get_inventory_item(db, rack_id)
    if db_item is None:
        return None

    update_data = item.model_dump(exclude_unset=True)
    renamed = "rack_id" in update_data and update_data["rack_id"] != rack_id
    for key, value in update_data.items():
        setattr(db_item, key, value)

    if renamed:
        action = "renamed"
    elif set(update_data) == {"quantity"}:
        action = "quantity_adjusted"
    else:
        action = "updated"
    _audit(db, action, db_item, user_id)

    db.commit()
    db.refresh(db_item)
    return db_item

def delete_inventory_item(db: Session, rack_id: str, user_id: Optional[int] = None) -> bool:
    """
    Delete an inventory record from the database.

    Args:
        db: Database session
        rack_id: Rack identifier of the record to delete
        user_id: ID of the acting user, stored in the audit log

    Returns:
        True if the record was deleted, False if not found
    """
    db_item = get_inventory_item(db, rack_id)
    if db_item is None:
        return False

    _audit(db, "deleted", db_item, user_id)
    db.delete(db_item)
    db.commit()
    return True

def get_audit_log(db: Session, skip: int = 0, limit: int = 200) -> List[models.AuditLogEntry]:
    """Audit entries, newest first."""
    return (
        db.query(models.AuditLogEntry)
        .order_by(models.AuditLogEntry.id.desc())
        .offset(skip)
        .limit(limit)
        .all()
    )

def save_photo(db: Session, data: bytes, content_type: str) -> models.Photo:
    """Store photo bytes and return the new row."""
    photo = models.Photo(data=data, content_type=content_type)
    db.add(photo)
    db.commit()
    db.refresh(photo)
    return photo

def get_photo(db: Session, photo_id: str) -> Optional[models.Photo]:
    return db.query(models.Photo).filter(models.Photo.id == photo_id).first()
