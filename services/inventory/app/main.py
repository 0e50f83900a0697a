"""
    Inventory Service API

    This module implements a FastAPI-based microservice that stores fabric and
    textile stock by rack location, with PostgreSQL persistence.

    The service exposes:
    - CRUD endpoints for inventory records keyed by rack ID (including rename)
    - Search, dashboard analytics and CSV export
    - An audit log of every change
    - Photo upload and serving for item and receipt pictures
    - Health endpoint: Provides service health status for monitoring and orchestration

    The Scanner service uses this service as its inventory store.
"""
from typing import List, Optional
import csv
import io
import logging
from fastapi import FastAPI, Depends, HTTPException, status, UploadFile, File
from fastapi.responses import Response, StreamingResponse
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from . import crud, models, schemas, auth
from .config import LOW_STOCK_THRESHOLD, MAX_PHOTO_BYTES
from .database import engine, get_db

logger = logging.getLogger(__name__)

# Create database tables
models.Base.metadata.create_all(bind=engine)

app = FastAPI(title="inventory-service")

@app.get("/healthz", response_model=dict)
def health():
    """
    Health check endpoint for the inventory service.

    Returns:
        dict: A dictionary containing the health status of the service.
            - status (str): "healthy" if the service is operational.

    Example:
        GET /healthz
        Response: {"status": "healthy"}
    """
    return {"status": "healthy"}

@app.get("/", response_model=List[schemas.InventoryItem])
def list_inventory_items(
    skip: int = 0,
    limit: Optional[int] = None,
    db: Session = Depends(get_db),
    current_user: auth.CurrentUser = Depends(auth.require_guest)
):
    """
    List inventory records in insertion order (authenticated users only).

    Args:
        skip: Number of records to skip (default: 0)
        limit: Maximum number of records to return (default: every record)
        db: Database session (injected)
        current_user: Current authenticated user (injected)

    Returns:
        List of inventory records
    """
    return crud.get_inventory_items(db, skip=skip, limit=limit)

@app.get("/search", response_model=List[schemas.InventoryItem])
def search_inventory_items(
    term: str = "",
    db: Session = Depends(get_db),
    current_user: auth.CurrentUser = Depends(auth.require_guest)
):
    """
    Search records by name, rack ID or category (case-insensitive substring).
    """
    return crud.search_inventory_items(db, term)

@app.get("/analytics", response_model=schemas.InventoryAnalytics)
def get_analytics(
    db: Session = Depends(get_db),
    current_user: auth.CurrentUser = Depends(auth.require_guest)
):
    """
    Get stock analytics for the dashboard (authenticated users).

    Returns:
        Totals, out-of-stock count and the records below the low stock threshold
    """
    items = crud.get_inventory_items(db)
    out_of_stock = [item for item in items if item.quantity == 0]
    low_stock = sorted(
        (item for item in items if 0 < item.quantity < LOW_STOCK_THRESHOLD),
        key=lambda item: item.quantity,
    )

    return schemas.InventoryAnalytics(
        total_items=len(items),
        out_of_stock=len(out_of_stock),
        low_stock=len(low_stock),
        low_stock_items=[
            schemas.LowStockItem(
                rack_id=item.rack_id,
                display_name=item.display_name,
                quantity=item.quantity,
                unit=item.unit,
            )
            for item in low_stock
        ],
    )

@app.get("/audit", response_model=List[schemas.AuditLogEntry])
def get_audit_log(
    skip: int = 0,
    limit: int = 200,
    db: Session = Depends(get_db),
    current_user: auth.CurrentUser = Depends(auth.require_admin)
):
    """Inventory change history, newest first (admin only)."""
    return crud.get_audit_log(db, skip=skip, limit=limit)

@app.get("/export/csv")
def export_inventory_csv(
    db: Session = Depends(get_db),
    current_user: auth.CurrentUser = Depends(auth.require_guest)
):
    """
    Export all inventory records to CSV (authenticated users).

    Returns:
        CSV file with columns: rack_id, display_name, category, quantity, unit, purchase_date
    """
    items = crud.get_inventory_items(db)

    output = io.StringIO()
    writer = csv.writer(output)

    writer.writerow(['rack_id', 'display_name', 'category', 'quantity', 'unit', 'purchase_date'])
    for item in items:
        writer.writerow([
            item.rack_id,
            item.display_name,
            item.category or '',
            item.quantity,
            item.unit,
            item.purchase_date.isoformat() if item.purchase_date else '',
        ])

    output.seek(0)
    return StreamingResponse(
        iter([output.getvalue()]),
        media_type="text/csv",
        headers={"Content-Disposition": "attachment; filename=inventory.csv"}
    )

@app.post("/photos", response_model=schemas.PhotoReference, status_code=status.HTTP_201_CREATED)
def upload_photo(
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    current_user: auth.CurrentUser = Depends(auth.require_user)
):
    """
    Store an item or receipt photo.

    The returned ``id`` is the reference to put into ``item_photo`` or
    ``bill_photo``; ``url`` is where the image can be fetched.

    Raises:
        HTTPException: 400 if the file is not an image, is empty or is too large
    """
    content_type = (file.content_type or "").strip().lower()
    if not content_type.startswith("image/"):
        raise HTTPException(status_code=400, detail="Please select an image file")

    data = file.file.read()
    if not data:
        raise HTTPException(status_code=400, detail="Image file is empty")
    if len(data) > MAX_PHOTO_BYTES:
        raise HTTPException(
            status_code=400,
            detail=f"Image size must be less than {MAX_PHOTO_BYTES // (1024 * 1024)}MB"
        )

    photo = crud.save_photo(db, data, content_type)
    logger.info(f"User {current_user.id} uploaded photo {photo.id} ({len(data)} bytes)")
    return schemas.PhotoReference(id=photo.id, url=f"/photos/{photo.id}")

@app.get("/photos/{photo_id}", response_class=Response)
def serve_photo(photo_id: str, db: Session = Depends(get_db)):
    """Serve photo bytes by reference. No auth required so image tags work."""
    photo = crud.get_photo(db, photo_id)
    if photo is None:
        raise HTTPException(status_code=404, detail="Photo not found")
    return Response(content=bytes(photo.data), media_type=photo.content_type)

@app.get("/{rack_id}", response_model=schemas.InventoryItem)
def get_inventory_item(
    rack_id: str,
    db: Session = Depends(get_db),
    current_user: auth.CurrentUser = Depends(auth.require_guest)
):
    """
    Get a single inventory record by rack ID (authenticated users only).

    Raises:
        HTTPException: 404 if the record is not found
    """
    db_item = crud.get_inventory_item(db, rack_id=rack_id)
    if db_item is None:
        raise HTTPException(status_code=404, detail=f"Rack ID '{rack_id}' not found in inventory")
    return db_item

@app.post("/", response_model=schemas.InventoryItem, status_code=status.HTTP_201_CREATED)
def create_inventory_item(
    item: schemas.InventoryItemCreate,
    db: Session = Depends(get_db),
    current_user: auth.CurrentUser = Depends(auth.require_admin)
):
    """
    Add a new inventory record (admin only).

    Raises:
        HTTPException: 400 if the rack ID already exists
    """
    if crud.get_inventory_item(db, rack_id=item.rack_id):
        raise HTTPException(status_code=400, detail=f"Rack ID '{item.rack_id}' already exists")
    try:
        db_item = crud.create_inventory_item(db, item, user_id=current_user.id)
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=400, detail=f"Rack ID '{item.rack_id}' already exists")
    logger.info(f"Created rack '{db_item.rack_id}' with {db_item.quantity} {db_item.unit}")
    return db_item

@app.put("/{rack_id}", response_model=schemas.InventoryItem)
def update_inventory_item(
    rack_id: str,
    item: schemas.InventoryItemUpdate,
    db: Session = Depends(get_db),
    current_user: auth.CurrentUser = Depends(auth.require_user)
):
    """
    Update an inventory record.

    Users may only change ``quantity``; any other field needs an admin.
    A different ``rack_id`` in the body renames the record.

    Raises:
        HTTPException: 400 if the new rack ID is already taken
        HTTPException: 403 if a non-admin changes anything but the quantity
        HTTPException: 404 if the record is not found
    """
    changed = set(item.model_dump(exclude_unset=True))
    if changed - {"quantity"} and not auth.has_role(current_user.role, "admin"):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin privileges required to edit record details"
        )

    new_rack_id = item.rack_id
    if new_rack_id is not None and new_rack_id != rack_id:
        if crud.get_inventory_item(db, rack_id=new_rack_id):
            raise HTTPException(status_code=400, detail=f"Rack ID '{new_rack_id}' already exists")

    try:
        db_item = crud.update_inventory_item(db, rack_id=rack_id, item=item, user_id=current_user.id)
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=400, detail=f"Rack ID '{new_rack_id}' already exists")
    if db_item is None:
        raise HTTPException(status_code=404, detail=f"Rack ID '{rack_id}' not found in inventory")
    logger.info(f"User {current_user.id} updated rack '{rack_id}' -> '{db_item.rack_id}'")
    return db_item

@app.delete("/{rack_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_inventory_item(
    rack_id: str,
    db: Session = Depends(get_db),
    current_user: auth.CurrentUser = Depends(auth.require_admin)
):
    """
    Delete an inventory record (admin only).

    Raises:
        HTTPException: 404 if the record is not found
    """
    success = crud.delete_inventory_item(db, rack_id=rack_id, user_id=current_user.id)
    if not success:
        raise HTTPException(status_code=404, detail=f"Rack ID '{rack_id}' not found in inventory")
    logger.info(f"User {current_user.id} deleted rack '{rack_id}'")
