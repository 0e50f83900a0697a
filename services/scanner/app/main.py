"""
Scanner Service API

This module implements the barcode scanning flow of the fabric inventory app.
It holds no database of its own: every request builds an in-memory index over
the records of the Inventory service and works against it.

Endpoints:
    GET /healthz: Health check endpoint for orchestration systems
    GET /search: Substring search over the current inventory
    POST /resolve: Match a scanned code to an inventory record
    POST /adjust: Increase or decrease the quantity of a scanned record

Attributes:
    app (FastAPI): The FastAPI application instance configured with the title "scanner-service"
"""
from typing import List
import logging
import httpx
from fastapi import FastAPI, Depends, HTTPException, status

from . import auth, schemas
from .adjustments import adjust_quantity
from .cache import get_cache, set_cache, delete_cache
from .clients import inventory_client
from .config import INVENTORY_CACHE_TTL
from .index import InventoryIndex
from .resolver import resolve

logger = logging.getLogger(__name__)

INVENTORY_CACHE_KEY = "scanner:inventory"

app = FastAPI(title="scanner-service")


def store_error(e: httpx.HTTPError) -> HTTPException:
    """Translate a failed inventory store call into the response for our caller."""
    if isinstance(e, httpx.HTTPStatusError):
        response = e.response
        try:
            detail = response.json().get("detail", response.text)
        except ValueError:
            detail = response.text
        logger.error(f"Inventory service returned {response.status_code}: {detail}")
        return HTTPException(status_code=response.status_code, detail=detail)
    logger.error(f"Inventory service error: {e}")
    return HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail=f"Inventory service error: {str(e)}"
    )


async def load_index(token: str, fresh: bool = False) -> InventoryIndex:
    """
    Build the inventory index from the store.

    Args:
        token: Caller's bearer token, forwarded to the Inventory service
        fresh: Skip the cached snapshot and read the store directly

    Raises:
        HTTPException: When the Inventory service call fails
    """
    items = None if fresh else get_cache(INVENTORY_CACHE_KEY)
    if items is None:
        try:
            items = await inventory_client.list_items(token)
        except httpx.HTTPError as e:
            raise store_error(e)
        set_cache(INVENTORY_CACHE_KEY, items, ttl=INVENTORY_CACHE_TTL)
    return InventoryIndex.from_records(schemas.InventoryRecord(**item) for item in items)


@app.get("/healthz", response_model=dict)
def health():
    """
    Health check endpoint for the scanner service.

    Returns:
        dict: A dictionary containing the health status of the service.
            - status (str): Always returns "healthy" when the service is operational.
    """
    return {"status": "healthy"}

@app.get("/search", response_model=List[schemas.InventoryRecord])
async def search_inventory(
    term: str = "",
    current_user: auth.CurrentUser = Depends(auth.require_guest)
):
    """
    Search the current inventory by name, rack ID or category.

    Args:
        term: Case-insensitive substring; blank returns everything
        current_user: Current authenticated user (injected)

    Returns:
        Matching records in inventory order
    """
    index = await load_index(current_user.token)
    return [record for _, record in index.search(term)]

@app.post("/resolve", response_model=schemas.ScanResult)
async def resolve_scan(
    request: schemas.ResolveRequest,
    current_user: auth.CurrentUser = Depends(auth.require_guest)
):
    """
    Resolve a scanned code to at most one inventory record.

    The outcome is always returned with status 200; ``status`` tells whether a
    record was found, nothing matched, or the inventory is empty.
    """
    index = await load_index(current_user.token)
    result = resolve(request.code, index)
    if result.status is schemas.ScanStatus.FOUND:
        logger.info(f"Scan '{request.code}' resolved to rack '{result.rack_id}'")
    else:
        logger.warning(f"Scan '{request.code}' unresolved: {result.status.value}")
    return result

@app.post("/adjust", response_model=schemas.InventoryRecord)
async def adjust_stock(
    request: schemas.AdjustRequest,
    current_user: auth.CurrentUser = Depends(auth.require_user)
):
    """
    Increase or decrease the stock of one rack.

    The record is read from the store immediately before the adjustment and
    the resulting absolute quantity is written back.

    Raises:
        HTTPException: 400 with ``reason`` and ``message`` if the adjustment is rejected
        HTTPException: 404 if the rack ID is not in the inventory
        HTTPException: store status and detail if writing back fails
    """
    index = await load_index(current_user.token, fresh=True)
    record = index.lookup(request.rack_id)
    if record is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Rack ID '{request.rack_id}' not found in inventory"
        )

    result = adjust_quantity(record, request.direction, request.amount)
    if not result.ok:
        logger.warning(f"Adjustment of rack '{request.rack_id}' rejected: {result.message}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"reason": result.reason.value, "message": result.message}
        )

    try:
        stored = await inventory_client.upsert(
            request.rack_id, {"quantity": result.new_quantity}, current_user.token
        )
    except httpx.HTTPError as e:
        raise store_error(e)
    finally:
        delete_cache(INVENTORY_CACHE_KEY)

    logger.info(f"User {current_user.id}: {result.message} (rack '{request.rack_id}')")
    return stored
