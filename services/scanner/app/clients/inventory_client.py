"""
HTTP client for communicating with the Inventory service.

This module is the Scanner's view of the inventory store: list the records,
write a record back, rename it or remove it. The caller's bearer token is
forwarded so the Inventory service applies the caller's own role.
"""
import httpx
from typing import Optional, List

from ..config import INVENTORY_PAGE_SIZE, INVENTORY_SERVICE_URL, INVENTORY_TIMEOUT

# Replaced in tests with an httpx.MockTransport
TRANSPORT: Optional[httpx.AsyncBaseTransport] = None


def _client() -> httpx.AsyncClient:
    return httpx.AsyncClient(base_url=INVENTORY_SERVICE_URL, timeout=INVENTORY_TIMEOUT, transport=TRANSPORT)


def _headers(token: Optional[str]) -> Optional[dict]:
    return {"Authorization": f"Bearer {token}"} if token else None


async def list_items(token: Optional[str] = None) -> List[dict]:
    """
    Retrieve all inventory records in insertion order.

    Pages through the store until a page comes back short.

    Returns:
        List of inventory records

    Raises:
        httpx.HTTPError: If there's a network error or the service answers with an error status
    """
    items: List[dict] = []
    async with _client() as client:
        while True:
            response = await client.get(
                "/", params={"skip": len(items), "limit": INVENTORY_PAGE_SIZE}, headers=_headers(token)
            )
            response.raise_for_status()
            page = response.json()
            items.extend(page)
            if len(page) < INVENTORY_PAGE_SIZE:
                return items


async def upsert(rack_id: str, data: dict, token: Optional[str] = None) -> dict:
    """
    Write record fields under ``rack_id``.

    Updates the existing record; when there is none and ``data`` holds a full
    record, creates it instead.

    Args:
        rack_id: Rack identifier of the record
        data: Fields to store (a partial update or a full record)

    Returns:
        The stored record

    Raises:
        httpx.HTTPError: If there's a network error or the service answers with an error status
    """
    async with _client() as client:
        response = await client.put(f"/{rack_id}", json=data, headers=_headers(token))
        if response.status_code == 404 and "display_name" in data:
            response = await client.post("/", json={**data, "rack_id": rack_id}, headers=_headers(token))
        response.raise_for_status()
        return response.json()


async def rename(old_rack_id: str, new_rack_id: str, data: Optional[dict] = None, token: Optional[str] = None) -> dict:
    """
    Move a record to a new rack ID, optionally updating other fields in the same write.

    Returns:
        The stored record under its new rack ID

    Raises:
        httpx.HTTPError: If there's a network error or the service answers with an error status
    """
    payload = {**(data or {}), "rack_id": new_rack_id}
    async with _client() as client:
        response = await client.put(f"/{old_rack_id}", json=payload, headers=_headers(token))
        response.raise_for_status()
        return response.json()


async def remove(rack_id: str, token: Optional[str] = None) -> None:
    """
    Delete the record stored under ``rack_id``.

    Raises:
        httpx.HTTPError: If there's a network error or the service answers with an error status
    """
    async with _client() as client:
        response = await client.delete(f"/{rack_id}", headers=_headers(token))
        response.raise_for_status()
