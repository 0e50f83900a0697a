"""
Resolution of scanned barcode strings to inventory records.
"""
from .index import InventoryIndex
from .schemas import ScanResult, ScanStatus


def normalize(value: str) -> str:
    return value.strip().lower()


def resolve(scanned_code: str, index: InventoryIndex) -> ScanResult:
    """
    Find the record a scanned code refers to.

    The code matches a record when, trimmed and lower-cased, it equals the
    record's rack ID or display name exactly. Records are tried in index
    order and the rack ID is tried before the display name, so the first
    record with either match wins.
    """
    if len(index) == 0:
        return ScanResult(
            status=ScanStatus.EMPTY,
            code=scanned_code,
            message="No inventory yet. Add inventory first.",
        )

    code = normalize(scanned_code)
    for rack_id, record in index:
        if normalize(rack_id) == code or normalize(record.display_name) == code:
            return ScanResult(
                status=ScanStatus.FOUND,
                code=scanned_code,
                rack_id=rack_id,
                record=record,
                message=f"Found {record.display_name} on rack {rack_id}",
            )

    return ScanResult(
        status=ScanStatus.NOT_FOUND,
        code=scanned_code,
        message=f"No match for code {scanned_code.strip()!r}",
    )
