"""
Validated quantity adjustment for a resolved inventory record.

The record is never modified: the caller receives the new absolute quantity
and is responsible for writing it back to the inventory store.
"""
import math
from typing import Optional, Union

from .config import DEFAULT_UNIT
from .schemas import AdjustmentResult, Direction, InventoryRecord, RejectionReason


def parse_amount(amount: Union[float, int, str, None]) -> Optional[float]:
    """Return ``amount`` as a finite positive float, or None if it is not one."""
    if amount is None or isinstance(amount, bool):
        return None
    if isinstance(amount, str):
        amount = amount.strip()
        if not amount:
            return None
    try:
        value = float(amount)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(value) or value <= 0:
        return None
    return value


def format_quantity(value: float) -> str:
    """Two-decimal display form without trailing zeros, e.g. 10.5 or 3."""
    return f"{value:.2f}".rstrip("0").rstrip(".")


def exact_quantity(value: float) -> str:
    """Unrounded form, e.g. 10.004 or 3."""
    value = float(value)
    return str(int(value)) if value.is_integer() else repr(value)


def adjust_quantity(
    record: InventoryRecord,
    direction: Direction,
    amount: Union[float, int, str, None],
) -> AdjustmentResult:
    """
    Compute the quantity that results from moving ``amount`` in ``direction``.

    Returns:
        AdjustmentResult with ``ok`` and ``new_quantity`` on success; otherwise
        ``reason`` is ``invalid_amount`` for a missing, non-numeric or
        non-positive amount, or ``insufficient_stock`` when a decrease exceeds
        the available quantity.
    """
    value = parse_amount(amount)
    if value is None:
        return AdjustmentResult(
            ok=False,
            reason=RejectionReason.INVALID_AMOUNT,
            message="Please enter a valid quantity greater than zero",
        )

    unit = record.unit or DEFAULT_UNIT
    direction = Direction(direction)

    if direction is Direction.DECREASE:
        if value > record.quantity:
            return AdjustmentResult(
                ok=False,
                reason=RejectionReason.INSUFFICIENT_STOCK,
                message=(
                    f"Cannot deduct {exact_quantity(value)} {unit}. "
                    f"Only {exact_quantity(record.quantity)} {unit} available."
                ),
            )
        new_quantity = record.quantity - value
        verb = "Deducted"
    else:
        new_quantity = record.quantity + value
        verb = "Added"

    return AdjustmentResult(
        ok=True,
        new_quantity=new_quantity,
        message=f"{verb} {format_quantity(value)} {unit} for {record.display_name}",
    )
