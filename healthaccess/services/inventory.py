"""Stock bookkeeping for the pharmacy catalogue."""
from healthaccess.schemas.medicine import StockMovementType, StockStatus
from healthaccess.workflow.exceptions import ValidationError

INBOUND = frozenset({StockMovementType.ADDED, StockMovementType.RETURNED})


def stock_status(stock: int, reorder_level: int, discontinued: bool = False) -> StockStatus:
    if discontinued:
        return StockStatus.DISCONTINUED
    if stock <= 0:
        return StockStatus.OUT_OF_STOCK
    if stock <= reorder_level:
        return StockStatus.LOW_STOCK
    return StockStatus.AVAILABLE


def needs_reorder(stock: int, reorder_level: int, discontinued: bool = False) -> bool:
    return stock_status(stock, reorder_level, discontinued) in (
        StockStatus.LOW_STOCK,
        StockStatus.OUT_OF_STOCK,
    )


def apply_movement(stock: int, movement_type: StockMovementType, quantity: int) -> int:
    """Stock level after a movement; outbound movements cannot overdraw."""
    if quantity <= 0:
        raise ValidationError("Quantity must be greater than zero")
    if movement_type in INBOUND:
        return stock + quantity
    if quantity > stock:
        raise ValidationError(f"Insufficient stock: only {stock} available")
    return stock - quantity
