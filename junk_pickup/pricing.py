"""
This module computes booking totals from resolved cart lines.
"""
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable

from .errors import InvalidRequest


@dataclass(frozen=True)
class PricedLine:
    """
    A cart line with the unit price resolved from the catalog.
    """
    item_id: str
    quantity: int
    unit_price: Decimal

    @property
    def subtotal(self) -> Decimal:
        return self.unit_price * self.quantity


def normalize_quantity(quantity: int | None) -> int:
    """
    Missing and zero quantities count as one unit. Negative quantities are rejected.
    """
    if quantity is not None and quantity < 0:
        raise InvalidRequest("Invalid request")
    return quantity or 1


def calculate_total(lines: Iterable[PricedLine]) -> Decimal:
    return sum((line.subtotal for line in lines), Decimal("0"))
