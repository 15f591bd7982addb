"""
This module resolves catalog items to their current price.
"""
import logging
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from .errors import ItemNotFound
from .models import CatalogItem

logger = logging.getLogger(__name__)


async def lookup_price(session: AsyncSession, item_id: str) -> Decimal:
    """
    Returns the base price of a catalog item.

    Must be awaited inside the transaction that writes the booking, so the price
    is read on the same connection as the insert that snapshots it.

    Args:
        session (AsyncSession): The session holding the open transaction.
        item_id (str): The catalog identifier to resolve.

    Raises:
        ItemNotFound: If the catalog has no item with that identifier.
    """
    base_price = await session.scalar(
        select(CatalogItem.base_price).where(CatalogItem.id == item_id)
    )
    if base_price is None:
        logger.warning(f"Catalog item {item_id!r} not found.")
        raise ItemNotFound(item_id)
    return Decimal(base_price)
