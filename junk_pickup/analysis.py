"""
This module contains the placeholder photo analysis used until a real model is wired in.
"""
import logging
import random
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from .models import Photo

logger = logging.getLogger(__name__)


def analyze_photo(file_url: str) -> dict[str, Any]:
    """
    Scores a photo. The score is random; callers must treat the result as opaque.
    """
    logger.debug(f"Analyzing photo {file_url}")
    return {"score": random.random()}


async def analyze_booking_photos(session: AsyncSession, booking_id: str) -> int:
    """
    Scores the photos of a booking that were stored without analysis.

    Returns:
        int: The number of photos that were scored.
    """
    async with session.begin():
        photos = (await session.scalars(
            select(Photo).where(Photo.booking_id == booking_id, Photo.analysis_data.is_(None))
        )).all()
        for photo in photos:
            photo.analysis_data = analyze_photo(photo.file_url)
    logger.info(f"Scored {len(photos)} photos of booking {booking_id}.")
    return len(photos)


async def find_bookings_with_unanalyzed_photos(session: AsyncSession) -> list[str]:
    result = await session.scalars(
        select(Photo.booking_id).where(Photo.analysis_data.is_(None)).distinct()
    )
    return list(result)
