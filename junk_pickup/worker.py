"""
This module contains the Celery worker and tasks for the junk pickup service.
"""
import anyio
import logging
from celery import Celery, Task
from sqlalchemy.exc import SQLAlchemyError

from .analysis import analyze_booking_photos
from .config import get_settings
from .db import db

# Configure logging
logger = logging.getLogger(__name__)

settings = get_settings()

app = Celery('junk_pickup',
             broker=settings.celery_broker_url,
             backend=settings.celery_result_backend,
             include=["junk_pickup.worker"])


class BaseTaskWithRetry(Task):
    """
    Base task with automatic retry on database errors.
    """
    autoretry_for = (SQLAlchemyError,)
    retry_kwargs = {'max_retries': 5}
    retry_backoff = True


async def _score_booking_photos(booking_id):
    """
    Helper function that scores the unanalyzed photos of a booking in its own session.

    Args:
        booking_id (str): The ID of the booking whose photos should be scored.
    """
    async with db.Session() as session:
        return await analyze_booking_photos(session, booking_id)


@app.task(bind=True, base=BaseTaskWithRetry)
def score_booking_photos(self, booking_id):
    """
    Celery task that fills in the analysis of photos stored without one.

    Args:
        booking_id (str): The ID of the booking whose photos should be scored.

    Returns:
        int: The number of photos that were scored.
    """
    logger.info(f"{type(self)} -- Scoring photos for booking_id: {booking_id}")
    return anyio.run(_score_booking_photos, booking_id)
