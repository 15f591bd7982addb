"""
This module contains the booking operations: create, read and update.
"""
import logging

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from .catalog import lookup_price
from .errors import InternalFailure, InvalidRequest, NotFound
from .models import Booking, BookingItem, Photo
from .pricing import PricedLine, calculate_total, normalize_quantity
from .schemas import BookingCommand, BookingRead, BookingUpdate

logger = logging.getLogger(__name__)

_WITH_CHILDREN = (selectinload(Booking.items), selectinload(Booking.photos))


async def create_booking(session: AsyncSession, command: BookingCommand) -> str:
    """
    Creates a booking together with its items and photos in a single transaction.

    Every cart line is priced from the catalog inside the transaction and the
    booking total is the sum of those prices. If any line cannot be resolved or
    any insert fails, nothing is written.

    Args:
        session (AsyncSession): A session with no transaction in progress.
        command (BookingCommand): The validated booking request.

    Returns:
        str: The identifier of the new booking.

    Raises:
        ItemNotFound: If a cart line references an unknown catalog item.
        InternalFailure: If the database rejects any statement.
    """
    try:
        async with session.begin():
            lines = []
            for cart_line in command.items:
                unit_price = await lookup_price(session, cart_line.item_id)
                lines.append(PricedLine(
                    item_id=cart_line.item_id,
                    quantity=normalize_quantity(cart_line.quantity),
                    unit_price=unit_price,
                ))

            booking = Booking(
                customer_id=command.customer_id,
                pickup_date=command.pickup_date,
                total_price=calculate_total(lines),
            )
            session.add(booking)
            # Children reference the generated id, so the booking row goes first.
            await session.flush()
            booking_id = booking.id

            session.add_all([
                BookingItem(booking_id=booking_id, item_id=line.item_id,
                            quantity=line.quantity, price=line.unit_price)
                for line in lines
            ])
            session.add_all([
                Photo(booking_id=booking_id, file_url=photo.file_url,
                      analysis_data=photo.analysis_data)
                for photo in command.photos
            ])
    except SQLAlchemyError as exc:
        logger.exception(f"Failed to create booking for customer {command.customer_id}.")
        raise InternalFailure() from exc

    logger.info(f"Created booking {booking_id} for customer {command.customer_id} "
                f"with {len(lines)} items and {len(command.photos)} photos.")
    return booking_id


async def list_bookings(session: AsyncSession, customer_id: str) -> list[BookingRead]:
    """
    Lists the bookings of a customer ordered by pickup date, with their items and photos.
    """
    query = (
        select(Booking)
        .where(Booking.customer_id == customer_id)
        .options(*_WITH_CHILDREN)
        .order_by(Booking.pickup_date, Booking.created_at)
    )
    try:
        bookings = await session.scalars(query)
        return [BookingRead.model_validate(booking) for booking in bookings]
    except SQLAlchemyError as exc:
        logger.exception(f"Failed to list bookings for customer {customer_id}.")
        raise InternalFailure() from exc


async def get_booking(session: AsyncSession, booking_id: str) -> BookingRead:
    """
    Retrieves a booking by its ID.

    Raises:
        NotFound: If there is no booking with that ID.
    """
    try:
        booking = await session.get(Booking, booking_id, options=_WITH_CHILDREN)
    except SQLAlchemyError as exc:
        logger.exception(f"Failed to load booking {booking_id}.")
        raise InternalFailure() from exc
    if booking is None:
        raise NotFound("Booking not found")
    return BookingRead.model_validate(booking)


async def update_booking(session: AsyncSession, booking_id: str, changes: BookingUpdate) -> BookingRead:
    """
    Overrides the status and/or total price of a booking.

    The total is taken as given and is not recomputed from the line items.

    Args:
        session (AsyncSession): A session with no transaction in progress.
        booking_id (str): The booking to update.
        changes (BookingUpdate): The fields to change. Unset fields are kept.

    Returns:
        BookingRead: The booking after the update.

    Raises:
        InvalidRequest: If neither status nor total price is given.
        NotFound: If there is no booking with that ID.
    """
    if changes.status is None and changes.total_price is None:
        raise InvalidRequest("No fields to update")

    try:
        async with session.begin():
            booking = await session.get(Booking, booking_id, options=_WITH_CHILDREN)
            if booking is None:
                logger.warning(f"Booking {booking_id} not found for update.")
                raise NotFound("Booking not found")
            if changes.status is not None:
                booking.status = changes.status
            if changes.total_price is not None:
                booking.total_price = changes.total_price
            await session.flush()
            updated = BookingRead.model_validate(booking)
    except SQLAlchemyError as exc:
        logger.exception(f"Failed to update booking {booking_id}.")
        raise InternalFailure() from exc

    logger.info(f"Updated booking {booking_id}: status={updated.status}, total_price={updated.total_price}")
    return updated
