"""
This module contains the main FastAPI application for the junk pickup service.
"""
import logging
from contextlib import asynccontextmanager
from typing import Any, Callable

from fastapi import Depends, FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import accounts, analysis, bookings
from .app_logging import configure_logging
from .config import get_settings
from .db import create_db_and_tables, get_db_session
from .errors import BookingError, InvalidRequest
from .schemas import (
    AddressCreate,
    AddressRead,
    AnalysisQueued,
    BookingCommand,
    BookingCreated,
    BookingRead,
    BookingUpdate,
    PaymentMethodCreate,
    PaymentMethodRead,
    PhotoAnalysisRequest,
    PhotoAnalysisResult,
)
from .worker import score_booking_photos

logger = logging.getLogger(__name__)

AnalysisDispatcher = Callable[[str], Any]


@asynccontextmanager
async def lifespan(api_app: FastAPI):
    """
    Asynchronous context manager for the lifespan of the FastAPI application.
    It configures logging and creates the database and tables on startup.

    Args:
        api_app (FastAPI): The FastAPI application instance.
    """
    configure_logging(get_settings().log_level)
    await create_db_and_tables()
    yield

app = FastAPI(title="Junk Pickup", lifespan=lifespan)


def get_analysis_dispatcher() -> AnalysisDispatcher:
    """
    Dependency that provides the callable used to queue photo analysis for a booking.
    """
    return score_booking_photos.delay


def get_customer_id(customer_id: str | None = Query(None, alias="customerId"),
                    user_id: str | None = Query(None, alias="user_id")) -> str:
    """
    Dependency that reads the booking owner from ``customerId`` or the older ``user_id`` parameter.
    """
    owner = customer_id or user_id
    if not owner:
        raise InvalidRequest("customerId required")
    return owner


def get_user_id(camel_user_id: str | None = Query(None, alias="userId"),
                user_id: str | None = Query(None, alias="user_id")) -> str:
    owner = camel_user_id or user_id
    if not owner:
        raise InvalidRequest("userId required")
    return owner


def _queue_photo_analysis(dispatch: AnalysisDispatcher, booking_id: str) -> bool:
    # The booking is already committed; analysis is best effort.
    try:
        dispatch(booking_id)
    except Exception:
        logger.exception(f"Could not queue photo analysis for booking {booking_id}.")
        return False
    return True


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    logger.info(f"Rejected {request.method} {request.url.path}: {exc.errors()}")
    return JSONResponse(status_code=400, content={"error": "Invalid request"})


@app.exception_handler(BookingError)
async def booking_error_handler(request: Request, exc: BookingError):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail},
                        headers=getattr(exc, "headers", None))


@app.exception_handler(Exception)
async def internal_error_handler(request: Request, exc: Exception):
    # Starlette logs the traceback after this response is sent.
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


@app.get("/")
async def root():
    """
    Root endpoint for the API.
    """
    return {"status": "ok"}


@app.post("/api/bookings", status_code=201, response_model=BookingCreated)
async def create_booking(booking_cmd: BookingCommand,
                         db: AsyncSession = Depends(get_db_session),
                         dispatch: AnalysisDispatcher = Depends(get_analysis_dispatcher)):
    """
    Creates a new booking priced from the catalog.

    Args:
        booking_cmd (BookingCommand): The booking command with the cart and photos.
        db (AsyncSession): The database session.
        dispatch (AnalysisDispatcher): Queues photo analysis for the new booking.

    Returns:
        BookingCreated: The ID of the new booking.
    """
    booking_id = await bookings.create_booking(db, booking_cmd)
    if any(photo.analysis_data is None for photo in booking_cmd.photos):
        _queue_photo_analysis(dispatch, booking_id)
    return BookingCreated(id=booking_id)


@app.get("/api/bookings", response_model=list[BookingRead])
async def list_bookings(customer_id: str = Depends(get_customer_id),
                        db: AsyncSession = Depends(get_db_session)):
    """
    Lists the bookings of a customer ordered by pickup date.
    """
    return await bookings.list_bookings(db, customer_id)


@app.get("/api/bookings/{booking_id}", response_model=BookingRead)
async def get_booking(booking_id: str, db: AsyncSession = Depends(get_db_session)):
    """
    Retrieves a booking by its ID.
    """
    return await bookings.get_booking(db, booking_id)


@app.put("/api/bookings/{booking_id}", response_model=BookingRead)
async def update_booking(booking_id: str, changes: BookingUpdate,
                         db: AsyncSession = Depends(get_db_session)):
    """
    Updates the status and/or total price of a booking.

    Args:
        booking_id (str): The ID of the booking to update.
        changes (BookingUpdate): The fields to change.
        db (AsyncSession): The database session.

    Returns:
        BookingRead: The updated booking.
    """
    return await bookings.update_booking(db, booking_id, changes)


@app.post("/api/photos/analyze", response_model=PhotoAnalysisResult)
async def analyze_photo(photo: PhotoAnalysisRequest):
    """
    Scores a single photo without storing anything.
    """
    return PhotoAnalysisResult(file_url=photo.file_url, analysis=analysis.analyze_photo(photo.file_url))


@app.post("/api/photos/unanalyzed", status_code=202, response_model=AnalysisQueued)
async def queue_unanalyzed_photos(db: AsyncSession = Depends(get_db_session),
                                  dispatch: AnalysisDispatcher = Depends(get_analysis_dispatcher)):
    """
    Queues photo analysis for every booking that still has photos without analysis.

    Returns:
        AnalysisQueued: The bookings for which analysis was queued.
    """
    booking_ids = await analysis.find_bookings_with_unanalyzed_photos(db)
    queued = [booking_id for booking_id in booking_ids if _queue_photo_analysis(dispatch, booking_id)]
    logger.info(f"Queued photo analysis for {len(queued)} bookings: {queued}")
    return AnalysisQueued(message="Photo analysis queued.", booking_ids=queued)


@app.get("/api/users/addresses", response_model=list[AddressRead])
async def list_addresses(user_id: str = Depends(get_user_id),
                         db: AsyncSession = Depends(get_db_session)):
    return await accounts.list_addresses(db, user_id)


@app.post("/api/users/addresses", status_code=201, response_model=AddressRead)
async def add_address(address: AddressCreate, db: AsyncSession = Depends(get_db_session)):
    return await accounts.add_address(db, address)


@app.get("/api/users/payments", response_model=list[PaymentMethodRead])
async def list_payment_methods(user_id: str = Depends(get_user_id),
                               db: AsyncSession = Depends(get_db_session)):
    return await accounts.list_payment_methods(db, user_id)


@app.post("/api/users/payments", status_code=201, response_model=PaymentMethodRead)
async def add_payment_method(method: PaymentMethodCreate, db: AsyncSession = Depends(get_db_session)):
    return await accounts.add_payment_method(db, method)
