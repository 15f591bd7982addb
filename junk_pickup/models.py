"""
This module contains the database models for the junk pickup service.
"""
from datetime import datetime, timezone
from typing import Literal
from uuid import uuid4

from alchemical import Model
from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
)
from sqlalchemy.orm import relationship

BookingStatus = Literal["pending", "scheduled", "in_progress", "completed", "cancelled"]


def _new_id() -> str:
    return str(uuid4())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CatalogItem(Model):
    """
    Represents a sellable item in the catalog. Prices here are authoritative.

    Attributes:
        id (str): The catalog identifier of the item.
        name (str): Human readable name.
        base_price (Decimal): Current unit price.
    """
    __tablename__ = "items"

    id = Column(String, primary_key=True)
    name = Column(String)
    base_price = Column(Numeric(10, 2), nullable=False)


class Booking(Model):
    """
    Represents a scheduled pickup. Owns its line items and photos.

    Attributes:
        id (str): Server generated identifier.
        customer_id (str): The customer who owns the booking.
        pickup_date (date): The day of the pickup.
        status (BookingStatus): The status of the booking.
        total_price (Decimal): Total computed from the line items at creation time.
        created_at (datetime): When the booking was written.
    """
    __tablename__ = "bookings"
    __table_args__ = (
        CheckConstraint("total_price >= 0", name="ck_bookings_total_price_non_negative"),
    )

    id = Column(String(36), primary_key=True, default=_new_id)
    customer_id = Column(String, nullable=False, index=True)
    pickup_date = Column(Date, nullable=False)
    status = Column(String, nullable=False, default="pending")
    total_price = Column(Numeric(10, 2), nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)

    items = relationship("BookingItem", order_by="BookingItem.id", cascade="all, delete-orphan")
    photos = relationship("Photo", order_by="Photo.id", cascade="all, delete-orphan")


class BookingItem(Model):
    """
    A line of a booking. ``price`` is the unit price captured when the booking was made.
    """
    __tablename__ = "booking_items"
    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_booking_items_quantity_positive"),
    )

    id = Column(Integer, primary_key=True)
    booking_id = Column(String(36), ForeignKey("bookings.id", ondelete="CASCADE"), nullable=False, index=True)
    item_id = Column(String, ForeignKey("items.id"), nullable=False)
    quantity = Column(Integer, nullable=False, default=1)
    price = Column(Numeric(10, 2), nullable=False)


class Photo(Model):
    """
    A photo attached to a booking. ``analysis_data`` is NULL until the photo has been scored.
    """
    __tablename__ = "photos"

    id = Column(Integer, primary_key=True)
    booking_id = Column(String(36), ForeignKey("bookings.id", ondelete="CASCADE"), nullable=False, index=True)
    file_url = Column(String, nullable=False)
    analysis_data = Column(JSON(none_as_null=True), nullable=True)


class Address(Model):
    """
    A saved pickup address of a user.
    """
    __tablename__ = "addresses"

    id = Column(Integer, primary_key=True)
    user_id = Column(String, nullable=False, index=True)
    street = Column(String, nullable=False)
    city = Column(String, nullable=False)
    state = Column(String, nullable=False)
    zip = Column(String, nullable=False)
    is_default = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)


class PaymentMethod(Model):
    """
    A saved payment method of a user. Only the provider token is kept, never card data.
    """
    __tablename__ = "payment_methods"

    id = Column(Integer, primary_key=True)
    user_id = Column(String, nullable=False, index=True)
    provider = Column(String, nullable=False)
    account_last4 = Column(String(4), nullable=False)
    token = Column(String, nullable=False)
    is_default = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
