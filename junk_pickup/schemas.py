"""
This module contains the request and response models of the junk pickup API.

Request bodies accept camelCase keys (``customerId``) as well as the field names
(``customer_id``); responses are serialized with camelCase keys.
"""
from datetime import date, datetime
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .models import BookingStatus

# Units per cart line; larger values are rejected before any database access.
MAX_QUANTITY = 1000


class ApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class CartLine(ApiModel):
    """
    One item of the cart. A missing or zero quantity counts as a single unit.
    """
    item_id: str = Field(..., min_length=1, description="Catalog identifier of the item")
    quantity: int | None = Field(None, ge=0, le=MAX_QUANTITY, description="Number of units, defaults to 1")


class PhotoUpload(ApiModel):
    file_url: str = Field(..., min_length=1, description="Where the uploaded photo is stored")
    analysis_data: dict[str, Any] | None = Field(None, description="Result of a previous photo analysis")


class BookingCommand(ApiModel):
    """
    Represents the command for creating a booking.

    Attributes:
        customer_id (str): The customer placing the booking.
        pickup_date (date): The requested pickup day.
        items (list[CartLine]): Cart lines to price against the catalog.
        photos (list[PhotoUpload]): Photos of the junk to haul away.
    """
    customer_id: str = Field(..., min_length=1, description="Customer placing the booking")
    pickup_date: date = Field(..., description="Requested pickup day")
    items: list[CartLine] = Field(default_factory=list)
    photos: list[PhotoUpload] = Field(default_factory=list)


class BookingUpdate(ApiModel):
    """
    Partial update of a booking. Fields left out keep their current value.
    """
    status: BookingStatus | None = None
    total_price: Decimal | None = Field(None, ge=0, max_digits=10, decimal_places=2)


class BookingCreated(ApiModel):
    id: str


class BookingItemRead(ApiModel):
    item_id: str
    quantity: int
    price: Decimal


class PhotoRead(ApiModel):
    id: int
    file_url: str
    analysis_data: dict[str, Any] | None = None


class BookingRead(ApiModel):
    id: str
    customer_id: str
    pickup_date: date
    status: str
    total_price: Decimal
    created_at: datetime
    items: list[BookingItemRead] = Field(default_factory=list)
    photos: list[PhotoRead] = Field(default_factory=list)


class PhotoAnalysisRequest(ApiModel):
    file_url: str = Field(..., min_length=1)


class PhotoAnalysisResult(ApiModel):
    file_url: str
    analysis: dict[str, Any]


class AnalysisQueued(ApiModel):
    message: str
    booking_ids: list[str]


class AddressCreate(ApiModel):
    user_id: str = Field(..., min_length=1)
    street: str = Field(..., min_length=1)
    city: str = Field(..., min_length=1)
    state: str = Field(..., min_length=1)
    zip: str = Field(..., min_length=1)
    is_default: bool = False


class AddressRead(AddressCreate):
    id: int
    created_at: datetime


class PaymentMethodCreate(ApiModel):
    """
    A payment method to remember for a user. ``token`` is the provider's reference, not a card number.
    """
    user_id: str = Field(..., min_length=1)
    provider: str = Field(..., min_length=1)
    account_last4: str = Field(..., pattern=r"^\d{4}$")
    token: str = Field(..., min_length=1)
    is_default: bool = False


class PaymentMethodRead(ApiModel):
    id: int
    user_id: str
    provider: str
    account_last4: str
    is_default: bool
    created_at: datetime
