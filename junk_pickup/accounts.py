"""
This module stores the saved addresses and payment methods of users.
"""
import logging

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from .errors import InternalFailure
from .models import Address, PaymentMethod
from .schemas import AddressCreate, AddressRead, PaymentMethodCreate, PaymentMethodRead

logger = logging.getLogger(__name__)


async def list_addresses(session: AsyncSession, user_id: str) -> list[AddressRead]:
    try:
        addresses = await session.scalars(
            select(Address).where(Address.user_id == user_id).order_by(Address.created_at)
        )
        return [AddressRead.model_validate(address) for address in addresses]
    except SQLAlchemyError as exc:
        logger.exception(f"Failed to list addresses for user {user_id}.")
        raise InternalFailure() from exc


async def add_address(session: AsyncSession, payload: AddressCreate) -> AddressRead:
    try:
        async with session.begin():
            address = Address(**payload.model_dump())
            session.add(address)
            await session.flush()
            created = AddressRead.model_validate(address)
    except SQLAlchemyError as exc:
        logger.exception(f"Failed to save address for user {payload.user_id}.")
        raise InternalFailure() from exc
    logger.info(f"Saved address {created.id} for user {created.user_id}.")
    return created


async def list_payment_methods(session: AsyncSession, user_id: str) -> list[PaymentMethodRead]:
    try:
        methods = await session.scalars(
            select(PaymentMethod).where(PaymentMethod.user_id == user_id).order_by(PaymentMethod.created_at)
        )
        return [PaymentMethodRead.model_validate(method) for method in methods]
    except SQLAlchemyError as exc:
        logger.exception(f"Failed to list payment methods for user {user_id}.")
        raise InternalFailure() from exc


async def add_payment_method(session: AsyncSession, payload: PaymentMethodCreate) -> PaymentMethodRead:
    """
    Saves a payment method. The token is stored but is not part of the returned record.
    """
    try:
        async with session.begin():
            method = PaymentMethod(**payload.model_dump())
            session.add(method)
            await session.flush()
            created = PaymentMethodRead.model_validate(method)
    except SQLAlchemyError as exc:
        logger.exception(f"Failed to save payment method for user {payload.user_id}.")
        raise InternalFailure() from exc
    logger.info(f"Saved {created.provider} payment method {created.id} for user {created.user_id}.")
    return created
