"""Booking confirmation and booking id generation."""

import logging
import secrets
import string
import time
from dataclasses import dataclass
from typing import Protocol

from rental_booking.app_logging import mask_phone
from rental_booking.domain.models import BookingStatus, BookingVerification, Identity
from rental_booking.services.users import UserService

logger = logging.getLogger(__name__)

_SUFFIX_ALPHABET = string.ascii_lowercase + string.digits
_SUFFIX_LENGTH = 9


def generate_booking_id(now_ms: int | None = None) -> str:
    """Return a new id of the form ``BK-<epoch ms>-<random>``, upper-cased."""
    timestamp = now_ms if now_ms is not None else time.time_ns() // 1_000_000
    suffix = "".join(
        secrets.choice(_SUFFIX_ALPHABET) for _ in range(_SUFFIX_LENGTH)
    )
    return f"BK-{timestamp}-{suffix}".upper()


class BookingRepository(Protocol):
    """Persistence interface for booking verifications."""

    async def create_booking(self, booking: BookingVerification) -> None:
        """Insert a booking verification row."""

    async def find_latest_active(self, user_email: str) -> BookingVerification | None:
        """Return the newest confirmed or ride-completed booking for an email."""

    async def mark_ride_completed(self, booking_id: str) -> None:
        """Flip a booking's status to ride_completed."""


@dataclass(frozen=True)
class BookingDraft:
    """Verified form input ready to be persisted."""

    booking_id: str
    phone_number: str
    country_code: str
    documents: list[str]
    guidelines_accepted: bool


@dataclass
class BookingService:
    """Persists confirmed bookings."""

    user_service: UserService
    repository: BookingRepository

    async def confirm(
        self, identity: Identity, draft: BookingDraft
    ) -> BookingVerification:
        """Upsert the identity and insert a confirmed booking.

        Store failures propagate as ``StoreError`` with the store's message.
        """
        await self.user_service.store_identity(identity)
        booking = BookingVerification(
            booking_id=draft.booking_id,
            user_id=identity.id,
            user_email=identity.email or "",
            user_name=identity.display_name,
            phone_number=draft.phone_number,
            country_code=draft.country_code,
            documents_confirmed=list(draft.documents),
            guidelines_accepted=draft.guidelines_accepted,
            status=BookingStatus.CONFIRMED,
        )
        logger.info(
            "Inserting booking verification",
            extra={
                "booking_id": booking.booking_id,
                "phone_number": mask_phone(booking.phone_number),
                "documents_count": len(booking.documents_confirmed),
            },
        )
        await self.repository.create_booking(booking)
        return booking
