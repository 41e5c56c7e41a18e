"""Decides the initial screen after authentication from persisted bookings."""

import asyncio
import logging
from dataclasses import dataclass, field

from rental_booking.domain.lifecycle import Screen
from rental_booking.domain.models import BookingVerification, Identity
from rental_booking.services.audit import AuditService
from rental_booking.services.background import DetachedTasks
from rental_booking.services.bookings import BookingRepository
from rental_booking.services.users import UserService

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 2.0


@dataclass(frozen=True)
class ReconcileResult:
    """Screen to show plus the booking to restore, if one was found."""

    screen: Screen
    booking: BookingVerification | None = None
    timed_out: bool = False

    @property
    def is_ride_completed(self) -> bool:
        return self.booking is not None and self.booking.is_ride_completed


@dataclass
class BookingReconciler:
    """Races the booking lookup against a timeout on every sign-in."""

    user_service: UserService
    booking_repository: BookingRepository
    audit_service: AuditService
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    tasks: DetachedTasks = field(default_factory=DetachedTasks)

    async def reconcile(self, identity: Identity) -> ReconcileResult:
        """Return the screen for an authenticated identity.

        The identity upsert and the booking query start together. If they do
        not finish within ``timeout_seconds`` the lookup is left running in the
        background and its eventual result is ignored.
        """
        if not identity.email:
            logger.info("No user email, skipping booking check")
            return ReconcileResult(screen=Screen.VERIFICATION)

        lookup = asyncio.ensure_future(self._lookup(identity))
        done, _ = await asyncio.wait({lookup}, timeout=self.timeout_seconds)
        if lookup not in done:
            logger.warning(
                "Booking check timed out, continuing without a booking",
                extra={"timeout_seconds": self.timeout_seconds},
            )
            self.tasks.adopt(lookup)
            return ReconcileResult(screen=Screen.VERIFICATION, timed_out=True)

        booking = lookup.result()
        if booking is None:
            logger.info("No existing confirmed booking found")
            return ReconcileResult(screen=Screen.VERIFICATION)

        logger.info(
            "Found existing booking",
            extra={"booking_id": booking.booking_id, "status": booking.status.value},
        )
        self.audit_service.dispatch(
            identity.email,
            booking.booking_id,
            "booking_status_restored",
            {"rideCompleted": booking.is_ride_completed},
        )
        return ReconcileResult(screen=Screen.CONFIRMATION, booking=booking)

    async def _lookup(self, identity: Identity) -> BookingVerification | None:
        _, booking = await asyncio.gather(
            self._store_identity(identity),
            self._find_booking(identity.email or ""),
        )
        return booking

    async def _store_identity(self, identity: Identity) -> None:
        try:
            await self.user_service.store_identity(identity)
        except Exception:
            logger.exception("Error storing user data")

    async def _find_booking(self, email: str) -> BookingVerification | None:
        try:
            return await self.booking_repository.find_latest_active(email)
        except Exception:
            logger.warning("Error checking booking status", exc_info=True)
            return None
