"""Supabase-backed booking verification repository."""

import json
from dataclasses import dataclass
from datetime import UTC, datetime

from supabase import AsyncClient, PostgrestAPIError

from rental_booking.domain.models import (
    ACTIVE_BOOKING_STATUSES,
    BookingStatus,
    BookingVerification,
)
from rental_booking.errors import StoreError
from rental_booking.services.bookings import BookingRepository

_BOOKING_COLUMNS = (
    "booking_id, user_id, user_email, user_name, phone_number, country_code, "
    "documents_confirmed, guidelines_accepted, verification_status, created_at"
)


@dataclass
class SupabaseBookingRepository(BookingRepository):
    """Supabase implementation for booking verifications."""

    client: AsyncClient

    async def create_booking(self, booking: BookingVerification) -> None:
        """Insert a booking verification row."""
        try:
            response = (
                await self.client.table("booking_verifications")
                .insert(
                    {
                        "booking_id": booking.booking_id,
                        "user_id": booking.user_id,
                        "user_email": booking.user_email,
                        "user_name": booking.user_name,
                        "phone_number": booking.phone_number,
                        "country_code": booking.country_code,
                        "documents_confirmed": json.dumps(
                            booking.documents_confirmed
                        ),
                        "guidelines_accepted": booking.guidelines_accepted,
                        "verification_status": booking.status.value,
                    }
                )
                .execute()
            )
        except PostgrestAPIError as exc:
            raise StoreError(exc.message or str(exc)) from exc
        if not response.data:
            raise StoreError("Failed to create booking verification")

    async def find_latest_active(self, user_email: str) -> BookingVerification | None:
        """Return the newest confirmed or ride-completed booking for an email."""
        try:
            response = (
                await self.client.table("booking_verifications")
                .select(_BOOKING_COLUMNS)
                .eq("user_email", user_email)
                .in_(
                    "verification_status",
                    [status.value for status in ACTIVE_BOOKING_STATUSES],
                )
                .order("created_at", desc=True)
                .limit(1)
                .execute()
            )
        except PostgrestAPIError as exc:
            raise StoreError(exc.message or str(exc)) from exc
        if not response.data:
            return None
        return _to_booking(response.data[0])

    async def mark_ride_completed(self, booking_id: str) -> None:
        """Flip a booking's status to ride_completed."""
        try:
            await (
                self.client.table("booking_verifications")
                .update(
                    {
                        "verification_status": BookingStatus.RIDE_COMPLETED.value,
                        "updated_at": datetime.now(tz=UTC).isoformat(),
                    }
                )
                .eq("booking_id", booking_id)
                .execute()
            )
        except PostgrestAPIError as exc:
            raise StoreError(exc.message or str(exc)) from exc


def _to_booking(row: dict[str, object]) -> BookingVerification:
    raw_documents = row.get("documents_confirmed")
    if isinstance(raw_documents, str):
        documents = json.loads(raw_documents) if raw_documents else []
    else:
        documents = list(raw_documents or [])
    created_at = row.get("created_at")
    return BookingVerification(
        booking_id=str(row["booking_id"]),
        user_id=row.get("user_id"),
        user_email=str(row.get("user_email") or ""),
        user_name=row.get("user_name"),
        phone_number=str(row.get("phone_number") or ""),
        country_code=str(row.get("country_code") or ""),
        documents_confirmed=[str(document) for document in documents],
        guidelines_accepted=bool(row.get("guidelines_accepted")),
        status=BookingStatus(row["verification_status"]),
        created_at=(
            datetime.fromisoformat(created_at) if isinstance(created_at, str) else None
        ),
    )
