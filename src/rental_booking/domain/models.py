"""Domain models for identities and bookings."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum


class BookingStatus(StrEnum):
    """Lifecycle status of a booking verification row."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    RIDE_COMPLETED = "ride_completed"
    CANCELLED = "cancelled"


ACTIVE_BOOKING_STATUSES = (BookingStatus.CONFIRMED, BookingStatus.RIDE_COMPLETED)


@dataclass(frozen=True)
class Identity:
    """Authenticated user as reported by the identity provider."""

    id: str
    email: str | None
    name: str | None = None
    avatar_url: str | None = None

    @property
    def display_name(self) -> str:
        return self.name or self.email or ""


@dataclass(frozen=True)
class BookingVerification:
    """Persisted record of a confirmed rental booking."""

    booking_id: str
    user_email: str
    phone_number: str
    country_code: str
    documents_confirmed: list[str]
    guidelines_accepted: bool
    status: BookingStatus
    user_id: str | None = None
    user_name: str | None = None
    created_at: datetime | None = None

    @property
    def is_ride_completed(self) -> bool:
        return self.status == BookingStatus.RIDE_COMPLETED


@dataclass(frozen=True)
class RideCompletion:
    """Post-ride media evidence for a booking."""

    booking_id: str
    user_id: str
    photo_paths: dict[str, str]
    video_path: str
    completed_at: datetime
    metadata: dict[str, object] = field(default_factory=dict)
