"""In-memory lifecycle state owned by the lifecycle controller."""

from dataclasses import dataclass, field
from enum import StrEnum

from rental_booking.domain.media import RideMediaSelection
from rental_booking.domain.models import Identity, RideCompletion
from rental_booking.domain.notifications import Banner

REQUIRED_DOCUMENTS: tuple[str, ...] = (
    "Valid Driver License (Physical copy required)",
    (
        "Proof of Insurance (Declaration Page): Bring a copy of your insurance "
        "declaration page. Insurance can also be purchased at the counter."
    ),
    (
        "Physical Credit Card (No debit/digital cards accepted): Name on the "
        "reservation must match the name on credit card."
    ),
    "Full coverage insurance documentation",
)


class Screen(StrEnum):
    """Top-level screens."""

    VERIFICATION = "verification"
    CONFIRMATION = "confirmation"
    RIDE_COMPLETION = "ride_completion"


class AuthPhase(StrEnum):
    """Authentication gate underneath the screens."""

    UNAUTHENTICATED = "unauthenticated"
    CHECKING = "checking"
    AUTHENTICATED = "authenticated"


@dataclass
class LifecycleState:
    """Mutable state for one user session."""

    booking_id: str = ""
    booking_persisted: bool = False
    country_code: str = "1"
    identity: Identity | None = None
    auth_phase: AuthPhase = AuthPhase.UNAUTHENTICATED
    screen: Screen = Screen.VERIFICATION
    checked_documents: list[str] = field(default_factory=list)
    guidelines_accepted: bool = False
    phone_number: str = ""
    error: str | None = None
    phone_error: str | None = None
    banner: Banner | None = None
    media: RideMediaSelection = field(default_factory=RideMediaSelection)
    is_ride_completed: bool = False
    ride_completion: RideCompletion | None = None
