"""Shared test fixtures."""

import asyncio
from dataclasses import dataclass, field

import pytest

from rental_booking.adapters.wati_client import MessagingClient, ProviderResponse
from rental_booking.config import Settings
from rental_booking.containers import AppContainer
from rental_booking.domain.media import MediaFile
from rental_booking.domain.models import (
    ACTIVE_BOOKING_STATUSES,
    BookingStatus,
    BookingVerification,
    Identity,
    RideCompletion,
)
from rental_booking.errors import StoreError
from rental_booking.services.audit import AuditRepository, AuditService
from rental_booking.services.bookings import BookingRepository, BookingService
from rental_booking.services.notifications import NotificationDispatcher
from rental_booking.services.reconciler import BookingReconciler
from rental_booking.services.ride_media import (
    MediaStorage,
    RideCompletionRepository,
    RideMediaService,
    VideoProbe,
)
from rental_booking.services.users import UserRepository, UserService

SUPABASE_TEST_KEY = (
    "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9."
    "eyJyb2xlIjoic2VydmljZV9yb2xlIn0."
    "c2lnbmF0dXJl"
)


@dataclass
class InMemoryUserRepository(UserRepository):
    """In-memory identity repository for tests."""

    users: dict[str, Identity] = field(default_factory=dict)
    upserts: list[str] = field(default_factory=list)
    error: str | None = None

    async def upsert_identity(self, identity: Identity) -> None:
        if self.error:
            raise StoreError(self.error)
        self.upserts.append(identity.email or "")
        self.users[identity.email or ""] = identity

    async def find_user_id(self, email: str) -> str | None:
        user = self.users.get(email)
        return user.id if user else None


@dataclass
class InMemoryBookingRepository(BookingRepository):
    """In-memory booking repository for tests."""

    bookings: list[BookingVerification] = field(default_factory=list)
    insert_error: str | None = None
    query_delay: float = 0.0
    query_error: str | None = None
    queries: int = 0

    async def create_booking(self, booking: BookingVerification) -> None:
        if self.insert_error:
            raise StoreError(self.insert_error)
        self.bookings.append(booking)

    async def find_latest_active(self, user_email: str) -> BookingVerification | None:
        self.queries += 1
        if self.query_delay:
            await asyncio.sleep(self.query_delay)
        if self.query_error:
            raise StoreError(self.query_error)
        for booking in reversed(self.bookings):
            if (
                booking.user_email == user_email
                and booking.status in ACTIVE_BOOKING_STATUSES
            ):
                return booking
        return None

    async def mark_ride_completed(self, booking_id: str) -> None:
        self.bookings = [
            BookingVerification(
                booking_id=booking.booking_id,
                user_id=booking.user_id,
                user_email=booking.user_email,
                user_name=booking.user_name,
                phone_number=booking.phone_number,
                country_code=booking.country_code,
                documents_confirmed=booking.documents_confirmed,
                guidelines_accepted=booking.guidelines_accepted,
                status=BookingStatus.RIDE_COMPLETED,
                created_at=booking.created_at,
            )
            if booking.booking_id == booking_id
            else booking
            for booking in self.bookings
        ]

    def status_of(self, booking_id: str) -> BookingStatus | None:
        for booking in self.bookings:
            if booking.booking_id == booking_id:
                return booking.status
        return None


@dataclass
class InMemoryRideCompletionRepository(RideCompletionRepository):
    """In-memory ride completion repository for tests."""

    completions: list[RideCompletion] = field(default_factory=list)

    async def create_completion(self, completion: RideCompletion) -> None:
        self.completions.append(completion)


@dataclass
class InMemoryAuditRepository(AuditRepository):
    """In-memory audit repository for tests."""

    events: list[dict[str, object]] = field(default_factory=list)
    fail: bool = False

    async def create_action(
        self,
        user_email: str,
        booking_id: str | None,
        action_type: str,
        action_data: dict[str, object],
    ) -> None:
        if self.fail:
            raise RuntimeError("audit store unavailable")
        self.events.append(
            {
                "user_email": user_email,
                "booking_id": booking_id,
                "action_type": action_type,
                "action_data": action_data,
            }
        )

    def action_types(self) -> list[str]:
        return [str(event["action_type"]) for event in self.events]


@dataclass
class FakeMediaStorage(MediaStorage):
    """Records uploads; paths containing ``fail_on`` raise."""

    uploads: list[str] = field(default_factory=list)
    fail_on: str | None = None

    async def upload(self, path: str, file: MediaFile) -> str:
        await asyncio.sleep(0)
        if self.fail_on and self.fail_on in path:
            raise StoreError("The resource already exists")
        self.uploads.append(path)
        return path


@dataclass
class FakeVideoProbe(VideoProbe):
    """Returns a fixed duration."""

    duration: float | None = 60.0
    calls: int = 0

    async def duration_seconds(self, file: MediaFile) -> float | None:
        self.calls += 1
        await asyncio.sleep(0)
        return self.duration


@dataclass
class FakeMessagingClient(MessagingClient):
    """Fake WATI client with per-template responses."""

    configured: bool = True
    failing_templates: set[str] = field(default_factory=set)
    sent: list[tuple[str, dict[str, object]]] = field(default_factory=list)

    @property
    def is_configured(self) -> bool:
        return self.configured

    async def send_template(
        self, whatsapp_number: str, body: dict[str, object]
    ) -> ProviderResponse:
        self.sent.append((whatsapp_number, body))
        if body["template_name"] in self.failing_templates:
            return ProviderResponse(status_code=400, text="template not approved")
        return ProviderResponse(status_code=200, text='{"result": true}')


def photo(name: str = "front.jpg", size: int = 1024) -> MediaFile:
    return MediaFile(filename=name, content_type="image/jpeg", size=size)


def video(name: str = "walkaround.mp4", size: int = 5 * 1024 * 1024) -> MediaFile:
    return MediaFile(filename=name, content_type="video/mp4", size=size)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key=SUPABASE_TEST_KEY,
        wati_api_url="https://live-server.wati.io/api/v1/sendTemplateMessage",
        wati_auth_token="wati-token",
        wati_channel_number="15550001111",
    )


@pytest.fixture
def identity() -> Identity:
    return Identity(
        id="user-1",
        email="driver@example.com",
        name="Jane Driver",
        avatar_url=None,
    )


@pytest.fixture
def user_repository() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture
def booking_repository() -> InMemoryBookingRepository:
    return InMemoryBookingRepository()


@pytest.fixture
def audit_repository() -> InMemoryAuditRepository:
    return InMemoryAuditRepository()


@pytest.fixture
def completion_repository() -> InMemoryRideCompletionRepository:
    return InMemoryRideCompletionRepository()


@pytest.fixture
def media_storage() -> FakeMediaStorage:
    return FakeMediaStorage()


@pytest.fixture
def video_probe() -> FakeVideoProbe:
    return FakeVideoProbe()


@pytest.fixture
def messaging_client() -> FakeMessagingClient:
    return FakeMessagingClient()


@pytest.fixture
def container(  # noqa: PLR0913
    settings: Settings,
    user_repository: InMemoryUserRepository,
    booking_repository: InMemoryBookingRepository,
    audit_repository: InMemoryAuditRepository,
    completion_repository: InMemoryRideCompletionRepository,
    media_storage: FakeMediaStorage,
    video_probe: FakeVideoProbe,
    messaging_client: FakeMessagingClient,
) -> AppContainer:
    user_service = UserService(user_repository)
    audit_service = AuditService(audit_repository)
    booking_service = BookingService(user_service, booking_repository)
    reconciler = BookingReconciler(
        user_service=user_service,
        booking_repository=booking_repository,
        audit_service=audit_service,
        timeout_seconds=0.2,
    )
    ride_media_service = RideMediaService(
        storage=media_storage,
        probe=video_probe,
        completion_repository=completion_repository,
        booking_repository=booking_repository,
        audit_service=audit_service,
    )

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        messaging_client=messaging_client,
        notification_dispatcher=NotificationDispatcher(messaging_client),
        user_service=user_service,
        audit_service=audit_service,
        booking_service=booking_service,
        reconciler=reconciler,
        ride_media_service=ride_media_service,
        close_resources=close_resources,
    )
