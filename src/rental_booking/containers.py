"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import AsyncClient

from rental_booking.adapters.mutagen_video_probe import MutagenVideoProbe
from rental_booking.adapters.supabase_audit_repository import SupabaseAuditRepository
from rental_booking.adapters.supabase_booking_repository import (
    SupabaseBookingRepository,
)
from rental_booking.adapters.supabase_media_storage import SupabaseMediaStorage
from rental_booking.adapters.supabase_ride_completion_repository import (
    SupabaseRideCompletionRepository,
)
from rental_booking.adapters.supabase_user_repository import SupabaseUserRepository
from rental_booking.adapters.wati_client import HttpxWatiClient, MessagingClient
from rental_booking.config import Settings
from rental_booking.services.audit import AuditService
from rental_booking.services.bookings import BookingService
from rental_booking.services.lifecycle import LifecycleController, new_state
from rental_booking.services.notifications import NotificationDispatcher
from rental_booking.services.reconciler import BookingReconciler
from rental_booking.services.ride_media import RideMediaService
from rental_booking.services.users import UserService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    messaging_client: MessagingClient
    notification_dispatcher: NotificationDispatcher
    user_service: UserService
    audit_service: AuditService
    booking_service: BookingService
    reconciler: BookingReconciler
    ride_media_service: RideMediaService
    close_resources: Callable[[], Awaitable[None]]

    def new_lifecycle_controller(self) -> LifecycleController:
        """Create a controller with fresh state for one user session."""
        return LifecycleController(
            state=new_state(self.settings.default_country_code),
            reconciler=self.reconciler,
            booking_service=self.booking_service,
            dispatcher=self.notification_dispatcher,
            media_service=self.ride_media_service,
            audit_service=self.audit_service,
            default_country_code=self.settings.default_country_code,
        )


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = AsyncClient(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    user_repository = SupabaseUserRepository(supabase_client)
    booking_repository = SupabaseBookingRepository(supabase_client)
    completion_repository = SupabaseRideCompletionRepository(supabase_client)
    audit_repository = SupabaseAuditRepository(supabase_client, user_repository)
    media_storage = SupabaseMediaStorage(
        supabase_client, bucket=resolved_settings.ride_media_bucket
    )

    user_service = UserService(user_repository)
    audit_service = AuditService(audit_repository)
    booking_service = BookingService(user_service, booking_repository)
    reconciler = BookingReconciler(
        user_service=user_service,
        booking_repository=booking_repository,
        audit_service=audit_service,
        timeout_seconds=resolved_settings.booking_check_timeout_seconds,
    )
    ride_media_service = RideMediaService(
        storage=media_storage,
        probe=MutagenVideoProbe(),
        completion_repository=completion_repository,
        booking_repository=booking_repository,
        audit_service=audit_service,
    )
    wati_client = HttpxWatiClient.create(resolved_settings)
    dispatcher = NotificationDispatcher(wati_client)

    async def close_resources() -> None:
        await audit_service.tasks.drain()
        await wati_client.close()

    return AppContainer(
        settings=resolved_settings,
        messaging_client=wati_client,
        notification_dispatcher=dispatcher,
        user_service=user_service,
        audit_service=audit_service,
        booking_service=booking_service,
        reconciler=reconciler,
        ride_media_service=ride_media_service,
        close_resources=close_resources,
    )
