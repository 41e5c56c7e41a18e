"""Lifecycle controller: verification, confirmation and ride completion."""

import logging
from dataclasses import dataclass, field

from rental_booking.domain.lifecycle import (
    REQUIRED_DOCUMENTS,
    AuthPhase,
    LifecycleState,
    Screen,
)
from rental_booking.domain.media import MediaFile
from rental_booking.domain.models import BookingVerification, Identity, RideCompletion
from rental_booking.domain.notifications import Banner, DispatchSummary, Severity
from rental_booking.errors import MediaError, StoreError, ValidationError
from rental_booking.services.audit import AuditService
from rental_booking.services.background import DetachedTasks
from rental_booking.services.bookings import (
    BookingDraft,
    BookingService,
    generate_booking_id,
)
from rental_booking.services.notifications import (
    NotificationDispatcher,
    booking_confirmation_messages,
)
from rental_booking.services.phone import (
    country_label,
    expected_digit_count,
    is_valid_phone_number,
)
from rental_booking.services.reconciler import BookingReconciler, ReconcileResult
from rental_booking.services.ride_media import RideMediaService, slot_label

logger = logging.getLogger(__name__)

RIDE_COMPLETION_UNAVAILABLE_MESSAGE = (
    "Ride completion is only available for a confirmed booking."
)


def new_state(country_code: str = "1") -> LifecycleState:
    """Return a fresh, signed-out state with a newly generated booking id."""
    return LifecycleState(booking_id=generate_booking_id(), country_code=country_code)


def check_confirmation_preconditions(state: LifecycleState) -> None:
    """Raise ``ValidationError`` for the first unmet confirmation precondition."""
    if len(state.checked_documents) != len(REQUIRED_DOCUMENTS):
        raise ValidationError(
            "documents_incomplete",
            "Please confirm you have all required documents.",
        )
    if not state.guidelines_accepted:
        raise ValidationError(
            "guidelines_not_accepted",
            "Please read and accept the rental guidelines.",
        )
    if not state.phone_number.strip():
        raise ValidationError("phone_missing", "Phone number is required")
    if not is_valid_phone_number(state.phone_number, state.country_code):
        raise ValidationError("phone_invalid", "Invalid phone number format")
    if not state.booking_id:
        raise ValidationError(
            "booking_id_not_ready",
            "Booking ID is still being generated. "
            "Please wait a moment and try again.",
        )


def _media_failure_message(exc: MediaError | StoreError) -> str:
    missing = exc.missing if isinstance(exc, MediaError) else ()
    if not missing:
        return exc.message
    labels = ", ".join(slot_label(slot) for slot in missing)
    return f"{exc.message} Missing: {labels}."


def _phone_hint(state: LifecycleState, code: str) -> str | None:
    if code == "phone_missing":
        return "Please enter your phone number to receive booking confirmation"
    if code == "phone_invalid":
        digits = expected_digit_count(state.country_code)
        country = country_label(state.country_code)
        return f"Please enter a valid {digits}-digit phone number for {country}"
    return None


@dataclass
class LifecycleController:
    """Single owner of a session's lifecycle state.

    Collaborating services return values or raise domain errors; every state
    transition is applied here.
    """

    state: LifecycleState
    reconciler: BookingReconciler
    booking_service: BookingService
    dispatcher: NotificationDispatcher
    media_service: RideMediaService
    audit_service: AuditService
    tasks: DetachedTasks = field(default_factory=DetachedTasks)
    default_country_code: str = "1"

    async def sign_in(self, identity: Identity) -> Screen:
        """Reconcile persisted bookings for a freshly authenticated identity."""
        self.state.identity = identity
        self.state.auth_phase = AuthPhase.CHECKING
        try:
            result = await self.reconciler.reconcile(identity)
        except Exception:
            logger.exception("Error during booking check")
            result = ReconcileResult(screen=Screen.VERIFICATION)
        self._apply_reconcile(result)
        self.state.auth_phase = AuthPhase.AUTHENTICATED
        return self.state.screen

    def sign_out(self) -> None:
        """Reset every booking and ride field to its signed-out default."""
        logger.info("User signed out, resetting application state")
        self.state = new_state(self.default_country_code)

    def toggle_document(self, document: str) -> None:
        checked = document in self.state.checked_documents
        if checked:
            self.state.checked_documents = [
                entry for entry in self.state.checked_documents if entry != document
            ]
        else:
            self.state.checked_documents = [*self.state.checked_documents, document]
        self._track(
            "documents_checked",
            {
                "document": document,
                "checked": not checked,
                "totalChecked": len(self.state.checked_documents),
            },
        )

    def accept_guidelines(self) -> None:
        self.state.guidelines_accepted = True
        self._track("guidelines_accepted")

    def set_phone(self, phone_number: str, country_code: str | None = None) -> None:
        self.state.phone_number = phone_number
        if country_code:
            self.state.country_code = country_code
        self.state.phone_error = None

    async def confirm_booking(self) -> BookingVerification | None:
        """Persist the booking and move to the confirmation screen.

        Returns None and leaves the screen unchanged when a precondition fails
        or the store rejects the booking. Notifications are sent in the
        background and only update the banner.
        """
        if self.state.screen != Screen.VERIFICATION or self.state.booking_persisted:
            self.state.banner = Banner(
                "This booking has already been confirmed", Severity.INFO
            )
            return None
        try:
            check_confirmation_preconditions(self.state)
        except ValidationError as exc:
            self.state.error = exc.message
            hint = _phone_hint(self.state, exc.code)
            if hint:
                self.state.phone_error = hint
            return None

        self.state.error = None
        self.state.phone_error = None
        identity = self.state.identity
        if identity is None:
            self._fail("User not authenticated")
            return None

        draft = BookingDraft(
            booking_id=self.state.booking_id,
            phone_number=self.state.phone_number,
            country_code=self.state.country_code,
            documents=list(self.state.checked_documents),
            guidelines_accepted=self.state.guidelines_accepted,
        )
        try:
            booking = await self.booking_service.confirm(identity, draft)
        except StoreError as exc:
            logger.error("Error confirming booking", extra={"error": exc.message})
            self._fail(exc.message or "Failed to confirm booking. Please try again.")
            return None

        self.state.booking_persisted = True
        self.state.screen = Screen.CONFIRMATION
        self.state.banner = Banner(
            "Booking confirmed! Sending WhatsApp notifications...", Severity.SUCCESS
        )
        self.tasks.spawn(
            self._notify(booking), name=f"notify:{booking.booking_id}"
        )
        self._track(
            "booking_confirmed",
            {
                "phoneNumber": booking.phone_number,
                "documentsVerified": booking.documents_confirmed,
                "guidelinesAccepted": True,
            },
        )
        return booking

    def open_ride_completion(self) -> bool:
        if self.state.screen != Screen.CONFIRMATION:
            return False
        self.state.screen = Screen.RIDE_COMPLETION
        return True

    def return_to_confirmation(self) -> None:
        if self.state.screen == Screen.RIDE_COMPLETION:
            self.state.screen = Screen.CONFIRMATION

    def select_photo(self, slot: str, file: MediaFile) -> bool:
        """Fill a photo slot; the slot is left unchanged on rejection."""
        if self._reject_outside_ride_completion() or self._reject_if_completed():
            return False
        try:
            accepted = self.media_service.accept_photo(slot, file)
        except MediaError as exc:
            self.state.banner = Banner(exc.message, Severity.ERROR)
            return False
        self.state.media.photos[slot] = accepted
        self.state.banner = Banner(
            f"{slot_label(slot)} photo uploaded successfully", Severity.SUCCESS
        )
        return True

    async def select_video(self, file: MediaFile) -> bool:
        """Fill the video slot after the size, type and duration checks."""
        if self._reject_outside_ride_completion() or self._reject_if_completed():
            return False
        try:
            accepted = await self.media_service.accept_video(file)
        except MediaError as exc:
            self.state.banner = Banner(exc.message, Severity.ERROR)
            return False
        self.state.media.video = accepted
        self.state.banner = Banner(
            "Surrounding video uploaded successfully", Severity.SUCCESS
        )
        return True

    async def complete_ride(self) -> RideCompletion | None:
        """Submit the ride media and mark the booking as ride-completed."""
        identity = self.state.identity
        if identity is None or not self.state.booking_id:
            self.state.error = "User not authenticated or booking ID missing"
            return None
        if self._reject_outside_ride_completion() or self._reject_if_completed():
            return None
        self.state.error = None
        try:
            completion = await self.media_service.submit(
                identity, self.state.booking_id, self.state.media
            )
        except (MediaError, StoreError) as exc:
            logger.error(
                "Error completing ride",
                extra={"booking_id": self.state.booking_id, "error": exc.message},
            )
            self._fail(
                _media_failure_message(exc)
                or "Failed to complete ride. Please try again."
            )
            return None
        self.state.ride_completion = completion
        self.state.is_ride_completed = True
        self.state.banner = Banner(
            "Ride completed successfully! "
            "All photos and video have been uploaded.",
            Severity.SUCCESS,
        )
        return completion

    async def drain(self) -> None:
        """Wait for background notifications and audit writes to finish."""
        await self.tasks.drain()
        await self.audit_service.tasks.drain()

    async def _notify(self, booking: BookingVerification) -> DispatchSummary:
        summary = await self.dispatcher.send_all(
            booking.booking_id,
            booking.phone_number,
            booking.country_code,
            booking_confirmation_messages(booking.booking_id),
        )
        if self.state.booking_id == booking.booking_id:
            self.state.banner = Banner(summary.message, summary.severity)
        return summary

    def _apply_reconcile(self, result: ReconcileResult) -> None:
        booking = result.booking
        if booking is not None:
            self.state.checked_documents = list(booking.documents_confirmed)
            self.state.guidelines_accepted = booking.guidelines_accepted
            self.state.booking_id = booking.booking_id
            self.state.booking_persisted = True
            self.state.phone_number = booking.phone_number
            if booking.country_code:
                self.state.country_code = booking.country_code
            self.state.is_ride_completed = booking.is_ride_completed
        self.state.screen = result.screen

    def _reject_outside_ride_completion(self) -> bool:
        if self.state.screen == Screen.RIDE_COMPLETION:
            return False
        self.state.error = RIDE_COMPLETION_UNAVAILABLE_MESSAGE
        self.state.banner = Banner(RIDE_COMPLETION_UNAVAILABLE_MESSAGE, Severity.ERROR)
        return True

    def _reject_if_completed(self) -> bool:
        if not self.state.is_ride_completed:
            return False
        self.state.banner = Banner(
            "This ride has already been completed", Severity.INFO
        )
        return True

    def _fail(self, message: str) -> None:
        self.state.error = message
        self.state.banner = Banner(message, Severity.ERROR)

    def _track(
        self, action_type: str, action_data: dict[str, object] | None = None
    ) -> None:
        identity = self.state.identity
        if identity is None or not identity.email or not self.state.booking_id:
            return
        self.audit_service.dispatch(
            identity.email, self.state.booking_id, action_type, action_data
        )
