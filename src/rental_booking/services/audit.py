"""Audit trail of user actions."""

import logging
from dataclasses import dataclass, field
from typing import Protocol

from rental_booking.services.background import DetachedTasks

logger = logging.getLogger(__name__)


class AuditRepository(Protocol):
    """Persistence interface for user action events."""

    async def create_action(
        self,
        user_email: str,
        booking_id: str | None,
        action_type: str,
        action_data: dict[str, object],
    ) -> None:
        """Create a user action row."""


@dataclass
class AuditService:
    """Service for recording user actions without blocking the caller."""

    repository: AuditRepository
    tasks: DetachedTasks = field(default_factory=DetachedTasks)

    async def record_action(
        self,
        user_email: str,
        booking_id: str | None,
        action_type: str,
        action_data: dict[str, object] | None = None,
    ) -> None:
        """Persist a user action event."""
        payload = {"userEmail": user_email, "bookingVerificationId": booking_id}
        payload.update(action_data or {})
        await self.repository.create_action(
            user_email=user_email,
            booking_id=booking_id,
            action_type=action_type,
            action_data=payload,
        )

    def dispatch(
        self,
        user_email: str,
        booking_id: str | None,
        action_type: str,
        action_data: dict[str, object] | None = None,
    ) -> None:
        """Record an action in the background; failures are logged only."""
        self.tasks.spawn(
            self._record_quietly(user_email, booking_id, action_type, action_data),
            name=f"audit:{action_type}",
        )

    async def _record_quietly(
        self,
        user_email: str,
        booking_id: str | None,
        action_type: str,
        action_data: dict[str, object] | None,
    ) -> None:
        try:
            await self.record_action(user_email, booking_id, action_type, action_data)
        except Exception:
            logger.warning(
                "Failed to track user action",
                exc_info=True,
                extra={"action_type": action_type, "booking_id": booking_id},
            )
