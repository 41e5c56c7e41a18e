"""Supabase repository for user action events."""

import json
from dataclasses import dataclass

from supabase import AsyncClient

from rental_booking.services.audit import AuditRepository
from rental_booking.services.users import UserRepository


@dataclass
class SupabaseAuditRepository(AuditRepository):
    """Supabase-backed audit repository."""

    client: AsyncClient
    user_repository: UserRepository

    async def create_action(
        self,
        user_email: str,
        booking_id: str | None,
        action_type: str,
        action_data: dict[str, object],
    ) -> None:
        """Create a user_actions row for a known user; unknown emails are skipped."""
        user_id = await self.user_repository.find_user_id(user_email)
        if user_id is None:
            return
        await (
            self.client.table("user_actions")
            .insert(
                {
                    "user_id": user_id,
                    "booking_verification_id": booking_id,
                    "action_type": action_type,
                    "action_data": json.dumps(action_data),
                }
            )
            .execute()
        )
