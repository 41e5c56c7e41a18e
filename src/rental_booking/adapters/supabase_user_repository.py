"""Supabase-backed identity repository."""

from dataclasses import dataclass
from datetime import UTC, datetime

from supabase import AsyncClient, PostgrestAPIError

from rental_booking.domain.models import Identity
from rental_booking.errors import StoreError
from rental_booking.services.users import UserRepository


@dataclass
class SupabaseUserRepository(UserRepository):
    """Supabase implementation for identity persistence."""

    client: AsyncClient

    async def upsert_identity(self, identity: Identity) -> None:
        """Insert or update the users row, resolving conflicts on email."""
        try:
            await (
                self.client.table("users")
                .upsert(
                    {
                        "id": identity.id,
                        "email": identity.email,
                        "name": identity.display_name,
                        "avatar_url": identity.avatar_url,
                        "updated_at": datetime.now(tz=UTC).isoformat(),
                    },
                    on_conflict="email",
                    ignore_duplicates=False,
                )
                .execute()
            )
        except PostgrestAPIError as exc:
            raise StoreError(exc.message or str(exc)) from exc

    async def find_user_id(self, email: str) -> str | None:
        """Return the users.id for an email, if present."""
        response = (
            await self.client.table("users")
            .select("id")
            .eq("email", email)
            .limit(1)
            .execute()
        )
        if response.data:
            return str(response.data[0]["id"])
        return None
