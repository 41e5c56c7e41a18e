"""Identity persistence."""

from dataclasses import dataclass
from typing import Protocol

from rental_booking.domain.models import Identity


class UserRepository(Protocol):
    """Persistence interface for identities."""

    async def upsert_identity(self, identity: Identity) -> None:
        """Insert or update the identity, keyed by email."""

    async def find_user_id(self, email: str) -> str | None:
        """Return the stored user id for an email, if present."""


@dataclass
class UserService:
    """Application service for identity records."""

    repository: UserRepository

    async def store_identity(self, identity: Identity) -> None:
        """Upsert the identity; identities without an email are skipped."""
        if not identity.email:
            return
        await self.repository.upsert_identity(identity)
