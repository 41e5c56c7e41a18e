"""Supabase Storage adapter for ride media."""

from dataclasses import dataclass

from supabase import AsyncClient, StorageException

from rental_booking.domain.media import MediaFile
from rental_booking.errors import StoreError
from rental_booking.services.ride_media import MediaStorage


@dataclass
class SupabaseMediaStorage(MediaStorage):
    """Uploads ride media into a Supabase Storage bucket."""

    client: AsyncClient
    bucket: str = "ride-photos"

    async def upload(self, path: str, file: MediaFile) -> str:
        """Upload without overwriting, with a one-hour cache directive."""
        try:
            await self.client.storage.from_(self.bucket).upload(
                path,
                file.content,
                file_options={
                    "cache-control": "3600",
                    "upsert": "false",
                    "content-type": file.content_type,
                },
            )
        except StorageException as exc:
            raise StoreError(_storage_message(exc)) from exc
        return path


def _storage_message(exc: StorageException) -> str:
    details = exc.args[0] if exc.args else None
    if isinstance(details, dict) and details.get("message"):
        return str(details["message"])
    return str(exc)
