"""Supabase-backed ride completion repository."""

import json
from dataclasses import dataclass

from supabase import AsyncClient, PostgrestAPIError

from rental_booking.domain.models import RideCompletion
from rental_booking.errors import StoreError
from rental_booking.services.ride_media import RideCompletionRepository


@dataclass
class SupabaseRideCompletionRepository(RideCompletionRepository):
    """Supabase implementation for ride completions."""

    client: AsyncClient

    async def create_completion(self, completion: RideCompletion) -> None:
        """Insert a ride completion row with ordered photo paths."""
        try:
            await (
                self.client.table("ride_completions")
                .insert(
                    {
                        "user_id": completion.user_id,
                        "booking_verification_id": completion.booking_id,
                        "photo_urls": json.dumps(list(completion.photo_paths.values())),
                        "video_url": completion.video_path,
                        "file_metadata": json.dumps(
                            {
                                "photos": completion.photo_paths,
                                "video": completion.video_path,
                            }
                        ),
                        "completion_timestamp": completion.completed_at.isoformat(),
                    }
                )
                .execute()
            )
        except PostgrestAPIError as exc:
            raise StoreError(exc.message or str(exc)) from exc
