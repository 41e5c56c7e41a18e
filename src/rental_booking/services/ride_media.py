"""Ride-completion media validation and submission."""

import asyncio
import logging
import time
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol

from rental_booking.domain.media import (
    MAX_PHOTO_BYTES,
    MAX_VIDEO_BYTES,
    MAX_VIDEO_SECONDS,
    PHOTO_SLOTS,
    VIDEO_SLOT,
    MediaFile,
    RideMediaSelection,
)
from rental_booking.domain.models import Identity, RideCompletion
from rental_booking.errors import MediaError
from rental_booking.services.audit import AuditService
from rental_booking.services.bookings import BookingRepository

logger = logging.getLogger(__name__)

MISSING_MEDIA_MESSAGE = (
    "Please upload all required photos and the surrounding video before "
    "completing the ride."
)


class MediaStorage(Protocol):
    """Object storage for ride media."""

    async def upload(self, path: str, file: MediaFile) -> str:
        """Store the file at ``path`` without overwriting and return its locator."""


class VideoProbe(Protocol):
    """Reads video metadata."""

    async def duration_seconds(self, file: MediaFile) -> float | None:
        """Return the decoded duration, or None when it cannot be read."""


class RideCompletionRepository(Protocol):
    """Persistence interface for ride completions."""

    async def create_completion(self, completion: RideCompletion) -> None:
        """Insert a ride completion row."""


def validate_photo(slot: str, file: MediaFile) -> None:
    """Raise ``MediaError`` unless the file can fill the given photo slot."""
    if slot not in PHOTO_SLOTS:
        raise MediaError("unknown_slot", f"Unknown photo slot: {slot}")
    if file.size > MAX_PHOTO_BYTES:
        raise MediaError("photo_too_large", "Photo size must be less than 10MB")
    if not file.content_type.startswith("image/"):
        raise MediaError("photo_wrong_type", "Please upload only image files")


def validate_video_file(file: MediaFile) -> None:
    """Synchronous first phase of video acceptance: size and type."""
    if file.size > MAX_VIDEO_BYTES:
        raise MediaError("video_too_large", "Video size must be less than 50MB")
    if not file.content_type.startswith("video/"):
        raise MediaError("video_wrong_type", "Please upload only video files")


def slot_label(slot: str) -> str:
    return slot.replace("_", " ")


def build_upload_path(
    user_id: str, booking_id: str, slot: str, file: MediaFile, timestamp_ms: int
) -> str:
    return f"{user_id}/{booking_id}/{slot}_{timestamp_ms}.{file.extension}"


@dataclass
class RideMediaService:
    """Validates ride media and orchestrates the submission."""

    storage: MediaStorage
    probe: VideoProbe
    completion_repository: RideCompletionRepository
    booking_repository: BookingRepository
    audit_service: AuditService

    def accept_photo(self, slot: str, file: MediaFile) -> MediaFile:
        validate_photo(slot, file)
        return file

    async def accept_video(self, file: MediaFile) -> MediaFile:
        """Accept a video once both the size/type and duration checks pass."""
        validate_video_file(file)
        duration = await self.probe.duration_seconds(file)
        if duration is None:
            raise MediaError(
                "video_unreadable", "Could not read the video duration"
            )
        if duration > MAX_VIDEO_SECONDS:
            raise MediaError(
                "video_too_long", "Video must be less than 2 minutes long"
            )
        return file

    async def submit(
        self,
        identity: Identity,
        booking_id: str,
        selection: RideMediaSelection,
    ) -> RideCompletion:
        """Upload every file concurrently, then record the completion.

        Nothing is uploaded when a slot is empty. When any upload fails the
        submission fails as a whole and objects already stored stay in place.
        """
        missing = selection.missing_items()
        if missing:
            raise MediaError(
                "missing_media", MISSING_MEDIA_MESSAGE, missing=tuple(missing)
            )

        timestamp_ms = time.time_ns() // 1_000_000
        files: list[tuple[str, MediaFile]] = [
            (slot, selection.photos[slot]) for slot in PHOTO_SLOTS
        ]
        files.append((VIDEO_SLOT, selection.video))
        results = await asyncio.gather(
            *(
                self.storage.upload(
                    build_upload_path(
                        identity.id, booking_id, slot, file, timestamp_ms
                    ),
                    file,
                )
                for slot, file in files
            ),
            return_exceptions=True,
        )
        failures = [result for result in results if isinstance(result, BaseException)]
        if failures:
            logger.error(
                "Ride media upload failed",
                exc_info=failures[0],
                extra={"booking_id": booking_id, "failed": len(failures)},
            )
            raise MediaError(
                "upload_failed",
                str(failures[0]) or "Failed to complete ride. Please try again.",
            ) from failures[0]

        paths = [str(result) for result in results]
        photo_paths = dict(zip(PHOTO_SLOTS, paths[:-1], strict=True))
        completion = RideCompletion(
            booking_id=booking_id,
            user_id=identity.id,
            photo_paths=photo_paths,
            video_path=paths[-1],
            completed_at=datetime.now(tz=UTC),
        )
        await self.completion_repository.create_completion(completion)
        await self.booking_repository.mark_ride_completed(booking_id)
        self.audit_service.dispatch(
            identity.email or "",
            booking_id,
            "ride_completed",
            {
                "photosUploaded": len(photo_paths),
                "videoUploaded": True,
                "completionTimestamp": completion.completed_at.isoformat(),
            },
        )
        return completion
