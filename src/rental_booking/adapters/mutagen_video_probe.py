"""Video duration probe backed by mutagen."""

import asyncio
import io
from dataclasses import dataclass

import mutagen

from rental_booking.domain.media import MediaFile
from rental_booking.services.ride_media import VideoProbe


@dataclass
class MutagenVideoProbe(VideoProbe):
    """Reads container duration without decoding frames."""

    async def duration_seconds(self, file: MediaFile) -> float | None:
        return await asyncio.to_thread(_read_duration, file.content)


def _read_duration(content: bytes) -> float | None:
    if not content:
        return None
    try:
        parsed = mutagen.File(io.BytesIO(content))
    except mutagen.MutagenError:
        return None
    if parsed is None or parsed.info is None:
        return None
    length = getattr(parsed.info, "length", None)
    return float(length) if length is not None else None
