"""Domain models for ride-completion media."""

from dataclasses import dataclass, field

PHOTO_SLOTS: tuple[str, ...] = (
    "exterior_front",
    "exterior_back",
    "exterior_left",
    "exterior_right",
    "interior_front",
    "interior_back",
    "dashboard",
)
VIDEO_SLOT = "surrounding_video"

MAX_PHOTO_BYTES = 10 * 1024 * 1024
MAX_VIDEO_BYTES = 50 * 1024 * 1024
MAX_VIDEO_SECONDS = 120


@dataclass(frozen=True)
class MediaFile:
    """A file selected by the user, with its declared type and size."""

    filename: str
    content_type: str
    size: int
    content: bytes = b""

    @classmethod
    def from_bytes(
        cls, filename: str, content_type: str, content: bytes
    ) -> "MediaFile":
        return cls(
            filename=filename,
            content_type=content_type,
            size=len(content),
            content=content,
        )

    @property
    def extension(self) -> str:
        """Text after the last dot, or the whole name when there is none."""
        return self.filename.rsplit(".", maxsplit=1)[-1]


@dataclass
class RideMediaSelection:
    """Photos and video chosen for a ride-completion submission."""

    photos: dict[str, MediaFile | None] = field(
        default_factory=lambda: dict.fromkeys(PHOTO_SLOTS)
    )
    video: MediaFile | None = None

    def missing_items(self) -> list[str]:
        missing = [slot for slot in PHOTO_SLOTS if self.photos.get(slot) is None]
        if self.video is None:
            missing.append(VIDEO_SLOT)
        return missing

    @property
    def is_complete(self) -> bool:
        return not self.missing_items()
