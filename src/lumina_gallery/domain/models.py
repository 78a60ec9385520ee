"""Domain models for the photo gallery."""

from dataclasses import dataclass, replace
from datetime import datetime


@dataclass(frozen=True)
class Photo:
    """A published photo as held in the client cache."""

    id: str
    title: str
    theme: str
    image_url: str
    likes: int
    created_at: datetime
    description: str | None = None

    def with_likes(self, likes: int) -> "Photo":
        """Return a copy carrying an authoritative like count."""
        return replace(self, likes=likes)


@dataclass(frozen=True)
class Theme:
    """A theme used to group photos."""

    id: str
    slug: str
    name: str
    description: str | None = None


@dataclass(frozen=True)
class LikeResult:
    """Server answer to a like request."""

    likes: int
    already_liked: bool


@dataclass(frozen=True)
class ImageFile:
    """Binary image selected for upload."""

    filename: str
    content: bytes
    content_type: str


@dataclass(frozen=True)
class ConsoleStats:
    """Figures shown on the admin console header."""

    total_photos: int
    total_likes: int
    theme_count: int
    recent_uploads: int
