"""Public gallery browsing state."""

import asyncio
import logging
from dataclasses import dataclass, field
from enum import StrEnum

from lumina_gallery.adapters.gallery_client import GalleryClient
from lumina_gallery.domain.models import Photo, Theme
from lumina_gallery.errors import GalleryError
from lumina_gallery.services import notices
from lumina_gallery.services.likes import LikeLedger
from lumina_gallery.services.notices import Notifier

logger = logging.getLogger(__name__)

ALL_FILTER = "all"


class LikeStatus(StrEnum):
    """Outcome of a like action."""

    LIKED = "liked"
    ALREADY_LIKED = "already_liked"
    FAILED = "failed"


@dataclass
class GalleryState:
    """Photos, themes and liked flags for the public gallery.

    Each photo reload bumps a generation counter; results from an older
    generation are dropped so a slow response for an abandoned filter never
    overwrites the current one. The previous photo list stays in place while a
    reload is pending.
    """

    client: GalleryClient
    ledger: LikeLedger
    notifier: Notifier
    active_filter: str = ALL_FILTER
    photos: list[Photo] = field(default_factory=list)
    themes: list[Theme] = field(default_factory=list)
    loading: bool = True
    _generation: int = field(default=0, init=False)
    _closed: bool = field(default=False, init=False)

    @property
    def liked(self) -> dict[str, bool]:
        return {photo.id: self.ledger.has_liked(photo.id) for photo in self.photos}

    @property
    def shows_placeholder(self) -> bool:
        """Whether the grid should render loading placeholders."""
        return self.loading and not self.photos

    @property
    def is_empty(self) -> bool:
        """Whether the grid should render the empty-gallery message."""
        return not self.loading and not self.photos

    def image_src(self, photo: Photo) -> str:
        return self.client.image_url(photo.image_url)

    def find(self, photo_id: str) -> Photo | None:
        for photo in self.photos:
            if photo.id == photo_id:
                return photo
        return None

    async def load(self) -> None:
        """Fetch themes and the photos for the active filter concurrently."""
        await asyncio.gather(self._load_themes(), self._load_photos())

    async def set_filter(self, theme_slug: str) -> None:
        """Switch the active filter and reload the photo list."""
        self.active_filter = theme_slug or ALL_FILTER
        await self._load_photos()

    async def like(self, photo_id: str) -> LikeStatus:
        """Like a photo, applying the server's count only when it is a new like."""
        if self.ledger.has_liked(photo_id):
            self.notifier.notify(notices.info("You've already liked this photo"))
            return LikeStatus.ALREADY_LIKED
        try:
            result = await self.client.like_photo(photo_id)
        except GalleryError:
            logger.exception("Failed to like photo %s", photo_id)
            self.notifier.notify(notices.error("Failed to like photo"))
            return LikeStatus.FAILED

        self.ledger.mark_liked(photo_id)
        if result.already_liked:
            self.notifier.notify(notices.info("You've already liked this photo"))
            return LikeStatus.ALREADY_LIKED
        if not self._closed:
            self.photos = [
                photo.with_likes(result.likes) if photo.id == photo_id else photo
                for photo in self.photos
            ]
        self.notifier.notify(notices.success("Photo liked!"))
        return LikeStatus.LIKED

    def close(self) -> None:
        """Stop applying responses to this view."""
        self._closed = True

    def _is_current(self, generation: int) -> bool:
        return not self._closed and generation == self._generation

    async def _load_themes(self) -> None:
        try:
            themes = await self.client.list_themes()
        except GalleryError:
            logger.exception("Failed to fetch themes")
            return
        if not self._closed:
            self.themes = themes

    async def _load_photos(self) -> None:
        self._generation += 1
        generation = self._generation
        self.loading = True
        theme = None if self.active_filter == ALL_FILTER else self.active_filter
        try:
            photos = await self.client.list_photos(theme)
        except GalleryError:
            logger.exception("Failed to fetch photos for filter %s", theme)
            if self._is_current(generation):
                self.loading = False
                self.notifier.notify(notices.error("Failed to load photos"))
            return
        if not self._is_current(generation):
            logger.debug("Dropping stale photo list from generation %s", generation)
            return
        self.photos = photos
        self.loading = False

        statuses = await asyncio.gather(
            *(self._liked_status(photo.id) for photo in photos)
        )
        if not self._is_current(generation):
            return
        for photo, liked in zip(photos, statuses, strict=True):
            if liked:
                self.ledger.mark_liked(photo.id)

    async def _liked_status(self, photo_id: str) -> bool:
        try:
            return await self.client.liked_status(photo_id)
        except GalleryError as exc:
            logger.warning("Liked status unavailable for %s: %s", photo_id, exc)
            return False
