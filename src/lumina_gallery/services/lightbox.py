"""Full-screen photo viewer with circular navigation."""

from dataclasses import dataclass, field

from lumina_gallery.domain.models import Photo
from lumina_gallery.services.gallery import GalleryState, LikeStatus
from lumina_gallery.services.keyboard import (
    ARROW_LEFT,
    ARROW_RIGHT,
    ESCAPE,
    KeyBindings,
)


@dataclass
class LightboxNavigator:
    """Tracks the open photo and moves through the gallery's current list.

    Key bindings are registered on open and removed on close, so nothing
    listens while the viewer is hidden.
    """

    gallery: GalleryState
    keyboard: KeyBindings
    _open_id: str | None = field(default=None, init=False)
    _open_photo: Photo | None = field(default=None, init=False)

    @property
    def is_open(self) -> bool:
        return self._open_id is not None

    @property
    def current(self) -> Photo | None:
        """Return the open photo, refreshed from the gallery when still listed."""
        if self._open_id is None:
            return None
        return self.gallery.find(self._open_id) or self._open_photo

    def open(self, photo_id: str) -> Photo | None:
        photo = self.gallery.find(photo_id)
        if photo is None:
            return None
        self._select(photo)
        self.keyboard.add_listener(self.handle_key)
        return photo

    def close(self) -> None:
        self._open_id = None
        self._open_photo = None
        self.keyboard.remove_listener(self.handle_key)

    def next(self) -> Photo | None:
        return self._step(1)

    def prev(self) -> Photo | None:
        return self._step(-1)

    async def like(self) -> LikeStatus | None:
        """Like the open photo through the gallery's shared ledger."""
        if self._open_id is None:
            return None
        return await self.gallery.like(self._open_id)

    def handle_key(self, key: str) -> None:
        if not self.is_open:
            return
        if key == ARROW_RIGHT:
            self.next()
        elif key == ARROW_LEFT:
            self.prev()
        elif key == ESCAPE:
            self.close()

    def _step(self, offset: int) -> Photo | None:
        if self._open_id is None:
            return None
        photos = self.gallery.photos
        if not photos:
            return self.current
        index = _index_of(photos, self._open_id)
        if index is None:
            # The open photo left the list; start again from the matching end.
            target = photos[0] if offset > 0 else photos[-1]
        else:
            target = photos[(index + offset) % len(photos)]
        self._select(target)
        return target

    def _select(self, photo: Photo) -> None:
        self._open_id = photo.id
        self._open_photo = photo


def _index_of(photos: list[Photo], photo_id: str) -> int | None:
    for index, photo in enumerate(photos):
        if photo.id == photo_id:
            return index
    return None
