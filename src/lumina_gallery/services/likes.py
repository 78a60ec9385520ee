"""Per-visitor record of liked photos."""

from dataclasses import dataclass, field


@dataclass
class LikeLedger:
    """Photos this visitor has liked, as confirmed by the server.

    Entries are only ever added; the client never un-likes a photo.
    """

    _liked: set[str] = field(default_factory=set)

    def has_liked(self, photo_id: str) -> bool:
        return photo_id in self._liked

    def mark_liked(self, photo_id: str) -> None:
        self._liked.add(photo_id)
