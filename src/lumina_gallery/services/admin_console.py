"""Authenticated photo and theme management state."""

import asyncio
import base64
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from enum import StrEnum

from lumina_gallery.adapters.gallery_client import GalleryClient
from lumina_gallery.domain.models import ConsoleStats, ImageFile, Photo, Theme
from lumina_gallery.errors import (
    FormValidationError,
    GalleryError,
    UnauthorizedError,
    user_message,
)
from lumina_gallery.services import notices
from lumina_gallery.services.auth import AuthGate
from lumina_gallery.services.notices import Notifier

logger = logging.getLogger(__name__)

RECENT_WINDOW = timedelta(days=7)

UPLOAD = "upload"
CREATE_THEME = "create_theme"
DELETE_THEME = "delete_theme"
DELETE_PHOTO = "delete_photo"


class ConsoleModal(StrEnum):
    """Which overlay the console is showing."""

    NONE = "none"
    UPLOAD = "upload"
    SETTINGS = "settings"
    THEMES = "themes"
    CONFIRM_THEME_DELETE = "confirm_theme_delete"
    CONFIRM_PHOTO_DELETE = "confirm_photo_delete"


@dataclass
class UploadForm:
    """Fields of the upload modal."""

    title: str = ""
    description: str = ""
    theme: str = ""
    image: ImageFile | None = None
    preview: str | None = None

    @property
    def is_complete(self) -> bool:
        return bool(self.title and self.theme and self.image)

    def select_image(self, image: ImageFile) -> None:
        self.image = image
        self.preview = _to_data_url(image.content)

    def validate(self) -> ImageFile:
        if self.image is None or not self.title or not self.theme:
            raise FormValidationError("Please fill all required fields")
        return self.image


@dataclass
class PasswordForm:
    """Fields of the settings modal."""

    current_password: str = ""
    new_password: str = ""
    confirm_password: str = ""


@dataclass
class ThemeForm:
    """Fields of the theme creation form."""

    name: str = ""
    description: str = ""

    def validate(self) -> str:
        name = self.name.strip()
        if not name:
            raise FormValidationError("Theme name is required")
        return name


@dataclass
class PendingOperations:
    """Tracks which forms have a request in flight."""

    _busy: set[str] = field(default_factory=set)

    def is_busy(self, name: str) -> bool:
        return name in self._busy

    @asynccontextmanager
    async def run(self, name: str) -> AsyncIterator[None]:
        """Mark an operation in flight for the duration of the block."""
        if name in self._busy:
            raise FormValidationError(f"{name} already in progress")
        self._busy.add(name)
        try:
            yield
        finally:
            self._busy.discard(name)


@dataclass
class AdminConsoleState:
    """Photo and theme lists of the admin console.

    Lists change only after the server confirms an operation. A failed call
    leaves them untouched and surfaces the server's reason.
    """

    client: GalleryClient
    auth: AuthGate
    notifier: Notifier
    photos: list[Photo] = field(default_factory=list)
    themes: list[Theme] = field(default_factory=list)
    loading: bool = True
    modal: ConsoleModal = ConsoleModal.NONE
    upload_form: UploadForm = field(default_factory=UploadForm)
    password_form: PasswordForm = field(default_factory=PasswordForm)
    theme_form: ThemeForm = field(default_factory=ThemeForm)
    pending: PendingOperations = field(default_factory=PendingOperations)
    photo_to_delete: str | None = None
    theme_to_delete: str | None = None
    _closed: bool = field(default=False, init=False)

    async def mount(self) -> bool:
        """Verify the session, then load photos and themes."""
        if not await self.auth.verify():
            self.close()
            return False
        try:
            photos, themes = await asyncio.gather(
                self.client.list_photos(), self.client.list_themes()
            )
        except GalleryError:
            logger.exception("Failed to load console data")
            if not self._closed:
                self.notifier.notify(notices.error("Failed to load data"))
            return True
        finally:
            self.loading = False
        if not self._closed:
            self.photos = photos
            self.themes = themes
        return True

    def close(self) -> None:
        """Stop applying responses to this view."""
        self._closed = True

    def logout(self) -> None:
        self.auth.logout()
        self.close()

    def stats(self, now: datetime | None = None) -> ConsoleStats:
        """Project header figures from the currently loaded lists."""
        cutoff = (now or datetime.now(tz=UTC)) - RECENT_WINDOW
        return ConsoleStats(
            total_photos=len(self.photos),
            total_likes=sum(photo.likes for photo in self.photos),
            theme_count=len(self.themes),
            recent_uploads=sum(
                1 for photo in self.photos if _as_aware(photo.created_at) > cutoff
            ),
        )

    def image_src(self, photo: Photo) -> str:
        return self.client.image_url(photo.image_url)

    def open_upload(self) -> None:
        self.modal = ConsoleModal.UPLOAD

    def close_upload(self) -> None:
        self.modal = ConsoleModal.NONE
        self.upload_form = UploadForm()

    def open_settings(self) -> None:
        self.modal = ConsoleModal.SETTINGS

    def open_themes(self) -> None:
        self.modal = ConsoleModal.THEMES

    def close_modal(self) -> None:
        self.modal = ConsoleModal.NONE

    async def upload(self) -> Photo | None:
        """Submit the upload form; prepend the stored photo on success."""
        if self.pending.is_busy(UPLOAD):
            return None
        form = self.upload_form
        try:
            image = form.validate()
        except FormValidationError as exc:
            self.notifier.notify(notices.error(str(exc)))
            return None

        async with self.pending.run(UPLOAD):
            try:
                photo = await self.client.upload_photo(
                    title=form.title,
                    description=form.description,
                    theme=form.theme,
                    image=image,
                )
            except GalleryError as exc:
                self._report_failure(exc, "Failed to upload photo")
                return None
        if self._closed:
            return photo
        self.photos = [photo, *self.photos]
        self.close_upload()
        self.notifier.notify(notices.success("Photo uploaded successfully!"))
        return photo

    async def change_password(self) -> bool:
        """Submit the settings form."""
        form = self.password_form
        changed = await self.auth.change_password(
            form.current_password, form.new_password, form.confirm_password
        )
        if changed and not self._closed:
            self.modal = ConsoleModal.NONE
            self.password_form = PasswordForm()
        return changed

    def request_photo_delete(self, photo_id: str) -> None:
        self.photo_to_delete = photo_id
        self.modal = ConsoleModal.CONFIRM_PHOTO_DELETE

    def cancel_photo_delete(self) -> None:
        self.photo_to_delete = None
        self.modal = ConsoleModal.NONE

    async def confirm_photo_delete(self) -> bool:
        """Delete the photo awaiting confirmation."""
        photo_id = self.photo_to_delete
        if photo_id is None or self.pending.is_busy(DELETE_PHOTO):
            return False
        try:
            async with self.pending.run(DELETE_PHOTO):
                await self.client.delete_photo(photo_id)
        except GalleryError as exc:
            self._report_failure(exc, "Failed to delete photo")
            return False
        finally:
            self.photo_to_delete = None
            if self.modal == ConsoleModal.CONFIRM_PHOTO_DELETE:
                self.modal = ConsoleModal.NONE
        if not self._closed:
            self.photos = [photo for photo in self.photos if photo.id != photo_id]
            self.notifier.notify(notices.success("Photo deleted"))
        return True

    async def create_theme(self) -> Theme | None:
        """Submit the theme form; append the created theme on success."""
        if self.pending.is_busy(CREATE_THEME):
            return None
        form = self.theme_form
        try:
            name = form.validate()
        except FormValidationError as exc:
            self.notifier.notify(notices.error(str(exc)))
            return None

        async with self.pending.run(CREATE_THEME):
            try:
                theme = await self.client.create_theme(name, form.description)
            except GalleryError as exc:
                self._report_failure(exc, "Failed to create theme")
                return None
        if self._closed:
            return theme
        self.themes = [*self.themes, theme]
        self.theme_form = ThemeForm()
        self.notifier.notify(notices.success("Theme created successfully"))
        return theme

    def request_theme_delete(self, slug: str) -> None:
        self.theme_to_delete = slug
        self.modal = ConsoleModal.CONFIRM_THEME_DELETE

    def cancel_theme_delete(self) -> None:
        self.theme_to_delete = None
        self.modal = ConsoleModal.THEMES

    async def confirm_theme_delete(self) -> bool:
        """Delete the theme awaiting confirmation and return to the theme list.

        Photos that reference the deleted slug are left as they are.
        """
        slug = self.theme_to_delete
        if slug is None or self.pending.is_busy(DELETE_THEME):
            return False
        try:
            async with self.pending.run(DELETE_THEME):
                await self.client.delete_theme(slug)
        except GalleryError as exc:
            self._report_failure(exc, "Failed to delete theme")
            return False
        finally:
            self.theme_to_delete = None
            if self.modal == ConsoleModal.CONFIRM_THEME_DELETE:
                self.modal = ConsoleModal.THEMES
        if not self._closed:
            self.themes = [theme for theme in self.themes if theme.slug != slug]
            self.notifier.notify(notices.success("Theme deleted"))
        return True

    def _report_failure(self, exc: GalleryError, fallback: str) -> None:
        if isinstance(exc, UnauthorizedError):
            self.notifier.notify(notices.error("Session expired, please sign in"))
            self.auth.expire()
            self.close()
            return
        if not self._closed:
            self.notifier.notify(notices.error(user_message(exc, fallback)))


def _as_aware(value: datetime) -> datetime:
    return value if value.tzinfo else value.replace(tzinfo=UTC)


def _to_data_url(image_bytes: bytes) -> str:
    """Convert bytes to a base64 data URL for the upload preview."""
    mime_type = _detect_mime_type(image_bytes)
    encoded = base64.b64encode(image_bytes).decode("utf-8")
    return f"data:{mime_type};base64,{encoded}"


def _detect_mime_type(image_bytes: bytes) -> str:
    """Infer a basic image MIME type from file signatures."""
    if image_bytes.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if image_bytes.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if image_bytes[:4] == b"RIFF" and image_bytes[8:12] == b"WEBP":
        return "image/webp"
    return "image/jpeg"
