"""Shared test fixtures."""

import asyncio
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path

import pytest

from lumina_gallery.adapters.gallery_client import GalleryClient
from lumina_gallery.adapters.token_file import TokenStorage
from lumina_gallery.config import Settings, resolve_image_url
from lumina_gallery.domain.models import ImageFile, LikeResult, Photo, Theme
from lumina_gallery.errors import ApiError, GalleryError, UnauthorizedError
from lumina_gallery.services.admin_console import AdminConsoleState
from lumina_gallery.services.auth import AuthGate
from lumina_gallery.services.gallery import GalleryState
from lumina_gallery.services.keyboard import KeyBindings
from lumina_gallery.services.lightbox import LightboxNavigator
from lumina_gallery.services.likes import LikeLedger
from lumina_gallery.services.navigation import RouteHistory
from lumina_gallery.services.notices import NoticeLog
from lumina_gallery.services.session import SessionStore

BACKEND_URL = "https://gallery.test"


def make_photo(
    photo_id: str,
    theme: str = "street",
    likes: int = 0,
    created_at: datetime | None = None,
) -> Photo:
    return Photo(
        id=photo_id,
        title=f"Photo {photo_id}",
        theme=theme,
        image_url=f"/uploads/{photo_id}.jpg",
        likes=likes,
        created_at=created_at or datetime.now(tz=UTC),
    )


def make_theme(slug: str) -> Theme:
    return Theme(id=f"theme-{slug}", slug=slug, name=slug.title())


@dataclass
class InMemoryTokenStorage(TokenStorage):
    """In-memory token storage for tests."""

    token: str | None = None
    writes: list[str] = field(default_factory=list)

    def read(self) -> str | None:
        return self.token

    def write(self, token: str) -> None:
        self.writes.append(token)
        self.token = token

    def delete(self) -> None:
        self.token = None


@dataclass
class FakeGalleryClient(GalleryClient):
    """Fake collaborator holding photos and themes in memory.

    ``failures`` maps an operation name to the error it raises. ``gates`` maps
    an operation name, or ``"name:arg"``, to an event the call waits on.
    """

    session: SessionStore
    admin_exists: bool = True
    username: str = "admin"
    password: str = "secret1"
    issued_token: str = "token-1"
    photos: list[Photo] = field(default_factory=list)
    themes: list[Theme] = field(default_factory=list)
    visitor_likes: set[str] = field(default_factory=set)
    failures: dict[str, GalleryError] = field(default_factory=dict)
    gates: dict[str, asyncio.Event] = field(default_factory=dict)
    calls: list[tuple[str, object]] = field(default_factory=list)
    sent_tokens: list[str | None] = field(default_factory=list)

    async def check_admin(self) -> bool:
        await self._enter("check_admin")
        return self.admin_exists

    async def setup_admin(self, username: str, password: str) -> str:
        await self._enter("setup_admin", username)
        if self.admin_exists:
            raise ApiError(400, "Admin already exists")
        self.admin_exists = True
        self.username = username
        self.password = password
        return self.issued_token

    async def login_admin(self, username: str, password: str) -> str:
        await self._enter("login_admin", username)
        if (username, password) != (self.username, self.password):
            raise UnauthorizedError("Invalid credentials")
        return self.issued_token

    async def verify_session(self) -> None:
        await self._enter("verify_session")
        self._authorize()

    async def change_password(self, current_password: str, new_password: str) -> None:
        await self._enter("change_password")
        self._authorize()
        if current_password != self.password:
            raise ApiError(400, "Current password is incorrect")
        self.password = new_password

    async def list_themes(self) -> list[Theme]:
        await self._enter("list_themes")
        return list(self.themes)

    async def create_theme(self, name: str, description: str) -> Theme:
        await self._enter("create_theme", name)
        self._authorize()
        theme = Theme(
            id=f"theme-{len(self.themes) + 1}",
            slug=name.lower().replace(" ", "-"),
            name=name,
            description=description or None,
        )
        self.themes.append(theme)
        return theme

    async def delete_theme(self, slug: str) -> None:
        await self._enter("delete_theme", slug)
        self._authorize()
        if not any(theme.slug == slug for theme in self.themes):
            raise ApiError(404, "Theme not found")
        self.themes = [theme for theme in self.themes if theme.slug != slug]

    async def list_photos(self, theme: str | None = None) -> list[Photo]:
        await self._enter("list_photos", theme)
        return [photo for photo in self.photos if theme in {None, photo.theme}]

    async def upload_photo(
        self, title: str, description: str, theme: str, image: ImageFile
    ) -> Photo:
        await self._enter("upload_photo", title)
        self._authorize()
        photo = Photo(
            id=f"uploaded-{len(self.photos) + 1}",
            title=title,
            description=description or None,
            theme=theme,
            image_url=f"/uploads/{image.filename}",
            likes=0,
            created_at=datetime.now(tz=UTC),
        )
        self.photos.insert(0, photo)
        return photo

    async def delete_photo(self, photo_id: str) -> None:
        await self._enter("delete_photo", photo_id)
        self._authorize()
        if not any(photo.id == photo_id for photo in self.photos):
            raise ApiError(404, "Photo not found")
        self.photos = [photo for photo in self.photos if photo.id != photo_id]

    async def like_photo(self, photo_id: str) -> LikeResult:
        await self._enter("like_photo", photo_id)
        index = next(i for i, photo in enumerate(self.photos) if photo.id == photo_id)
        photo = self.photos[index]
        if photo_id in self.visitor_likes:
            return LikeResult(likes=photo.likes, already_liked=True)
        self.visitor_likes.add(photo_id)
        self.photos[index] = photo.with_likes(photo.likes + 1)
        return LikeResult(likes=photo.likes + 1, already_liked=False)

    async def liked_status(self, photo_id: str) -> bool:
        await self._enter("liked_status", photo_id)
        return photo_id in self.visitor_likes

    def image_url(self, url: str) -> str:
        return resolve_image_url(BACKEND_URL, url)

    def call_names(self) -> list[str]:
        return [name for name, _ in self.calls]

    def _authorize(self) -> None:
        self.sent_tokens.append(self.session.token)
        if self.session.token != self.issued_token:
            raise UnauthorizedError("Not authenticated")

    async def _enter(self, name: str, arg: object = None) -> None:
        self.calls.append((name, arg))
        gate = self.gates.get(f"{name}:{arg}") or self.gates.get(name)
        if gate is not None:
            await gate.wait()
        error = self.failures.get(f"{name}:{arg}") or self.failures.get(name)
        if error is not None:
            raise error


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        backend_url=BACKEND_URL,
        session_token_path=tmp_path / "admin_token",
    )


@pytest.fixture
def token_storage() -> InMemoryTokenStorage:
    return InMemoryTokenStorage()


@pytest.fixture
def session(token_storage: InMemoryTokenStorage) -> SessionStore:
    store = SessionStore(token_storage)
    store.load()
    return store


@pytest.fixture
def client(session: SessionStore) -> FakeGalleryClient:
    return FakeGalleryClient(session=session)


@pytest.fixture
def notifier() -> NoticeLog:
    return NoticeLog()


@pytest.fixture
def router() -> RouteHistory:
    return RouteHistory()


@pytest.fixture
def ledger() -> LikeLedger:
    return LikeLedger()


@pytest.fixture
def keyboard() -> KeyBindings:
    return KeyBindings()


@pytest.fixture
def auth_gate(
    client: FakeGalleryClient,
    session: SessionStore,
    router: RouteHistory,
    notifier: NoticeLog,
) -> AuthGate:
    return AuthGate(client=client, session=session, router=router, notifier=notifier)


@pytest.fixture
def gallery(
    client: FakeGalleryClient, ledger: LikeLedger, notifier: NoticeLog
) -> GalleryState:
    return GalleryState(client=client, ledger=ledger, notifier=notifier)


@pytest.fixture
def lightbox(gallery: GalleryState, keyboard: KeyBindings) -> LightboxNavigator:
    return LightboxNavigator(gallery=gallery, keyboard=keyboard)


@pytest.fixture
def console(
    client: FakeGalleryClient, auth_gate: AuthGate, notifier: NoticeLog
) -> AdminConsoleState:
    return AdminConsoleState(client=client, auth=auth_gate, notifier=notifier)
