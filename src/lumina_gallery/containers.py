"""Dependency container wiring for the gallery client."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from lumina_gallery.adapters.gallery_client import GalleryClient, HttpxGalleryClient
from lumina_gallery.adapters.token_file import FileTokenStorage
from lumina_gallery.app_logging import configure_logging
from lumina_gallery.config import Settings
from lumina_gallery.services.admin_console import AdminConsoleState
from lumina_gallery.services.auth import AuthGate
from lumina_gallery.services.gallery import GalleryState
from lumina_gallery.services.keyboard import KeyBindings
from lumina_gallery.services.lightbox import LightboxNavigator
from lumina_gallery.services.likes import LikeLedger
from lumina_gallery.services.navigation import RouteHistory, Router
from lumina_gallery.services.notices import NoticeLog, Notifier
from lumina_gallery.services.session import SessionStore


@dataclass
class AppContainer:
    """Holds process-wide client dependencies and view states."""

    settings: Settings
    session: SessionStore
    client: GalleryClient
    notifier: Notifier
    router: Router
    keyboard: KeyBindings
    ledger: LikeLedger
    auth_gate: AuthGate
    gallery: GalleryState
    lightbox: LightboxNavigator
    admin_console: AdminConsoleState
    close_resources: Callable[[], Awaitable[None]]

    def new_admin_console(self) -> AdminConsoleState:
        """Create a fresh console state for a newly mounted console view."""
        self.admin_console.close()
        self.admin_console = AdminConsoleState(
            client=self.client, auth=self.auth_gate, notifier=self.notifier
        )
        return self.admin_console


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    configure_logging()
    resolved_settings = settings or Settings()
    session = SessionStore(FileTokenStorage(resolved_settings.session_token_path))
    session.load()
    client = HttpxGalleryClient.create(resolved_settings, session)
    notifier = NoticeLog()
    router = RouteHistory()
    keyboard = KeyBindings()
    ledger = LikeLedger()
    auth_gate = AuthGate(
        client=client, session=session, router=router, notifier=notifier
    )
    gallery = GalleryState(client=client, ledger=ledger, notifier=notifier)
    lightbox = LightboxNavigator(gallery=gallery, keyboard=keyboard)
    admin_console = AdminConsoleState(
        client=client, auth=auth_gate, notifier=notifier
    )

    async def close_resources() -> None:
        lightbox.close()
        await client.close()

    return AppContainer(
        settings=resolved_settings,
        session=session,
        client=client,
        notifier=notifier,
        router=router,
        keyboard=keyboard,
        ledger=ledger,
        auth_gate=auth_gate,
        gallery=gallery,
        lightbox=lightbox,
        admin_console=admin_console,
        close_resources=close_resources,
    )
