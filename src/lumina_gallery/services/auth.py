"""Admin authentication state machine."""

import asyncio
import logging
from dataclasses import dataclass, field
from enum import StrEnum

from lumina_gallery.adapters.gallery_client import GalleryClient
from lumina_gallery.errors import (
    FormValidationError,
    GalleryError,
    UnauthorizedError,
    user_message,
)
from lumina_gallery.services import notices
from lumina_gallery.services.navigation import (
    ADMIN_CONSOLE_ROUTE,
    ADMIN_LOGIN_ROUTE,
    Router,
)
from lumina_gallery.services.notices import Notifier
from lumina_gallery.services.session import SessionStore

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


class AuthState(StrEnum):
    """States of the admin entry point."""

    CHECKING = "checking"
    NEEDS_SETUP = "needs_setup"
    NEEDS_LOGIN = "needs_login"
    AUTHENTICATING = "authenticating"
    AUTHENTICATED = "authenticated"
    FAILED = "failed"


@dataclass(frozen=True)
class AuthOutcome:
    """Result of a credential submission."""

    state: AuthState
    message: str


@dataclass
class AuthGate:
    """Gates the admin console behind a verified session token.

    ``start`` picks between the setup and login forms and silently verifies a
    token that is already held. ``submit`` posts the form to the endpoint that
    matches the current mode. ``verify`` is what every privileged screen calls
    when it mounts.
    """

    client: GalleryClient
    session: SessionStore
    router: Router
    notifier: Notifier
    state: AuthState = AuthState.CHECKING
    admin_exists: bool = True
    username: str = ""
    last_error: str | None = None
    changing_password: bool = False
    _closed: bool = field(default=False, init=False)

    @property
    def is_setup(self) -> bool:
        return not self.admin_exists

    @property
    def form_state(self) -> AuthState:
        return AuthState.NEEDS_SETUP if self.is_setup else AuthState.NEEDS_LOGIN

    @property
    def busy(self) -> bool:
        return self.state in {AuthState.CHECKING, AuthState.AUTHENTICATING}

    async def start(self) -> AuthState:
        """Resolve the entry mode and try the held token, if any."""
        self.state = AuthState.CHECKING
        exists, verified = await asyncio.gather(
            self._check_admin_exists(), self._verify_held_token()
        )
        if self._closed:
            return self.state
        self.admin_exists = exists
        if verified:
            self.state = AuthState.AUTHENTICATED
            self.router.navigate(ADMIN_CONSOLE_ROUTE)
        else:
            self.state = self.form_state
        return self.state

    async def submit(self, username: str, password: str) -> AuthOutcome:
        """Send the credentials to the setup or login endpoint."""
        self.username = username
        if self.state == AuthState.AUTHENTICATING:
            return AuthOutcome(AuthState.AUTHENTICATING, "Request already in progress")
        if not username or not password:
            message = "Username and password are required"
            self.notifier.notify(notices.error(message))
            return AuthOutcome(self.state, message)

        setup = self.is_setup
        self.state = AuthState.AUTHENTICATING
        self.last_error = None
        try:
            if setup:
                token = await self.client.setup_admin(username, password)
            else:
                token = await self.client.login_admin(username, password)
        except GalleryError as exc:
            message = user_message(exc, "Authentication failed")
            logger.info("Admin authentication failed: %s", message)
            self.last_error = message
            self.state = self.form_state
            self.notifier.notify(notices.error(message))
            return AuthOutcome(AuthState.FAILED, message)

        self.session.set(token)
        self.admin_exists = True
        if self._closed:
            return AuthOutcome(AuthState.AUTHENTICATED, "")
        self.state = AuthState.AUTHENTICATED
        message = "Admin account created!" if setup else "Welcome back!"
        self.notifier.notify(notices.success(message))
        self.router.navigate(ADMIN_CONSOLE_ROUTE)
        return AuthOutcome(AuthState.AUTHENTICATED, message)

    async def verify(self) -> bool:
        """Re-verify the held token; on failure drop it and go to login."""
        if await self._verify_held_token():
            self.state = AuthState.AUTHENTICATED
            return True
        self.expire()
        return False

    def expire(self) -> None:
        """Return to the unauthenticated entry point after a rejected token."""
        self.session.clear()
        self.state = self.form_state
        self.router.navigate(ADMIN_LOGIN_ROUTE)

    def logout(self) -> None:
        """End the admin session."""
        self.session.clear()
        self.state = self.form_state
        self.router.navigate(ADMIN_LOGIN_ROUTE)
        self.notifier.notify(notices.success("Logged out successfully"))

    async def change_password(
        self, current_password: str, new_password: str, confirm_password: str
    ) -> bool:
        """Change the admin password without touching the session token."""
        try:
            validate_new_password(new_password, confirm_password)
        except FormValidationError as exc:
            self.notifier.notify(notices.error(str(exc)))
            return False
        if self.changing_password:
            return False

        self.changing_password = True
        try:
            await self.client.change_password(current_password, new_password)
        except UnauthorizedError:
            self.expire()
            return False
        except GalleryError as exc:
            self.notifier.notify(
                notices.error(user_message(exc, "Failed to change password"))
            )
            return False
        finally:
            self.changing_password = False
        self.notifier.notify(notices.success("Password changed successfully"))
        return True

    def close(self) -> None:
        """Stop applying responses to this view."""
        self._closed = True

    async def _check_admin_exists(self) -> bool:
        try:
            return await self.client.check_admin()
        except GalleryError:
            logger.exception("Failed to check whether an admin account exists")
            return True

    async def _verify_held_token(self) -> bool:
        if not self.session.has_token:
            return False
        try:
            await self.client.verify_session()
        except GalleryError as exc:
            logger.info("Session verification failed: %s", exc)
            self.session.clear()
            return False
        return True


def validate_new_password(new_password: str, confirm_password: str) -> None:
    """Reject a new password locally before it is sent."""
    if new_password != confirm_password:
        raise FormValidationError("New passwords don't match")
    if len(new_password) < MIN_PASSWORD_LENGTH:
        raise FormValidationError(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
        )
