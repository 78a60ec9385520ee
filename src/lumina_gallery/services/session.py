"""Process-wide admin session token."""

import logging
from dataclasses import dataclass, field

from lumina_gallery.adapters.token_file import TokenStorage

logger = logging.getLogger(__name__)


@dataclass
class SessionStore:
    """Owns the admin token for the lifetime of the process.

    The token is read from storage once by ``load`` at startup, replaced by
    ``set`` after a successful setup or login, and dropped by ``clear`` on
    logout or when the collaborator rejects it. The request dispatch layer
    reads ``token`` at the moment each privileged request is sent.
    """

    storage: TokenStorage
    _token: str | None = field(default=None, init=False)

    def load(self) -> str | None:
        """Initialise the held token from persistent storage."""
        self._token = self.storage.read()
        return self._token

    @property
    def token(self) -> str | None:
        return self._token

    @property
    def has_token(self) -> bool:
        return self._token is not None

    def set(self, token: str) -> None:
        """Hold and persist a freshly issued token."""
        self._token = token
        self.storage.write(token)

    def clear(self) -> None:
        """Forget the token in memory and in storage."""
        if self._token is not None:
            logger.info("Clearing admin session token")
        self._token = None
        self.storage.delete()
