"""File-backed persistence for the admin session token."""

from dataclasses import dataclass
from pathlib import Path
from typing import Protocol


class TokenStorage(Protocol):
    """Persistence interface for the admin session token."""

    def read(self) -> str | None:
        """Return the persisted token, if any."""

    def write(self, token: str) -> None:
        """Persist a token, replacing any previous one."""

    def delete(self) -> None:
        """Remove the persisted token."""


@dataclass
class FileTokenStorage(TokenStorage):
    """Stores the token in a single file readable only by its owner."""

    path: Path

    def __post_init__(self) -> None:
        self.path = Path(self.path).expanduser()

    def read(self) -> str | None:
        """Read the token file."""
        try:
            token = self.path.read_text(encoding="utf-8").strip()
        except FileNotFoundError:
            return None
        return token or None

    def write(self, token: str) -> None:
        """Write the token file."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(token, encoding="utf-8")
        self.path.chmod(0o600)

    def delete(self) -> None:
        """Delete the token file."""
        self.path.unlink(missing_ok=True)
