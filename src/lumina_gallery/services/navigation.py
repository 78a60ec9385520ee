"""Route names and the navigation interface."""

from dataclasses import dataclass, field
from typing import Protocol

GALLERY_ROUTE = "/"
ADMIN_LOGIN_ROUTE = "/admin"
ADMIN_CONSOLE_ROUTE = "/admin/dashboard"


class Router(Protocol):
    """Interface for moving between views."""

    def navigate(self, route: str) -> None:
        """Switch to a route."""


@dataclass
class RouteHistory(Router):
    """Router that records visited routes."""

    history: list[str] = field(default_factory=lambda: [GALLERY_ROUTE])

    def navigate(self, route: str) -> None:
        self.history.append(route)

    @property
    def current(self) -> str:
        return self.history[-1]
