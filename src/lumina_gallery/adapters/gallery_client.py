"""HTTP client for the gallery API."""

from dataclasses import dataclass
from typing import Protocol, TypeVar

import httpx
from pydantic import BaseModel, TypeAdapter, ValidationError

from lumina_gallery.adapters.gallery_models import (
    AdminCheckPayload,
    ErrorPayload,
    LikedStatusPayload,
    LikePayload,
    PhotoPayload,
    ThemePayload,
    TokenPayload,
)
from lumina_gallery.config import Settings, resolve_image_url
from lumina_gallery.domain.models import ImageFile, LikeResult, Photo, Theme
from lumina_gallery.errors import ApiError, TransportError, UnauthorizedError
from lumina_gallery.services.session import SessionStore

_ModelT = TypeVar("_ModelT", bound=BaseModel)

_PHOTO_LIST = TypeAdapter(list[PhotoPayload])
_THEME_LIST = TypeAdapter(list[ThemePayload])


class GalleryClient(Protocol):
    """Interface for the remote photo store."""

    async def check_admin(self) -> bool:
        """Return whether an admin account has been configured."""

    async def setup_admin(self, username: str, password: str) -> str:
        """Create the admin account and return a session token."""

    async def login_admin(self, username: str, password: str) -> str:
        """Log in and return a session token."""

    async def verify_session(self) -> None:
        """Check that the held session token is still accepted."""

    async def change_password(self, current_password: str, new_password: str) -> None:
        """Change the admin password."""

    async def list_themes(self) -> list[Theme]:
        """Return all themes."""

    async def create_theme(self, name: str, description: str) -> Theme:
        """Create a theme and return it."""

    async def delete_theme(self, slug: str) -> None:
        """Delete a theme by slug."""

    async def list_photos(self, theme: str | None = None) -> list[Photo]:
        """Return photos, optionally scoped to one theme slug."""

    async def upload_photo(
        self, title: str, description: str, theme: str, image: ImageFile
    ) -> Photo:
        """Upload a photo and return the stored record."""

    async def delete_photo(self, photo_id: str) -> None:
        """Delete a photo by id."""

    async def like_photo(self, photo_id: str) -> LikeResult:
        """Like a photo on behalf of the current visitor."""

    async def liked_status(self, photo_id: str) -> bool:
        """Return whether the current visitor already liked a photo."""

    def image_url(self, url: str) -> str:
        """Return a displayable URL for a photo image."""


@dataclass
class HttpxGalleryClient(GalleryClient):
    """Gallery API client implemented with httpx."""

    base_url: str
    backend_url: str
    session: SessionStore
    http_client: httpx.AsyncClient
    timeout: float = 15.0

    @classmethod
    def create(cls, settings: Settings, session: SessionStore) -> "HttpxGalleryClient":
        """Create a gallery client with a managed httpx session."""
        return cls(
            base_url=settings.api_base_url,
            backend_url=settings.backend_url,
            session=session,
            http_client=httpx.AsyncClient(),
            timeout=settings.request_timeout,
        )

    async def check_admin(self) -> bool:
        """Query whether the admin account exists."""
        response = await self._request("GET", "/admin/check")
        return _parse(AdminCheckPayload, response).exists

    async def setup_admin(self, username: str, password: str) -> str:
        """Create the admin account."""
        response = await self._request(
            "POST",
            "/admin/setup",
            json={"username": username, "password": password},
        )
        return _parse(TokenPayload, response).token

    async def login_admin(self, username: str, password: str) -> str:
        """Log in with admin credentials."""
        response = await self._request(
            "POST",
            "/admin/login",
            json={"username": username, "password": password},
        )
        return _parse(TokenPayload, response).token

    async def verify_session(self) -> None:
        """Verify the held token."""
        await self._request("GET", "/admin/verify", privileged=True)

    async def change_password(self, current_password: str, new_password: str) -> None:
        """Change the admin password."""
        await self._request(
            "POST",
            "/admin/change-password",
            privileged=True,
            json={
                "current_password": current_password,
                "new_password": new_password,
            },
        )

    async def list_themes(self) -> list[Theme]:
        """List all themes."""
        response = await self._request("GET", "/themes")
        payloads = _parse_list(_THEME_LIST, response)
        return [payload.to_domain() for payload in payloads]

    async def create_theme(self, name: str, description: str) -> Theme:
        """Create a theme."""
        response = await self._request(
            "POST",
            "/themes",
            privileged=True,
            json={"name": name, "description": description},
        )
        return _parse(ThemePayload, response).to_domain()

    async def delete_theme(self, slug: str) -> None:
        """Delete a theme."""
        await self._request("DELETE", f"/themes/{slug}", privileged=True)

    async def list_photos(self, theme: str | None = None) -> list[Photo]:
        """List photos, filtered by theme when one is given."""
        params = {"theme": theme} if theme else {}
        response = await self._request("GET", "/photos", params=params)
        payloads = _parse_list(_PHOTO_LIST, response)
        return [payload.to_domain() for payload in payloads]

    async def upload_photo(
        self, title: str, description: str, theme: str, image: ImageFile
    ) -> Photo:
        """Upload a photo as multipart form data."""
        response = await self._request(
            "POST",
            "/photos",
            privileged=True,
            data={"title": title, "description": description, "theme": theme},
            files={"image": (image.filename, image.content, image.content_type)},
            timeout=max(self.timeout, 60),
        )
        return _parse(PhotoPayload, response).to_domain()

    async def delete_photo(self, photo_id: str) -> None:
        """Delete a photo."""
        await self._request("DELETE", f"/photos/{photo_id}", privileged=True)

    async def like_photo(self, photo_id: str) -> LikeResult:
        """Like a photo."""
        response = await self._request("POST", f"/photos/{photo_id}/like")
        return _parse(LikePayload, response).to_domain()

    async def liked_status(self, photo_id: str) -> bool:
        """Fetch liked status for a photo."""
        response = await self._request("GET", f"/photos/{photo_id}/liked")
        return _parse(LikedStatusPayload, response).liked

    def image_url(self, url: str) -> str:
        """Resolve relative image URLs against the backend origin."""
        return resolve_image_url(self.backend_url, url)

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        *,
        privileged: bool = False,
        timeout: float | None = None,
        **kwargs: object,
    ) -> httpx.Response:
        headers: dict[str, str] = {}
        if privileged:
            # Read at dispatch so a logout between requests is honoured.
            token = self.session.token
            if token:
                headers["Authorization"] = f"Bearer {token}"
        try:
            response = await self.http_client.request(
                method,
                f"{self.base_url}{path}",
                headers=headers,
                timeout=timeout or self.timeout,
                **kwargs,
            )
        except httpx.TransportError as exc:
            raise TransportError(f"{method} {path} failed: {exc}") from exc
        if response.status_code == httpx.codes.UNAUTHORIZED:
            if privileged:
                self.session.clear()
            raise UnauthorizedError(_error_detail(response))
        if response.is_error:
            raise ApiError(response.status_code, _error_detail(response))
        return response


def _parse(model: type[_ModelT], response: httpx.Response) -> _ModelT:
    try:
        return model.model_validate_json(response.content)
    except ValidationError as exc:
        raise ApiError(response.status_code, None) from exc


def _parse_list(adapter: TypeAdapter, response: httpx.Response) -> list:
    try:
        return adapter.validate_json(response.content)
    except ValidationError as exc:
        raise ApiError(response.status_code, None) from exc


def _error_detail(response: httpx.Response) -> str | None:
    """Extract the server's human-readable reason from an error response."""
    try:
        payload = ErrorPayload.model_validate_json(response.content)
    except ValidationError:
        return None
    if isinstance(payload.detail, str) and payload.detail:
        return payload.detail
    return None
