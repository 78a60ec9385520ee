"""Error taxonomy shared by the client and the view states."""


class GalleryError(Exception):
    """Base class for gallery client errors."""


class FormValidationError(GalleryError):
    """Input rejected locally before any request was sent."""


class ApiError(GalleryError):
    """The collaborator answered with a non-success status."""

    def __init__(self, status_code: int, detail: str | None = None) -> None:
        super().__init__(detail or f"Request failed with status {status_code}")
        self.status_code = status_code
        self.detail = detail


class UnauthorizedError(ApiError):
    """The collaborator rejected the session credential."""

    def __init__(self, detail: str | None = None) -> None:
        super().__init__(401, detail)


class TransportError(GalleryError):
    """The request never produced a response."""


def user_message(error: Exception, fallback: str) -> str:
    """Return the server-provided detail for an error, or the fallback."""
    if isinstance(error, ApiError) and error.detail:
        return error.detail
    return fallback
