"""Pydantic models for collaborator payloads."""

from datetime import datetime

from pydantic import BaseModel, Field

from lumina_gallery.domain.models import LikeResult, Photo, Theme


class PhotoPayload(BaseModel):
    """Photo payload."""

    id: str
    title: str
    description: str | None = None
    theme: str
    image_url: str
    likes: int = Field(default=0, ge=0)
    created_at: datetime

    def to_domain(self) -> Photo:
        return Photo(
            id=self.id,
            title=self.title,
            description=self.description or None,
            theme=self.theme,
            image_url=self.image_url,
            likes=self.likes,
            created_at=self.created_at,
        )


class ThemePayload(BaseModel):
    """Theme payload."""

    id: str
    slug: str
    name: str
    description: str | None = None

    def to_domain(self) -> Theme:
        return Theme(
            id=self.id,
            slug=self.slug,
            name=self.name,
            description=self.description or None,
        )


class AdminCheckPayload(BaseModel):
    """Answer to the admin existence check."""

    exists: bool


class TokenPayload(BaseModel):
    """Answer to setup and login."""

    token: str


class LikePayload(BaseModel):
    """Answer to a like request."""

    likes: int = Field(ge=0)
    already_liked: bool = False

    def to_domain(self) -> LikeResult:
        return LikeResult(likes=self.likes, already_liked=self.already_liked)


class LikedStatusPayload(BaseModel):
    """Answer to a liked-status query."""

    liked: bool


class ErrorPayload(BaseModel):
    """Error body returned with non-success statuses."""

    detail: object = None
