"""
Domain entities for contentcore.

Versions are immutable snapshots; everything else that is persisted is either
a layout definition (Template, DesignVersion) or a projection derived from the
version history (CatalogEntry, PublishedPage).

Invariants:
- I1: version numbers for an article number start at 1 and grow by exactly 1
- I2: the current version is the one with the highest version number
- I3: historical versions are never mutated or deleted
"""

from __future__ import annotations

from datetime import UTC, datetime
from enum import IntEnum
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field


def _utcnow() -> datetime:
    return datetime.now(UTC)


# --- Enums ---


class StatusCode(IntEnum):
    """Lifecycle status carried by every version."""

    ACTIVE = 0
    INACTIVE = 1
    DELETED = 2
    REDIRECT = 3


class ContentType(IntEnum):
    """Kind of page a version renders as."""

    GENERAL = 0
    BLOG_POST = 1
    BLOG_STREAM = 2
    SPA = 3


# --- Content ---


class ContentVersion(BaseModel):
    """One immutable snapshot of a logical content entry."""

    model_config = ConfigDict(frozen=True)

    id: UUID = Field(default_factory=uuid4)
    article_number: int
    version_number: int
    title: str
    content: str
    header_script: str = ""
    footer_script: str = ""
    banner_image: str = ""
    status_code: StatusCode = StatusCode.ACTIVE
    content_type: ContentType = ContentType.GENERAL
    category: str = ""
    introduction: str = ""
    published_at: datetime | None = None
    updated_at: datetime = Field(default_factory=_utcnow)
    editor_id: UUID
    template_id: UUID | None = None
    expires_at: datetime | None = None
    redirect_target: str = ""
    url_path: str = ""
    blog_key: str = "default"

    @property
    def is_published(self) -> bool:
        return self.published_at is not None


# --- Templates ---


class Template(BaseModel):
    """Live layout that dependent content entries are regenerated against."""

    id: UUID = Field(default_factory=uuid4)
    layout_id: UUID | None = None
    community_layout_id: str | None = None
    title: str = ""
    description: str = ""
    content: str = ""
    page_type: str = ""


class DesignVersion(BaseModel):
    """
    Versioned edit of a Template.

    Publishing a design version is the only way its content reaches the
    live Template.
    """

    id: UUID = Field(default_factory=uuid4)
    template_id: UUID
    version: int = 1
    layout_id: UUID | None = None
    community_layout_id: str | None = None
    title: str = ""
    description: str = ""
    content: str = ""
    page_type: str = ""
    published_at: datetime | None = None
    modified_at: datetime = Field(default_factory=_utcnow)


# --- Projections ---


class CatalogEntry(BaseModel):
    """Denormalized listing row, one per article number."""

    model_config = ConfigDict(frozen=True)

    article_number: int
    title: str
    banner_image: str = ""
    status: str = "Active"
    published_at: datetime | None = None
    updated_at: datetime
    url_path: str = ""
    template_id: UUID | None = None
    introduction: str = ""
    author_info: str = ""
    blog_key: str = "default"


class PublishedPage(BaseModel):
    """Snapshot of the version currently deployed for an article number."""

    id: UUID = Field(default_factory=uuid4)
    article_number: int
    version_number: int
    url_path: str
    title: str
    content: str
    published_at: datetime | None = None
    expires_at: datetime | None = None


class CdnResult(BaseModel):
    """Outcome of one CDN purge request."""

    provider: str
    paths: list[str] = Field(default_factory=list)
    success: bool = True
    message: str = ""


class RedirectRule(BaseModel):
    """Permanent redirect created when a page moves to a new URL path."""

    id: UUID = Field(default_factory=uuid4)
    source_path: str
    target_path: str
    status_code: int = 301
    article_number: int | None = None
    created_by: UUID | None = None
    created_at: datetime = Field(default_factory=_utcnow)
