"""
Save component input/output models.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import ClassVar
from uuid import UUID

from contentcore.domain.entities import CdnResult, ContentType, ContentVersion


@dataclass(frozen=True)
class SaveContentOutcome:
    """What a successful save produced."""

    version: ContentVersion
    new_version_number: int
    cdn_results: list[CdnResult] = field(default_factory=list)
    success: bool = True


@dataclass(frozen=True)
class SaveContentCommand:
    """
    Edit of an existing content entry.

    `url_path` is optional; when omitted the prior version's path is kept, or
    follows the new title when the title changed.
    """

    result_type: ClassVar[type] = SaveContentOutcome

    article_number: int
    title: str
    content: str
    editor_id: UUID
    header_script: str = ""
    footer_script: str = ""
    banner_image: str = ""
    content_type: ContentType = ContentType.GENERAL
    category: str = ""
    introduction: str = ""
    published_at: datetime | None = None
    url_path: str | None = None


@dataclass(frozen=True)
class SaveLimits:
    """Field length limits applied before any storage access."""

    title_max: int = 254
    category_max: int = 64
    introduction_max: int = 512


DEFAULT_LIMITS = SaveLimits()
