"""
Publishing component port definitions.
"""

from __future__ import annotations

from typing import Protocol

from contentcore.core.ports.db import PublishedPageRepoPort
from contentcore.domain.entities import CdnResult, ContentVersion


class PublishScopePort(Protocol):
    pages: PublishedPageRepoPort


class CdnDriverPort(Protocol):
    """Purges cached copies of rendered paths at the edge."""

    async def purge(self, paths: list[str]) -> list[CdnResult]: ...


class PublishingCoordinatorPort(Protocol):
    """Renders/deploys a version and purges CDN caches."""

    async def deploy(
        self, version: ContentVersion, *, uow: PublishScopePort
    ) -> list[CdnResult]: ...
