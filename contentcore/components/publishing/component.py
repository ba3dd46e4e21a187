"""
Publishing component - deploys a version and purges the CDN.

Invariants:
- I1: at most one published page per article number
- I2: a deploy always replaces the page before purging
- I3: CDN failures are reported as unsuccessful results, not raised
"""

from __future__ import annotations

import logging

from contentcore.core.ports.time import ClockPort
from contentcore.domain.entities import CdnResult, ContentVersion, PublishedPage
from contentcore.domain.errors import InfrastructureError

from .ports import CdnDriverPort, PublishScopePort

logger = logging.getLogger(__name__)


def public_path(url_path: str) -> str:
    """Path a page is served from; the home page is stored as 'root'."""
    trimmed = (url_path or "").strip("/")
    if not trimmed or trimmed.lower() == "root":
        return "/"
    return "/" + trimmed


class PagePublisher:
    """Publishing coordinator backed by the published-page repo."""

    def __init__(self, cdn: CdnDriverPort, clock: ClockPort) -> None:
        self._cdn = cdn
        self._clock = clock

    async def deploy(self, version: ContentVersion, *, uow: PublishScopePort) -> list[CdnResult]:
        page = PublishedPage(
            article_number=version.article_number,
            version_number=version.version_number,
            url_path=version.url_path,
            title=version.title,
            content=version.content,
            published_at=version.published_at or self._clock.now_utc(),
            expires_at=version.expires_at,
        )
        await uow.pages.replace(page)
        logger.info(
            "Deployed article %s version %s to %s",
            version.article_number,
            version.version_number,
            public_path(version.url_path),
        )

        paths = [public_path(version.url_path)]
        try:
            return await self._cdn.purge(paths)
        except InfrastructureError as e:
            logger.warning("CDN purge failed for %s: %s", paths, e)
            return [
                CdnResult(
                    provider=type(self._cdn).__name__,
                    paths=paths,
                    success=False,
                    message=str(e),
                )
            ]
