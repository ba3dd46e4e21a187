"""
Catalog component - one denormalized summary row per article number.

Invariants:
- I1: zero or one row per article number
- I2: a row always mirrors the latest saved version's projectable fields
- I3: upsert replaces the whole row; fields are never patched
- I4: delete is idempotent

The catalog holds nothing the version store cannot reproduce, so `rebuild`
may drop and recompute it at any time.
"""

from __future__ import annotations

import logging

from contentcore.domain.entities import CatalogEntry, ContentVersion, StatusCode
from contentcore.domain.result import CancelToken, check_cancelled

from .models import DEFAULT_CONFIG, CatalogConfig, RebuildOutput
from .ports import CatalogScopePort, IntroductionExtractorPort, RulesPort

logger = logging.getLogger(__name__)


def _build_config(rules: RulesPort | None) -> CatalogConfig:
    if rules is None:
        return DEFAULT_CONFIG
    active, inactive = rules.get_status_labels()
    return CatalogConfig(active_label=active, inactive_label=inactive)


def build_entry(
    version: ContentVersion,
    html: IntroductionExtractorPort,
    config: CatalogConfig = DEFAULT_CONFIG,
) -> CatalogEntry:
    """Project a version onto a catalog row."""
    introduction = version.introduction
    if not introduction or not introduction.strip():
        introduction = html.extract_introduction(version.content)

    status = (
        config.inactive_label
        if version.status_code == StatusCode.INACTIVE
        else config.active_label
    )

    return CatalogEntry(
        article_number=version.article_number,
        title=version.title,
        banner_image=version.banner_image,
        status=status,
        published_at=version.published_at,
        updated_at=version.updated_at,
        url_path=version.url_path,
        template_id=version.template_id,
        introduction=introduction,
        author_info="",  # enriched by the author service, outside this package
        blog_key=version.blog_key,
    )


class CatalogProjector:
    """Maintains the catalog read model."""

    def __init__(
        self,
        html: IntroductionExtractorPort,
        rules: RulesPort | None = None,
    ) -> None:
        self._html = html
        self._config = _build_config(rules)

    async def upsert(self, version: ContentVersion, *, uow: CatalogScopePort) -> CatalogEntry:
        entry = build_entry(version, self._html, self._config)
        await uow.catalog.replace(entry)
        logger.debug(
            "Catalog row for article %s now mirrors version %s",
            version.article_number,
            version.version_number,
        )
        return entry

    async def delete(self, article_number: int, *, uow: CatalogScopePort) -> bool:
        removed = await uow.catalog.delete(article_number)
        if not removed:
            logger.debug("No catalog row for article %s; nothing to delete", article_number)
        return removed

    async def rebuild(self, *, uow: CatalogScopePort, cancel: CancelToken | None = None) -> int:
        """Drop every row and recompute from the latest versions."""
        latest = await uow.versions.list_latest()
        await uow.catalog.clear()
        for version in latest:
            check_cancelled(cancel)
            await self.upsert(version, uow=uow)
        logger.info("Catalog rebuilt with %d rows", len(latest))
        return len(latest)


# --- Component Entry Points ---


async def run_rebuild(
    *,
    projector: CatalogProjector,
    uow: CatalogScopePort,
    cancel: CancelToken | None = None,
) -> RebuildOutput:
    """Recompute the catalog from the version store."""
    rows = await projector.rebuild(uow=uow, cancel=cancel)
    return RebuildOutput(rows=rows)
