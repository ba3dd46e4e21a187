"""
Catalog component port definitions.
"""

from __future__ import annotations

from typing import Protocol

from contentcore.core.ports.db import CatalogRepoPort, VersionStorePort
from contentcore.domain.entities import ContentVersion
from contentcore.domain.result import CancelToken


class CatalogScopePort(Protocol):
    """The slice of a unit of work the projector touches."""

    versions: VersionStorePort
    catalog: CatalogRepoPort


class IntroductionExtractorPort(Protocol):
    def extract_introduction(self, html: str | None) -> str: ...


class CatalogProjectorPort(Protocol):
    """Consumed by the save and propagation handlers."""

    async def upsert(self, version: ContentVersion, *, uow: CatalogScopePort) -> object: ...

    async def delete(self, article_number: int, *, uow: CatalogScopePort) -> bool: ...

    async def rebuild(
        self, *, uow: CatalogScopePort, cancel: CancelToken | None = None
    ) -> int: ...


class RulesPort(Protocol):
    def get_status_labels(self) -> tuple[str, str]:
        """(active_label, inactive_label)."""
        ...
