"""
Database adapter interfaces.

Protocol-based, async repository interfaces grouped under one UnitOfWork.
Implementations: in-memory (tests, embedding) and SQLite.

Invariants:
- I1: the version store is append-only; `append` is the only write
- I2: `append` rejects a write whose expected head is not the current head
- I3: the catalog holds nothing that cannot be recomputed from the versions
"""

from __future__ import annotations

from types import TracebackType
from typing import Protocol
from uuid import UUID

from contentcore.domain.entities import (
    CatalogEntry,
    ContentVersion,
    DesignVersion,
    PublishedPage,
    RedirectRule,
    Template,
)

# -----------------------------------------------------------------------------
# Version store
# -----------------------------------------------------------------------------


class VersionStorePort(Protocol):
    """
    Append-only store of content versions.

    The optimistic-concurrency token is the id of the version the writer read
    as current (None when creating the first version).
    """

    async def get_latest(self, article_number: int) -> ContentVersion | None:
        """Get the highest-numbered version for an article number."""
        ...

    async def list_versions(self, article_number: int) -> list[ContentVersion]:
        """Full history for an article number, oldest first."""
        ...

    async def list_latest(self) -> list[ContentVersion]:
        """Latest version of every article number."""
        ...

    async def append(self, version: ContentVersion, expected_head: UUID | None) -> ContentVersion:
        """Append a version. Raises ConcurrencyConflict on a stale token."""
        ...


# -----------------------------------------------------------------------------
# Catalog
# -----------------------------------------------------------------------------


class CatalogRepoPort(Protocol):
    """One denormalized row per article number."""

    async def get(self, article_number: int) -> CatalogEntry | None: ...

    async def replace(self, entry: CatalogEntry) -> CatalogEntry:
        """Replace-or-insert the whole row."""
        ...

    async def delete(self, article_number: int) -> bool:
        """Delete the row. Returns False if there was nothing to delete."""
        ...

    async def list_by_template(self, template_id: UUID) -> list[CatalogEntry]: ...

    async def list_all(self) -> list[CatalogEntry]: ...

    async def clear(self) -> None: ...


# -----------------------------------------------------------------------------
# Templates
# -----------------------------------------------------------------------------


class TemplateRepoPort(Protocol):
    async def get(self, template_id: UUID) -> Template | None: ...

    async def save(self, template: Template) -> Template: ...


class DesignVersionRepoPort(Protocol):
    async def get(self, design_version_id: UUID) -> DesignVersion | None: ...

    async def save(self, design: DesignVersion) -> DesignVersion: ...


# -----------------------------------------------------------------------------
# Collaborator storage
# -----------------------------------------------------------------------------


class RedirectRepoPort(Protocol):
    async def get_by_source(self, source_path: str) -> RedirectRule | None: ...

    async def save(self, rule: RedirectRule) -> RedirectRule:
        """Save a rule, replacing any rule with the same source path."""
        ...

    async def list_all(self) -> list[RedirectRule]: ...


class PublishedPageRepoPort(Protocol):
    async def get(self, article_number: int) -> PublishedPage | None: ...

    async def replace(self, page: PublishedPage) -> PublishedPage: ...


# -----------------------------------------------------------------------------
# Unit of work
# -----------------------------------------------------------------------------


class UnitOfWorkPort(Protocol):
    """
    Request-scoped transactional scope.

    Handlers receive it as an argument and call `commit` after each durable
    step. Leaving the context with an exception rolls back uncommitted work.
    """

    versions: VersionStorePort
    catalog: CatalogRepoPort
    templates: TemplateRepoPort
    designs: DesignVersionRepoPort
    redirects: RedirectRepoPort
    pages: PublishedPageRepoPort

    async def commit(self) -> None: ...

    async def rollback(self) -> None: ...

    async def __aenter__(self) -> UnitOfWorkPort: ...

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None: ...
