"""
In-memory adapters.

Used by tests and for embedding the engine without a database. All repos share
one InMemoryDatabase; writes are visible immediately, so commit and rollback
on InMemoryUnitOfWork only track counts.
"""

from __future__ import annotations

import asyncio
from types import TracebackType
from uuid import UUID

from contentcore.domain.entities import (
    CatalogEntry,
    ContentVersion,
    DesignVersion,
    PublishedPage,
    RedirectRule,
    Template,
)
from contentcore.domain.errors import ConcurrencyConflict


class InMemoryDatabase:
    """Process-local state shared by every unit of work created from it."""

    def __init__(self) -> None:
        self.versions: dict[int, list[ContentVersion]] = {}
        self.catalog: dict[int, CatalogEntry] = {}
        self.templates: dict[UUID, Template] = {}
        self.designs: dict[UUID, DesignVersion] = {}
        self.redirects: dict[str, RedirectRule] = {}
        self.pages: dict[int, PublishedPage] = {}
        self.append_lock = asyncio.Lock()


class InMemoryVersionStore:
    def __init__(self, db: InMemoryDatabase) -> None:
        self._db = db

    async def get_latest(self, article_number: int) -> ContentVersion | None:
        history = self._db.versions.get(article_number)
        return history[-1] if history else None

    async def list_versions(self, article_number: int) -> list[ContentVersion]:
        return list(self._db.versions.get(article_number, []))

    async def list_latest(self) -> list[ContentVersion]:
        return [history[-1] for _, history in sorted(self._db.versions.items()) if history]

    async def append(self, version: ContentVersion, expected_head: UUID | None) -> ContentVersion:
        async with self._db.append_lock:
            history = self._db.versions.setdefault(version.article_number, [])
            head = history[-1] if history else None
            head_id = head.id if head else None
            if head_id != expected_head:
                raise ConcurrencyConflict(version.article_number, expected_head, head_id)

            expected_number = (head.version_number + 1) if head else 1
            if version.version_number != expected_number:
                raise ConcurrencyConflict(
                    version.article_number, expected_number, version.version_number
                )

            history.append(version)
            return version


class InMemoryCatalogRepo:
    def __init__(self, db: InMemoryDatabase) -> None:
        self._db = db

    async def get(self, article_number: int) -> CatalogEntry | None:
        return self._db.catalog.get(article_number)

    async def replace(self, entry: CatalogEntry) -> CatalogEntry:
        self._db.catalog[entry.article_number] = entry
        return entry

    async def delete(self, article_number: int) -> bool:
        return self._db.catalog.pop(article_number, None) is not None

    async def list_by_template(self, template_id: UUID) -> list[CatalogEntry]:
        return [
            e for _, e in sorted(self._db.catalog.items()) if e.template_id == template_id
        ]

    async def list_all(self) -> list[CatalogEntry]:
        return [e for _, e in sorted(self._db.catalog.items())]

    async def clear(self) -> None:
        self._db.catalog.clear()


class InMemoryTemplateRepo:
    def __init__(self, db: InMemoryDatabase) -> None:
        self._db = db

    async def get(self, template_id: UUID) -> Template | None:
        return self._db.templates.get(template_id)

    async def save(self, template: Template) -> Template:
        self._db.templates[template.id] = template
        return template


class InMemoryDesignVersionRepo:
    def __init__(self, db: InMemoryDatabase) -> None:
        self._db = db

    async def get(self, design_version_id: UUID) -> DesignVersion | None:
        return self._db.designs.get(design_version_id)

    async def save(self, design: DesignVersion) -> DesignVersion:
        self._db.designs[design.id] = design
        return design


class InMemoryRedirectRepo:
    def __init__(self, db: InMemoryDatabase) -> None:
        self._db = db

    async def get_by_source(self, source_path: str) -> RedirectRule | None:
        return self._db.redirects.get(source_path.lower())

    async def save(self, rule: RedirectRule) -> RedirectRule:
        self._db.redirects[rule.source_path.lower()] = rule
        return rule

    async def list_all(self) -> list[RedirectRule]:
        return list(self._db.redirects.values())


class InMemoryPublishedPageRepo:
    def __init__(self, db: InMemoryDatabase) -> None:
        self._db = db

    async def get(self, article_number: int) -> PublishedPage | None:
        return self._db.pages.get(article_number)

    async def replace(self, page: PublishedPage) -> PublishedPage:
        self._db.pages[page.article_number] = page
        return page


class InMemoryUnitOfWork:
    def __init__(self, db: InMemoryDatabase) -> None:
        self.db = db
        self.versions = InMemoryVersionStore(db)
        self.catalog = InMemoryCatalogRepo(db)
        self.templates = InMemoryTemplateRepo(db)
        self.designs = InMemoryDesignVersionRepo(db)
        self.redirects = InMemoryRedirectRepo(db)
        self.pages = InMemoryPublishedPageRepo(db)
        self.commits = 0
        self.rollbacks = 0

    async def commit(self) -> None:
        self.commits += 1

    async def rollback(self) -> None:
        self.rollbacks += 1

    async def __aenter__(self) -> InMemoryUnitOfWork:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if exc_type is not None:
            await self.rollback()
