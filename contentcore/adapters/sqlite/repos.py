"""
SQLite adapters for the database ports.

sqlite3 is synchronous; every statement runs through asyncio.to_thread so the
event loop never blocks on disk I/O. One connection per unit of work; repos
created by the unit of work share it.
"""

from __future__ import annotations

import asyncio
import logging
import sqlite3
from collections.abc import Callable
from datetime import datetime
from types import TracebackType
from typing import Any, TypeVar
from uuid import UUID

from contentcore.domain.entities import (
    CatalogEntry,
    ContentType,
    ContentVersion,
    DesignVersion,
    PublishedPage,
    RedirectRule,
    StatusCode,
    Template,
)
from contentcore.domain.errors import ConcurrencyConflict, InfrastructureError

logger = logging.getLogger(__name__)

R = TypeVar("R")


# -----------------------------------------------------------------------------
# Helper functions
# -----------------------------------------------------------------------------


def dict_factory(cursor: sqlite3.Cursor, row: tuple[Any, ...]) -> dict[str, Any]:
    """Convert SQLite row to dictionary."""
    return {col[0]: row[idx] for idx, col in enumerate(cursor.description)}


def parse_dt(s: str | None) -> datetime | None:
    return datetime.fromisoformat(s) if s else None


def parse_uuid(s: str | None) -> UUID | None:
    return UUID(s) if s else None


def fmt_dt(dt: datetime | None) -> str | None:
    return dt.isoformat() if dt else None


def fmt_uuid(u: UUID | None) -> str | None:
    return str(u) if u else None


# -----------------------------------------------------------------------------
# Base
# -----------------------------------------------------------------------------


class SQLiteRepoBase:
    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn

    async def _run(self, fn: Callable[[sqlite3.Connection], R]) -> R:
        try:
            return await asyncio.to_thread(fn, self._conn)
        except sqlite3.IntegrityError:
            raise
        except sqlite3.Error as e:
            raise InfrastructureError(f"SQLite operation failed: {e}") from e


# -----------------------------------------------------------------------------
# Versions
# -----------------------------------------------------------------------------

_VERSION_COLUMNS = (
    "id, article_number, version_number, title, content, header_script, "
    "footer_script, banner_image, status_code, content_type, category, "
    "introduction, published_at, updated_at, editor_id, template_id, "
    "expires_at, redirect_target, url_path, blog_key"
)


def _row_to_version(row: dict[str, Any]) -> ContentVersion:
    return ContentVersion(
        id=UUID(row["id"]),
        article_number=row["article_number"],
        version_number=row["version_number"],
        title=row["title"],
        content=row["content"],
        header_script=row["header_script"],
        footer_script=row["footer_script"],
        banner_image=row["banner_image"],
        status_code=StatusCode(row["status_code"]),
        content_type=ContentType(row["content_type"]),
        category=row["category"],
        introduction=row["introduction"],
        published_at=parse_dt(row["published_at"]),
        updated_at=parse_dt(row["updated_at"]) or datetime.min,
        editor_id=UUID(row["editor_id"]),
        template_id=parse_uuid(row["template_id"]),
        expires_at=parse_dt(row["expires_at"]),
        redirect_target=row["redirect_target"],
        url_path=row["url_path"],
        blog_key=row["blog_key"],
    )


class SQLiteVersionStore(SQLiteRepoBase):
    async def get_latest(self, article_number: int) -> ContentVersion | None:
        def query(conn: sqlite3.Connection) -> dict[str, Any] | None:
            row: dict[str, Any] | None = conn.execute(
                f"SELECT {_VERSION_COLUMNS} FROM content_versions "
                "WHERE article_number = ? ORDER BY version_number DESC LIMIT 1",
                (article_number,),
            ).fetchone()
            return row

        row = await self._run(query)
        return _row_to_version(row) if row else None

    async def list_versions(self, article_number: int) -> list[ContentVersion]:
        def query(conn: sqlite3.Connection) -> list[dict[str, Any]]:
            return conn.execute(
                f"SELECT {_VERSION_COLUMNS} FROM content_versions "
                "WHERE article_number = ? ORDER BY version_number ASC",
                (article_number,),
            ).fetchall()

        return [_row_to_version(r) for r in await self._run(query)]

    async def list_latest(self) -> list[ContentVersion]:
        def query(conn: sqlite3.Connection) -> list[dict[str, Any]]:
            return conn.execute(
                f"SELECT {_VERSION_COLUMNS} FROM content_versions v "
                "WHERE version_number = ("
                "  SELECT MAX(version_number) FROM content_versions "
                "  WHERE article_number = v.article_number"
                ") ORDER BY article_number ASC"
            ).fetchall()

        return [_row_to_version(r) for r in await self._run(query)]

    async def append(self, version: ContentVersion, expected_head: UUID | None) -> ContentVersion:
        def insert(conn: sqlite3.Connection) -> None:
            # Head check and insert run under one write lock.
            if not conn.in_transaction:
                conn.execute("BEGIN IMMEDIATE")
            head = conn.execute(
                "SELECT id FROM content_versions WHERE article_number = ? "
                "ORDER BY version_number DESC LIMIT 1",
                (version.article_number,),
            ).fetchone()
            head_id = parse_uuid(head["id"]) if head else None
            if head_id != expected_head:
                raise ConcurrencyConflict(version.article_number, expected_head, head_id)

            conn.execute(
                f"INSERT INTO content_versions ({_VERSION_COLUMNS}) "
                "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
                (
                    str(version.id),
                    version.article_number,
                    version.version_number,
                    version.title,
                    version.content,
                    version.header_script,
                    version.footer_script,
                    version.banner_image,
                    int(version.status_code),
                    int(version.content_type),
                    version.category,
                    version.introduction,
                    fmt_dt(version.published_at),
                    fmt_dt(version.updated_at),
                    str(version.editor_id),
                    fmt_uuid(version.template_id),
                    fmt_dt(version.expires_at),
                    version.redirect_target,
                    version.url_path,
                    version.blog_key,
                ),
            )

        try:
            await self._run(insert)
        except sqlite3.IntegrityError as e:
            # Unique (article_number, version_number): another writer got there first.
            raise ConcurrencyConflict(version.article_number, expected_head, None) from e
        return version


# -----------------------------------------------------------------------------
# Catalog
# -----------------------------------------------------------------------------


def _row_to_catalog(row: dict[str, Any]) -> CatalogEntry:
    return CatalogEntry(
        article_number=row["article_number"],
        title=row["title"],
        banner_image=row["banner_image"],
        status=row["status"],
        published_at=parse_dt(row["published_at"]),
        updated_at=parse_dt(row["updated_at"]) or datetime.min,
        url_path=row["url_path"],
        template_id=parse_uuid(row["template_id"]),
        introduction=row["introduction"],
        author_info=row["author_info"],
        blog_key=row["blog_key"],
    )


class SQLiteCatalogRepo(SQLiteRepoBase):
    async def get(self, article_number: int) -> CatalogEntry | None:
        def query(conn: sqlite3.Connection) -> dict[str, Any] | None:
            row: dict[str, Any] | None = conn.execute(
                "SELECT * FROM catalog_entries WHERE article_number = ?", (article_number,)
            ).fetchone()
            return row

        row = await self._run(query)
        return _row_to_catalog(row) if row else None

    async def replace(self, entry: CatalogEntry) -> CatalogEntry:
        def write(conn: sqlite3.Connection) -> None:
            conn.execute(
                """
                INSERT OR REPLACE INTO catalog_entries (
                    article_number, title, banner_image, status, published_at,
                    updated_at, url_path, template_id, introduction, author_info, blog_key
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
                (
                    entry.article_number,
                    entry.title,
                    entry.banner_image,
                    entry.status,
                    fmt_dt(entry.published_at),
                    fmt_dt(entry.updated_at),
                    entry.url_path,
                    fmt_uuid(entry.template_id),
                    entry.introduction,
                    entry.author_info,
                    entry.blog_key,
                ),
            )

        await self._run(write)
        return entry

    async def delete(self, article_number: int) -> bool:
        def write(conn: sqlite3.Connection) -> int:
            cur = conn.execute(
                "DELETE FROM catalog_entries WHERE article_number = ?", (article_number,)
            )
            return cur.rowcount

        return await self._run(write) > 0

    async def list_by_template(self, template_id: UUID) -> list[CatalogEntry]:
        def query(conn: sqlite3.Connection) -> list[dict[str, Any]]:
            return conn.execute(
                "SELECT * FROM catalog_entries WHERE template_id = ? ORDER BY article_number",
                (str(template_id),),
            ).fetchall()

        return [_row_to_catalog(r) for r in await self._run(query)]

    async def list_all(self) -> list[CatalogEntry]:
        def query(conn: sqlite3.Connection) -> list[dict[str, Any]]:
            return conn.execute(
                "SELECT * FROM catalog_entries ORDER BY article_number"
            ).fetchall()

        return [_row_to_catalog(r) for r in await self._run(query)]

    async def clear(self) -> None:
        await self._run(lambda conn: conn.execute("DELETE FROM catalog_entries"))


# -----------------------------------------------------------------------------
# Templates
# -----------------------------------------------------------------------------


class SQLiteTemplateRepo(SQLiteRepoBase):
    async def get(self, template_id: UUID) -> Template | None:
        def query(conn: sqlite3.Connection) -> dict[str, Any] | None:
            row: dict[str, Any] | None = conn.execute(
                "SELECT * FROM templates WHERE id = ?", (str(template_id),)
            ).fetchone()
            return row

        row = await self._run(query)
        if not row:
            return None
        return Template(
            id=UUID(row["id"]),
            layout_id=parse_uuid(row["layout_id"]),
            community_layout_id=row["community_layout_id"],
            title=row["title"],
            description=row["description"],
            content=row["content"],
            page_type=row["page_type"],
        )

    async def save(self, template: Template) -> Template:
        def write(conn: sqlite3.Connection) -> None:
            conn.execute(
                """
                INSERT INTO templates (
                    id, layout_id, community_layout_id, title, description, content, page_type
                ) VALUES (?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    layout_id=excluded.layout_id,
                    community_layout_id=excluded.community_layout_id,
                    title=excluded.title,
                    description=excluded.description,
                    content=excluded.content,
                    page_type=excluded.page_type
            """,
                (
                    str(template.id),
                    fmt_uuid(template.layout_id),
                    template.community_layout_id,
                    template.title,
                    template.description,
                    template.content,
                    template.page_type,
                ),
            )

        await self._run(write)
        return template


class SQLiteDesignVersionRepo(SQLiteRepoBase):
    async def get(self, design_version_id: UUID) -> DesignVersion | None:
        def query(conn: sqlite3.Connection) -> dict[str, Any] | None:
            row: dict[str, Any] | None = conn.execute(
                "SELECT * FROM design_versions WHERE id = ?", (str(design_version_id),)
            ).fetchone()
            return row

        row = await self._run(query)
        if not row:
            return None
        return DesignVersion(
            id=UUID(row["id"]),
            template_id=UUID(row["template_id"]),
            version=row["version"],
            layout_id=parse_uuid(row["layout_id"]),
            community_layout_id=row["community_layout_id"],
            title=row["title"],
            description=row["description"],
            content=row["content"],
            page_type=row["page_type"],
            published_at=parse_dt(row["published_at"]),
            modified_at=parse_dt(row["modified_at"]) or datetime.min,
        )

    async def save(self, design: DesignVersion) -> DesignVersion:
        def write(conn: sqlite3.Connection) -> None:
            conn.execute(
                """
                INSERT INTO design_versions (
                    id, template_id, version, layout_id, community_layout_id, title,
                    description, content, page_type, published_at, modified_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    template_id=excluded.template_id,
                    version=excluded.version,
                    layout_id=excluded.layout_id,
                    community_layout_id=excluded.community_layout_id,
                    title=excluded.title,
                    description=excluded.description,
                    content=excluded.content,
                    page_type=excluded.page_type,
                    published_at=excluded.published_at,
                    modified_at=excluded.modified_at
            """,
                (
                    str(design.id),
                    str(design.template_id),
                    design.version,
                    fmt_uuid(design.layout_id),
                    design.community_layout_id,
                    design.title,
                    design.description,
                    design.content,
                    design.page_type,
                    fmt_dt(design.published_at),
                    fmt_dt(design.modified_at),
                ),
            )

        await self._run(write)
        return design


# -----------------------------------------------------------------------------
# Redirects and published pages
# -----------------------------------------------------------------------------


class SQLiteRedirectRepo(SQLiteRepoBase):
    @staticmethod
    def _to_rule(row: dict[str, Any]) -> RedirectRule:
        return RedirectRule(
            id=UUID(row["id"]),
            source_path=row["source_path"],
            target_path=row["target_path"],
            status_code=row["status_code"],
            article_number=row["article_number"],
            created_by=parse_uuid(row["created_by"]),
            created_at=parse_dt(row["created_at"]) or datetime.min,
        )

    async def get_by_source(self, source_path: str) -> RedirectRule | None:
        def query(conn: sqlite3.Connection) -> dict[str, Any] | None:
            row: dict[str, Any] | None = conn.execute(
                "SELECT * FROM redirect_rules WHERE lower(source_path) = lower(?)",
                (source_path,),
            ).fetchone()
            return row

        row = await self._run(query)
        return self._to_rule(row) if row else None

    async def save(self, rule: RedirectRule) -> RedirectRule:
        def write(conn: sqlite3.Connection) -> None:
            conn.execute(
                "DELETE FROM redirect_rules WHERE lower(source_path) = lower(?)",
                (rule.source_path,),
            )
            conn.execute(
                """
                INSERT INTO redirect_rules (
                    id, source_path, target_path, status_code, article_number,
                    created_by, created_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
                (
                    str(rule.id),
                    rule.source_path,
                    rule.target_path,
                    rule.status_code,
                    rule.article_number,
                    fmt_uuid(rule.created_by),
                    fmt_dt(rule.created_at),
                ),
            )

        await self._run(write)
        return rule

    async def list_all(self) -> list[RedirectRule]:
        def query(conn: sqlite3.Connection) -> list[dict[str, Any]]:
            return conn.execute("SELECT * FROM redirect_rules ORDER BY created_at").fetchall()

        return [self._to_rule(r) for r in await self._run(query)]


class SQLitePublishedPageRepo(SQLiteRepoBase):
    async def get(self, article_number: int) -> PublishedPage | None:
        def query(conn: sqlite3.Connection) -> dict[str, Any] | None:
            row: dict[str, Any] | None = conn.execute(
                "SELECT * FROM published_pages WHERE article_number = ?", (article_number,)
            ).fetchone()
            return row

        row = await self._run(query)
        if not row:
            return None
        return PublishedPage(
            id=UUID(row["id"]),
            article_number=row["article_number"],
            version_number=row["version_number"],
            url_path=row["url_path"],
            title=row["title"],
            content=row["content"],
            published_at=parse_dt(row["published_at"]),
            expires_at=parse_dt(row["expires_at"]),
        )

    async def replace(self, page: PublishedPage) -> PublishedPage:
        def write(conn: sqlite3.Connection) -> None:
            conn.execute(
                """
                INSERT OR REPLACE INTO published_pages (
                    article_number, id, version_number, url_path, title, content,
                    published_at, expires_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
            """,
                (
                    page.article_number,
                    str(page.id),
                    page.version_number,
                    page.url_path,
                    page.title,
                    page.content,
                    fmt_dt(page.published_at),
                    fmt_dt(page.expires_at),
                ),
            )

        await self._run(write)
        return page


# -----------------------------------------------------------------------------
# Unit of work
# -----------------------------------------------------------------------------


class SQLiteUnitOfWork:
    """One connection, one transaction at a time, committed by the handler."""

    def __init__(self, db_path: str) -> None:
        self.db_path = db_path
        self._conn: sqlite3.Connection | None = None

    def _open(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path, check_same_thread=False, timeout=30)
        conn.row_factory = dict_factory
        conn.execute("PRAGMA foreign_keys = ON;")
        return conn

    async def __aenter__(self) -> SQLiteUnitOfWork:
        self._conn = await asyncio.to_thread(self._open)
        self.versions = SQLiteVersionStore(self._conn)
        self.catalog = SQLiteCatalogRepo(self._conn)
        self.templates = SQLiteTemplateRepo(self._conn)
        self.designs = SQLiteDesignVersionRepo(self._conn)
        self.redirects = SQLiteRedirectRepo(self._conn)
        self.pages = SQLitePublishedPageRepo(self._conn)
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if self._conn is None:
            return
        try:
            if exc_type is not None:
                await self.rollback()
        finally:
            await asyncio.to_thread(self._conn.close)
            self._conn = None

    async def commit(self) -> None:
        if self._conn is not None:
            await asyncio.to_thread(self._conn.commit)

    async def rollback(self) -> None:
        if self._conn is not None:
            logger.debug("Rolling back uncommitted work on %s", self.db_path)
            await asyncio.to_thread(self._conn.rollback)
