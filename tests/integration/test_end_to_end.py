"""
End-to-end flows through ServiceContext: gateway, handlers and storage.
"""

import asyncio
from datetime import UTC, datetime

import pytest

from contentcore.adapters.sqlite.migrator import SQLiteMigrator
from contentcore.app_shell.context import ServiceContext
from contentcore.components.propagation import PublishDesignCommand
from contentcore.components.save import (
    CONFLICT_FAULT_MESSAGE,
    SaveContentCommand,
    SaveContentOutcome,
)
from contentcore.domain.entities import DesignVersion, Template
from contentcore.domain.result import Fault, Success

PUBLISHED_AT = datetime(2024, 6, 1, 9, 0, 0, tzinfo=UTC)
BODY = '<div contenteditable="true" data-ccms-ceid="x">old</div>'


@pytest.fixture(params=["memory", "sqlite"])
def context(request, rules, clock, cdn, tmp_path) -> ServiceContext:
    if request.param == "memory":
        return ServiceContext.create(rules, clock=clock, cdn=cdn)
    db_path = str(tmp_path / "contentcore.db")
    SQLiteMigrator(db_path, "migrations").run_migrations()
    return ServiceContext.create(rules, db_path=db_path, clock=clock, cdn=cdn)


async def _seed(ctx: ServiceContext, *versions) -> None:
    async with ctx.unit_of_work() as uow:
        for v in versions:
            await uow.versions.append(v, expected_head=None)
            await ctx.catalog.upsert(v, uow=uow)
        await uow.commit()


def _save(editor_id, **overrides) -> SaveContentCommand:
    fields = {"article_number": 42, "title": "A", "content": BODY, "editor_id": editor_id}
    fields.update(overrides)
    return SaveContentCommand(**fields)


@pytest.mark.asyncio
async def test_save_then_publish_article_42(context, make_version, editor_id, cdn):
    await _seed(context, make_version(title="Original", content=BODY))

    first = await context.execute(_save(editor_id))

    assert isinstance(first, Success)
    assert first.value.new_version_number == 2
    assert first.value.cdn_results == []
    assert cdn.purged == []
    async with context.unit_of_work() as uow:
        row = await uow.catalog.get(42)
    assert row.title == "A"

    second = await context.execute(_save(editor_id, published_at=PUBLISHED_AT))

    assert isinstance(second, Success)
    outcome: SaveContentOutcome = second.value
    assert outcome.success is True
    assert outcome.new_version_number == 3
    assert all(r.success for r in outcome.cdn_results)
    assert cdn.purged == ["/a"]
    async with context.unit_of_work() as uow:
        page = await uow.pages.get(42)
        row = await uow.catalog.get(42)
    assert page.version_number == 3
    assert row.published_at == PUBLISHED_AT


@pytest.mark.asyncio
async def test_rename_of_published_page_leaves_redirect(context, make_version, editor_id):
    await _seed(context, make_version(published_at=PUBLISHED_AT))

    result = await context.execute(
        _save(editor_id, title="Team", url_path="team", published_at=PUBLISHED_AT)
    )

    assert isinstance(result, Success)
    async with context.unit_of_work() as uow:
        rule = await uow.redirects.get_by_source("/about-us")
    assert rule.target_path == "/team"


@pytest.mark.asyncio
async def test_retitle_of_published_page_follows_new_title(context, make_version, editor_id):
    await _seed(context, make_version(published_at=PUBLISHED_AT))

    result = await context.execute(
        _save(editor_id, title="Company History", published_at=PUBLISHED_AT)
    )

    assert isinstance(result, Success)
    async with context.unit_of_work() as uow:
        latest = await uow.versions.get_latest(42)
        row = await uow.catalog.get(42)
        rule = await uow.redirects.get_by_source("/about-us")
    assert latest.url_path == row.url_path == "company-history"
    assert rule.target_path == "/company-history"


@pytest.mark.asyncio
async def test_concurrent_saves_lose_no_update(context, make_version, editor_id):
    await _seed(context, make_version(content=BODY))

    results = await asyncio.gather(
        context.execute(_save(editor_id, title="First writer")),
        context.execute(_save(editor_id, title="Second writer")),
    )

    async with context.unit_of_work() as uow:
        history = await uow.versions.list_versions(42)
    numbers = [v.version_number for v in history]
    assert numbers == list(range(1, len(history) + 1))

    succeeded = [r for r in results if isinstance(r, Success)]
    failed = [r for r in results if isinstance(r, Fault)]
    assert len(succeeded) >= 1
    assert all(f.message == CONFLICT_FAULT_MESSAGE for f in failed)
    assert len(history) == 1 + len(succeeded)
    saved_titles = {v.title for v in history[1:]}
    assert saved_titles == {r.value.version.title for r in succeeded}


@pytest.mark.asyncio
async def test_design_publish_regenerates_dependents(context, make_version, editor_id, cdn):
    template = Template(
        title="Standard", content='<div contenteditable="true" data-ccms-ceid="x">old</div>'
    )
    design = DesignVersion(
        template_id=template.id,
        version=2,
        title="Standard v2",
        content=(
            '<article><h1 contenteditable="true" data-ccms-ceid="h">Heading</h1>'
            '<div contenteditable="true" data-ccms-ceid="x">Placeholder</div></article>'
        ),
    )
    async with context.unit_of_work() as uow:
        await uow.templates.save(template)
        await uow.designs.save(design)
        await uow.commit()
    await _seed(
        context,
        make_version(article_number=1, template_id=template.id, content=BODY, url_path="one"),
        make_version(
            article_number=2,
            template_id=template.id,
            content=BODY.replace("old", "kept"),
            url_path="two",
            published_at=PUBLISHED_AT,
        ),
    )

    result = await context.execute(PublishDesignCommand(design.id, editor_id))

    assert isinstance(result, Success)
    assert result.value.updated == [1, 2]
    assert result.value.republished == [2]
    assert cdn.purged == ["/two"]
    async with context.unit_of_work() as uow:
        v2 = await uow.versions.get_latest(2)
        live = await uow.templates.get(template.id)
    assert v2.version_number == 2
    assert v2.content.startswith("<article>")
    assert 'data-ccms-ceid="x">kept</div>' in v2.content
    assert live.title == "Standard v2"
