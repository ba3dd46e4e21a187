"""
Tests for template propagation.

Test assertions:
- publishing a design copies its layout onto the template
- N dependents -> N new versions, each with editor regions preserved
- only published dependents are redeployed
- a failing dependent is reported and does not stop the batch
- cancellation stops the batch; finished dependents stay committed
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from uuid import uuid4

import pytest
from bs4 import BeautifulSoup

from contentcore.components.catalog import CatalogProjector, build_entry
from contentcore.components.markup import create_normalizer
from contentcore.components.propagation import (
    DEPENDENTS_FAULT_MESSAGE,
    PUBLISH_FAULT_MESSAGE,
    PublishDesignCommand,
    PublishDesignHandler,
    PublishDesignOutcome,
)
from contentcore.domain.entities import DesignVersion, Template
from contentcore.domain.errors import OperationCancelled
from contentcore.domain.result import CancelToken, Fault, NotFound, Success

PUBLISHED_AT = datetime(2024, 6, 1, 9, 0, 0, tzinfo=UTC)

OLD_LAYOUT = (
    '<div class="v1">'
    '<div contenteditable="true" data-ccms-ceid="R1">Placeholder</div>'
    "</div>"
)
NEW_LAYOUT = (
    '<div class="v2">'
    '<header contenteditable="true" data-ccms-ceid="R0">Banner default</header>'
    '<div contenteditable="true" data-ccms-ceid="R1">Placeholder</div>'
    "</div>"
)

# --- Test doubles ---


class RecordingPublisher:
    def __init__(self) -> None:
        self.deployed: list[int] = []

    async def deploy(self, version, *, uow):
        self.deployed.append(version.article_number)
        return []


class FlakyMerger:
    """Delegates to the real merge but fails for chosen article bodies."""

    def __init__(self, fail_marker: str, cancel: CancelToken | None = None) -> None:
        self._inner = create_normalizer()
        self._fail_marker = fail_marker
        self._cancel = cancel
        self.calls = 0

    def merge_regions(self, old_html, template_html):
        self.calls += 1
        if self._cancel is not None:
            self._cancel.cancel()
        if self._fail_marker and self._fail_marker in (old_html or ""):
            raise RuntimeError("merge exploded")
        return self._inner.merge_regions(old_html, template_html)


# --- Fixtures ---


@pytest.fixture
def template(memory_db) -> Template:
    t = Template(title="Standard page", content=OLD_LAYOUT, page_type="page")
    memory_db.templates[t.id] = t
    return t


@pytest.fixture
def design(memory_db, template) -> DesignVersion:
    d = DesignVersion(
        template_id=template.id,
        version=2,
        layout_id=uuid4(),
        community_layout_id="community-7",
        title="Standard page v2",
        description="Adds a banner",
        content=NEW_LAYOUT,
        page_type="page",
    )
    memory_db.designs[d.id] = d
    return d


@pytest.fixture
def publisher() -> RecordingPublisher:
    return RecordingPublisher()


@pytest.fixture
def make_handler(clock, publisher):
    def _make(merger=None) -> PublishDesignHandler:
        normalizer = create_normalizer()
        return PublishDesignHandler(
            merger=merger or normalizer,
            catalog=CatalogProjector(normalizer),
            publisher=publisher,
            clock=clock,
        )

    return _make


@pytest.fixture
def dependents(memory_db, template, make_version):
    """Articles 1..3 on the template (2 published), article 9 on another template."""
    normalizer = create_normalizer()
    made = {}
    for number, published in ((1, PUBLISHED_AT), (2, None), (3, PUBLISHED_AT)):
        body = (
            '<div class="v1"><div contenteditable="true" data-ccms-ceid="R1">'
            f"Article {number} text</div></div>"
        )
        v = make_version(
            article_number=number,
            title=f"Article {number}",
            content=body,
            template_id=template.id,
            published_at=published,
            url_path=f"article-{number}",
            category="docs",
        )
        memory_db.versions[number] = [v]
        memory_db.catalog[number] = build_entry(v, normalizer)
        made[number] = v

    other = make_version(article_number=9, template_id=uuid4())
    memory_db.versions[9] = [other]
    memory_db.catalog[9] = build_entry(other, normalizer)
    return made


def _region_text(html: str, region_id: str) -> str:
    el = BeautifulSoup(html, "html.parser").find(attrs={"data-ccms-ceid": region_id})
    return el.get_text()


# --- Tests ---


class TestTemplatePublish:
    @pytest.mark.asyncio
    async def test_missing_design_version(self, make_handler, uow, editor_id) -> None:
        result = await make_handler().handle(PublishDesignCommand(uuid4(), editor_id), uow=uow)
        assert isinstance(result, NotFound)

    @pytest.mark.asyncio
    async def test_missing_template(self, make_handler, uow, memory_db, editor_id) -> None:
        orphan = DesignVersion(template_id=uuid4(), content=NEW_LAYOUT)
        memory_db.designs[orphan.id] = orphan

        result = await make_handler().handle(PublishDesignCommand(orphan.id, editor_id), uow=uow)
        assert isinstance(result, NotFound)

    @pytest.mark.asyncio
    async def test_design_copied_onto_template(
        self, make_handler, uow, memory_db, template, design, editor_id, clock
    ) -> None:
        result = await make_handler().handle(PublishDesignCommand(design.id, editor_id), uow=uow)

        assert isinstance(result, Success)
        assert result.value == PublishDesignOutcome(template_id=template.id)
        live = memory_db.templates[template.id]
        assert live.content == NEW_LAYOUT
        assert live.title == "Standard page v2"
        assert live.description == "Adds a banner"
        assert live.layout_id == design.layout_id
        assert live.community_layout_id == "community-7"
        assert memory_db.designs[design.id].published_at == clock.now_utc()
        assert uow.commits == 1

    @pytest.mark.asyncio
    async def test_storage_failure_before_propagation_is_fault(
        self, make_handler, uow, design, editor_id
    ) -> None:
        async def broken_save(template):
            raise RuntimeError("disk full")

        uow.templates.save = broken_save

        result = await make_handler().handle(PublishDesignCommand(design.id, editor_id), uow=uow)

        assert isinstance(result, Fault)
        assert result.message == PUBLISH_FAULT_MESSAGE

    @pytest.mark.asyncio
    async def test_dependents_listing_failure_is_fault(
        self, make_handler, uow, memory_db, design, dependents, editor_id, caplog
    ) -> None:
        async def broken_listing(template_id):
            raise RuntimeError("catalog storage down")

        uow.catalog.list_by_template = broken_listing

        result = await make_handler().handle(PublishDesignCommand(design.id, editor_id), uow=uow)

        assert isinstance(result, Fault)
        assert result.message == DEPENDENTS_FAULT_MESSAGE
        assert "storage down" not in result.message
        assert "Error listing content for template" in caplog.text
        # the template publish itself stays committed
        assert memory_db.templates[design.template_id].content == NEW_LAYOUT
        assert [v.version_number for v in memory_db.versions[1]] == [1]


class TestPropagation:
    @pytest.mark.asyncio
    async def test_each_dependent_gets_one_merged_version(
        self, make_handler, uow, memory_db, design, dependents, editor_id
    ) -> None:
        result = await make_handler().handle(PublishDesignCommand(design.id, editor_id), uow=uow)

        outcome = result.value
        assert outcome.updated == [1, 2, 3]
        assert outcome.failed == []
        for number in (1, 2, 3):
            history = memory_db.versions[number]
            assert [v.version_number for v in history] == [1, 2]
            merged = history[-1].content
            assert _region_text(merged, "R1") == f"Article {number} text"
            assert _region_text(merged, "R0") == "Banner default"
            assert '<div class="v2">' in merged
        assert [v.version_number for v in memory_db.versions[9]] == [1]

    @pytest.mark.asyncio
    async def test_other_fields_carried_over(
        self, make_handler, uow, memory_db, design, dependents, editor_id, clock
    ) -> None:
        clock.advance(timedelta(hours=1))
        await make_handler().handle(PublishDesignCommand(design.id, editor_id), uow=uow)

        prior = dependents[1]
        regenerated = memory_db.versions[1][-1]
        assert regenerated.id != prior.id
        assert regenerated.updated_at == clock.now_utc()
        assert regenerated.editor_id == editor_id
        unchanged = {"id", "version_number", "content", "updated_at", "editor_id"}
        for name in type(prior).model_fields:
            if name not in unchanged:
                assert getattr(regenerated, name) == getattr(prior, name), name

    @pytest.mark.asyncio
    async def test_only_published_dependents_redeployed(
        self, make_handler, uow, design, dependents, editor_id, publisher
    ) -> None:
        result = await make_handler().handle(PublishDesignCommand(design.id, editor_id), uow=uow)

        assert publisher.deployed == [1, 3]
        assert result.value.republished == [1, 3]

    @pytest.mark.asyncio
    async def test_catalog_refreshed(
        self, make_handler, uow, memory_db, design, dependents, editor_id, clock
    ) -> None:
        clock.advance(timedelta(days=1))
        await make_handler().handle(PublishDesignCommand(design.id, editor_id), uow=uow)

        for number in (1, 2, 3):
            assert memory_db.catalog[number].updated_at == clock.now_utc()

    @pytest.mark.asyncio
    async def test_failing_dependent_does_not_abort_batch(
        self, make_handler, uow, memory_db, design, dependents, editor_id, caplog
    ) -> None:
        handler = make_handler(merger=FlakyMerger(fail_marker="Article 2 text"))

        result = await handler.handle(PublishDesignCommand(design.id, editor_id), uow=uow)

        outcome = result.value
        assert outcome.updated == [1, 3]
        assert outcome.failed == [2]
        assert [v.version_number for v in memory_db.versions[2]] == [1]
        assert "Error regenerating article 2" in caplog.text

    @pytest.mark.asyncio
    async def test_catalog_row_without_versions_is_reported(
        self, make_handler, uow, memory_db, template, design, dependents, editor_id
    ) -> None:
        ghost = memory_db.catalog[1].model_copy(update={"article_number": 5})
        memory_db.catalog[5] = ghost

        result = await make_handler().handle(PublishDesignCommand(design.id, editor_id), uow=uow)

        assert result.value.failed == [5]
        assert result.value.updated == [1, 2, 3]

    @pytest.mark.asyncio
    async def test_cancellation_keeps_processed_entries(
        self, make_handler, uow, memory_db, design, dependents, editor_id
    ) -> None:
        token = CancelToken()
        merger = FlakyMerger(fail_marker="", cancel=token)
        handler = make_handler(merger=merger)

        with pytest.raises(OperationCancelled):
            await handler.handle(PublishDesignCommand(design.id, editor_id), uow=uow, cancel=token)

        assert merger.calls == 1
        assert [v.version_number for v in memory_db.versions[1]] == [1, 2]
        assert [v.version_number for v in memory_db.versions[2]] == [1]
        assert memory_db.templates[design.template_id].content == NEW_LAYOUT
