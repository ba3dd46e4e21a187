"""
Propagation component - publishes a design version and regenerates dependents.

Invariants:
- I1: the template is updated and committed before any dependent is touched
- I2: each dependent gains exactly one version, committed on its own
- I3: a failing dependent is logged and reported, never aborting the batch
- I4: only published dependents are redeployed
- I5: cancellation stops the batch; finished dependents stay committed
- I6: storage faults surface as Fault results, never as raised exceptions
"""

from __future__ import annotations

import logging
from datetime import datetime
from uuid import UUID, uuid4

from contentcore.components.catalog.ports import CatalogProjectorPort
from contentcore.components.publishing.ports import PublishingCoordinatorPort
from contentcore.core.ports.db import UnitOfWorkPort
from contentcore.core.ports.time import ClockPort
from contentcore.domain.entities import ContentVersion, DesignVersion, Template
from contentcore.domain.errors import OperationCancelled
from contentcore.domain.result import CancelToken, Fault, NotFound, Success, check_cancelled

from .models import PublishDesignCommand, PublishDesignOutcome
from .ports import RegionMergerPort

logger = logging.getLogger(__name__)

PUBLISH_FAULT_MESSAGE = "An error occurred while publishing the design."
DEPENDENTS_FAULT_MESSAGE = (
    "The design was published, but the content using its template could not be listed."
)


def apply_design(template: Template, design: DesignVersion) -> Template:
    """Copy a design version's layout fields onto its live template."""
    return template.model_copy(
        update={
            "layout_id": design.layout_id,
            "community_layout_id": design.community_layout_id,
            "title": design.title,
            "description": design.description,
            "content": design.content,
            "page_type": design.page_type,
        }
    )


def regenerate(
    prior: ContentVersion,
    content: str,
    editor_id: UUID,
    updated_at: datetime,
) -> ContentVersion:
    """Next version of a dependent: new body, every other field carried over."""
    return prior.model_copy(
        update={
            "id": uuid4(),
            "version_number": prior.version_number + 1,
            "content": content,
            "updated_at": updated_at,
            "editor_id": editor_id,
        }
    )


class _EntryFailed(Exception):
    """A dependent could not be regenerated; already logged."""


class PublishDesignHandler:
    """Handles PublishDesignCommand -> PublishDesignOutcome."""

    def __init__(
        self,
        merger: RegionMergerPort,
        catalog: CatalogProjectorPort,
        publisher: PublishingCoordinatorPort,
        clock: ClockPort,
    ) -> None:
        self._merger = merger
        self._catalog = catalog
        self._publisher = publisher
        self._clock = clock

    async def handle(
        self,
        command: PublishDesignCommand,
        *,
        uow: UnitOfWorkPort,
        cancel: CancelToken | None = None,
    ) -> Success[PublishDesignOutcome] | NotFound | Fault:
        check_cancelled(cancel)

        try:
            design = await uow.designs.get(command.design_version_id)
            if design is None:
                return NotFound(f"Design version {command.design_version_id} not found.")

            template = await uow.templates.get(design.template_id)
            if template is None:
                return NotFound(f"Template {design.template_id} not found.")

            now = self._clock.now_utc()
            design = design.model_copy(update={"published_at": now})
            template = apply_design(template, design)
            await uow.designs.save(design)
            await uow.templates.save(template)
            await uow.commit()
        except OperationCancelled:
            raise
        except Exception:
            logger.exception("Error publishing design version %s", command.design_version_id)
            return Fault(PUBLISH_FAULT_MESSAGE)

        logger.info(
            "Published design version %s to template %s",
            design.id,
            template.id,
        )

        outcome = PublishDesignOutcome(template_id=template.id)
        try:
            entries = await uow.catalog.list_by_template(template.id)
        except Exception:
            logger.exception("Error listing content for template %s", template.id)
            return Fault(DEPENDENTS_FAULT_MESSAGE)

        for entry in entries:
            check_cancelled(cancel)
            try:
                deployed = await self._regenerate_entry(
                    entry.article_number, template, command.editor_id, uow
                )
            except _EntryFailed:
                outcome.failed.append(entry.article_number)
                continue

            outcome.updated.append(entry.article_number)
            if deployed:
                outcome.republished.append(entry.article_number)

        logger.info(
            "Template %s propagated: %d updated, %d failed, %d republished",
            template.id,
            len(outcome.updated),
            len(outcome.failed),
            len(outcome.republished),
        )
        if outcome.failed:
            logger.warning(
                "Articles %s kept their previous version and need a manual re-publish",
                outcome.failed,
            )
        return Success(outcome)

    async def _regenerate_entry(
        self,
        article_number: int,
        template: Template,
        editor_id: UUID,
        uow: UnitOfWorkPort,
    ) -> bool:
        """Append the merged version for one dependent. Returns True if redeployed."""
        try:
            prior = await uow.versions.get_latest(article_number)
            if prior is None:
                logger.warning(
                    "Catalog lists article %s for template %s but it has no versions",
                    article_number,
                    template.id,
                )
                raise _EntryFailed(article_number)

            merged = self._merger.merge_regions(prior.content, template.content)
            version = regenerate(prior, merged, editor_id, self._clock.now_utc())
            await uow.versions.append(version, expected_head=prior.id)
            await uow.commit()

            await self._catalog.upsert(version, uow=uow)
            await uow.commit()

            if version.published_at is None:
                return False

            await self._publisher.deploy(version, uow=uow)
            await uow.commit()
            return True
        except (_EntryFailed, OperationCancelled):
            raise
        except Exception as e:
            await uow.rollback()
            logger.exception(
                "Error regenerating article %s for template %s", article_number, template.id
            )
            raise _EntryFailed(article_number) from e
