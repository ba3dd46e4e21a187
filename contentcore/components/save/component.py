"""
Save component - appends a new version of an existing content entry.

Invariants:
- I1: validation runs before any storage access
- I2: the new version number is exactly the prior number + 1
- I3: the version is durably committed before the catalog or CDN is touched
- I4: an optimistic conflict is retried from the reloaded head, never blindly
- I5: business rule violations and cancellation reach the caller unchanged
- I6: a path the redirect rules reject is refused before anything is written

Flow:
    validate -> load head -> normalize body -> check path -> append (retry on conflict)
    -> commit -> title/redirect collaborator -> catalog upsert -> deploy
"""

from __future__ import annotations

import logging

from contentcore.components.catalog.ports import CatalogProjectorPort
from contentcore.components.markup.ports import MarkupNormalizerPort
from contentcore.components.publishing.ports import PublishingCoordinatorPort
from contentcore.components.redirects.ports import TitleRedirectPort
from contentcore.core.ports.db import UnitOfWorkPort
from contentcore.core.ports.time import ClockPort
from contentcore.domain.entities import CdnResult, ContentVersion
from contentcore.domain.errors import (
    BusinessRuleViolation,
    ConcurrencyConflict,
    OperationCancelled,
)
from contentcore.domain.result import (
    CancelToken,
    Fault,
    NotFound,
    Success,
    ValidationFailure,
    check_cancelled,
)

from ._impl import next_version, validate_save_command
from .models import DEFAULT_LIMITS, SaveContentCommand, SaveContentOutcome, SaveLimits
from .ports import RulesPort

logger = logging.getLogger(__name__)

SAVE_FAULT_MESSAGE = "An error occurred while saving the content."
CONFLICT_FAULT_MESSAGE = "The content could not be saved due to a concurrent modification."

DEFAULT_ATTEMPTS = 2


def _build_limits(rules: RulesPort | None) -> SaveLimits:
    if rules is None:
        return DEFAULT_LIMITS
    limits = rules.get_field_limits()
    return SaveLimits(
        title_max=limits.get("title", DEFAULT_LIMITS.title_max),
        category_max=limits.get("category", DEFAULT_LIMITS.category_max),
        introduction_max=limits.get("introduction", DEFAULT_LIMITS.introduction_max),
    )


class _Conflicted:
    """Marker: every attempt lost the race."""


class SaveContentHandler:
    """Handles SaveContentCommand -> SaveContentOutcome."""

    def __init__(
        self,
        normalizer: MarkupNormalizerPort,
        catalog: CatalogProjectorPort,
        publisher: PublishingCoordinatorPort,
        title_handler: TitleRedirectPort,
        clock: ClockPort,
        rules: RulesPort | None = None,
    ) -> None:
        self._normalizer = normalizer
        self._catalog = catalog
        self._publisher = publisher
        self._title_handler = title_handler
        self._clock = clock
        self._limits = _build_limits(rules)
        self._attempts = rules.get_save_attempts() if rules is not None else DEFAULT_ATTEMPTS

    async def handle(
        self,
        command: SaveContentCommand,
        *,
        uow: UnitOfWorkPort,
        cancel: CancelToken | None = None,
    ) -> Success[SaveContentOutcome] | ValidationFailure | NotFound | Fault:
        errors = validate_save_command(command, self._limits)
        if errors:
            logger.info(
                "Save of article %s rejected: %s",
                command.article_number,
                ", ".join(f"{e.field}:{e.code}" for e in errors),
            )
            return ValidationFailure(errors)

        try:
            return await self._save(command, uow, cancel)
        except (BusinessRuleViolation, OperationCancelled):
            raise
        except Exception:
            logger.exception("Error saving article %s", command.article_number)
            return Fault(SAVE_FAULT_MESSAGE)

    async def _save(
        self,
        command: SaveContentCommand,
        uow: UnitOfWorkPort,
        cancel: CancelToken | None,
    ) -> Success[SaveContentOutcome] | NotFound | Fault:
        check_cancelled(cancel)

        prior = await uow.versions.get_latest(command.article_number)
        if prior is None:
            return NotFound(f"Content {command.article_number} not found.")

        body = self._normalizer.ensure_editable_markers(command.content)

        appended = await self._append_with_retry(command, body, prior, uow, cancel)
        if isinstance(appended, NotFound):
            return appended
        if isinstance(appended, _Conflicted):
            return Fault(CONFLICT_FAULT_MESSAGE)
        version, prior = appended
        await uow.commit()

        logger.info(
            "Saved article %s as version %s",
            version.article_number,
            version.version_number,
        )

        if version.title != prior.title or version.url_path != prior.url_path:
            await self._title_handler.handle_title_change(
                version, prior.title, prior.url_path, uow=uow
            )
            await uow.commit()

        await self._catalog.upsert(version, uow=uow)
        await uow.commit()

        cdn_results: list[CdnResult] = []
        if version.published_at is not None:
            check_cancelled(cancel)
            cdn_results = await self._publisher.deploy(version, uow=uow)
            await uow.commit()

        return Success(
            SaveContentOutcome(
                version=version,
                new_version_number=version.version_number,
                cdn_results=cdn_results,
            )
        )

    async def _append_with_retry(
        self,
        command: SaveContentCommand,
        body: str,
        prior: ContentVersion,
        uow: UnitOfWorkPort,
        cancel: CancelToken | None,
    ) -> tuple[ContentVersion, ContentVersion] | NotFound | _Conflicted:
        """Append against `prior`; on conflict reload the head and rebuild from it."""
        for attempt in range(1, self._attempts + 1):
            check_cancelled(cancel)
            candidate = next_version(prior, command, body, self._clock.now_utc())
            self._title_handler.validate_path(candidate, prior.url_path)
            try:
                version = await uow.versions.append(candidate, expected_head=prior.id)
                return version, prior
            except ConcurrencyConflict as e:
                await uow.rollback()
                logger.warning(
                    "Conflict saving article %s (attempt %d of %d): %s",
                    command.article_number,
                    attempt,
                    self._attempts,
                    e,
                )
                if attempt == self._attempts:
                    break

            reloaded = await uow.versions.get_latest(command.article_number)
            if reloaded is None:
                return NotFound(f"Content {command.article_number} not found.")
            prior = reloaded

        return _Conflicted()
