"""
Redirects component - title/URL change handling.

Invariants:
- I1: a version may not move onto a reserved path
- I2: the reserved-path check runs before the version is written
- I3: a published page that moves leaves a redirect behind
- I4: at most one rule per source path; no rule redirects to itself
- I5: the home page ('root') never gets a redirect
"""

from __future__ import annotations

import logging

from contentcore.core.ports.time import ClockPort
from contentcore.domain.entities import ContentVersion, RedirectRule
from contentcore.domain.errors import BusinessRuleViolation

from ._impl import DEFAULT_CONFIG, RedirectConfig, is_reserved, normalize_path
from .ports import RedirectScopePort, RulesPort

logger = logging.getLogger(__name__)


def _build_config(rules: RulesPort | None) -> RedirectConfig:
    if rules is None:
        return DEFAULT_CONFIG
    return RedirectConfig(
        status_code=rules.get_redirect_status_code(),
        reserved_paths=frozenset(normalize_path(p) for p in rules.get_reserved_paths()),
    )


class SlugRedirectHandler:
    """Title/redirect collaborator for the save handler."""

    def __init__(self, clock: ClockPort, rules: RulesPort | None = None) -> None:
        self._clock = clock
        self._config = _build_config(rules)

    def validate_path(self, version: ContentVersion, old_url_path: str) -> None:
        """Reject a move onto a reserved path. Paths already in place are left alone."""
        new_path = normalize_path(version.url_path)
        if new_path == normalize_path(old_url_path):
            return
        if is_reserved(new_path, self._config):
            raise BusinessRuleViolation(
                code="reserved_path",
                message=f"'{version.url_path}' conflicts with a reserved path",
                field="url_path",
            )

    async def handle_title_change(
        self,
        version: ContentVersion,
        old_title: str,
        old_url_path: str,
        *,
        uow: RedirectScopePort,
    ) -> None:
        self.validate_path(version, old_url_path)

        old_path = normalize_path(old_url_path)
        new_path = normalize_path(version.url_path)

        if not old_path or new_path == old_path or old_path == "root":
            logger.debug(
                "Title of article %s changed from '%s' to '%s'; path unchanged",
                version.article_number,
                old_title,
                version.title,
            )
            return

        if not version.is_published:
            return

        rule = RedirectRule(
            source_path="/" + old_path,
            target_path="/" + new_path,
            status_code=self._config.status_code,
            article_number=version.article_number,
            created_by=version.editor_id,
            created_at=self._clock.now_utc(),
        )
        await uow.redirects.save(rule)
        logger.info(
            "Redirect %s -> %s created for article %s",
            rule.source_path,
            rule.target_path,
            version.article_number,
        )
