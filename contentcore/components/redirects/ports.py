"""
Redirects component port definitions.
"""

from __future__ import annotations

from typing import Protocol

from contentcore.core.ports.db import RedirectRepoPort
from contentcore.domain.entities import ContentVersion


class RedirectScopePort(Protocol):
    redirects: RedirectRepoPort


class TitleRedirectPort(Protocol):
    """
    Reacts to a title change on a freshly saved version.

    `validate_path` runs before the version is appended; `handle_title_change`
    runs after it is committed and may persist its own rows through the unit
    of work. Both raise BusinessRuleViolation for input the caller must fix.
    """

    def validate_path(self, version: ContentVersion, old_url_path: str) -> None: ...

    async def handle_title_change(
        self,
        version: ContentVersion,
        old_title: str,
        old_url_path: str,
        *,
        uow: RedirectScopePort,
    ) -> None: ...


class RulesPort(Protocol):
    def get_reserved_paths(self) -> list[str]: ...

    def get_redirect_status_code(self) -> int: ...
