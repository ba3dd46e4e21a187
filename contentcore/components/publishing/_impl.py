"""
CDN drivers.

The real providers (Azure Front Door, CloudFront, Cloudflare, Fastly, Sucuri)
live outside this package; these drivers cover the no-CDN case and local runs.
"""

from __future__ import annotations

import logging

from contentcore.domain.entities import CdnResult

logger = logging.getLogger(__name__)


class NullCdnDriver:
    """No CDN configured: nothing to purge, nothing to report."""

    async def purge(self, paths: list[str]) -> list[CdnResult]:
        return []


class LoggingCdnDriver:
    """Logs purge requests and reports them as successful."""

    provider = "logging"

    async def purge(self, paths: list[str]) -> list[CdnResult]:
        logger.info("CDN purge requested for %s", ", ".join(paths))
        return [CdnResult(provider=self.provider, paths=list(paths), success=True)]


def create_cdn_driver(provider: str) -> NullCdnDriver | LoggingCdnDriver:
    if provider == "logging":
        return LoggingCdnDriver()
    if provider in ("", "none"):
        return NullCdnDriver()
    raise ValueError(f"Unknown CDN provider: {provider}")
