# contentcore - Ports (Protocol Interfaces)
# Abstract interfaces for adapters; no implementations here

from contentcore.core.ports.db import (
    CatalogRepoPort,
    DesignVersionRepoPort,
    PublishedPageRepoPort,
    RedirectRepoPort,
    TemplateRepoPort,
    UnitOfWorkPort,
    VersionStorePort,
)
from contentcore.core.ports.time import ClockPort

__all__ = [
    "CatalogRepoPort",
    "ClockPort",
    "DesignVersionRepoPort",
    "PublishedPageRepoPort",
    "RedirectRepoPort",
    "TemplateRepoPort",
    "UnitOfWorkPort",
    "VersionStorePort",
]
