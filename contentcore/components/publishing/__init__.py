"""
Publishing component - published pages and CDN invalidation.
"""

from ._impl import LoggingCdnDriver, NullCdnDriver, create_cdn_driver
from .component import PagePublisher, public_path
from .ports import CdnDriverPort, PublishingCoordinatorPort, PublishScopePort

__all__ = [
    "PagePublisher",
    "public_path",
    "LoggingCdnDriver",
    "NullCdnDriver",
    "create_cdn_driver",
    "CdnDriverPort",
    "PublishingCoordinatorPort",
    "PublishScopePort",
]
