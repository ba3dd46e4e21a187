"""
Redirects component - redirects left behind when a page moves.
"""

from ._impl import DEFAULT_CONFIG, RedirectConfig, is_reserved, normalize_path, slugify
from .component import SlugRedirectHandler
from .ports import RedirectScopePort, RulesPort, TitleRedirectPort

__all__ = [
    "SlugRedirectHandler",
    "DEFAULT_CONFIG",
    "RedirectConfig",
    "is_reserved",
    "normalize_path",
    "slugify",
    "RedirectScopePort",
    "RulesPort",
    "TitleRedirectPort",
]
