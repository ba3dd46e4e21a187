"""
Catalog component - denormalized listing projection.
"""

from .component import CatalogProjector, build_entry, run_rebuild
from .models import DEFAULT_CONFIG, CatalogConfig, RebuildOutput
from .ports import (
    CatalogProjectorPort,
    CatalogScopePort,
    IntroductionExtractorPort,
    RulesPort,
)

__all__ = [
    "CatalogProjector",
    "build_entry",
    "run_rebuild",
    # Models
    "CatalogConfig",
    "DEFAULT_CONFIG",
    "RebuildOutput",
    # Ports
    "CatalogProjectorPort",
    "CatalogScopePort",
    "IntroductionExtractorPort",
    "RulesPort",
]
