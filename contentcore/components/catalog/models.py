"""
Catalog component models.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class CatalogConfig:
    """Labels written into the status column."""

    active_label: str = "Active"
    inactive_label: str = "Inactive"


DEFAULT_CONFIG = CatalogConfig()


@dataclass(frozen=True)
class RebuildOutput:
    """Result of recomputing the whole catalog."""

    rows: int
    success: bool = True
