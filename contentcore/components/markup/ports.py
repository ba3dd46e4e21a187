"""
Markup component port definitions.
"""

from __future__ import annotations

from typing import Protocol


class MarkupNormalizerPort(Protocol):
    """HTML operations consumed by the save, catalog and propagation components."""

    def ensure_editable_markers(self, html: str) -> str:
        """Return markup whose editable regions all carry stable ids."""
        ...

    def extract_introduction(self, html: str | None) -> str:
        """Return a plain-text introduction of bounded length."""
        ...

    def merge_regions(self, old_html: str | None, template_html: str) -> str:
        """Return template markup with matching editable regions carried over."""
        ...


class RulesPort(Protocol):
    """Port for markup attribute configuration."""

    def get_markup_attrs(self) -> dict[str, str]:
        """editable_attr, region_id_attr, region_index_attr."""
        ...

    def get_introduction_max(self) -> int: ...
