"""
Propagation component port definitions.
"""

from __future__ import annotations

from typing import Protocol


class RegionMergerPort(Protocol):
    """Regenerates a body against a template, keeping matched editable regions."""

    def merge_regions(self, old_html: str | None, template_html: str) -> str: ...
