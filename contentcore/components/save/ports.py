"""
Save component port definitions.
"""

from __future__ import annotations

from typing import Protocol


class RulesPort(Protocol):
    def get_field_limits(self) -> dict[str, int]:
        """title, category and introduction maximum lengths."""
        ...

    def get_save_attempts(self) -> int:
        """Total append attempts per save, the first write included."""
        ...
